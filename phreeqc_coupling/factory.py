"""
Builds a PhreeqcCoupler from a validated ChemicalSolverConfig
"""

from pathlib import Path
from typing import List, Optional, Sequence
import logging

import numpy as np

from .core.aqueous_solution import AqueousSolution, Component, MeansOfAdjustingCharge
from .core.dump import Dump
from .core.equilibrium_phase import EquilibriumPhase
from .core.kinetic_reactant import KineticReactant
from .core.knobs import Knobs
from .core.output import BasicOutputSetups, OutputSchema
from .core.phreeqc_coupler import PhreeqcCoupler
from .core.reaction_rate import ReactionRate
from .core.surface import SurfaceSite
from .core.user_punch import SecondaryVariable, UserPunch
from .core_config import CONFIG
from .exceptions import ConfigurationError
from .schemas import AqueousSolutionConfig, ChemicalSolverConfig
from .transport_core.direct_phreeqc_engine import DirectPhreeqcEngine

logger = logging.getLogger(__name__)

_CHARGE_MODES = {
    "pH": MeansOfAdjustingCharge.PH,
    "pe": MeansOfAdjustingCharge.PE,
    "unspecified": MeansOfAdjustingCharge.UNSPECIFIED,
}


def check_previous_state_numbering(chemical_system_map: Sequence[int]) -> None:
    """
    Previous-state blocks are numbered N + g + 1; none of them may reuse the
    number g' + 1 of a current solution.

    Raises:
        ConfigurationError: On the first colliding pair
    """
    num_chemical_systems = len(chemical_system_map)
    current_ids = {int(g) + 1 for g in chemical_system_map}
    for global_id in chemical_system_map:
        previous_id = num_chemical_systems + int(global_id) + 1
        if previous_id in current_ids:
            raise ConfigurationError(
                message=(
                    f"Previous state of node {global_id} would be written as solution "
                    f"{previous_id}, which is already a current solution"
                ),
                details={"global_id": int(global_id), "solution_id": previous_id},
                hint="Disable enable_dump or use a chemical system map without this overlap"
            )


def _build_aqueous_solution(config: AqueousSolutionConfig) -> AqueousSolution:
    return AqueousSolution(
        components=[Component(c.name, c.amount, c.chemical_formula) for c in config.components],
        pH=config.pH,
        pe=config.pe,
        temperature=config.temperature,
        pressure=config.pressure,
        means_of_adjusting_charge=_CHARGE_MODES[config.means_of_adjusting_charge],
    )


def create_phreeqc_coupler(config: ChemicalSolverConfig,
                           chemical_system_map: Sequence[int],
                           num_global_nodes: Optional[int] = None,
                           engine=None) -> PhreeqcCoupler:
    """
    Create the entity model, output schema, engine and coupler for one setup.

    Args:
        config: Validated solver setup
        chemical_system_map: Global node id of each local chemical system
        num_global_nodes: Length of the per-node arrays (default: largest id + 1)
        engine: Engine handle to use instead of a new DirectPhreeqcEngine

    Returns:
        A coupler in the IDLE phase

    Raises:
        ConfigurationError: Inconsistent map or previous-state numbering
    """
    chemical_system_map = [int(g) for g in chemical_system_map]
    if not chemical_system_map:
        raise ConfigurationError("Chemical system map is empty")
    if min(chemical_system_map) < 0:
        raise ConfigurationError("Chemical system map contains negative global ids")

    max_global_id = max(chemical_system_map)
    if num_global_nodes is None:
        num_global_nodes = max_global_id + 1
    elif num_global_nodes <= max_global_id:
        raise ConfigurationError(
            f"num_global_nodes={num_global_nodes} does not cover global id {max_global_id}"
        )

    if config.enable_dump:
        check_previous_state_numbering(chemical_system_map)

    output_directory = Path(config.output_directory).resolve()
    output_directory.mkdir(parents=True, exist_ok=True)
    prefix = output_directory / config.project_file_name

    aqueous_solutions = [
        _build_aqueous_solution(config.aqueous_solution) for _ in chemical_system_map
    ]

    equilibrium_phases = [
        EquilibriumPhase(p.name, np.full(num_global_nodes, p.initial_amount), p.saturation_index)
        for p in config.equilibrium_phases
    ]
    kinetic_reactants = [
        KineticReactant(k.name, np.full(num_global_nodes, k.initial_amount),
                        list(k.parameters), k.chemical_formula)
        for k in config.kinetic_reactants
    ]
    reaction_rates = [ReactionRate(r.kinetic_reactant, list(r.statements)) for r in config.reaction_rates]
    surface = [
        SurfaceSite(s.name, s.site_density, s.specific_surface_area, s.mass)
        for s in config.surface
    ]

    user_punch = None
    secondary_variable_names: List[str] = []
    if config.user_punch is not None:
        secondary_variable_names = list(config.user_punch.headings)
        user_punch = UserPunch(
            [SecondaryVariable(name, np.zeros(num_global_nodes)) for name in secondary_variable_names],
            list(config.user_punch.statements),
        )

    basic_output_setups = BasicOutputSetups(
        output_file=str(prefix) + CONFIG.SELECTED_OUTPUT_FILE_SUFFIX,
        **config.output.model_dump()
    )
    output = OutputSchema.from_entities(
        basic_output_setups,
        component_names=config.component_names(),
        equilibrium_phase_names=[p.name for p in equilibrium_phases],
        kinetic_reactant_names=[k.name for k in kinetic_reactants],
        secondary_variable_names=secondary_variable_names,
    )

    dump = Dump(str(prefix) + CONFIG.DUMP_FILE_SUFFIX) if config.enable_dump else None

    knobs = Knobs(**config.knobs.model_dump())

    if engine is None:
        engine = DirectPhreeqcEngine(
            database=config.database,
            phreeqc_path=config.phreeqc_exe,
            working_directory=str(output_directory),
            listing_file=str(prefix) + CONFIG.LISTING_FILE_SUFFIX,
        )

    logger.info(
        f"Creating PHREEQC coupler '{config.project_file_name}' for "
        f"{len(chemical_system_map)} of {num_global_nodes} nodes"
    )

    return PhreeqcCoupler(
        engine=engine,
        input_file=str(prefix) + CONFIG.INPUT_FILE_SUFFIX,
        chemical_system_map=chemical_system_map,
        aqueous_solutions=aqueous_solutions,
        output=output,
        knobs=knobs,
        equilibrium_phases=equilibrium_phases,
        kinetic_reactants=kinetic_reactants,
        reaction_rates=reaction_rates,
        surface=surface,
        user_punch=user_punch,
        dump=dump,
        process_id_to_component_name_map=sorted(config.process_variables.items()),
        hydrogen_component=config.hydrogen_component,
    )
