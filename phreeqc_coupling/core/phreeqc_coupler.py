"""
PHREEQC coupler for transport simulations

Sequences one coupling step: pull concentrations out of the transport
process solutions, write the PHREEQC script, run the engine, read the
results and push the updated concentrations back.
"""

from typing import List, Optional, Sequence, Tuple
import os
import logging

import numpy as np

from .aqueous_solution import AqueousSolution
from .dump import Dump
from .equilibrium_phase import EquilibriumPhase
from .kinetic_reactant import KineticReactant
from .knobs import Knobs
from .lookup import find_by_name
from .output import OutputSchema
from .reaction_rate import ReactionRate
from .result_reader import PhreeqcResultReader
from .script_writer import PhreeqcScriptWriter
from .status import Status
from .surface import SurfaceSite
from .user_punch import UserPunch
from ..exceptions import ConfigurationError, CouplingIOError, NotFoundError

logger = logging.getLogger(__name__)


class PhreeqcCoupler:
    """
    Couples transport process solutions to a PHREEQC engine

    The coupler owns every per-system entity collection and the engine
    handle. ``phase`` reports where the current step is.
    """

    def __init__(self,
                 engine,
                 input_file: str,
                 chemical_system_map: Sequence[int],
                 aqueous_solutions: List[AqueousSolution],
                 output: OutputSchema,
                 knobs: Optional[Knobs] = None,
                 equilibrium_phases: Optional[List[EquilibriumPhase]] = None,
                 kinetic_reactants: Optional[List[KineticReactant]] = None,
                 reaction_rates: Optional[List[ReactionRate]] = None,
                 surface: Optional[List[SurfaceSite]] = None,
                 user_punch: Optional[UserPunch] = None,
                 dump: Optional[Dump] = None,
                 process_id_to_component_name_map: Sequence[Tuple[int, str]] = (),
                 hydrogen_component: str = "H"):
        """
        Args:
            engine: Engine driver offering set_selected_output_file_on,
                set_dump_file_on and run_file
            input_file: Path the PHREEQC script is written to every step
            chemical_system_map: Global node id of each chemical system
            aqueous_solutions: One solution per chemical system, in map order
            output: Selected-output schema (also names the result file)
            process_id_to_component_name_map: (transport process id, component
                name) pairs
            hydrogen_component: Transport variable carrying the H+ concentration
        """
        self.engine = engine
        self.input_file = str(input_file)
        self.chemical_system_map = [int(g) for g in chemical_system_map]
        self.aqueous_solutions = aqueous_solutions
        self.output = output
        self.knobs = knobs or Knobs()
        self.equilibrium_phases = equilibrium_phases or []
        self.kinetic_reactants = kinetic_reactants or []
        self.reaction_rates = reaction_rates or []
        self.surface = surface or []
        self.user_punch = user_punch
        self.dump = dump
        self.process_id_to_component_name_map = list(process_id_to_component_name_map)
        self.hydrogen_component = hydrogen_component
        self.phase = Status.IDLE
        self._dt: Optional[float] = None

        if len(set(self.chemical_system_map)) != len(self.chemical_system_map):
            raise ConfigurationError("Chemical system map contains duplicate global ids")

        self.writer = PhreeqcScriptWriter(
            chemical_system_map=self.chemical_system_map,
            aqueous_solutions=self.aqueous_solutions,
            output=self.output,
            knobs=self.knobs,
            equilibrium_phases=self.equilibrium_phases,
            kinetic_reactants=self.kinetic_reactants,
            reaction_rates=self.reaction_rates,
            surface=self.surface,
            user_punch=self.user_punch,
            dump=self.dump,
        )
        self.reader = PhreeqcResultReader(
            chemical_system_map=self.chemical_system_map,
            aqueous_solutions=self.aqueous_solutions,
            output=self.output,
            equilibrium_phases=self.equilibrium_phases,
            kinetic_reactants=self.kinetic_reactants,
            user_punch=self.user_punch,
            has_surface=bool(self.surface),
        )

        self.engine.set_selected_output_file_on(self.output.basic_output_setups.output_file)
        if self.dump is not None:
            # Composition after this step is dumped for the next one
            self.engine.set_dump_file_on(self.dump.dump_file)

        logger.info(
            f"PhreeqcCoupler initialized with {self.num_chemical_systems} chemical systems, "
            f"{len(self.equilibrium_phases)} equilibrium phases, "
            f"{len(self.kinetic_reactants)} kinetic reactants"
        )

    @property
    def num_chemical_systems(self) -> int:
        return len(self.chemical_system_map)

    @property
    def dt(self) -> Optional[float]:
        """Step length of the last script written (None for the initial calculation)."""
        return self._dt

    def initial_calculation(self, process_solutions: Sequence) -> None:
        """Equilibrate the initial state without a kinetic step."""
        self.set_aqueous_solutions_or_update_process_solutions(
            process_solutions, Status.SETTING_STATE)

        self.write_inputs_to_file()

        self.execute()

        self.read_outputs_from_file()

        self.set_aqueous_solutions_or_update_process_solutions(
            process_solutions, Status.UPDATING_STATE)

    def step(self, process_solutions: Sequence, dt: float) -> None:
        """Advance chemistry by ``dt`` for every chemical system."""
        self.set_aqueous_solutions_or_update_process_solutions(
            process_solutions, Status.SETTING_STATE)

        self.set_aqueous_solutions_prev_from_dump_file()

        self.write_inputs_to_file(dt)

        self.execute()

        self.read_outputs_from_file()

        self.set_aqueous_solutions_or_update_process_solutions(
            process_solutions, Status.UPDATING_STATE)

    def set_aqueous_solutions_or_update_process_solutions(self,
                                                          process_solutions: Sequence,
                                                          status: Status) -> None:
        """
        Transport -> chemistry (SETTING_STATE) or chemistry -> transport
        (UPDATING_STATE), over the same systems and components.
        """
        self.phase = status
        for local_id, global_id in enumerate(self.chemical_system_map):
            self.aqueous_solutions[local_id].transfer(
                process_solutions,
                self.process_id_to_component_name_map,
                global_id,
                status,
                self.hydrogen_component,
            )

    def set_aqueous_solutions_prev_from_dump_file(self) -> None:
        if self.dump is None:
            return

        dump_file = self.dump.dump_file
        if not os.path.exists(dump_file):
            # No run has dumped yet (step without initial_calculation)
            logger.debug(f"No phreeqc dump file '{dump_file}' yet; starting without previous state.")
            self.dump.aqueous_solutions_prev = {}
            return

        logger.debug(f"Reading phreeqc dump file '{dump_file}'.")
        try:
            with open(dump_file, 'r', encoding='utf-8', errors='replace') as in_stream:
                self.dump.read_dump_file(in_stream, self.chemical_system_map)
        except OSError as e:
            raise CouplingIOError(
                message=f"Could not open phreeqc dump file: {e}",
                path=dump_file
            ) from e

    def write_inputs_to_file(self, dt: Optional[float] = None) -> None:
        self._dt = dt
        self.writer.write_inputs_to_file(self.input_file, dt)

    def execute(self) -> None:
        logger.info("Phreeqc: Executing chemical calculation.")
        self.engine.run_file(self.input_file)

    def read_outputs_from_file(self) -> None:
        self.phase = Status.READING_STATE
        self.reader.read_outputs_from_file(self.output.basic_output_setups.output_file)

    def equilibrium_phase_amounts(self, name: str) -> np.ndarray:
        return find_by_name(self.equilibrium_phases, name, "equilibrium phase").amount

    def kinetic_reactant_amounts(self, name: str) -> np.ndarray:
        return find_by_name(self.kinetic_reactants, name, "kinetic reactant").amount

    def secondary_variable_values(self, name: str) -> np.ndarray:
        if self.user_punch is None:
            raise NotFoundError("secondary variable", name)
        return self.user_punch.find_secondary_variable(name).value
