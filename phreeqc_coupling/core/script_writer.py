"""
PHREEQC input script generation

Renders the per-step batch script from the entity model. Every chemical
system is numbered by its global node id plus one, both here and when the
result reader routes rows back, so the two stay in lockstep for any
chemical system map.
"""

from typing import Optional, Sequence, TextIO
import logging

from .aqueous_solution import AqueousSolution
from .dump import Dump
from .equilibrium_phase import EquilibriumPhase
from .kinetic_reactant import KineticReactant
from .knobs import Knobs
from .output import OutputSchema
from .reaction_rate import ReactionRate
from .surface import SurfaceSite
from .text_format import format_number
from .user_punch import UserPunch
from ..exceptions import ConfigurationError, CouplingIOError

logger = logging.getLogger(__name__)


class PhreeqcScriptWriter:
    """
    Serializes the chemical state of all systems into one PHREEQC script

    The writer only reads the entity collections; it holds references to the
    collections owned by the coupler.
    """

    def __init__(self,
                 chemical_system_map: Sequence[int],
                 aqueous_solutions: Sequence[AqueousSolution],
                 output: OutputSchema,
                 knobs: Knobs,
                 equilibrium_phases: Sequence[EquilibriumPhase] = (),
                 kinetic_reactants: Sequence[KineticReactant] = (),
                 reaction_rates: Sequence[ReactionRate] = (),
                 surface: Sequence[SurfaceSite] = (),
                 user_punch: Optional[UserPunch] = None,
                 dump: Optional[Dump] = None):
        if len(aqueous_solutions) != len(chemical_system_map):
            raise ConfigurationError(
                f"{len(aqueous_solutions)} aqueous solutions for "
                f"{len(chemical_system_map)} chemical systems"
            )
        self.chemical_system_map = chemical_system_map
        self.aqueous_solutions = aqueous_solutions
        self.output = output
        self.knobs = knobs
        self.equilibrium_phases = equilibrium_phases
        self.kinetic_reactants = kinetic_reactants
        self.reaction_rates = reaction_rates
        self.surface = surface
        self.user_punch = user_punch
        self.dump = dump

    @property
    def num_chemical_systems(self) -> int:
        return len(self.chemical_system_map)

    def surface_solution_id(self, global_id: int) -> int:
        """Solution the SURFACE block of ``global_id`` equilibrates with."""
        if self.dump is not None and self.dump.has_previous_state(global_id):
            return self.dump.previous_solution_id(global_id, self.num_chemical_systems)
        return global_id + 1

    def write(self, out: TextIO, dt: Optional[float] = None) -> None:
        """
        Write the complete script.

        Args:
            out: Text stream to write to
            dt: Step length for KINETICS; None for the initial calculation
        """
        self.knobs.write(out)
        out.write("\n")

        self.output.write(out)
        out.write("\n")

        if self.user_punch is not None:
            self.user_punch.write(out)
            out.write("\n")

        if self.reaction_rates:
            out.write("RATES\n")
            for reaction_rate in self.reaction_rates:
                reaction_rate.write(out)
            out.write("\n")

        steps = 0.0 if dt is None else dt

        for local_id, global_id in enumerate(self.chemical_system_map):
            global_id = int(global_id)
            solution_id = global_id + 1

            out.write(f"SOLUTION {solution_id}\n")
            self.aqueous_solutions[local_id].write(out)
            out.write("\n")

            if self.dump is not None and self.dump.has_previous_state(global_id):
                self.dump.write_previous_state(out, global_id)

            out.write("USE solution none\n")
            out.write("END\n\n")

            out.write(f"USE solution {solution_id}\n\n")

            if self.equilibrium_phases:
                out.write(f"EQUILIBRIUM_PHASES {solution_id}\n")
                for equilibrium_phase in self.equilibrium_phases:
                    equilibrium_phase.write(out, global_id)
                out.write("\n")

            if self.kinetic_reactants:
                out.write(f"KINETICS {solution_id}\n")
                for kinetic_reactant in self.kinetic_reactants:
                    kinetic_reactant.write(out, global_id)
                out.write(f"-steps {format_number(steps)}\n\n")

            if self.surface:
                out.write(f"SURFACE {solution_id}\n")
                out.write(f"-equilibrate with solution {self.surface_solution_id(global_id)}\n")
                out.write("-sites_units DENSITY\n")
                for site in self.surface:
                    site.write(out)
                out.write("\n")
                out.write(f"SAVE solution {solution_id}\n")

            out.write("END\n\n")

        if self.dump is not None:
            self.dump.write(out, self.chemical_system_map)

    def write_inputs_to_file(self, path: str, dt: Optional[float] = None) -> None:
        """Write the script to ``path``; the file is closed on return."""
        logger.debug(f"Writing phreeqc inputs into file '{path}'.")
        try:
            with open(path, 'w', encoding='utf-8') as out:
                self.write(out, dt)
        except OSError as e:
            raise CouplingIOError(
                message=f"Could not write phreeqc input file: {e}",
                path=str(path)
            ) from e
