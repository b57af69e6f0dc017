"""
PHREEQC selected-output parsing

Reads the result table written by the SELECTED_OUTPUT block and routes every
accepted column into the entity model. Rows are consumed in chemical system
map order, matching the order the script writer emitted the solutions in.
"""

from typing import Dict, List, Optional, Sequence, TextIO, Tuple
import re
import logging

import numpy as np

from .aqueous_solution import AqueousSolution
from .equilibrium_phase import EquilibriumPhase
from .kinetic_reactant import KineticReactant
from .lookup import find_by_name
from .output import ItemType, OutputSchema
from .user_punch import UserPunch
from ..exceptions import (
    CouplingIOError,
    MissingResultRowError,
    NotFoundError,
    ParseError,
    RowLengthMismatchError,
)

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\t ]+")


class PhreeqcResultReader:
    """
    Deserializes one selected-output table into the entity model

    Per chemical system the table holds ``num_skipped_lines`` rows that are
    discarded (the initial solution, plus the pre-equilibration row PHREEQC
    emits when a surface is present) followed by the row after reaction.
    """

    def __init__(self,
                 chemical_system_map: Sequence[int],
                 aqueous_solutions: Sequence[AqueousSolution],
                 output: OutputSchema,
                 equilibrium_phases: Sequence[EquilibriumPhase] = (),
                 kinetic_reactants: Sequence[KineticReactant] = (),
                 user_punch: Optional[UserPunch] = None,
                 has_surface: bool = False):
        self.chemical_system_map = chemical_system_map
        self.aqueous_solutions = aqueous_solutions
        self.output = output
        self.equilibrium_phases = equilibrium_phases
        self.kinetic_reactants = kinetic_reactants
        self.user_punch = user_punch
        self.has_surface = has_surface

    @property
    def num_skipped_lines(self) -> int:
        return 2 if self.has_surface else 1

    def _resolve_array_targets(self) -> Dict[int, np.ndarray]:
        """Map accepted item position -> array for phases, reactants and punch values."""
        targets: Dict[int, np.ndarray] = {}
        for item_id, item in enumerate(self.output.accepted_items):
            if item.item_type is ItemType.EQUILIBRIUM_PHASE:
                targets[item_id] = find_by_name(
                    self.equilibrium_phases, item.name, "equilibrium phase").amount
            elif item.item_type is ItemType.KINETIC_REACTANT:
                targets[item_id] = find_by_name(
                    self.kinetic_reactants, item.name, "kinetic reactant").amount
            elif item.item_type is ItemType.SECONDARY_VARIABLE:
                if self.user_punch is None:
                    raise NotFoundError("secondary variable", item.name)
                targets[item_id] = self.user_punch.find_secondary_variable(item.name).value
        return targets

    def parse_row(self, line: str, system_id: int) -> List[float]:
        """
        Tokenize a data row, drop the configured columns and convert the rest.

        Raises:
            RowLengthMismatchError: Token count differs from the schema
            ParseError: A kept token is not a number
        """
        stripped = line.strip("\t \r\n")
        items = _SEPARATORS.split(stripped) if stripped else []

        if len(items) != self.output.expected_column_count:
            raise RowLengthMismatchError(
                system_id, self.output.expected_column_count, len(items))

        accepted_items = []
        for item_id, item in enumerate(items):
            if item_id in self.output.dropped_item_ids:
                continue
            try:
                accepted_items.append(float(item))
            except ValueError:
                raise ParseError(item, system_id, item_id)
        return accepted_items

    def read(self, in_stream: TextIO) -> None:
        """Read the whole table; raises on the first malformed row."""
        array_targets = self._resolve_array_targets()

        # Skip the headline
        in_stream.readline()

        for local_id, global_id in enumerate(self.chemical_system_map):
            global_id = int(global_id)

            # Skip equilibrium calculation result of initial solution
            for _ in range(self.num_skipped_lines):
                if not in_stream.readline():
                    raise MissingResultRowError(global_id)

            line = in_stream.readline()
            if not line:
                raise MissingResultRowError(global_id)

            values = self.parse_row(line, global_id)
            self._apply(values, self.aqueous_solutions[local_id], global_id, array_targets)

    def _apply(self,
               values: List[float],
               aqueous_solution: AqueousSolution,
               global_id: int,
               array_targets: Dict[int, np.ndarray]) -> None:
        # Resolve every component first so a lookup miss leaves the system untouched
        updates: List[Tuple[object, str, float]] = []
        for item, value in zip(self.output.accepted_items, values):
            if item.item_type is ItemType.PH:
                updates.append((aqueous_solution, "pH", value))
            elif item.item_type is ItemType.PE:
                updates.append((aqueous_solution, "pe", value))
            elif item.item_type is ItemType.COMPONENT:
                component = aqueous_solution.find_component(item.name)
                updates.append((component, "amount", value))

        for target, attribute, value in updates:
            setattr(target, attribute, value)

        for item_id, array in array_targets.items():
            array[global_id] = values[item_id]

    def read_outputs_from_file(self, path: str) -> None:
        logger.debug(f"Reading phreeqc results from file '{path}'.")
        try:
            with open(path, 'r', encoding='utf-8', errors='replace') as in_stream:
                self.read(in_stream)
        except OSError as e:
            raise CouplingIOError(
                message=f"Could not open phreeqc result file: {e}",
                path=str(path)
            ) from e
