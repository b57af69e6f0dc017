"""
PHREEQC selected-output layout

Describes which columns PHREEQC writes to the selected-output file, which of
them carry chemistry the coupling reads back, and which are dropped.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence, TextIO
import logging

from .text_format import format_bool
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ItemType(Enum):
    """Kinds of selected-output columns routed back into the entity model"""
    PH = "pH"
    PE = "pe"
    COMPONENT = "component"
    EQUILIBRIUM_PHASE = "equilibrium_phase"
    KINETIC_REACTANT = "kinetic_reactant"
    SECONDARY_VARIABLE = "secondary_variable"


@dataclass(frozen=True)
class OutputItem:
    """One accepted column"""
    name: str
    item_type: ItemType


@dataclass(frozen=True)
class BasicOutputSetups:
    """
    File and identifier columns of the SELECTED_OUTPUT block

    Identifier columns are echoed by PHREEQC in front of the chemistry and
    always end up in the drop-set.
    """
    output_file: str
    use_high_precision: bool = True
    display_simulation_id: bool = False
    display_state: bool = False
    display_solution_id: bool = True
    display_distance: bool = False
    display_current_time: bool = False
    display_time_step: bool = False

    @property
    def num_identifier_columns(self) -> int:
        return sum([
            self.display_simulation_id,
            self.display_state,
            self.display_solution_id,
            self.display_distance,
            self.display_current_time,
            self.display_time_step,
        ])


class OutputSchema:
    """
    Ordered description of the result table

    ``accepted_items`` are matched positionally against the columns that
    survive after removing ``dropped_item_ids`` from a data row.
    """

    def __init__(self,
                 basic_output_setups: BasicOutputSetups,
                 accepted_items: Sequence[OutputItem],
                 dropped_item_ids: Iterable[int] = ()):
        self.basic_output_setups = basic_output_setups
        self.accepted_items: List[OutputItem] = list(accepted_items)
        self.dropped_item_ids = frozenset(dropped_item_ids)

        if any(item_id < 0 for item_id in self.dropped_item_ids):
            raise ConfigurationError("Dropped column positions must be non-negative")

    @property
    def expected_column_count(self) -> int:
        """Tokens every data row must have."""
        return len(self.accepted_items) + len(self.dropped_item_ids)

    def names_of(self, item_type: ItemType) -> List[str]:
        return [item.name for item in self.accepted_items if item.item_type is item_type]

    def has(self, item_type: ItemType) -> bool:
        return any(item.item_type is item_type for item in self.accepted_items)

    @classmethod
    def from_entities(cls,
                      basic_output_setups: BasicOutputSetups,
                      component_names: Sequence[str] = (),
                      equilibrium_phase_names: Sequence[str] = (),
                      kinetic_reactant_names: Sequence[str] = (),
                      secondary_variable_names: Sequence[str] = ()) -> "OutputSchema":
        """
        Build the schema matching PHREEQC's selected-output column order.

        PHREEQC writes: identifier columns, pH, pe, totals, then an amount and
        a delta column per equilibrium phase, an amount and a delta column per
        kinetic reactant, and finally the USER_PUNCH headings. Identifier and
        delta columns are dropped.
        """
        accepted_items: List[OutputItem] = []
        dropped_item_ids: List[int] = []

        column = basic_output_setups.num_identifier_columns
        dropped_item_ids.extend(range(column))

        accepted_items.append(OutputItem("pH", ItemType.PH))
        accepted_items.append(OutputItem("pe", ItemType.PE))
        column += 2

        for name in component_names:
            accepted_items.append(OutputItem(name, ItemType.COMPONENT))
            column += 1

        for name in equilibrium_phase_names:
            accepted_items.append(OutputItem(name, ItemType.EQUILIBRIUM_PHASE))
            dropped_item_ids.append(column + 1)  # d_<phase>
            column += 2

        for name in kinetic_reactant_names:
            accepted_items.append(OutputItem(name, ItemType.KINETIC_REACTANT))
            dropped_item_ids.append(column + 1)  # dk_<reactant>
            column += 2

        for name in secondary_variable_names:
            accepted_items.append(OutputItem(name, ItemType.SECONDARY_VARIABLE))
            column += 1

        logger.debug(
            f"Output schema: {len(accepted_items)} accepted, "
            f"{len(dropped_item_ids)} dropped columns"
        )
        return cls(basic_output_setups, accepted_items, dropped_item_ids)

    def write(self, out: TextIO) -> None:
        """SELECTED_OUTPUT block"""
        setups = self.basic_output_setups
        out.write("SELECTED_OUTPUT\n")
        out.write(f"-file {setups.output_file}\n")
        out.write(f"-high_precision {format_bool(setups.use_high_precision)}\n")
        out.write(f"-simulation {format_bool(setups.display_simulation_id)}\n")
        out.write(f"-state {format_bool(setups.display_state)}\n")
        out.write(f"-solution {format_bool(setups.display_solution_id)}\n")
        out.write(f"-distance {format_bool(setups.display_distance)}\n")
        out.write(f"-time {format_bool(setups.display_current_time)}\n")
        out.write(f"-step {format_bool(setups.display_time_step)}\n")
        out.write(f"-pH {format_bool(self.has(ItemType.PH))}\n")
        out.write(f"-pe {format_bool(self.has(ItemType.PE))}\n")

        for option, item_type in (("-totals", ItemType.COMPONENT),
                                  ("-equilibrium_phases", ItemType.EQUILIBRIUM_PHASE),
                                  ("-kinetic_reactants", ItemType.KINETIC_REACTANT)):
            names = self.names_of(item_type)
            if names:
                out.write(f"{option} {' '.join(names)}\n")
