"""
Aqueous solution of one chemical system

Holds the per-node pH, pe and component amounts and moves them between the
transport process solutions and the PHREEQC SOLUTION block.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, TextIO, Tuple
import math
import logging

from .lookup import find_by_name
from .status import Status
from .text_format import format_number
from ..exceptions import ConfigurationError, CouplingError

logger = logging.getLogger(__name__)


class MeansOfAdjustingCharge(Enum):
    """Which quantity PHREEQC adjusts to reach charge balance"""
    PH = "pH"
    PE = "pe"
    UNSPECIFIED = "unspecified"


@dataclass
class Component:
    """Named aqueous species total"""
    name: str
    amount: float = 0.0
    chemical_formula: str = ""

    def write(self, out: TextIO) -> None:
        out.write(f"{self.name} {format_number(self.amount)}")
        if self.chemical_formula:
            out.write(f" as {self.chemical_formula}")
        out.write("\n")


class AqueousSolution:
    """
    Aqueous solution of a single chemical system

    Component names are unique; lookups go through a name index so the
    per-step transfer does not rescan the component list.
    """

    def __init__(self,
                 components: Sequence[Component],
                 pH: float = 7.0,
                 pe: float = 4.0,
                 temperature: float = 25.0,
                 pressure: float = 1.0,
                 means_of_adjusting_charge: MeansOfAdjustingCharge = MeansOfAdjustingCharge.UNSPECIFIED):
        self.components: List[Component] = list(components)
        self.pH = pH
        self.pe = pe
        self.temperature = temperature
        self.pressure = pressure
        self.means_of_adjusting_charge = means_of_adjusting_charge

        self._index: Dict[str, Component] = {}
        for component in self.components:
            if component.name in self._index:
                raise ConfigurationError(f"Duplicate component '{component.name}' in aqueous solution")
            self._index[component.name] = component

    def find_component(self, name: str) -> Component:
        """Component by name; raises NotFoundError if it was never configured."""
        component = self._index.get(name)
        if component is None:
            return find_by_name(self.components, name, "component")
        return component

    def transfer(self,
                 process_solutions: Sequence,
                 process_id_to_component_name_map: Sequence[Tuple[int, str]],
                 global_id: int,
                 status: Status,
                 hydrogen_component: str = "H") -> None:
        """
        Move concentrations between transport solutions and this solution.

        Both directions walk the same component map, so every entry read while
        setting is written back while updating.

        Args:
            process_solutions: Global vectors indexed by transport process id,
                each offering get(global_id) and set(global_id, value)
            process_id_to_component_name_map: (process id, component name) pairs
            global_id: Mesh node of this chemical system
            status: SETTING_STATE (transport -> solution) or
                UPDATING_STATE (solution -> transport)
            hydrogen_component: Transport variable whose concentration
                stands for pH
        """
        if status not in (Status.SETTING_STATE, Status.UPDATING_STATE):
            raise ValueError(f"Cannot transfer aqueous solution in phase {status}")

        for process_id, variable in process_id_to_component_name_map:
            solution = process_solutions[process_id]

            component = self._index.get(variable)
            if component is not None:
                if status is Status.SETTING_STATE:
                    component.amount = solution.get(global_id)
                else:
                    solution.set(global_id, component.amount)

            if variable == hydrogen_component:
                if status is Status.SETTING_STATE:
                    self.pH = concentration_to_pH(solution.get(global_id), global_id)
                else:
                    solution.set(global_id, pH_to_concentration(self.pH))

    def write(self, out: TextIO) -> None:
        """Body of a SOLUTION block (the caller writes the SOLUTION line)."""
        out.write(f"temp {format_number(self.temperature)}\n")
        out.write(f"pressure {format_number(self.pressure)}\n")

        ph_line = f"pH {format_number(self.pH)}"
        pe_line = f"pe {format_number(self.pe)}"
        if self.means_of_adjusting_charge is MeansOfAdjustingCharge.PH:
            ph_line += " charge"
        elif self.means_of_adjusting_charge is MeansOfAdjustingCharge.PE:
            pe_line += " charge"
        out.write(ph_line + "\n")
        out.write(pe_line + "\n")

        out.write("units mol/kgw\n")
        for component in self.components:
            component.write(out)


def concentration_to_pH(concentration: float, global_id: Optional[int] = None) -> float:
    """pH = -log10(c) for a hydrogen ion concentration c > 0."""
    if not concentration > 0:
        raise CouplingError(
            message="Hydrogen ion concentration must be positive to derive pH",
            details={"concentration": concentration, "system_id": global_id}
        )
    return -math.log10(concentration)


def pH_to_concentration(pH: float) -> float:
    """Inverse of concentration_to_pH."""
    return math.pow(10.0, -pH)
