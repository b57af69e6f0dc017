"""
Equilibrium phases (EQUILIBRIUM_PHASES block entries)
"""

from dataclasses import dataclass
from typing import TextIO

import numpy as np

from .text_format import format_number


@dataclass
class EquilibriumPhase:
    """
    Mineral assumed to reach equilibrium every step

    Attributes:
        name: Phase name from the thermodynamic database
        amount: Moles of the phase, one entry per global node id
        saturation_index: Target saturation index (0 = equilibrium)
    """
    name: str
    amount: np.ndarray
    saturation_index: float = 0.0

    def write(self, out: TextIO, global_id: int) -> None:
        out.write(
            f"{self.name} {format_number(self.saturation_index)} "
            f"{format_number(self.amount[global_id])}\n"
        )
