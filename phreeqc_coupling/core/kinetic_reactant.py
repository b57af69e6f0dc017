"""
Kinetic reactants (KINETICS block entries)
"""

from dataclasses import dataclass, field
from typing import List, TextIO

import numpy as np

from .text_format import format_number


@dataclass
class KineticReactant:
    """
    Species whose reaction progress is integrated over the step length

    Attributes:
        name: Rate name, must match a RATES definition or a database rate
        amount: Moles of reactant, one entry per global node id
        parameters: Values passed to the rate expression as PARM(i)
        chemical_formula: Optional stoichiometry if name is not a phase
    """
    name: str
    amount: np.ndarray
    parameters: List[float] = field(default_factory=list)
    chemical_formula: str = ""

    def write(self, out: TextIO, global_id: int) -> None:
        out.write(f"{self.name}\n")
        if self.chemical_formula:
            out.write(f"-formula {self.chemical_formula}\n")
        out.write(f"-m {format_number(self.amount[global_id])}\n")
        if self.parameters:
            parms = " ".join(format_number(p) for p in self.parameters)
            out.write(f"-parms {parms}\n")
