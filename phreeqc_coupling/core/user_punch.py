"""
User-defined secondary outputs (USER_PUNCH block)
"""

from dataclasses import dataclass, field
from typing import List, TextIO

import numpy as np

from .lookup import find_by_name


@dataclass
class SecondaryVariable:
    """Derived quantity computed by the engine, one value per global node id"""
    name: str
    value: np.ndarray


@dataclass
class UserPunch:
    """
    USER_PUNCH definition

    The headings are the secondary variable names, in the order the BASIC
    statements PUNCH them.
    """
    secondary_variables: List[SecondaryVariable]
    statements: List[str] = field(default_factory=list)

    def find_secondary_variable(self, name: str) -> SecondaryVariable:
        return find_by_name(self.secondary_variables, name, "secondary variable")

    def write(self, out: TextIO) -> None:
        out.write("USER_PUNCH\n")
        headings = " ".join(v.name for v in self.secondary_variables)
        out.write(f"-headings {headings}\n")
        out.write("-start\n")
        for line_number, statement in enumerate(self.statements, start=1):
            out.write(f"{line_number} {statement}\n")
        out.write("-end\n")
