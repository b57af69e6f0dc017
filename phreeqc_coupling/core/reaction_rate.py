"""
Rate definitions (RATES block entries)
"""

from dataclasses import dataclass, field
from typing import List, TextIO


@dataclass
class ReactionRate:
    """BASIC rate expression for one kinetic reactant"""
    kinetic_reactant: str
    statements: List[str] = field(default_factory=list)

    def write(self, out: TextIO) -> None:
        out.write(f"{self.kinetic_reactant}\n")
        out.write("-start\n")
        # BASIC requires line numbers
        for line_number, statement in enumerate(self.statements, start=1):
            out.write(f"{line_number} {statement}\n")
        out.write("-end\n")
