"""
Global numerical solver settings (KNOBS block)
"""

from dataclasses import dataclass
from typing import TextIO

from .text_format import format_bool, format_number


@dataclass(frozen=True)
class Knobs:
    """Convergence tolerances and iteration caps, fixed after setup"""
    max_iter: int = 100
    relative_convergence_tolerance: float = 1e-12
    tolerance: float = 1e-15
    step_size: float = 100.0
    scaling: bool = False

    def write(self, out: TextIO) -> None:
        out.write("KNOBS\n")
        out.write(f"-iterations {self.max_iter}\n")
        out.write(f"-convergence_tolerance {format_number(self.relative_convergence_tolerance)}\n")
        out.write(f"-tolerance {format_number(self.tolerance)}\n")
        out.write(f"-step_size {format_number(self.step_size)}\n")
        out.write(f"-diagonal_scale {format_bool(self.scaling)}\n")
