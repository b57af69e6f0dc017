"""
Surface complexation sites (SURFACE block entries)
"""

from dataclasses import dataclass
from typing import TextIO

from .text_format import format_number


@dataclass
class SurfaceSite:
    """
    Sorption site written with ``-sites_units DENSITY``

    Attributes:
        name: Surface site name, e.g. 'Hfo_w'
        site_density: Sites per square nanometre
        specific_surface_area: m2/g
        mass: Grams of sorbent
    """
    name: str
    site_density: float
    specific_surface_area: float
    mass: float

    def write(self, out: TextIO) -> None:
        out.write(
            f"{self.name} {format_number(self.site_density)} "
            f"{format_number(self.specific_surface_area)} {format_number(self.mass)}\n"
        )
