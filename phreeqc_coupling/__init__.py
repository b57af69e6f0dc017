"""
PHREEQC Coupling Core

Couples a reactive-transport solver to the USGS PHREEQC geochemical engine:
per step the transport concentrations are written into a PHREEQC batch
script, the engine is run and the reacted chemistry is read back.

Entry points:
- create_phreeqc_coupler: Build a coupler from a ChemicalSolverConfig
- PhreeqcCoupler: initial_calculation() and step(dt)
- DirectPhreeqcEngine: Subprocess driver for the PHREEQC executable
"""

__version__ = "0.1.0"

from .core import PhreeqcCoupler, Status
from .exceptions import CouplingError
from .factory import create_phreeqc_coupler
from .schemas import ChemicalSolverConfig
from .transport_core import DirectPhreeqcEngine

__all__ = [
    "ChemicalSolverConfig",
    "CouplingError",
    "DirectPhreeqcEngine",
    "PhreeqcCoupler",
    "Status",
    "create_phreeqc_coupler",
]
