"""
Coupling Core

Entity model of the chemical systems, the PHREEQC script writer, the
selected-output reader and the coupler sequencing them.
"""

from .aqueous_solution import (
    AqueousSolution,
    Component,
    MeansOfAdjustingCharge,
    concentration_to_pH,
    pH_to_concentration,
)
from .dump import Dump
from .equilibrium_phase import EquilibriumPhase
from .kinetic_reactant import KineticReactant
from .knobs import Knobs
from .output import BasicOutputSetups, ItemType, OutputItem, OutputSchema
from .phreeqc_coupler import PhreeqcCoupler
from .reaction_rate import ReactionRate
from .result_reader import PhreeqcResultReader
from .script_writer import PhreeqcScriptWriter
from .status import Status
from .surface import SurfaceSite
from .transport_vectors import ArrayGlobalVector, wrap_process_solutions
from .user_punch import SecondaryVariable, UserPunch

__all__ = [
    "AqueousSolution",
    "ArrayGlobalVector",
    "BasicOutputSetups",
    "Component",
    "Dump",
    "EquilibriumPhase",
    "ItemType",
    "KineticReactant",
    "Knobs",
    "MeansOfAdjustingCharge",
    "OutputItem",
    "OutputSchema",
    "PhreeqcCoupler",
    "PhreeqcResultReader",
    "PhreeqcScriptWriter",
    "ReactionRate",
    "SecondaryVariable",
    "Status",
    "SurfaceSite",
    "UserPunch",
    "concentration_to_pH",
    "pH_to_concentration",
    "wrap_process_solutions",
]
