"""
Shared pytest fixtures for the phreeqc-coupling test suite.

Provides:
- Test markers registration
- Chemical entity and output schema fixtures
- A minimal solver setup for factory and coupler tests
"""
import pytest
import numpy as np

from phreeqc_coupling.core.aqueous_solution import AqueousSolution, Component
from phreeqc_coupling.core.output import BasicOutputSetups
from phreeqc_coupling.schemas import ChemicalSolverConfig


# =============================================================================
# Pytest Markers Registration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring PHREEQC")
    config.addinivalue_line("markers", "unit: marks unit tests (fast, no external deps)")


# =============================================================================
# Entity Fixtures
# =============================================================================

def make_solution(ca: float = 0.0, cl: float = 0.0, pH: float = 7.0) -> AqueousSolution:
    return AqueousSolution([Component("Ca", ca), Component("Cl", cl)], pH=pH)


@pytest.fixture
def solution_factory():
    """Factory for two-component (Ca, Cl) aqueous solutions."""
    return make_solution


@pytest.fixture
def basic_output_setups(tmp_path) -> BasicOutputSetups:
    """Default identifier columns (solution id only), result file under tmp_path."""
    return BasicOutputSetups(output_file=str(tmp_path / "test_phreeqc.sel"))


@pytest.fixture
def node_array():
    """Factory for per-node float arrays."""
    def _make(values):
        return np.array(values, dtype=float)
    return _make


# =============================================================================
# Setup Fixtures
# =============================================================================

@pytest.fixture
def calcite_config(tmp_path) -> ChemicalSolverConfig:
    """Calcite dissolution with one equilibrium phase and one kinetic reactant.

    Transport process 0 carries Ca, process 1 carries C(4), process 2 carries H+.
    """
    return ChemicalSolverConfig(
        project_file_name="calcite",
        output_directory=str(tmp_path),
        aqueous_solution={
            "components": [
                {"name": "Ca", "amount": 1e-3},
                {"name": "C(4)", "amount": 2e-3},
            ],
            "pH": 7.5,
            "means_of_adjusting_charge": "pH",
        },
        equilibrium_phases=[{"name": "Calcite", "initial_amount": 0.1}],
        kinetic_reactants=[{"name": "Quartz", "initial_amount": 5.0, "parameters": [0.5]}],
        reaction_rates=[{
            "kinetic_reactant": "Quartz",
            "statements": [
                "rate = -1e-10 * (1 - SR(\"Quartz\"))",
                "moles = rate * TIME",
                "save moles",
            ],
        }],
        user_punch={"headings": ["si_calcite"], "statements": ["punch SI(\"Calcite\")"]},
        process_variables={0: "Ca", 1: "C(4)", 2: "H"},
    )
