"""
Integration tests against a real PHREEQC executable.

Skipped unless PHREEQC and its database can be located (PHREEQC_EXE /
PHREEQC_DATABASE or the usual install locations).
"""
import numpy as np
import pytest

from phreeqc_coupling import ChemicalSolverConfig, create_phreeqc_coupler
from phreeqc_coupling.core.transport_vectors import wrap_process_solutions
from phreeqc_coupling.core_config import CONFIG

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        CONFIG.get_phreeqc_exe() is None or CONFIG.get_phreeqc_database() is None,
        reason="PHREEQC executable or database not available",
    ),
]


def _calcite_config(tmp_path, enable_dump=False):
    return ChemicalSolverConfig(
        project_file_name="calcite",
        output_directory=str(tmp_path),
        enable_dump=enable_dump,
        aqueous_solution={
            "components": [{"name": "Ca", "amount": 1e-4}, {"name": "C(4)", "amount": 2e-4}],
            "means_of_adjusting_charge": "pH",
        },
        equilibrium_phases=[{"name": "Calcite", "initial_amount": 0.01}],
        process_variables={0: "Ca", 1: "C(4)"},
    )


def test_calcite_dissolution(tmp_path):
    """Undersaturated water dissolves calcite at every node."""
    coupler = create_phreeqc_coupler(_calcite_config(tmp_path), [2, 0, 1])

    ca = np.full(3, 1e-4)
    c4 = np.full(3, 2e-4)
    coupler.initial_calculation(wrap_process_solutions([ca, c4]))

    assert np.all(ca > 1e-4)
    assert np.all(coupler.equilibrium_phase_amounts("Calcite") < 0.01)
    np.testing.assert_allclose(ca, ca[0], rtol=1e-6)
    assert all(7.0 < s.pH < 11.0 for s in coupler.aqueous_solutions)


def test_steps_with_dump(tmp_path):
    coupler = create_phreeqc_coupler(_calcite_config(tmp_path, enable_dump=True), [0, 1])
    vectors = wrap_process_solutions([np.full(2, 1e-4), np.full(2, 2e-4)])

    coupler.initial_calculation(vectors)
    coupler.step(vectors, dt=3600.0)

    assert set(coupler.dump.aqueous_solutions_prev) == {0, 1}
    assert (tmp_path / "calcite_phreeqc.dmp").exists()
