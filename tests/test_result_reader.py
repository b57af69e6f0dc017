"""
Tests for selected-output parsing.

Covers the three-system end-to-end scenario, row arity, drop-set
independence, error context and the no-mutation guarantee on failure.
"""
import io

import numpy as np
import pytest

from phreeqc_coupling.core.aqueous_solution import AqueousSolution, Component
from phreeqc_coupling.core.equilibrium_phase import EquilibriumPhase
from phreeqc_coupling.core.kinetic_reactant import KineticReactant
from phreeqc_coupling.core.output import ItemType, OutputItem, OutputSchema
from phreeqc_coupling.core.result_reader import PhreeqcResultReader
from phreeqc_coupling.core.status import Status
from phreeqc_coupling.core.transport_vectors import wrap_process_solutions
from phreeqc_coupling.core.user_punch import SecondaryVariable, UserPunch
from phreeqc_coupling.exceptions import (
    CouplingIOError,
    MissingResultRowError,
    NotFoundError,
    ParseError,
    ResultParseError,
    RowLengthMismatchError,
)

PH_PE_CA = [
    OutputItem("pH", ItemType.PH),
    OutputItem("pe", ItemType.PE),
    OutputItem("Ca", ItemType.COMPONENT),
]


def _table(rows, skipped_lines=1, width=None):
    """Header plus, per system, skipped rows and the given result row."""
    width = width or len(rows[0])
    lines = ["\t".join(f"c{i}" for i in range(width))]
    for row in rows:
        lines.extend("\t".join("0" for _ in range(width)) for _ in range(skipped_lines))
        lines.append("\t".join(str(v) for v in row))
    return io.StringIO("\n".join(lines) + "\n")


def _solutions(amounts):
    return [AqueousSolution([Component("Ca", a)]) for a in amounts]


@pytest.mark.unit
class TestEndToEnd:

    def test_three_systems(self, basic_output_setups):
        solutions = _solutions([1.0, 2.0, 3.0])
        schema = OutputSchema(basic_output_setups, PH_PE_CA)
        reader = PhreeqcResultReader([0, 1, 2], solutions, schema)

        reader.read(_table([[7.0, 4.0, 1.5], [7.1, 4.1, 2.5], [7.2, 4.2, 3.5]]))

        assert [s.pH for s in solutions] == [7.0, 7.1, 7.2]
        assert [s.pe for s in solutions] == [4.0, 4.1, 4.2]
        assert [s.find_component("Ca").amount for s in solutions] == [1.5, 2.5, 3.5]

        ca = np.zeros(3)
        vectors = wrap_process_solutions([ca])
        for global_id, solution in enumerate(solutions):
            solution.transfer(vectors, [(0, "Ca")], global_id, Status.UPDATING_STATE)
        np.testing.assert_array_equal(ca, [1.5, 2.5, 3.5])

    def test_permuted_map_routes_by_global_id(self, basic_output_setups):
        phase = EquilibriumPhase("Calcite", np.zeros(3))
        schema = OutputSchema(
            basic_output_setups, PH_PE_CA + [OutputItem("Calcite", ItemType.EQUILIBRIUM_PHASE)])
        solutions = _solutions([0.0, 0.0, 0.0])
        reader = PhreeqcResultReader([2, 0, 1], solutions, schema, equilibrium_phases=[phase])

        reader.read(_table([[7.2, 4.0, 3.0, 30.0], [7.0, 4.0, 1.0, 10.0], [7.1, 4.0, 2.0, 20.0]]))

        # Row k belongs to local system k, array entries to its global id
        np.testing.assert_array_equal(phase.amount, [10.0, 20.0, 30.0])
        assert [s.find_component("Ca").amount for s in solutions] == [3.0, 1.0, 2.0]

    def test_arrays_for_phases_reactants_and_punch(self, basic_output_setups):
        phase = EquilibriumPhase("Calcite", np.zeros(2))
        reactant = KineticReactant("Quartz", np.zeros(2))
        punch = UserPunch([SecondaryVariable("si_calcite", np.zeros(2))], ["punch 0"])
        schema = OutputSchema.from_entities(
            basic_output_setups,
            component_names=["Ca"],
            equilibrium_phase_names=["Calcite"],
            kinetic_reactant_names=["Quartz"],
            secondary_variable_names=["si_calcite"],
        )
        reader = PhreeqcResultReader(
            [0, 1], _solutions([0.0, 0.0]), schema,
            equilibrium_phases=[phase], kinetic_reactants=[reactant], user_punch=punch)

        # soln pH pe Ca Calcite d_Calcite Quartz dk_Quartz si_calcite
        reader.read(_table([
            [1, 7.0, 4.0, 0.1, 0.5, -0.01, 4.9, -0.1, 0.02],
            [2, 7.1, 4.1, 0.2, 0.6, -0.02, 4.8, -0.2, -0.03],
        ]))

        np.testing.assert_array_equal(phase.amount, [0.5, 0.6])
        np.testing.assert_array_equal(reactant.amount, [4.9, 4.8])
        np.testing.assert_array_equal(punch.find_secondary_variable("si_calcite").value, [0.02, -0.03])

    def test_surface_skips_two_lines(self, basic_output_setups):
        solutions = _solutions([0.0, 0.0])
        reader = PhreeqcResultReader(
            [0, 1], solutions, OutputSchema(basic_output_setups, PH_PE_CA), has_surface=True)
        assert reader.num_skipped_lines == 2

        reader.read(_table([[7.0, 4.0, 1.0], [8.0, 5.0, 2.0]], skipped_lines=2))

        assert [s.pH for s in solutions] == [7.0, 8.0]

    def test_space_and_tab_separators(self, basic_output_setups):
        solutions = _solutions([0.0])
        reader = PhreeqcResultReader([0], solutions, OutputSchema(basic_output_setups, PH_PE_CA))
        reader.read(io.StringIO("pH pe Ca\n0 0 0\n   7.25 \t  3.5\t\t0.004  \r\n"))
        assert solutions[0].pH == 7.25
        assert solutions[0].find_component("Ca").amount == 0.004


@pytest.mark.unit
class TestDropSet:

    @pytest.mark.parametrize("junk", ["1e300", "-5", "0", "123456"])
    def test_dropped_columns_never_influence_values(self, basic_output_setups, junk):
        schema = OutputSchema(basic_output_setups, PH_PE_CA, dropped_item_ids=[0, 2])
        solutions = _solutions([0.0])
        reader = PhreeqcResultReader([0], solutions, schema)

        reader.read(io.StringIO(f"h\n0 0 0 0 0\n{junk} 7.5 {junk} 3.5 0.25\n"))

        assert solutions[0].pH == 7.5
        assert solutions[0].pe == 3.5
        assert solutions[0].find_component("Ca").amount == 0.25

    def test_dropped_columns_may_be_non_numeric(self, basic_output_setups):
        schema = OutputSchema(basic_output_setups, PH_PE_CA, dropped_item_ids=[3])
        reader = PhreeqcResultReader([0], _solutions([0.0]), schema)
        assert reader.parse_row("7.0 4.0 0.5 n/a", 0) == [7.0, 4.0, 0.5]


@pytest.mark.unit
class TestFailures:

    @pytest.mark.parametrize("row", [[7.0, 4.0], [7.0, 4.0, 1.5, 9.9]])
    def test_arity_mismatch_leaves_system_untouched(self, basic_output_setups, row):
        solutions = _solutions([1.0, 2.0])
        reader = PhreeqcResultReader([0, 1], solutions, OutputSchema(basic_output_setups, PH_PE_CA))

        with pytest.raises(RowLengthMismatchError) as exc_info:
            reader.read(_table([[7.3, 4.3, 1.1], row], width=3))

        assert exc_info.value.system_id == 1
        # First system was read, the failing one keeps its state
        assert solutions[0].pH == 7.3
        assert solutions[1].pH == 7.0
        assert solutions[1].pe == 4.0
        assert solutions[1].find_component("Ca").amount == 2.0

    def test_parse_error_fields(self, basic_output_setups):
        solutions = _solutions([1.0])
        schema = OutputSchema(basic_output_setups, PH_PE_CA, dropped_item_ids=[0])
        reader = PhreeqcResultReader([5], solutions, schema)

        with pytest.raises(ParseError) as exc_info:
            reader.read(io.StringIO("h\n0 0 0 0\n1 7.0 abc 0.5\n"))

        error = exc_info.value
        assert (error.value, error.system_id, error.column_index) == ("abc", 5, 2)
        assert isinstance(error, ResultParseError)
        assert solutions[0].pH == 7.0
        assert solutions[0].find_component("Ca").amount == 1.0

    def test_unknown_component_leaves_system_untouched(self, basic_output_setups):
        solution = AqueousSolution([Component("Mg", 1.0)], pH=6.0)
        reader = PhreeqcResultReader([0], [solution], OutputSchema(basic_output_setups, PH_PE_CA))

        with pytest.raises(NotFoundError):
            reader.read(_table([[8.0, 4.0, 1.0]]))

        assert solution.pH == 6.0

    def test_unknown_phase_fails_before_reading(self, basic_output_setups):
        schema = OutputSchema(
            basic_output_setups, PH_PE_CA + [OutputItem("Dolomite", ItemType.EQUILIBRIUM_PHASE)])
        solutions = _solutions([1.0])
        reader = PhreeqcResultReader(
            [0], solutions, schema, equilibrium_phases=[EquilibriumPhase("Calcite", np.zeros(1))])

        with pytest.raises(NotFoundError) as exc_info:
            reader.read(_table([[8.0, 4.0, 1.0, 0.1]]))

        assert exc_info.value.kind == "equilibrium phase"
        assert solutions[0].pH == 7.0

    def test_secondary_variable_without_user_punch(self, basic_output_setups):
        schema = OutputSchema(
            basic_output_setups, PH_PE_CA + [OutputItem("si", ItemType.SECONDARY_VARIABLE)])
        reader = PhreeqcResultReader([0], _solutions([1.0]), schema)
        with pytest.raises(NotFoundError):
            reader.read(_table([[8.0, 4.0, 1.0, 0.1]]))

    def test_missing_rows(self, basic_output_setups):
        reader = PhreeqcResultReader(
            [0, 1], _solutions([1.0, 2.0]), OutputSchema(basic_output_setups, PH_PE_CA))
        with pytest.raises(MissingResultRowError) as exc_info:
            reader.read(_table([[7.0, 4.0, 1.0]]))
        assert exc_info.value.system_id == 1

    def test_missing_file(self, basic_output_setups, tmp_path):
        reader = PhreeqcResultReader([0], _solutions([1.0]), OutputSchema(basic_output_setups, PH_PE_CA))
        with pytest.raises(CouplingIOError):
            reader.read_outputs_from_file(str(tmp_path / "nope.sel"))
