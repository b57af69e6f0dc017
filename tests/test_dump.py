"""
Tests for the DUMP-based previous-state mechanism.
"""
import io

import pytest

from phreeqc_coupling.core.dump import Dump
from phreeqc_coupling.exceptions import ResultParseError

DUMP_TEXT = """\
SOLUTION_RAW                 2 Solution after simulation 4.
  -temp                     25
  -total_h                  111.0124
  -totals
    Ca   0.001
SOLUTION_RAW                 1 Solution after simulation 4.
  -temp                     25
  -totals
    Ca   0.002
USE mix none
USE reaction none
"""


@pytest.mark.unit
class TestReadDumpFile:

    def test_blocks_renumbered_by_solution_number(self):
        dump = Dump("x.dmp")
        dump.read_dump_file(io.StringIO(DUMP_TEXT), [0, 1])

        assert set(dump.aqueous_solutions_prev) == {0, 1}
        # N + g + 1 with N = 2
        assert dump.aqueous_solutions_prev[0].splitlines()[0] == "SOLUTION_RAW 3"
        assert dump.aqueous_solutions_prev[1].splitlines()[0] == "SOLUTION_RAW 4"
        assert "    Ca   0.002" in dump.aqueous_solutions_prev[0]
        assert "  -total_h                  111.0124" in dump.aqueous_solutions_prev[1]
        assert "USE mix none" not in dump.aqueous_solutions_prev[0]

    def test_unmapped_blocks_ignored(self):
        dump = Dump("x.dmp")
        dump.read_dump_file(io.StringIO(DUMP_TEXT), [1])

        assert set(dump.aqueous_solutions_prev) == {1}
        assert dump.has_previous_state(1)
        assert not dump.has_previous_state(0)
        assert dump.aqueous_solutions_prev[1].startswith("SOLUTION_RAW 3\n")

    def test_read_replaces_previous_content(self):
        dump = Dump("x.dmp")
        dump.aqueous_solutions_prev = {7: "stale"}
        dump.read_dump_file(io.StringIO(""), [7])
        assert dump.aqueous_solutions_prev == {}

    def test_bad_header(self):
        with pytest.raises(ResultParseError):
            Dump("x.dmp").read_dump_file(io.StringIO("SOLUTION_RAW abc\n  -temp 25\n"), [0])


@pytest.mark.unit
class TestWriteDump:

    def test_write_previous_state(self):
        dump = Dump("x.dmp")
        dump.aqueous_solutions_prev = {0: "SOLUTION_RAW 3\n  -temp 25"}
        out = io.StringIO()
        dump.write_previous_state(out, 0)
        assert out.getvalue() == "SOLUTION_RAW 3\n  -temp 25\n\n"

    @pytest.mark.parametrize("chemical_system_map, expected", [
        ([0], "1"),
        ([0, 1, 2], "1-3"),
        ([5, 0, 1, 2, 9], "1-3 6 10"),
        ([3, 1], "2 4"),
    ])
    def test_solution_ranges(self, chemical_system_map, expected):
        out = io.StringIO()
        Dump("/tmp/run.dmp").write(out, chemical_system_map)
        assert out.getvalue() == f"DUMP\n-file /tmp/run.dmp\n-append false\n-solution {expected}\nEND\n"

    def test_previous_solution_id(self):
        assert Dump("x.dmp").previous_solution_id(4, 10) == 15
