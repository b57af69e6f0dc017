"""
Previous-state mechanism based on PHREEQC's DUMP keyword

At the end of every run PHREEQC dumps the reacted solutions as SOLUTION_RAW
blocks. Before the next run the blocks are read back, renumbered so they do
not collide with the current solutions, and appended to each SOLUTION block
so kinetics and surfaces can resume from the previous composition.
"""

from typing import Dict, List, Sequence, TextIO
import logging

from ..exceptions import ResultParseError

logger = logging.getLogger(__name__)

RAW_KEYWORD = "SOLUTION_RAW"


class Dump:
    """
    Dump file location plus the previous-state blocks of the last run

    ``aqueous_solutions_prev`` maps a global node id to the renumbered
    SOLUTION_RAW text of that chemical system. It is replaced on every read.
    """

    def __init__(self, dump_file: str):
        self.dump_file = dump_file
        self.aqueous_solutions_prev: Dict[int, str] = {}

    def previous_solution_id(self, global_id: int, num_chemical_systems: int) -> int:
        """Solution number the previous state of ``global_id`` is written under."""
        return num_chemical_systems + global_id + 1

    def has_previous_state(self, global_id: int) -> bool:
        return global_id in self.aqueous_solutions_prev

    def read_dump_file(self, in_stream: TextIO, chemical_system_map: Sequence[int]) -> None:
        """
        Parse SOLUTION_RAW blocks and keep those of the mapped systems.

        Blocks are identified by their solution number (global id + 1), so the
        order in which PHREEQC dumps them does not matter.
        """
        num_chemical_systems = len(chemical_system_map)
        mapped_ids = set(int(g) for g in chemical_system_map)

        blocks: Dict[int, List[str]] = {}
        current: List[str] = []
        in_block = False

        for line in in_stream:
            line = line.rstrip("\r\n")
            stripped = line.strip()

            if stripped.startswith(RAW_KEYWORD):
                tokens = stripped.split()
                try:
                    solution_id = int(tokens[1])
                except (IndexError, ValueError):
                    raise ResultParseError(
                        message=f"{RAW_KEYWORD} line without a solution number",
                        details={"line": stripped}
                    )
                global_id = solution_id - 1
                new_id = self.previous_solution_id(global_id, num_chemical_systems)
                current = [f"{RAW_KEYWORD} {new_id}"]
                blocks[global_id] = current
                in_block = True
                continue

            if not in_block or not stripped:
                continue

            # Block body lines are indented or start with an option dash
            if line[0].isspace() or stripped.startswith("-"):
                current.append(line)
            else:
                in_block = False

        self.aqueous_solutions_prev = {
            global_id: "\n".join(lines)
            for global_id, lines in blocks.items()
            if global_id in mapped_ids
        }

        skipped = len(blocks) - len(self.aqueous_solutions_prev)
        if skipped:
            logger.debug(f"Ignored {skipped} dumped solutions outside the chemical system map")
        logger.debug(
            f"Read previous state of {len(self.aqueous_solutions_prev)} of "
            f"{num_chemical_systems} chemical systems"
        )

    def write_previous_state(self, out: TextIO, global_id: int) -> None:
        out.write(self.aqueous_solutions_prev[global_id])
        out.write("\n\n")

    def write(self, out: TextIO, chemical_system_map: Sequence[int]) -> None:
        """DUMP block covering the current solution of every system"""
        out.write("DUMP\n")
        out.write(f"-file {self.dump_file}\n")
        out.write("-append false\n")
        out.write(f"-solution {_format_id_ranges([g + 1 for g in chemical_system_map])}\n")
        out.write("END\n")


def _format_id_ranges(ids: Sequence[int]) -> str:
    """'1-3 7 9-10' for [1, 2, 3, 7, 9, 10]"""
    ordered = sorted(set(int(i) for i in ids))
    if not ordered:
        return ""

    ranges = []
    start = previous = ordered[0]
    for i in ordered[1:]:
        if i == previous + 1:
            previous = i
            continue
        ranges.append((start, previous))
        start = previous = i
    ranges.append((start, previous))

    return " ".join(f"{a}-{b}" if a != b else f"{a}" for a, b in ranges)
