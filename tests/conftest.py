"""Shared fixtures: literal /proc/stat text and a controllable clock."""

from typing import Dict, List, Sequence

import pytest
from loguru import logger

TAIL = """intr 1462898 28 9 0 0 0 0 0 0 0 0 0 0 0 0 0
ctxt 2554325
btime 1700000000
processes 12345
procs_running 2
procs_blocked 0
softirq 500000 1 2 3 4 5 6 7 8 9
"""


def stat_text(rows: Dict[str, Sequence[int]], tail: str = TAIL) -> str:
    """Render rows the way the kernel does, incl. the aggregate's double space."""
    lines: List[str] = []
    for name, vals in rows.items():
        sep = "  " if name == "cpu" else " "
        lines.append(name + sep + " ".join(str(v) for v in vals))
    return "\n".join(lines) + "\n" + tail


class FakeClock:
    """Monotonic nanosecond clock moved by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.t = round(start * 1_000_000_000)

    def __call__(self) -> int:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += round(seconds * 1_000_000_000)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stat_file(tmp_path):
    path = tmp_path / "stat"

    def write(rows: Dict[str, Sequence[int]], tail: str = TAIL) -> str:
        path.write_text(stat_text(rows, tail))
        return str(path)

    return write


@pytest.fixture
def log_messages():
    messages: List[str] = []
    handler_id = logger.add(
        lambda m: messages.append(m.record["message"]), level="DEBUG"
    )
    yield messages
    logger.remove(handler_id)
