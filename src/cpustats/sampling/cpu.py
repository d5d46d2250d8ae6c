from typing import List, Optional

from cpustats.sampling.models import AGGREGATE_ID, COUNTER_FIELDS, CpuCounters
from cpustats.sampling.utils import parse_u64, read_lines

STAT_PATH = "/proc/stat"
CPU_PREFIX = "cpu"


def read_cpu_counters(path: str = STAT_PATH) -> List[CpuCounters]:
    cores: List[CpuCounters] = []
    for ln in read_lines(path):
        if not ln.startswith(CPU_PREFIX):
            continue
        rec = parse_counter_line(ln)
        if rec is not None:
            cores.append(rec)
    return cores


def parse_counter_line(line: str) -> Optional[CpuCounters]:
    """
    Parse one ``cpu``/``cpuN`` line of /proc/stat.

    The aggregate row is written as ``cpu  <user> ...`` with two spaces, so
    splitting on single spaces leaves an empty placeholder token after the
    identity that is dropped here. Lines with fewer than ten counters (older
    kernels without the guest columns) are rejected rather than zero-filled.
    """
    parts = line.rstrip().split(" ")
    name = parts[0]
    if not name:
        return None

    idx = 1
    if name == AGGREGATE_ID:
        if len(parts) < 2 or parts[1] != "":
            return None
        idx = 2

    raw = parts[idx : idx + len(COUNTER_FIELDS)]
    if len(raw) < len(COUNTER_FIELDS):
        return None

    vals: List[int] = []
    for tok in raw:
        v = parse_u64(tok)
        if v is None:
            return None
        vals.append(v)

    return CpuCounters(name, *vals)
