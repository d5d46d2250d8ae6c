import threading
from typing import Callable, Dict, List, Union

from loguru import logger

from cpustats.sampling.cpu import STAT_PATH, read_cpu_counters
from cpustats.sampling.models import (
    AGGREGATE_ID,
    COUNTER_FIELDS,
    CpuCounters,
    CpuDelta,
    Sample,
    Snapshot,
)
from cpustats.sampling.utils import now

# Not monotonic per the kernel docs, carried over from the later sample.
CARRIED_FIELDS = frozenset({"io_wait"})


def diff_counters(prev: CpuCounters, cur: CpuCounters) -> CpuDelta:
    vals: Dict[str, int] = {}
    regressed: List[str] = []
    for name in COUNTER_FIELDS:
        after = getattr(cur, name)
        if name in CARRIED_FIELDS:
            vals[name] = after
            continue
        d = after - getattr(prev, name)
        if d < 0:
            regressed.append(name)
            d = 0
        vals[name] = d
    return CpuDelta(identity=cur.identity, regressed=tuple(regressed), **vals)


class StatsContext:
    """
    Holds the last observed counters and when they were read, and turns each
    new read into per-core deltas over the elapsed interval.

    Sampling cadence is up to the caller: every call to read() measures the
    interval since the previous call (or since construction).
    """

    def __init__(
        self,
        path: str = STAT_PATH,
        clock: Callable[[], int] = now,
    ) -> None:
        self.path = path
        self._clock = clock
        self._lock = threading.Lock()
        self.last_stats: List[CpuCounters] = []
        self._last_instant: int = 0
        self.initialize()

    def initialize(self) -> None:
        t0 = self._clock()
        stats = read_cpu_counters(self.path)
        with self._lock:
            self.last_stats = stats
            self._last_instant = t0
        logger.debug("Seeded baseline path={} rows={}", self.path, len(stats))

    def read(self) -> List[Snapshot]:
        """Read counters now and return one snapshot per core seen last time."""
        return self.sample().snapshots

    def sample(self) -> Sample:
        with self._lock:
            t0 = self._clock()
            period_ms = (t0 - self._last_instant) // 1_000_000
            now_stats = read_cpu_counters(self.path)

            prev_by_id = {c.identity: c for c in self.last_stats}
            seen = set()
            out = Sample(elapsed_ms=period_ms)
            for cur in now_stats:
                seen.add(cur.identity)
                prev = prev_by_id.get(cur.identity)
                if prev is None:
                    out.added.append(cur.identity)
                    continue
                delta = diff_counters(prev, cur)
                if delta.regressed:
                    logger.warning(
                        "Counter regression id={} fields={}",
                        delta.identity,
                        ",".join(delta.regressed),
                    )
                out.snapshots.append(Snapshot(delta=delta, elapsed_ms=period_ms))
            out.removed = [
                c.identity for c in self.last_stats if c.identity not in seen
            ]

            if out.added or out.removed:
                logger.info(
                    "CPU set changed added={} removed={}", out.added, out.removed
                )

            self.last_stats = now_stats
            self._last_instant = t0
            return out

    @staticmethod
    def is_aggregate(record: Union[CpuCounters, CpuDelta, Snapshot]) -> bool:
        return record.identity == AGGREGATE_ID

    @staticmethod
    def idle_percent(snapshot: Snapshot) -> int:
        return snapshot.idle_percent
