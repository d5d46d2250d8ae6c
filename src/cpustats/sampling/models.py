from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

AGGREGATE_ID = "cpu"

# Kernel order of the per-cpu columns in /proc/stat.
COUNTER_FIELDS: Tuple[str, ...] = (
    "user",
    "nice",
    "system",
    "idle",
    "io_wait",
    "irq",
    "soft_irq",
    "steal",
    "guest",
    "guest_nice",
)


@dataclass(slots=True, frozen=True)
class CpuCounters:
    """
    Cumulative ticks (USER_HZ) for one core, or for the aggregate row, since
    boot.
    """

    identity: str
    user: int
    nice: int
    system: int
    idle: int
    io_wait: int  # can go down, see Documentation/filesystems/proc.rst
    irq: int
    soft_irq: int
    steal: int
    guest: int
    guest_nice: int

    @property
    def is_aggregate(self) -> bool:
        return self.identity == AGGREGATE_ID

    def values(self) -> Tuple[int, ...]:
        return tuple(getattr(self, name) for name in COUNTER_FIELDS)


@dataclass(slots=True, frozen=True)
class CpuDelta:
    """
    Ticks accumulated by one core during a sampling interval.

    io_wait is the later sample's raw value, not a difference. Fields listed
    in regressed went backwards (wrap or reset) and were clamped to 0.
    """

    identity: str
    user: int
    nice: int
    system: int
    idle: int
    io_wait: int
    irq: int
    soft_irq: int
    steal: int
    guest: int
    guest_nice: int
    regressed: Tuple[str, ...] = ()

    @property
    def is_aggregate(self) -> bool:
        return self.identity == AGGREGATE_ID

    def values(self) -> Tuple[int, ...]:
        return tuple(getattr(self, name) for name in COUNTER_FIELDS)


@dataclass(slots=True, frozen=True)
class Snapshot:
    delta: CpuDelta
    elapsed_ms: int

    @property
    def identity(self) -> str:
        return self.delta.identity

    @property
    def is_aggregate(self) -> bool:
        return self.delta.is_aggregate

    @property
    def regressed(self) -> Tuple[str, ...]:
        return self.delta.regressed

    @property
    def idle_percent(self) -> int:
        """
        Idle ticks scaled against wall-clock milliseconds. Ticks are 1/100 s,
        so for the aggregate row this sums over all cores and exceeds 100 on
        multi-core machines.
        """
        if self.elapsed_ms <= 0:
            return 0
        return (self.delta.idle * 1000) // self.elapsed_ms

    @property
    def busy_percent(self) -> int:
        return 100 - self.idle_percent

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"identity": self.identity}
        out.update(zip(COUNTER_FIELDS, self.delta.values()))
        out["elapsed_ms"] = self.elapsed_ms
        out["idle_percent"] = self.idle_percent
        out["busy_percent"] = self.busy_percent
        out["regressed"] = list(self.regressed)
        return out

    def __str__(self) -> str:
        return f"{self.identity}: {self.idle_percent:3}%"


@dataclass
class Sample:
    elapsed_ms: int
    snapshots: List[Snapshot] = field(default_factory=list)
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    @property
    def aggregate(self) -> Optional[Snapshot]:
        for snap in self.snapshots:
            if snap.is_aggregate:
                return snap
        return None

    @property
    def cores(self) -> List[Snapshot]:
        return [s for s in self.snapshots if not s.is_aggregate]
