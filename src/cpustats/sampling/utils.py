import time
from typing import List, Optional

U64_MAX = 2**64 - 1


def read_lines(path: str) -> List[str]:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.readlines()


def now() -> int:
    return time.monotonic_ns()


def parse_u64(x: str) -> Optional[int]:
    """
    Parse a kernel counter token. Returns None unless the token is a plain
    decimal that fits in an unsigned 64-bit integer.
    """
    if not x.isascii() or not x.isdigit():
        return None
    value = int(x)
    if value > U64_MAX:
        return None
    return value
