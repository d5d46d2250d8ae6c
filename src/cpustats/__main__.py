import json
import sys
import time
from typing import Callable, Optional, Sequence, TextIO

from loguru import logger

from cpustats.cli import build_parser
from cpustats.config import AppConfig, SamplerConfig, apply_overrides, load_config
from cpustats.logging_config import setup_logging
from cpustats.sampling.context import StatsContext
from cpustats.sampling.models import Sample


def format_line(sample: Sample, show_aggregate: bool = False) -> str:
    parts = []
    agg = sample.aggregate
    if show_aggregate and agg is not None:
        parts.append(f"{agg.identity}: idle {agg.idle_percent}%")
    parts.extend(f"{s.busy_percent:3}%" for s in sample.cores)
    return " ".join(parts)


def format_json(sample: Sample) -> str:
    return json.dumps(
        {
            "elapsed_ms": sample.elapsed_ms,
            "snapshots": [s.to_dict() for s in sample.snapshots],
            "added": sample.added,
            "removed": sample.removed,
        }
    )


def run_display_loop(
    ctx: StatsContext,
    cfg: SamplerConfig,
    count: Optional[int] = None,
    out: Optional[TextIO] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Print one line per tick for count ticks (or forever).

    A failed read skips that tick. Returns the number of lines printed.
    """
    out = out if out is not None else sys.stdout
    shown = 0
    ticks = 0
    while count is None or ticks < count:
        ticks += 1
        sleep(cfg.interval_sec)
        try:
            sample = ctx.sample()
        except OSError as exc:
            logger.warning("No data this tick path={}: {}", cfg.stat_path, exc)
            continue

        if cfg.output == "json":
            line = format_json(sample)
        else:
            line = format_line(sample, cfg.show_aggregate)
        print(line, file=out, flush=True)
        shown += 1
    return shown


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg: AppConfig = apply_overrides(load_config(args.config), args)
    setup_logging(cfg.logging)

    try:
        ctx = StatsContext(path=cfg.sampler.stat_path)
    except OSError as exc:
        logger.error("Cannot read {}: {}", cfg.sampler.stat_path, exc)
        return 1

    logger.info(
        "Sampling path={} interval={}s", cfg.sampler.stat_path, cfg.sampler.interval_sec
    )
    try:
        run_display_loop(ctx, cfg.sampler, count=args.count)
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
