import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml

from cpustats.sampling.cpu import STAT_PATH

Output = Literal["text", "json"]
OUTPUTS = ("text", "json")


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    json: bool = False


@dataclass(frozen=True)
class SamplerConfig:
    stat_path: str = STAT_PATH
    interval_sec: float = 1.0
    show_aggregate: bool = False
    output: Output = "text"


@dataclass(frozen=True)
class AppConfig:
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    sampler: SamplerConfig = field(default_factory=SamplerConfig)


def _check_sampler(cfg: SamplerConfig) -> SamplerConfig:
    if not (cfg.interval_sec > 0 and math.isfinite(cfg.interval_sec)):
        raise ValueError(f"sampler.interval_sec must be > 0, got {cfg.interval_sec}")
    if cfg.output not in OUTPUTS:
        raise ValueError(f"sampler.output must be one of {OUTPUTS}, got {cfg.output!r}")
    if not cfg.stat_path:
        raise ValueError("sampler.stat_path must not be empty")
    return cfg


def load_config(path: Optional[str] = None) -> AppConfig:
    if path is None:
        return AppConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw: Dict[str, Any] = yaml.safe_load(p.read_text()) or {}

    log_raw = raw.get("logging") or {}
    logging_cfg = LoggingConfig(
        level=str(log_raw.get("level", "INFO")).upper(),
        json=bool(log_raw.get("json", False)),
    )

    s_raw = raw.get("sampler") or {}
    sampler_cfg = _check_sampler(
        SamplerConfig(
            stat_path=str(s_raw.get("stat_path", STAT_PATH)),
            interval_sec=float(s_raw.get("interval_sec", 1.0)),
            show_aggregate=bool(s_raw.get("show_aggregate", False)),
            output=str(s_raw.get("output", "text")).lower(),
        )
    )

    return AppConfig(logging=logging_cfg, sampler=sampler_cfg)


def apply_overrides(cfg: AppConfig, args: Any) -> AppConfig:
    """Fold command line flags over the file config."""
    log_cfg = cfg.logging
    if args.log_level:
        log_cfg = replace(log_cfg, level=args.log_level.upper())
    if args.log_json:
        log_cfg = replace(log_cfg, json=True)

    s_cfg = cfg.sampler
    if args.path:
        s_cfg = replace(s_cfg, stat_path=args.path)
    if args.interval is not None:
        s_cfg = replace(s_cfg, interval_sec=args.interval)
    if args.aggregate:
        s_cfg = replace(s_cfg, show_aggregate=True)
    if args.json:
        s_cfg = replace(s_cfg, output="json")

    return AppConfig(logging=log_cfg, sampler=_check_sampler(s_cfg))
