import argparse


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="cpustats", description="Per-core CPU utilization from /proc/stat"
    )
    p.add_argument("--config", "-c", help="Path to YAML config file")
    p.add_argument("--path", help="Override the counter feed path")
    p.add_argument(
        "--interval", "-i", type=float, help="Seconds between samples"
    )
    p.add_argument(
        "--count", "-n", type=int, help="Stop after this many samples"
    )
    p.add_argument(
        "--aggregate", action="store_true", help="Also print the all-cpu row"
    )
    p.add_argument("--json", action="store_true", help="One JSON object per sample")
    p.add_argument("--log-level", help="Override log level (INFO, DEBUG, ...)")
    p.add_argument("--log-json", action="store_true", help="Enable JSON logs")
    return p
