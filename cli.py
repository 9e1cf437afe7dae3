import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import Dict, Any

import yaml
from tqdm import tqdm

from artifacts.logger import RunLogger
from artifacts.report_writer import write_csv_and_summary
from domain.constants import DEFAULT_CHUNK_SIZE, ERROR_POLICY, JOB_STATUS_FAILED
from domain.errors import DigestMismatchError, ManifestError
from domain.models import ExecutorConfig
from eservice_io.stream_copy import copy_file
from services.executor_service import ExecutorService
from services.manifest_service import load_manifest


# ---------------------------
# Helpers
# ---------------------------

def load_config(path: str | None) -> Dict[str, Any]:
    if not path:
        return {}

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if p.suffix.lower() in (".yaml", ".yml"):
        cfg = yaml.safe_load(p.read_text(encoding="utf-8"))
    else:
        cfg = json.loads(p.read_text(encoding="utf-8"))

    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config file {path} must hold a mapping, got {type(cfg).__name__}")
    return cfg


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if v is not None:
            out[k] = v
    return out


def build_executor_config(cfg: Dict[str, Any]) -> ExecutorConfig:
    return ExecutorConfig(
        chunk_size=int(cfg.get("chunk_size", DEFAULT_CHUNK_SIZE)),
        error_policy=str(cfg.get("error_policy", "RETRY_THEN_SKIP")).upper(),
        retries=int(cfg.get("retries", 2)),
        verify=bool(cfg.get("verify", False)),
        make_parents=bool(cfg.get("make_parents", True)),
        copy_stat=bool(cfg.get("copy_stat", False)),
    )


def tqdm_enabled() -> bool:
    return sys.stderr.isatty()


def log(msg: str, run_logger: RunLogger | None):
    ts = time.strftime("%Y-%m-%d %H:%M:%S")
    tqdm.write(f"[{ts}] {msg}")
    if run_logger:
        run_logger.log(msg)


# ---------------------------
# Commands
# ---------------------------

def cmd_copy(args) -> int:
    try:
        n = copy_file(args.source, args.dest, chunk_size=args.chunk_size)
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    log(f"Copied {n} bytes: {args.source} -> {args.dest}", None)
    return 0


def cmd_run(args) -> int:
    try:
        cfg_file = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    cli_cfg = {
        "chunk_size": args.chunk_size,
        "error_policy": args.error_policy,
        "retries": args.retries,
        "verify": args.verify,
        "make_parents": args.make_parents,
        "copy_stat": args.copy_stat,
        "report_dir": args.report_dir,
        "log_file": args.log_file,
    }
    cfg = merge_config(cfg_file, cli_cfg)

    try:
        run_logger = RunLogger(str(cfg["log_file"])) if cfg.get("log_file") else None
        jobs = load_manifest(args.manifest)
        executor = ExecutorService(build_executor_config(cfg), logger=run_logger)
    except (OSError, ManifestError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    log(f"Executing {len(jobs)} copy jobs…", run_logger)

    exec_pbar = tqdm(
        total=len(jobs),
        desc="Copy",
        unit="file",
        dynamic_ncols=True,
        disable=not tqdm_enabled(),
    )

    _last_done = 0

    def exec_progress(done, total, src, dst):
        nonlocal _last_done
        delta = done - _last_done
        if delta > 0:
            exec_pbar.update(delta)
            _last_done = done

    try:
        results = executor.execute(jobs, progress_cb=exec_progress)
    except (OSError, DigestMismatchError) as e:
        exec_pbar.close()
        log(f"Aborted: {type(e).__name__}: {e}", run_logger)
        return 2
    exec_pbar.close()

    failed = [r for r in results if r.status == JOB_STATUS_FAILED]
    for r in failed:
        log(f"FAILED {r.job_id}: {r.error_message}", run_logger)

    report_dir = cfg.get("report_dir")
    if report_dir:
        run_name = time.strftime("CLI_Run_%Y%m%d_%H%M%S")
        write_csv_and_summary(
            results,
            os.path.join(report_dir, "report.csv"),
            os.path.join(report_dir, "summary.txt"),
            run_name=run_name,
        )
        log(f"Report written to {report_dir}", run_logger)

    log(f"Run finished. Jobs={len(results)} Failed={len(failed)}", run_logger)
    return 2 if failed else 0


# ---------------------------
# CLI main
# ---------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eservice-copy",
        description="Stream and file copy utility – CLI"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_copy = sub.add_parser("copy", help="Copy one file")
    p_copy.add_argument("source", help="Source file")
    p_copy.add_argument("dest", help="Destination file (created or truncated)")
    p_copy.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE, help="Read size in bytes")
    p_copy.set_defaults(func=cmd_copy)

    p_run = sub.add_parser("run", help="Execute the copy jobs of a manifest")
    p_run.add_argument("--manifest", required=True, help="Jobs file (json or yaml)")
    p_run.add_argument("--config", help="Config file (json or yaml)")
    p_run.add_argument("--chunk-size", type=int, help="Read size in bytes")
    p_run.add_argument("--error-policy", choices=sorted(ERROR_POLICY))
    p_run.add_argument("--retries", type=int, help="Extra attempts for RETRY_THEN_SKIP")
    p_run.add_argument("--verify", action="store_true", default=None, help="Check BLAKE3 digest after copy")
    p_run.add_argument("--no-make-parents", dest="make_parents", action="store_false", default=None)
    p_run.add_argument("--copy-stat", action="store_true", default=None, help="Also copy mode and timestamps")
    p_run.add_argument("--report-dir", help="Write report.csv and summary.txt here")
    p_run.add_argument("--log-file", help="Write logs to file")
    p_run.set_defaults(func=cmd_run)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
