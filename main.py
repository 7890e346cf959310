"""Replay a JSON-lines message stream through the change filter."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from core.config_loader import load_config
from core.logger import configure_logging, get_logger
from core.message import Message
from filters.change_filter import ChangeFilter
from filters.stream_registry import StreamRegistry

DEFAULT_STREAM_ID = "default"


@dataclass(slots=True)
class ReplaySummary:
    """Counters reported at the end of a replay."""

    processed: int = 0
    forwarded: int = 0
    suppressed: int = 0
    skipped: int = 0


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(description="Report-by-exception message filter replay")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config"),
        help="YAML config file or directory with system.yaml / filter.yaml.",
    )
    parser.add_argument(
        "--input",
        type=str,
        default="-",
        help="JSON-lines file with one message per line, '-' for stdin.",
    )
    parser.add_argument(
        "--stream-field",
        type=str,
        default="topic",
        help="Message field naming the stream a message belongs to.",
    )
    return parser.parse_args(argv)


def replay(
    lines: Iterable[str],
    registry: StreamRegistry,
    output: TextIO,
    *,
    stream_field: str = "topic",
) -> ReplaySummary:
    """Filter each line and write forwarded lines to ``output`` exactly as received."""

    log = get_logger("main.replay")
    summary = ReplaySummary()

    for line_number, line in enumerate(lines, start=1):
        text = line.strip()
        if not text:
            continue
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            log.warning("input_line_invalid", line=line_number, error=str(exc))
            summary.skipped += 1
            continue
        if not isinstance(raw, dict):
            log.warning("input_line_invalid", line=line_number, error="expected a JSON object")
            summary.skipped += 1
            continue

        stream_id = str(raw.get(stream_field) or DEFAULT_STREAM_ID)
        decision = registry.process(stream_id, Message.model_validate(raw))
        summary.processed += 1
        if decision.message is None:
            summary.suppressed += 1
            continue
        summary.forwarded += 1
        output.write(text + "\n")

    return summary


def run(argv: Sequence[str] | None = None, *, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    """Load config, set up logging and replay the input stream."""

    args = parse_args(argv)
    config = load_config(args.config)

    run_id = config.system.run_id or "unknown"
    configure_logging(
        run_id=run_id,
        environment=config.system.environment.value,
        log_level=config.system.log_level.value,
        log_dir=Path(config.system.log_dir),
    )
    log = get_logger("main")

    registry = StreamRegistry(ChangeFilter.from_config(config.filter), config.filter)
    output = stdout or sys.stdout

    if args.input == "-":
        summary = replay(stdin or sys.stdin, registry, output, stream_field=args.stream_field)
    else:
        with Path(args.input).open(encoding="utf-8") as handle:
            summary = replay(handle, registry, output, stream_field=args.stream_field)

    log.info(
        "replay_finished",
        processed=summary.processed,
        forwarded=summary.forwarded,
        suppressed=summary.suppressed,
        skipped=summary.skipped,
        streams=len(registry),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
