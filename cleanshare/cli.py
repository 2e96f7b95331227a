"""Command-line entrypoint for cleanshare."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Iterable, Sequence, TextIO
from uuid import uuid4

from cleaner import clean_batch
from cleanshare import __version__
from core.structured_logging import emit_json_event
from rules import load_effective


EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_INPUT = 2


def _resolve_command_run_id(args: argparse.Namespace) -> str:
    """Resolve run_id from CLI args or create one for command-level tracing."""
    explicit = getattr(args, "run_id", None)
    if explicit:
        return str(explicit)
    return str(uuid4())


def _emit_cli_event(
    event_type: str,
    *,
    run_id: str,
    level: str = "info",
    **payload: Any,
) -> str:
    """Emit one structured CLI event line (stderr) with standard fields."""
    return emit_json_event(
        event_type=event_type,
        run_id=run_id,
        level=level,
        command="clean",
        **payload,
    )


def _read_lines(lines: Iterable[str]) -> list[str]:
    """Trim lines and drop blanks."""
    return [line.strip() for line in lines if line.strip()]


def _read_input_file(path: Path) -> list[str]:
    """Read URLs from a file, one per line."""
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    return _read_lines(path.read_text(encoding="utf-8").splitlines())


def _collect_inputs(args: argparse.Namespace, stdin: TextIO | None) -> list[str]:
    """Inputs in order: -u values, then -f lines, then piped stdin."""
    inputs = [url for url in (args.urls or []) if url.strip()]
    if args.file:
        inputs.extend(_read_input_file(Path(args.file)))
    if stdin is not None and not stdin.isatty():
        inputs.extend(_read_lines(stdin))
    return inputs


def _write_output(lines: Sequence[str], output: str | None) -> None:
    """Write cleaned URLs, one per line, to a file or stdout."""
    text = "".join(f"{line}\n" for line in lines)
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def _cmd_clean(args: argparse.Namespace, stdin: TextIO | None, run_id: str) -> int:
    """Load rules once, clean every input, write results in input order."""
    # Rules are loaded before any input is read: a bad rules file is fatal.
    effective = load_effective(args.rules)

    inputs = _collect_inputs(args, stdin)
    if not inputs:
        _emit_cli_event(
            "cli_no_input",
            run_id=run_id,
            level="error",
            message="No input URLs provided. Use -u, -f, or pipe input.",
        )
        return EXIT_NO_INPUT

    results = clean_batch(
        inputs,
        effective,
        max_workers=args.workers,
        strip_fragment_params=args.strip_fragment_params,
    )

    skipped = [result for result in results if not result.ok]
    for result in skipped:
        _emit_cli_event(
            "url_skipped",
            run_id=run_id,
            level="warning",
            index=result.index,
            input=result.input,
            reason=result.error.reason if result.error else None,
        )

    if skipped and args.strict:
        _emit_cli_event(
            "cli_error",
            run_id=run_id,
            level="error",
            error_type="InvalidUrl",
            error=str(skipped[0].error),
            skipped=len(skipped),
        )
        return EXIT_ERROR

    cleaned = [result.output for result in results if result.ok and result.output is not None]
    _write_output(cleaned, args.output)

    if args.verbose:
        _emit_cli_event(
            "cli_clean_completed",
            run_id=run_id,
            total=len(results),
            cleaned=len(cleaned),
            skipped=len(skipped),
            rules=str(args.rules) if args.rules else None,
            output=str(args.output) if args.output else "<stdout>",
        )
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    """Create argument parser for the cleanshare CLI."""
    parser = argparse.ArgumentParser(
        prog="cleanshare",
        description="Clean trackers from URLs and unwrap redirect links",
    )
    parser.add_argument("--version", action="version", version=f"cleanshare {__version__}")
    parser.add_argument(
        "-u",
        "--url",
        dest="urls",
        action="append",
        default=[],
        help="URL to clean (can be repeated)",
    )
    parser.add_argument("-f", "--file", help="Read URLs from file (one per line)")
    parser.add_argument("-o", "--output", help="Output file (defaults to stdout)")
    parser.add_argument("-r", "--rules", help="Additional rules file (YAML or JSON)")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Emit a summary event when the run completes",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail the run (exit 1, no output) if any input is not a valid URL",
    )
    parser.add_argument(
        "--strip-fragment-params",
        action="store_true",
        help="Also drop fragments that look like tracking params (#xtor=...)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for batch cleaning",
    )
    parser.add_argument("--run-id", help="Optional explicit run ID for logging")
    return parser


def main(argv: Sequence[str] | None = None, *, stdin: TextIO | None = None) -> int:
    """Execute CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    run_id = _resolve_command_run_id(args)

    try:
        return int(_cmd_clean(args, sys.stdin if stdin is None else stdin, run_id))
    except Exception as exc:
        _emit_cli_event(
            "cli_error",
            run_id=run_id,
            level="error",
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return EXIT_ERROR


def cli() -> None:
    """Console-script entrypoint."""
    raise SystemExit(main())


if __name__ == "__main__":
    raise SystemExit(main())
