"""CLI entrypoints for apidocgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .logging import configure_logging, log_failure
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apidocgen",
        description="Generate HTML API documentation from annotated source comments.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Scan a source tree and render the documentation site.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    build_parser.add_argument("source", help="Path to the source tree to scan.")
    build_parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output root; pages are written to <output>/docs (defaults to the config or the source root).",
    )

    dump_parser = subparsers.add_parser(
        "dump",
        help="Print the extracted documentation catalog as JSON.",
    )
    _add_verbose_option(dump_parser, suppress_default=True)
    dump_parser.add_argument("source", help="Path to the source tree to scan.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service (requires the 'service' extra).",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for apidocgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "build":
        try:
            outcome = orchestrator.run_build(args.source, args.output)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except RuntimeError as exc:
            log_failure("build", exc)
            parser.exit(1, f"apidocgen build failed: {exc}\nRun with --verbose for more details.\n")
        rel_path = _relativize(outcome.output_dir)
        print(f"Documented {len(outcome.catalog)} package(s) in {rel_path}")
    elif args.command == "dump":
        try:
            payload = orchestrator.run_dump(args.source)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except RuntimeError as exc:
            log_failure("dump", exc)
            parser.exit(1, f"apidocgen dump failed: {exc}\nRun with --verbose for more details.\n")
        print(payload)
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
