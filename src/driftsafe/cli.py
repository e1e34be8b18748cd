"""Driftsafe CLI: decode JSON payloads against a descriptor and report drift."""

import argparse
import json
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def main():
    """Main CLI entry point for driftsafe commands."""
    try:
        driftsafe_version = get_version("driftsafe")
    except PackageNotFoundError:
        driftsafe_version = "dev"

    parser = argparse.ArgumentParser(
        prog="driftsafe",
        description="Driftsafe: fail-soft decoding of drifting JSON payloads"
    )
    parser.add_argument("--version", action="version", version=f"driftsafe {driftsafe_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # decode command
    decode_parser = subparsers.add_parser(
        "decode",
        help="Decode a payload against a model descriptor",
        parents=[parent_parser]
    )
    decode_parser.add_argument(
        "--descriptor",
        type=Path,
        required=True,
        help="Path to model descriptor JSON"
    )
    decode_parser.add_argument(
        "--payload",
        type=Path,
        required=True,
        help="Path to payload JSON"
    )
    decode_parser.add_argument(
        "--records",
        action="store_true",
        help="Treat the payload as an array of records"
    )
    decode_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report format: text (markdown summary) or json (canonical JSON)"
    )
    decode_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any diagnostic is reported"
    )
    decode_parser.add_argument(
        "--required-as-error",
        action="store_true",
        help="Report missing required fields with error severity"
    )
    decode_parser.add_argument(
        "--ignore-extra",
        action="store_true",
        help="Do not report undeclared keys"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    _configure_logging(args.verbose, args.quiet)

    if args.command == "decode":
        # Lazy import: only import the kernel when a command runs
        from ._internal.reporting.render import render_batch_report, render_decode_report, render_json_report
        from .api import decode, decode_records, has_errors, load_descriptor
        from .kernel.decoder import DecodeOptions

        try:
            descriptor = load_descriptor(args.descriptor.resolve())
            options = DecodeOptions(
                extra_keys="ignore" if args.ignore_extra else "report",
                required_missing_severity="error" if args.required_as_error else "warning",
            )
            payload_path = args.payload.resolve()
            if args.records:
                report = decode_records(payload_path, descriptor, options=options)
                anomalies = bool(report.records)
                rendered = render_batch_report(report, descriptor.name)
            else:
                report = decode(payload_path, descriptor, options=options)
                anomalies = bool(report.diagnostics)
                rendered = render_decode_report(report, descriptor.name)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(2)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(2)

        if not args.quiet:
            if args.format == "json":
                print(render_json_report(report))
            else:
                print(rendered)

        if has_errors(report) or (args.strict and anomalies):
            sys.exit(1)
        sys.exit(0)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
