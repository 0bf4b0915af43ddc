"""
Safeguard Capability Mapper — Main Entry Point

List and inspect safeguards:
    python -m safeguard_mapper list --group IG1
    python -m safeguard_mapper show 1.1 --examples

Validate a vendor claim / analyze a vendor response:
    python -m safeguard_mapper validate --vendor "AssetMax Pro" --safeguard 1.1 \
        --capability full --text "Our asset management platform ..."
    python -m safeguard_mapper analyze --vendor "AssetMax Pro" --safeguard 1.1 --file response.txt

Run as an API server:
    python -m safeguard_mapper serve
    # or: uvicorn safeguard_mapper.api:app --port 8080

Or import and use programmatically:
    from safeguard_mapper.services import MappingService
    result = MappingService().validate_mapping("AssetMax Pro", "1.1", "full", text)
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from safeguard_mapper.config import get_settings
from safeguard_mapper.exceptions import MappingError
from safeguard_mapper.models.enums import ImplementationGroup, SecurityFunction
from safeguard_mapper.utils.logger import setup_logging

logger = logging.getLogger(__name__)

# Exit status for rejected input (matches argparse usage errors)
EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="safeguard_mapper",
        description="Map vendor capability claims to CIS safeguard capability roles.",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, ...)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List safeguards")
    p_list.add_argument(
        "--group", dest="implementation_group",
        choices=[g.value for g in ImplementationGroup], help="Filter by implementation group",
    )
    p_list.add_argument(
        "--function", dest="security_function",
        choices=[f.value for f in SecurityFunction], help="Filter by security function",
    )
    p_list.add_argument("--ids", action="store_true", help="Only print the sorted id listing")

    p_show = sub.add_parser("show", help="Show one safeguard")
    p_show.add_argument("safeguard_id")
    p_show.add_argument("--examples", action="store_true", help="Append curated implementation examples")

    p_validate = sub.add_parser("validate", help="Validate a vendor's claimed capability")
    p_validate.add_argument("--vendor", required=True)
    p_validate.add_argument("--safeguard", required=True)
    p_validate.add_argument("--capability", required=True, help="full|partial|facilitates|governance|validates")
    _add_text_source(p_validate)

    p_analyze = sub.add_parser("analyze", help="Detect the capability a vendor response exhibits")
    p_analyze.add_argument("--vendor", required=True)
    p_analyze.add_argument("--safeguard", required=True)
    _add_text_source(p_analyze)

    p_serve = sub.add_parser("serve", help="Start the HTTP API server")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)
    p_serve.add_argument("--reload", action="store_true")

    return parser


def _add_text_source(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Supporting text")
    source.add_argument("--file", help="Read supporting text from a file ('-' for stdin)")


def _read_text(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    if args.file == "-":
        return sys.stdin.read()
    with open(args.file, "r", encoding="utf-8") as f:
        return f.read()


def run(args: argparse.Namespace) -> int:
    """Execute one non-server command and print its JSON result."""
    from safeguard_mapper.services.mapping_service import MappingService

    service = MappingService()

    if args.command == "list":
        if args.ids:
            result = service.list_safeguards()
        else:
            result = service.summarize_safeguards(args.implementation_group, args.security_function)
    elif args.command == "show":
        result = service.get_safeguard(args.safeguard_id, include_examples=args.examples)
    elif args.command == "validate":
        result = service.validate_mapping(args.vendor, args.safeguard, args.capability, _read_text(args))
    elif args.command == "analyze":
        result = service.analyze_response(args.vendor, args.safeguard, _read_text(args))
    else:
        raise ValueError(f"Unknown command: {args.command}")

    print(result.model_dump_json(indent=2))
    return 0


def serve(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False) -> None:
    """Start the FastAPI server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("safeguard_mapper.api:app", host=host, port=port, reload=reload)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or get_settings().log_level)

    if args.command == "serve":
        serve(args.host, args.port, args.reload)
        return 0

    try:
        return run(args)
    except MappingError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        if exc.guidance:
            print(f"Guidance: {exc.guidance}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT


if __name__ == "__main__":
    sys.exit(main())
