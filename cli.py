import argparse
import json
import os
import sys
import uuid as _uuid
from pathlib import Path

from config.settings import get_settings
from data_validator import validate_discovery_request, validate_introduction_request
from models.discovery import DiscoveryRequest
from models.introductions import IntroductionRequest
from services.reporting import print_summary
from utils.logging_setup import init_logging


def _load_payload(path: str):
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _write_or_print(data: dict, output: str = None) -> None:
    text = json.dumps(data, indent=2, ensure_ascii=False)
    if output:
        out = Path(output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
    else:
        print(text)


def _report_errors(errors) -> int:
    print("Invalid request data:", file=sys.stderr)
    for err in errors:
        print(f"  - {err}", file=sys.stderr)
    return 2


def cmd_discover(args) -> int:
    from api.app import build_discovery_service

    payload = _load_payload(args.input)
    if args.depth:
        payload["searchDepth"] = args.depth
    errors = validate_discovery_request(payload)
    if errors:
        return _report_errors(errors)
    request = DiscoveryRequest.model_validate(payload)
    service = build_discovery_service()
    response = service.discover(request)
    output = getattr(args, "output", None)
    if output or args.json:
        _write_or_print(response.to_wire(), output)
    if not args.json:
        print_summary(response, Path(output) if output else None)
    return 0 if response.code != "DISCOVERY_FAILED" else 1


def cmd_intro_templates(args) -> int:
    from api.app import build_introduction_writer

    payload = _load_payload(args.input)
    errors = validate_introduction_request(payload)
    if errors:
        return _report_errors(errors)
    request = IntroductionRequest.model_validate(payload)
    writer = build_introduction_writer()
    templates = writer.generate_templates(
        request.connection, request.contact, request.requester_profile, request.objective
    )
    _write_or_print(templates.to_wire(), getattr(args, "output", None))
    return 0


def cmd_serve(args) -> int:
    import uvicorn
    from api.app import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(),
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        log_level=settings.log_level.lower(),
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="FWB network discovery CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    p_disc = sub.add_parser("discover", help="Discover and rank connections in a contact's network")
    p_disc.add_argument("--input", required=True, help="Path to request JSON (fwbContact, userProfile, ...)")
    p_disc.add_argument("--depth", choices=["shallow", "medium", "deep"], help="Override searchDepth")
    p_disc.add_argument("--output", "-o", help="Write the JSON response to this file")
    p_disc.add_argument("--json", action="store_true", help="Print the JSON response instead of a summary")
    p_disc.set_defaults(func=cmd_discover)

    p_intro = sub.add_parser("intro-templates", help="Draft introduction messages for one connection")
    p_intro.add_argument("--input", required=True, help="Path to request JSON (connection, fwbContact, userProfile)")
    p_intro.add_argument("--output", "-o", help="Write the JSON templates to this file")
    p_intro.set_defaults(func=cmd_intro_templates)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)
    p_serve.set_defaults(func=cmd_serve)
    return parser


def main(argv=None) -> int:
    settings = get_settings()
    init_logging(settings.log_level)
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
