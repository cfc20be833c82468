"""Command line: run the server, ask a one-off question, or print key visibility."""

from __future__ import annotations

import argparse
import json
import logging
import mimetypes
import sys
from collections.abc import Sequence
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from agri_vision._config import AppSettings, key_visibility, load_store
from agri_vision._errors import AnalyzeError
from agri_vision._pipeline import analyze_sync
from agri_vision._types import AnalyzeRequest
from agri_vision.providers import create_adapter


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agri-vision", description="Ask a multimodal AI provider about a farm image."
    )
    parser.add_argument("--log-level", default="INFO", help="logging level (default: INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8080)

    ask = sub.add_parser("ask", help="analyze one image and print the answer")
    ask.add_argument("image", type=Path)
    ask.add_argument("--question", default="")
    ask.add_argument("--mime-type", default=None, help="defaults to a guess from the file name")

    sub.add_parser("health", help="print where the API key is visible")
    return parser


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from agri_vision.server import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


def _ask(args: argparse.Namespace) -> int:
    store = load_store()
    settings = AppSettings.load(store=store)
    adapter = create_adapter(settings.provider, settings.model, timeout=settings.timeout)

    path: Path = args.image
    try:
        image_bytes = path.read_bytes()
    except OSError as exc:
        print(f"Cannot read {path}: {exc.strerror}", file=sys.stderr)
        return 2
    if not image_bytes:
        print(f"{path} is empty.", file=sys.stderr)
        return 2

    request = AnalyzeRequest.from_upload(
        image_bytes,
        mime_type=args.mime_type or mimetypes.guess_type(path.name)[0],
        question=args.question,
        file_name=path.name,
    )
    try:
        response = analyze_sync(request, adapter, store=store)
    except AnalyzeError as exc:
        print(f"{exc.title} ({exc.status_code}): {exc.detail}", file=sys.stderr)
        return 1
    print(response.answer)
    if response.note:
        print(f"[{response.note}]", file=sys.stderr)
    return 0


def _health(_args: argparse.Namespace) -> int:
    store = load_store()
    settings = AppSettings.load(store=store)
    adapter = create_adapter(settings.provider, settings.model)
    visibility = key_visibility(adapter.key_env, adapter.key_section_path, store=store)
    print(json.dumps(visibility.to_health(adapter.label)))
    return 0


_COMMANDS = {"serve": _serve, "ask": _ask, "health": _health}


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    load_dotenv(find_dotenv(usecwd=True))
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return _COMMANDS[args.command](args)
