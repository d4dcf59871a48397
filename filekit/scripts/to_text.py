# filekit/scripts/to_text.py
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from filekit.config import ENVIRONMENTS, Settings
from filekit.errors import FileKitError, root_cause
from filekit.logging_config import setup_logging
from filekit.pipeline.converter import FileConverter
from filekit.pipeline.environments import environment_from_settings


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="filekit: convert an office document to plain text.")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--url", help="http(s):// URL, file:// URL or path to fetch")
    src.add_argument("--file", help="Local file path")
    ap.add_argument("--env", choices=ENVIRONMENTS, default=None, help="Host environment profile (default: settings)")
    ap.add_argument("--pptx-json", action="store_true", help="Print PPTX slides as JSON instead of text.")
    ap.add_argument("--pdf-max-pages", type=int, default=None, help="Only read the first N PDF pages (web env).")
    return ap


async def _run(conv: FileConverter, args: argparse.Namespace) -> str:
    if args.file:
        path = Path(args.file)
        data = await conv.serialize(path)
        hint = path.name
    else:
        data = await conv.url_to_serialized(args.url)
        hint = args.url

    if args.pptx_json:
        slides = await conv.extract_pptx(data, fmt="json")
        return json.dumps(slides, ensure_ascii=False, indent=2)
    return await conv.to_text(data, url_hint=hint)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    settings = Settings()
    if args.env:
        settings.environment = args.env
    if args.pdf_max_pages is not None:
        settings.pdf_max_pages = args.pdf_max_pages
    settings.validate_runtime()
    setup_logging(settings.log_level)

    # --url may name a file:// URL or path on this machine
    conv = FileConverter(environment_from_settings(settings, allow_local=True))

    try:
        text = asyncio.run(_run(conv, args))
    except FileKitError as e:
        inner = root_cause(e)
        code = getattr(inner, "error_code", e.error_code)
        print(f"[FAIL] {code}: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        return 2

    sys.stdout.write(text)
    if not text.endswith("\n"):
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
