"""Command line entry point for the Photo Insight project."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from . import Language, RecordController, SettingsStore
from .models.registry import ProviderRegistry
from .records import ImageHandle, ImageRecord
from .utils.paths import resolve_image_paths


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Photo Insight")
    parser.add_argument(
        "--input",
        "-i",
        type=Path,
        help="Image file or directory to analyze.",
    )
    parser.add_argument(
        "--language",
        choices=[language.value for language in Language],
        help="Override the configured output language.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Read settings from this YAML or JSON file instead of the user settings.",
    )
    parser.add_argument(
        "--list-providers",
        action="store_true",
        help="Print available providers and exit.",
    )
    parser.add_argument(
        "--no-overlay",
        action="store_true",
        help="Do not draw the face overlay image.",
    )
    parser.add_argument(
        "--include-overlay",
        action="store_true",
        help="Include overlay data URLs in the JSON output.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging.",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_providers:
        payload = []
        for info in ProviderRegistry.list_provider_infos():
            data = asdict(info)
            data["capability"] = info.capability.value
            data["tags"] = list(info.tags)
            payload.append(data)
        json.dump(payload, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return

    if args.input is None:
        parser.error("--input is required unless --list-providers is given.")
    if args.config is not None and not args.config.exists():
        parser.error(f"Config file not found: {args.config}")

    try:
        paths = resolve_image_paths(args.input)
    except FileNotFoundError:
        parser.error(f"Input not found: {args.input}")

    store = SettingsStore(args.config)
    config = store.load(
        language=args.language,
        draw_overlay=False if args.no_overlay else None,
    )

    handles = [ImageHandle.from_path(path) for path in paths]
    records = asyncio.run(_run(RecordController.from_config(config), handles))

    output = [record.as_dict(include_overlay=args.include_overlay) for record in records]
    json.dump(output, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


async def _run(controller: RecordController, handles: list[ImageHandle]) -> list[ImageRecord]:
    submitted = await controller.submit(handles)
    await controller.wait_for_enrichment()
    return [controller.get(record.id) or record for record in submitted]


if __name__ == "__main__":  # pragma: no cover
    main()
