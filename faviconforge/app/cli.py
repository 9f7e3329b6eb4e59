from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from ..assets import AssetRegistry
from ..bundle import DEFAULT_ICO_SIZES, BundleSettings, FaviconBundle
from ..diagnostics import LoggingDiagnostics, RecordingDiagnostics
from ..ico import IcoFileGenerator
from ..manifest import Display, WebManifest

logger = logging.getLogger("faviconforge")


def parse_size(value: str) -> Tuple[int, int]:
    """Parse ``N`` or ``WxH`` into a (width, height) pair."""
    parts = value.lower().split("x")
    try:
        if len(parts) == 1:
            size = int(parts[0])
            width, height = size, size
        elif len(parts) == 2:
            width, height = int(parts[0]), int(parts[1])
        else:
            raise ValueError(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid size '{value}', expected N or WxH") from None
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"Invalid size '{value}', dimensions must be positive")
    return width, height


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="faviconforge",
        description="FaviconForge: generate favicon.ico, PNG icons, manifest.json and browserconfig.xml.",
    )
    parser.add_argument("source", nargs="?", help="Source image (.png/.jpg/.gif/.bmp/.webp/.svg)")
    parser.add_argument("output", nargs="?", help="Public root directory (or .ico path with --ico-only)")
    parser.add_argument("--ico-only", action="store_true", help="Only write a .ico file to OUTPUT")
    parser.add_argument(
        "--ico-size",
        dest="ico_sizes",
        action="append",
        type=parse_size,
        metavar="N|WxH",
        help="Layer size for favicon.ico, repeatable (default: 16, 24, 32)",
    )
    parser.add_argument("--name", help="Application name for manifest.json")
    parser.add_argument("--short-name", help="Short application name for manifest.json")
    parser.add_argument("--description", help="Application description for manifest.json")
    parser.add_argument("--theme-color", help="Theme color, e.g. #0f172a")
    parser.add_argument("--background-color", help="Background / tile color, e.g. #ffffff")
    parser.add_argument("--display", choices=[item.value for item in Display], help="Manifest display mode")
    parser.add_argument("--start-url", help="Manifest start_url (defaults to the id)")
    parser.add_argument("--href-prefix", default="/", help="URL prefix for generated links (default: /)")
    parser.add_argument("--list-assets", action="store_true", help="List generated PNG assets and exit")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def list_assets() -> int:
    registry = AssetRegistry.load()
    for asset in registry.assets:
        print(f"{asset.name}\t{asset.sizes}")
    return 0


def build_ico(source: str, output: str, sizes: Optional[List[Tuple[int, int]]]) -> int:
    recorder = RecordingDiagnostics(forward=LoggingDiagnostics(logger))
    generator = IcoFileGenerator(diagnostics=recorder)
    if not generator.add(source, sizes or [(size, size) for size in DEFAULT_ICO_SIZES]):
        print(_first_message(recorder, "No icon layers could be generated"), file=sys.stderr)
        return 2
    if not generator.save(output):
        print(_first_message(recorder, f"Unable to write {output}"), file=sys.stderr)
        return 2
    print(f"Wrote {output} ({len(generator)} layers)")
    return 0


def build_manifest(args: argparse.Namespace) -> WebManifest:
    manifest = WebManifest()
    if args.short_name or args.name:
        manifest.set_title(args.short_name or args.name, args.name, args.description)
    elif args.description:
        manifest.description = args.description
    if args.theme_color:
        manifest.colors(args.theme_color, args.background_color)
    elif args.background_color:
        manifest.background_color = args.background_color
    if args.display:
        manifest.display = Display(args.display)
    if args.start_url:
        manifest.start_url = args.start_url
    return manifest


def build_bundle(args: argparse.Namespace) -> int:
    settings = BundleSettings(href_prefix=args.href_prefix)
    if args.ico_sizes:
        settings.ico_sizes = args.ico_sizes
    bundle = FaviconBundle(args.output, settings=settings, manifest=build_manifest(args))
    bundle.set_source(args.source)
    document = bundle.generate()
    print(document.html())
    return 0


def _first_message(recorder: RecordingDiagnostics, fallback: str) -> str:
    for event in recorder.events:
        error = event.context.get("error")
        return f"{event.message}: {error}" if error else event.message
    return fallback


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    if args.list_assets:
        return list_assets()
    if not args.source or not args.output:
        print("Missing source image or output path. Use --help for usage.", file=sys.stderr)
        return 2
    try:
        if args.ico_only:
            return build_ico(args.source, args.output, args.ico_sizes)
        return build_bundle(args)
    except Exception as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
