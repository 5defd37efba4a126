"""Thin CLI entry point — loads a Manifest and calls the engine."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from recut.engine import process
from recut.export import build_ffmpeg_command
from recut.manifest import command_result_to_dict, load_manifest
from recut.preview import build_preview_timeline
from recut.timemap import original_to_preview, preview_to_original


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="recut",
        description="recut — edit decisions, preview timelines and export plans.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    prev = sub.add_parser("preview", help="Print the preview timeline for a manifest")
    prev.add_argument("manifest", type=Path, help="Path to a JSON manifest file")

    exp = sub.add_parser("export", help="Print the export plan for a manifest")
    exp.add_argument("manifest", type=Path, help="Path to a JSON manifest file")
    exp.add_argument("--input", "-i", type=Path, help="Source video, to print the ffmpeg command")
    exp.add_argument("--output", "-o", type=Path, help="Output file path")

    cmd = sub.add_parser("command", help="Run free-text commands against a manifest")
    cmd.add_argument("manifest", type=Path, help="Path to a JSON manifest file")
    cmd.add_argument("text", nargs="+", help="Command(s), e.g. 'remove all silence'")

    tmap = sub.add_parser("map", help="Convert a time between original and preview")
    tmap.add_argument("manifest", type=Path, help="Path to a JSON manifest file")
    direction = tmap.add_mutually_exclusive_group(required=True)
    direction.add_argument("--original", type=float, help="Original time in seconds")
    direction.add_argument("--preview", type=float, help="Preview time in seconds")

    serve = sub.add_parser("serve", help="Launch the web API")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from recut.web import create_app
        app = create_app()
        print(f"recut web API: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    try:
        m = load_manifest(args.manifest)
    except (OSError, ValueError) as e:
        print(f"Error: cannot load manifest {args.manifest}: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "preview":
        _print_json(asdict(build_preview_timeline(m.duration, m.decisions)))

    elif args.command == "export":
        result = process(m)
        data = asdict(result.plan)
        if args.input:
            output = args.output or args.input.with_stem(args.input.stem + "_edited")
            try:
                data["ffmpeg"] = build_ffmpeg_command(args.input, output, result.plan)
            except ValueError as e:
                print(f"Error: {e}", file=sys.stderr)
                sys.exit(1)
        _print_json(data)

    elif args.command == "command":
        result = process(m, commands=args.text)
        _print_json({
            "results": [command_result_to_dict(r) for r in result.command_results],
            "editsApplied": result.edits_applied,
            "duration": {
                "original": result.savings.original_duration,
                "final": result.savings.new_duration,
            },
        })
        if not all(r.success for r in result.command_results):
            sys.exit(1)

    elif args.command == "map":
        timeline = build_preview_timeline(m.duration, m.decisions)
        if args.original is not None:
            _print_json({"original": args.original, "preview": original_to_preview(args.original, timeline)})
        else:
            _print_json({"preview": args.preview, "original": preview_to_original(args.preview, timeline)})
