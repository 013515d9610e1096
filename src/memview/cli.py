from __future__ import annotations

import argparse
import logging
import os
import sys

from memview.core.color import Color, parse_color
from memview.core.config import ConfigError, EditorConfig, default_config_path, load_config_file
from memview.core.io import BufferSource
from memview.core.ranges import ByteRange, NoteRange, RangeError, validate_ranges


def parse_range_spec(spec: str, default_color: Color, *, note: bool = False) -> ByteRange:
    """Parse ``START:END[:COLOR]`` (plus ``:TEXT`` for notes).

    START and END accept any Python integer literal (``0x10``, ``16``).
    """
    parts = spec.split(":", 3 if note else 2)
    if len(parts) < 2:
        raise ValueError(f"range '{spec}' must look like START:END[:COLOR]")
    try:
        start = int(parts[0], 0)
        end = int(parts[1], 0)
    except ValueError:
        raise ValueError(f"range '{spec}' has a non-numeric bound") from None
    color = parse_color(parts[2]) if len(parts) > 2 and parts[2] else default_color
    if note:
        desc = parts[3] if len(parts) > 3 else ""
        return NoteRange(start, end, color, description=desc)
    return ByteRange(start, end, color)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="memview", description="Memory grid viewer (Textual)")
    parser.add_argument("path", help="Path to binary file")
    parser.add_argument("--config", help="YAML settings file (default: user config if present)")
    parser.add_argument("--columns", type=int, help="Bytes per row")
    parser.add_argument(
        "--highlight",
        action="append",
        default=[],
        metavar="START:END[:COLOR]",
        help="Highlight range, may be repeated",
    )
    parser.add_argument(
        "--note",
        action="append",
        default=[],
        metavar="START:END[:COLOR[:TEXT]]",
        help="Annotated range, may be repeated",
    )
    parser.add_argument(
        "--edit",
        action="store_true",
        help="Load the file into memory for byte editing (ctrl+s saves)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)

    if not os.path.isfile(args.path):
        print(f"memview: not a readable file: {args.path}", file=sys.stderr)
        return 2

    try:
        if args.config:
            config = load_config_file(args.config)
        elif default_config_path().exists():
            config = load_config_file(default_config_path())
        else:
            config = EditorConfig()
    except ConfigError as e:
        for err in e.errors:
            print(f"memview: config: {err}", file=sys.stderr)
        return 2

    if args.columns is not None:
        if args.columns < 1:
            print("memview: --columns must be >= 1", file=sys.stderr)
            return 2
        config.columns = args.columns

    try:
        highlights = sorted(
            (parse_range_spec(s, config.highlight_color) for s in args.highlight),
            key=lambda r: r.start,
        )
        notes = sorted(
            (parse_range_spec(s, config.note_color, note=True) for s in args.note),
            key=lambda r: r.start,
        )
    except (ValueError, RangeError) as e:
        print(f"memview: {e}", file=sys.stderr)
        return 2

    for label, ranges in (("--highlight", highlights), ("--note", notes)):
        problems = validate_ranges(ranges)
        if problems:
            for p in problems:
                print(f"memview: {label}: {p}", file=sys.stderr)
            return 2

    from memview.app import MemviewApp

    source = None
    if args.edit:
        with open(args.path, "rb") as fh:
            source = BufferSource(bytearray(fh.read()))

    app = MemviewApp(
        args.path, source=source, config=config, highlights=highlights, notes=notes  # type: ignore[arg-type]
    )
    app.run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
