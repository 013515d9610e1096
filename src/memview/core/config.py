"""Viewer settings loaded from YAML."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from memview.core.color import DEFAULT_HIGHLIGHT_COLOR, DEFAULT_NOTE_COLOR, Color, parse_color
from memview.core.endian import Endian, normalize_endian
from memview.core.types import (
    NumericFormat,
    NumericType,
    parse_numeric_format,
    parse_numeric_type,
)

logger = logging.getLogger("memview.config")


class ConfigError(Exception):
    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass
class EditorConfig:
    columns: int = 16
    mid_columns: int = 8
    show_ascii: bool = True
    grey_out_zeroes: bool = True
    uppercase_hex: bool = True
    address_digits: int = 0  # 0 = derived from the buffer size
    highlight_color: Color = field(default=DEFAULT_HIGHLIGHT_COLOR)
    note_color: Color = field(default=DEFAULT_NOTE_COLOR)
    preview_type: NumericType = NumericType.I32
    preview_endian: Endian = "little"
    converter_type: NumericType = NumericType.U32
    converter_format: NumericFormat = NumericFormat.HEXADECIMAL


_KNOWN_KEYS = {f.name for f in fields(EditorConfig)} - {
    "preview_type",
    "preview_endian",
    "converter_type",
    "converter_format",
} | {"preview", "converter"}


def _int_option(data: dict[str, Any], key: str, minimum: int, errors: list[str]) -> int | None:
    if key not in data:
        return None
    v = data[key]
    if isinstance(v, bool) or not isinstance(v, int) or v < minimum:
        errors.append(f"{key} must be an integer >= {minimum}")
        return None
    return v


def _bool_option(data: dict[str, Any], key: str, errors: list[str]) -> bool | None:
    if key not in data:
        return None
    v = data[key]
    if not isinstance(v, bool):
        errors.append(f"{key} must be true or false")
        return None
    return v


def load_config(text: str) -> EditorConfig:
    """Parse YAML settings into an EditorConfig.

    Every problem is collected and reported together as a ConfigError.
    """
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError([f"YAML parse error: {e}"]) from None

    if not isinstance(data, dict):
        raise ConfigError(["Top-level YAML must be a mapping of settings."])

    errors: list[str] = []
    cfg = EditorConfig()

    for key in sorted(set(data) - _KNOWN_KEYS, key=str):
        errors.append(f"unknown setting: {key}")

    for key, minimum in (("columns", 1), ("mid_columns", 0), ("address_digits", 0)):
        v = _int_option(data, key, minimum, errors)
        if v is not None:
            setattr(cfg, key, v)

    for key in ("show_ascii", "grey_out_zeroes", "uppercase_hex"):
        v = _bool_option(data, key, errors)
        if v is not None:
            setattr(cfg, key, v)

    for key in ("highlight_color", "note_color"):
        if key in data:
            try:
                setattr(cfg, key, parse_color(data[key]))
            except ValueError as e:
                errors.append(f"{key}: {e}")

    preview = data.get("preview", {})
    if not isinstance(preview, dict):
        errors.append("preview must be a mapping with 'type' and/or 'endian'")
        preview = {}
    if "type" in preview:
        try:
            cfg.preview_type = parse_numeric_type(preview["type"])
        except ValueError as e:
            errors.append(f"preview.type: {e}")
    if "endian" in preview:
        try:
            cfg.preview_endian = normalize_endian(str(preview["endian"])) or "little"
        except ValueError:
            errors.append("preview.endian must be 'little' or 'big'")

    converter = data.get("converter", {})
    if not isinstance(converter, dict):
        errors.append("converter must be a mapping with 'type' and/or 'format'")
        converter = {}
    if "type" in converter:
        try:
            cfg.converter_type = parse_numeric_type(converter["type"])
        except ValueError as e:
            errors.append(f"converter.type: {e}")
    if "format" in converter:
        try:
            cfg.converter_format = parse_numeric_format(converter["format"])
        except ValueError as e:
            errors.append(f"converter.format: {e}")

    if errors:
        raise ConfigError(errors)
    return cfg


def load_config_file(path: str | Path) -> EditorConfig:
    p = Path(path)
    logger.debug("loading config from %s", p)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError([f"cannot read {p}: {e.strerror or e}"]) from None
    return load_config(text)


def default_config_path() -> Path:
    """Platform-appropriate location of the user's config file."""
    if os.name == "nt":  # Windows
        base = os.environ.get("APPDATA", os.path.expanduser("~"))
        return Path(base) / "memview" / "config.yaml"
    return Path.home() / ".config" / "memview" / "config.yaml"
