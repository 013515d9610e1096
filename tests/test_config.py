from __future__ import annotations

from pathlib import Path

import pytest

from memview.core.color import Color
from memview.core.config import ConfigError, EditorConfig, load_config, load_config_file
from memview.core.types import NumericFormat, NumericType


def test_empty_config_is_defaults() -> None:
    assert load_config("") == EditorConfig()
    cfg = EditorConfig()
    assert cfg.columns == 16
    assert cfg.converter_type is NumericType.U32
    assert cfg.converter_format is NumericFormat.HEXADECIMAL


def test_full_config() -> None:
    cfg = load_config(
        """
columns: 14
mid_columns: 7
show_ascii: false
uppercase_hex: false
highlight_color: "#00ff0080"
note_color: orange
preview:
  type: f32
  endian: be
converter:
  type: Int8
  format: dec
"""
    )
    assert cfg.columns == 14
    assert cfg.mid_columns == 7
    assert cfg.show_ascii is False
    assert cfg.uppercase_hex is False
    assert cfg.highlight_color == Color(0, 255, 0, 0x80)
    assert cfg.note_color == Color(255, 165, 0)
    assert cfg.preview_type is NumericType.F32
    assert cfg.preview_endian == "big"
    assert cfg.converter_type is NumericType.I8
    assert cfg.converter_format is NumericFormat.DECIMAL


def test_errors_are_collected() -> None:
    with pytest.raises(ConfigError) as exc:
        load_config("columns: 0\nfoo: 1\npreview:\n  type: bogus\nshow_ascii: maybe\n")
    errors = exc.value.errors
    assert len(errors) == 4
    assert "unknown setting: foo" in errors
    assert any(e.startswith("columns") for e in errors)
    assert any(e.startswith("preview.type") for e in errors)
    assert any(e.startswith("show_ascii") for e in errors)


@pytest.mark.parametrize("text", ["- 1\n- 2\n", "columns: [1\n"])
def test_malformed_documents(text: str) -> None:
    with pytest.raises(ConfigError):
        load_config(text)


def test_bad_color_and_endian() -> None:
    with pytest.raises(ConfigError) as exc:
        load_config("note_color: '#12'\npreview: {endian: middle}\n")
    assert len(exc.value.errors) == 2


def test_load_config_file(tmp_path: Path) -> None:
    p = tmp_path / "config.yaml"
    p.write_text("columns: 8\n", encoding="utf-8")
    assert load_config_file(p).columns == 8
    with pytest.raises(ConfigError):
        load_config_file(tmp_path / "missing.yaml")
