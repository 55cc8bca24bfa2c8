"""Tests for engine configuration."""

from datetime import date
from pathlib import Path

from tpltree import EngineConfig, Date, Markdown, Number, render


def test_missing_file_gives_defaults(tmp_path: Path):
    config = EngineConfig.load(tmp_path / "tpltree.yaml")
    assert config == EngineConfig()
    assert config.locale.thousands_sep == ","


def test_load_locale_overrides(tmp_path: Path):
    path = tmp_path / "tpltree.yaml"
    path.write_text(
        "locale:\n"
        '  thousands_sep: "."\n'
        '  decimal_sep: ","\n'
        '  date_format: "{day}.{month}.{year}"\n'
    )
    config = EngineConfig.load(path)

    tmpl = lambda t: t.seq(Number("n"), " ", Date("d"))  # noqa: E731
    out = render(tmpl, {"n": 1234.5, "d": date(2026, 10, 19)}, config)
    assert out == "1.234,5 19.10.2026"


def test_empty_file_gives_defaults(tmp_path: Path):
    path = tmp_path / "tpltree.yaml"
    path.write_text("")
    assert EngineConfig.load(path) == EngineConfig()


def test_markdown_extensions(tmp_path: Path):
    path = tmp_path / "tpltree.yaml"
    path.write_text("markdown_extensions:\n  - tables\n")
    config = EngineConfig.load(path)
    assert config.markdown_extensions == ["tables"]


TABLE = "| a | b |\n|---|---|\n| 1 | 2 |\n"


def test_markdown_extensions_change_output(tmp_path: Path):
    """Configured extensions are passed through to the markdown converter."""
    path = tmp_path / "tpltree.yaml"
    path.write_text("markdown_extensions:\n  - tables\n")
    tmpl = lambda t: t.seq(Markdown("body"))  # noqa: E731

    assert "<table>" not in render(tmpl, {"body": TABLE})
    assert "<table>" in render(tmpl, {"body": TABLE}, EngineConfig.load(path))
