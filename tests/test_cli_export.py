"""Tests for the 'blockcopy export' and 'blockcopy config' CLI subcommands."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from blockcopy import cli
from blockcopy import config as config_module
from blockcopy.cli import config_cmd
from click.testing import CliRunner

PAGE = textwrap.dedent(
    """\
    - Parent
      - TODO Child
        - Grandchild
    - Second
      owner:: Ada
    """
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch) -> Path:
    """Point the default configuration location into the test directory."""

    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", config_path)
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_DIR", config_path.parent)
    monkeypatch.setattr(config_cmd, "DEFAULT_CONFIG_PATH", config_path)
    return config_path


def _write_page(tmp_path: Path) -> Path:
    page = tmp_path / "page.md"
    page.write_text(PAGE, encoding="utf-8")
    return page


def test_export_page_as_markdown(tmp_path: Path) -> None:
    page = _write_page(tmp_path)

    result = CliRunner().invoke(cli.cli, ["export", str(page)])

    assert result.exit_code == 0, result.output
    assert result.output == (
        "Parent\n  - - [ ] Child\n    - Grandchild\n\nSecond\nowner:: Ada\n"
    )


def test_export_single_block_as_asciidoc(tmp_path: Path) -> None:
    page = _write_page(tmp_path)

    result = CliRunner().invoke(
        cli.cli, ["export", str(page), "--block", "1", "--format", "asciidoc"]
    )

    assert result.exit_code == 0, result.output
    assert result.output == "Parent\n* [ ] Child\n** Grandchild\n"


def test_export_respects_depth_and_children_flags(tmp_path: Path) -> None:
    page = _write_page(tmp_path)
    runner = CliRunner()

    shallow = runner.invoke(
        cli.cli, ["export", str(page), "-b", "1", "-f", "html", "-d", "1"]
    )
    assert shallow.exit_code == 0, shallow.output
    assert shallow.output == (
        'Parent<ul><li><input type="checkbox" disabled /> Child</li></ul>\n'
    )

    alone = runner.invoke(cli.cli, ["export", str(page), "-b", "1", "--no-children"])
    assert alone.exit_code == 0, alone.output
    assert alone.output == "Parent\n"


def test_export_without_depth_limit(tmp_path: Path) -> None:
    page = tmp_path / "deep.md"
    page.write_text(
        "".join(f"{'  ' * level}- L{level}\n" for level in range(13)),
        encoding="utf-8",
    )
    runner = CliRunner()

    limited = runner.invoke(cli.cli, ["export", str(page)])
    assert limited.exit_code == 0, limited.output
    assert "L10" in limited.output
    assert "L11" not in limited.output

    unbounded = runner.invoke(cli.cli, ["export", str(page), "--no-depth-limit"])
    assert unbounded.exit_code == 0, unbounded.output
    assert unbounded.output.rstrip("\n").endswith(f"{'  ' * 12}- L12")


def test_depth_limit_flags_are_exclusive(tmp_path: Path) -> None:
    page = _write_page(tmp_path)

    result = CliRunner().invoke(
        cli.cli, ["export", str(page), "-d", "2", "--no-depth-limit"]
    )

    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_export_with_properties(tmp_path: Path) -> None:
    page = _write_page(tmp_path)

    result = CliRunner().invoke(
        cli.cli, ["export", str(page), "-b", "2", "--properties"]
    )

    assert result.exit_code == 0, result.output
    assert result.output == "Second\nowner:: Ada\n**Properties:**\n- **owner**: Ada\n"


def test_export_uses_config_defaults(tmp_path: Path, isolated_config: Path) -> None:
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text(
        '[blockcopy]\nformat = "asciidoc"\ninclude_children = false\n',
        encoding="utf-8",
    )
    page = _write_page(tmp_path)

    result = CliRunner().invoke(cli.cli, ["export", str(page), "-b", "1"])

    assert result.exit_code == 0, result.output
    assert result.output == "Parent\n"


def test_export_standalone_to_file(tmp_path: Path) -> None:
    page = _write_page(tmp_path)
    output = tmp_path / "out.html"

    result = CliRunner().invoke(
        cli.cli,
        [
            "export",
            str(page),
            "-f",
            "html",
            "--standalone",
            "--title",
            "Notes",
            "-o",
            str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    document = output.read_text(encoding="utf-8")
    assert "<title>Notes</title>" in document
    assert "<h1>Notes</h1>" in document
    assert "<li>Grandchild</li>" in document


def test_export_standalone_markdown_title_defaults_to_file_name(tmp_path: Path) -> None:
    page = _write_page(tmp_path)

    result = CliRunner().invoke(
        cli.cli, ["export", str(page), "-b", "2", "--standalone"]
    )

    assert result.exit_code == 0, result.output
    assert result.output == "# page\n\nSecond\nowner:: Ada\n"


def test_list_formats(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli.cli, ["export", "--list-formats"])

    assert result.exit_code == 0, result.output
    assert "Available export formats:" in result.output
    for fmt in ("asciidoc", "html", "markdown"):
        assert f"  - {fmt}: " in result.output


def test_missing_block_is_reported(tmp_path: Path) -> None:
    page = _write_page(tmp_path)

    result = CliRunner().invoke(cli.cli, ["export", str(page), "-b", "nope"])

    assert result.exit_code == 1
    assert "Block with id nope not found" in result.output


def test_unknown_format_is_reported(tmp_path: Path) -> None:
    page = _write_page(tmp_path)

    result = CliRunner().invoke(cli.cli, ["export", str(page), "-f", "pdf"])

    assert result.exit_code == 1
    assert "Unknown export format: pdf" in result.output


def test_missing_path_is_reported() -> None:
    result = CliRunner().invoke(cli.cli, ["export"])

    assert result.exit_code == 1
    assert "Missing argument 'PATH'" in result.output


def test_explicit_missing_config_is_reported(tmp_path: Path) -> None:
    page = _write_page(tmp_path)

    result = CliRunner().invoke(
        cli.cli, ["-c", str(tmp_path / "nope.toml"), "export", str(page)]
    )

    assert result.exit_code == 1
    assert "blockcopy config" in result.output


def test_config_command_creates_file(isolated_config: Path) -> None:
    runner = CliRunner()

    first = runner.invoke(cli.cli, ["config"])
    assert first.exit_code == 0, first.output
    assert f"Created configuration at {isolated_config}" in first.output
    assert isolated_config.exists()

    second = runner.invoke(cli.cli, ["config"])
    assert second.exit_code == 0, second.output
    assert "already exists" in second.output


def test_main_returns_exit_codes(tmp_path: Path) -> None:
    page = _write_page(tmp_path)

    assert cli.main(["export", str(page), "-o", str(tmp_path / "out.md")]) == 0
    assert (tmp_path / "out.md").read_text(encoding="utf-8").startswith("Parent\n")
    assert cli.main(["export", str(page), "-f", "pdf"]) == 1
