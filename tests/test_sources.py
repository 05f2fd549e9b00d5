"""Tests for file-backed block sources."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest
from blockcopy.models import Block
from blockcopy.sources import (
    OutlineFileSource,
    SourceError,
    parse_markdown_page,
    truncate_children,
)

PAGE = textwrap.dedent(
    """\
    - First block
      continued here
      status:: done
      - Child
    - Second
      id:: abc
      - Nested
        - Deep
    """
)


def write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_markdown_page_structure() -> None:
    first, second = parse_markdown_page(PAGE)

    assert first.id == "1"
    assert first.content == "First block\ncontinued here\nstatus:: done"
    assert first.properties == {"status": "done"}
    assert first.children is not None
    assert [child.id for child in first.children] == ["1.1"]
    assert first.children[0].content == "Child"

    assert second.id == "abc"
    assert second.properties == {"id": "abc"}
    assert second.children is not None
    nested = second.children[0]
    assert nested.id == "2.1"
    assert nested.children is not None
    assert nested.children[0].content == "Deep"
    assert nested.children[0].id == "2.1.1"


def test_markdown_page_with_tabs_and_preamble() -> None:
    page = "title:: Tabs\n\n- Parent\n\t- Child\n\t\t- Grandchild\n- Next\n"
    preamble, parent, following = parse_markdown_page(page)

    assert preamble.content == "title:: Tabs"
    assert preamble.properties == {"title": "Tabs"}
    assert parent.content == "Parent"
    assert parent.children is not None
    child = parent.children[0]
    assert child.id == "2.1"
    assert child.children is not None
    assert child.children[0].content == "Grandchild"
    assert following.children is None


def test_markdown_page_keeps_blank_lines_inside_blocks() -> None:
    (block,) = parse_markdown_page("- First\n\n  Third\n\n")
    assert block.content == "First\n\nThird"


def test_markdown_page_keeps_fenced_code_in_its_block() -> None:
    page = "- Example\n  ```md\n  - not a block\n  ```\n- Next\n"
    example, following = parse_markdown_page(page)

    assert example.id == "1"
    assert example.content == "Example\n```md\n- not a block\n```"
    assert example.children is None
    assert following.id == "2"
    assert following.content == "Next"


def test_markdown_page_fence_opened_on_bullet_line() -> None:
    page = "- ```\n  - still code\n  ```\n  - Child\n"
    (block,) = parse_markdown_page(page)

    assert block.content == "```\n- still code\n```"
    assert block.children is not None
    assert block.children[0].content == "Child"


def test_markdown_page_preamble_keeps_paragraph_breaks() -> None:
    preamble, block = parse_markdown_page("\ntitle:: T\n\nIntro text\n\n- Block\n")

    assert preamble.content == "title:: T\n\nIntro text"
    assert preamble.properties == {"title": "T"}
    assert block.content == "Block"


def test_markdown_source_lookup(tmp_path: Path) -> None:
    source = OutlineFileSource(write(tmp_path, "page.md", PAGE))

    block = source.get_block_with_children("abc", None)
    assert block is not None
    assert block.content == "Second\nid:: abc"
    assert source.get_block_with_children("2.1.1", 5) is not None
    assert source.get_block_with_children("missing", 5) is None
    assert len(source.get_page_blocks()) == 2


def test_fetch_truncates_below_max_depth(tmp_path: Path) -> None:
    source = OutlineFileSource(write(tmp_path, "page.md", PAGE))

    shallow = source.get_block_with_children("abc", 0)
    assert shallow is not None
    assert shallow.children is None

    one_level = source.get_block_with_children("abc", 1)
    assert one_level is not None
    assert one_level.children is not None
    assert one_level.children[0].content == "Nested"
    assert one_level.children[0].children is None


def test_truncate_children_keeps_order() -> None:
    root = Block(
        id="r",
        content="Root",
        children=(
            Block(id="a", content="A", children=(Block(id="a1", content="A1"),)),
            Block(id="b", content="B"),
        ),
    )
    truncated = truncate_children(root, 1)
    assert truncated.children is not None
    assert [child.id for child in truncated.children] == ["a", "b"]
    assert truncated.children[0].children is None
    assert truncate_children(root, None) is root


def test_json_source_in_editor_api_shape(tmp_path: Path) -> None:
    data = [
        {
            "uuid": "u-1",
            "content": "Root",
            "properties": {"status": "todo"},
            "children": [{"content": "Child"}, {"id": "named"}],
        }
    ]
    source = OutlineFileSource(write(tmp_path, "outline.json", json.dumps(data)))

    (root,) = source.get_page_blocks()
    assert root.id == "u-1"
    assert root.properties == {"status": "todo"}
    assert root.children is not None
    assert [child.id for child in root.children] == ["1.1", "named"]
    assert root.children[1].content == ""
    assert root.children[0].children is None


def test_yaml_source_single_mapping(tmp_path: Path) -> None:
    path = write(
        tmp_path,
        "outline.yaml",
        textwrap.dedent(
            """\
            content: Root
            children:
              - content: Child
                children:
                  - content: Grandchild
            """
        ),
    )
    block = OutlineFileSource(path).get_block_with_children("1", 10)
    assert block is not None
    assert block.content == "Root"
    assert block.children is not None
    assert block.children[0].children is not None
    assert block.children[0].children[0].id == "1.1.1"


@pytest.mark.parametrize(
    ("name", "content", "message"),
    [
        ("outline.json", "{not json", "Invalid JSON"),
        ("outline.yml", "a: [unclosed", "Invalid YAML"),
        ("outline.json", '"just a string"', "block mapping"),
        ("outline.json", '[{"content": 3}]', "'content' must be a string"),
        ("outline.json", '[{"children": {}}]', "'children' must be a list"),
        ("outline.txt", "- block", "Unsupported outline file type"),
    ],
)
def test_malformed_sources(tmp_path: Path, name: str, content: str, message: str) -> None:
    source = OutlineFileSource(write(tmp_path, name, content))
    with pytest.raises(SourceError, match=message):
        source.get_page_blocks()


def test_missing_file(tmp_path: Path) -> None:
    source = OutlineFileSource(tmp_path / "missing.md")
    with pytest.raises(SourceError, match="Cannot read"):
        source.get_block_with_children("1", None)
