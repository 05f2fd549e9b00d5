"""Tests for the Markdown generator and converter."""

from __future__ import annotations

from blockcopy.models import Block, ExportOptions
from blockcopy.plugins.builtin.markdown.converter import convert_block, convert_content
from blockcopy.plugins.builtin.markdown.generator import generate
from blockcopy.tokenizer import tokenize

OPTIONS = ExportOptions(format="markdown")


def render(content: str) -> str:
    return generate(tokenize(content))


def chain(*contents: str) -> Block:
    """Build a single-child chain, first content at the root."""

    block: Block | None = None
    for index, content in reversed(list(enumerate(contents))):
        children = (block,) if block is not None else None
        block = Block(id=str(index), content=content, children=children)
    assert block is not None
    return block


def test_task_markers() -> None:
    assert render("TODO Complete the task") == "- [ ] Complete the task"
    assert render("DONE Shipped") == "- [x] Shipped"
    assert render("DOING Work") == "- [ ] 🔄 Work"
    assert render("LATER Read") == "- [ ] ⏳ Read"
    assert render("NOW Fix") == "- [ ] 🔥 Fix"


def test_inline_rendering() -> None:
    assert render("[[Page]] #tag **b**") == "**Page** **tag** **b**"
    assert render("==hi==") == "<mark>hi</mark>"
    assert render("{{query (todo now)}}") == "Query: (todo now)"
    assert render("https://example.com") == "https://example.com"


def test_links_and_images() -> None:
    assert render("[site](https://example.com)") == "[site](https://example.com)"
    assert render("[doc](other-page)") == "**doc** (→ other-page)"
    assert render("![Logo](https://e.com/a.png)") == "![Logo](https://e.com/a.png)"
    assert (
        render("![](assets/a.png)")
        == "**[Image: no description]** (local file: assets/a.png)"
    )


def test_videos() -> None:
    assert (
        render("{{youtube abc}}")
        == "[▶️ YouTube Video](https://www.youtube.com/watch?v=abc)"
    )
    assert render("{{vimeo 42}}") == "[▶️ Vimeo Video](https://vimeo.com/42)"
    assert (
        render("{{video https://example.com/v.mp4}}")
        == "[▶️ Video](https://example.com/v.mp4)"
    )


def test_code_block_and_quote() -> None:
    assert render("```python\nx = 1\n```") == "```python\nx = 1\n```"
    assert render("> wise words") == "> wise words"


def test_nested_children_are_indented() -> None:
    result = convert_block(chain("Root", "Child", "Grandchild"), OPTIONS)
    assert result.content == "Root\n  - Child\n    - Grandchild"
    assert result.format == "markdown"
    assert result.block_count == 3


def test_sibling_order_is_preserved() -> None:
    root = Block(
        id="r",
        content="Root",
        children=(Block(id="a", content="A"), Block(id="b", content="B")),
    )
    assert convert_block(root, OPTIONS).content == "Root\n  - A\n  - B"


def test_max_depth_truncates_rendering() -> None:
    root = chain("Level 0", "Level 1", "Level 2")
    result = convert_block(root, ExportOptions(format="markdown", max_depth=1))
    assert result.content == "Level 0\n  - Level 1"
    # the count follows include_children only
    assert result.block_count == 3


def test_zero_max_depth_renders_root_only() -> None:
    root = chain("Level 0", "Level 1")
    result = convert_block(root, ExportOptions(format="markdown", max_depth=0))
    assert result.content == "Level 0"


def test_without_children_renders_parent_only() -> None:
    root = chain("Parent", "Child")
    result = convert_block(
        root, ExportOptions(format="markdown", include_children=False)
    )
    assert result.content == "Parent"
    assert result.block_count == 1


def test_blank_blocks_are_skipped() -> None:
    root = Block(
        id="r",
        content="Root",
        children=(Block(id="a", content="   "), Block(id="b", content="B")),
    )
    assert convert_block(root, OPTIONS).content == "Root\n  - B"


def test_multiline_content_gets_hard_breaks() -> None:
    converted = convert_content("First line\nSecond line\nThird line", 1)
    assert converted.split("\n") == [
        "  - First line\\",
        "    Second line\\",
        "    Third line",
    ]


def test_no_hard_break_around_quotes() -> None:
    converted = convert_content("Introduction\n> Quote text\nConclusion", 1)
    assert converted.split("\n") == [
        "  - Introduction",
        "    > Quote text",
        "    Conclusion",
    ]


def test_no_hard_break_before_empty_line() -> None:
    converted = convert_content("First\n\nThird\nFourth", 2)
    assert converted.split("\n") == [
        "    - First",
        "      ",
        "      Third\\",
        "      Fourth",
    ]


def test_no_hard_break_after_leading_quote() -> None:
    converted = convert_content("> quoted\nafter", 1)
    assert converted.split("\n") == ["  - > quoted", "    after"]


def test_no_hard_break_after_leading_empty_line() -> None:
    converted = convert_content("\nafter\nmore", 1)
    assert converted.split("\n") == ["  - ", "    after\\", "    more"]


def test_code_block_is_indented_without_bullet() -> None:
    converted = convert_content("```python\nprint(1)\n```", 1)
    assert converted.split("\n") == ["  ```python", "  print(1)", "  ```"]


def test_root_content_is_unchanged() -> None:
    assert convert_content("Line 1\nLine 2", 0) == "Line 1\nLine 2"


def test_nested_task_keeps_its_checkbox() -> None:
    assert convert_content("TODO Task", 1) == "  - - [ ] Task"


def test_properties_section() -> None:
    root = Block(
        id="r",
        content="Root",
        properties={"status": "done", "tags": ["a", "b"], "flag": True, "gone": None},
    )
    options = ExportOptions(format="markdown", include_properties=True)
    assert convert_block(root, options).content == (
        "Root\n**Properties:**\n- **status**: done\n- **tags**: a, b\n- **flag**: true"
    )


def test_properties_hidden_by_default() -> None:
    root = Block(id="r", content="Root", properties={"status": "done"})
    assert convert_block(root, OPTIONS).content == "Root"


def test_deep_outline_does_not_recurse() -> None:
    contents = [f"Level {i}" for i in range(3000)]
    result = convert_block(chain(*contents), ExportOptions(format="markdown"))
    assert result.block_count == 3000
    assert result.content.endswith("- Level 2999")
