#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/renderers/test_canonical_markdown_renderer.py
"""Unit tests for rendering the canonical AST to markdown.

Tests cover:
- Block layout (separators, list markers, indentation, quotes)
- Inline formatting and escaping
- Code fences and code spans
- CiceroMark nodes
- Input handling and error cases

"""

from io import BytesIO, StringIO

import pytest

from markbridge.ast.nodes import (
    BlockQuote,
    Clause,
    Code,
    CodeBlock,
    ComputedVariable,
    Document,
    Emph,
    Heading,
    HtmlBlock,
    HtmlInline,
    Image,
    Item,
    Linebreak,
    Link,
    List,
    Paragraph,
    Softbreak,
    Strong,
    Text,
    ThematicBreak,
    Variable,
)
from markbridge.ast.serialization import ast_to_dict
from markbridge.constants import COMMON_NS_PREFIX
from markbridge.exceptions import InvalidOptionsError, RenderingError, ValidationError
from markbridge.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from markbridge.renderers.markdown import MarkdownRenderer


def render(*blocks, **options):
    """Render blocks as a document with the given renderer options."""
    renderer = MarkdownRenderer(MarkdownRendererOptions(**options))
    return renderer.render_to_string(Document(children=list(blocks)))


def para(*inline):
    """Build a paragraph, turning strings into Text nodes."""
    return Paragraph(children=[Text(text=child) if isinstance(child, str) else child for child in inline])


def item(*blocks):
    """Build a list item, turning strings into paragraphs."""
    return Item(children=[para(block) if isinstance(block, str) else block for block in blocks])


def bullets(*items, tight="true"):
    """Build a bullet list."""
    return List(list_type="bullet", tight=tight, children=list(items))


def ordered(*items, start="1", tight="true", delimiter="period"):
    """Build an ordered list."""
    return List(list_type="ordered", start=start, tight=tight, delimiter=delimiter, children=list(items))


@pytest.mark.unit
class TestBlockLayout:
    """Tests for block separators and headings."""

    def test_paragraphs_separated_by_blank_line(self):
        """Test that blocks are separated by one blank line."""
        assert render(para("a"), para("b")) == "a\n\nb"

    @pytest.mark.parametrize("level", ["1", "3", "6"])
    def test_heading(self, level):
        """Test ATX heading prefixes."""
        assert render(Heading(level=level, children=[Text(text="T")])) == "#" * int(level) + " T"

    def test_empty_heading(self):
        """Test that an empty heading is just its hashes."""
        assert render(Heading(level="2")) == "##"

    def test_thematic_break(self):
        """Test the thematic break marker."""
        assert render(para("a"), ThematicBreak(), para("b")) == "a\n\n***\n\nb"

    def test_html_block(self):
        """Test that HTML blocks are written verbatim without trailing newlines."""
        assert render(HtmlBlock(text="<div>\nhi\n</div>\n")) == "<div>\nhi\n</div>"

    def test_empty_document(self):
        """Test that an empty document renders as an empty string."""
        assert render() == ""

    def test_loose_inline_children_form_a_paragraph(self):
        """Test that inline nodes directly in a block container render as one paragraph."""
        assert render(Text(text="a"), Emph(children=[Text(text="b")]), para("c")) == "a*b*\n\nc"


@pytest.mark.unit
class TestLists:
    """Tests for list rendering."""

    def test_ordered_list_scenario(self):
        """Test the smallest ordered list."""
        assert render(ordered(item("x"))) == "1. x"

    def test_tight_bullet_list(self):
        """Test that tight items are separated by a single newline."""
        assert render(bullets(item("a"), item("b"))) == "- a\n- b"

    def test_loose_bullet_list(self):
        """Test that loose items are separated by a blank line."""
        assert render(bullets(item("a"), item("b"), tight="false")) == "- a\n\n- b"

    def test_missing_tight_is_loose(self):
        """Test that a list without a tight flag is loose."""
        assert render(List(list_type="bullet", children=[item("a"), item("b")])) == "- a\n\n- b"

    @pytest.mark.parametrize("symbol", ["-", "*", "+"])
    def test_bullet_symbol(self, symbol):
        """Test the configurable bullet marker."""
        assert render(bullets(item("a")), bullet_symbol=symbol) == f"{symbol} a"

    def test_start_number(self):
        """Test counting up from the start number."""
        assert render(ordered(item("a"), item("b"), start="3")) == "3. a\n4. b"

    def test_no_index(self):
        """Test that no_index numbers every item 1."""
        assert render(ordered(item("a"), item("b"), start="3"), no_index=True) == "1. a\n1. b"

    def test_paren_delimiter(self):
        """Test the parenthesis delimiter."""
        assert render(ordered(item("a"), item("b"), delimiter="paren")) == "1) a\n2) b"

    def test_missing_start_counts_from_one(self):
        """Test that an ordered list without a start begins at 1."""
        assert render(List(list_type="ordered", tight="true", children=[item("a"), item("b")])) == "1. a\n2. b"

    def test_invalid_start(self):
        """Test that a non-numeric start is a rendering error."""
        with pytest.raises(RenderingError, match="Invalid ordered list start"):
            render(ordered(item("a"), start="one"))

    def test_nested_bullet_list(self):
        """Test that nested content is indented by the marker width."""
        assert render(bullets(item("a", bullets(item("b"))))) == "- a\n  - b"

    def test_nested_under_ordered_marker(self):
        """Test indentation under a three-character ordered marker."""
        assert render(ordered(item("a", bullets(item("b"), item("c"))))) == "1. a\n   - b\n   - c"

    def test_loose_item_with_two_paragraphs(self):
        """Test continuation paragraphs in a loose list."""
        assert render(bullets(item("a", "b"), tight="false")) == "- a\n\n  b"

    def test_empty_items(self):
        """Test that empty items render as bare markers."""
        assert render(bullets(Item(), item("b"))) == "-\n- b"
        assert render(ordered(Item())) == "1."

    def test_code_block_in_item(self):
        """Test that fenced code inside an item is indented."""
        result = render(bullets(item("a", CodeBlock(text="x\ny\n"))))
        assert result == "- a\n  ```\n  x\n  y\n  ```"

    def test_softbreak_in_item(self):
        """Test that soft breaks continue at the item's indentation."""
        assert render(bullets(item(para("a", Softbreak(), "b")))) == "- a\n  b"

    def test_paragraph_holding_nested_list(self):
        """Test a paragraph whose children mix inline text and a nested list."""
        assert render(bullets(Item(children=[para("a", bullets(item("b")))]))) == "- a\n  - b"

    def test_paragraph_holding_paragraphs(self):
        """Test that paragraphs nested in a paragraph render as separate blocks."""
        assert render(bullets(Item(children=[Paragraph(children=[para("c"), para("d")])]))) == "- c\n\n  d"

    def test_paragraph_holding_paragraph_and_list(self):
        """Test a paragraph holding a paragraph and a list."""
        nested = Paragraph(children=[para("a"), bullets(item("b"), item("c"))])
        assert render(bullets(Item(children=[nested]), item("d"))) == "- a\n  - b\n  - c\n- d"

    def test_tight_item_with_two_paragraphs_renders_loose(self):
        """Test that a tight list is loosened when an item holds consecutive paragraphs."""
        assert render(bullets(item("a", "b"), item("c"))) == "- a\n\n  b\n\n- c"

    def test_heading_then_paragraph_stays_tight(self):
        """Test that a paragraph may follow a heading on the next line."""
        heading = Heading(level="2", children=[Text(text="h")])
        assert render(bullets(item(heading, "p"), item("x"))) == "- ## h\n  p\n- x"

    def test_block_quote_then_paragraph_in_item(self):
        """Test that a paragraph after a quote is kept out of the quote."""
        assert render(bullets(item(BlockQuote(children=[para("q")]), "p"))) == "- > q\n\n  p"

    def test_ordered_sublist_not_starting_at_one(self):
        """Test that a sublist that cannot interrupt a paragraph gets a blank line."""
        assert render(bullets(item("a", ordered(item("b"), start="2")))) == "- a\n\n  2. b"

    def test_ordered_sublist_with_no_index(self):
        """Test that no_index numbering lets the sublist follow directly."""
        assert render(bullets(item("a", ordered(item("b"), start="2"))), no_index=True) == "- a\n  1. b"

    def test_empty_first_sublist_item(self):
        """Test that a sublist starting with an empty item gets a blank line."""
        assert render(bullets(item("a", bullets(Item(), item("b"))))) == "- a\n\n  -\n  - b"


@pytest.mark.unit
class TestBlockQuotes:
    """Tests for block quote rendering."""

    def test_single_paragraph(self):
        """Test a one-line quote."""
        assert render(BlockQuote(children=[para("q")])) == "> q"

    def test_multiple_blocks(self):
        """Test that blank lines inside a quote become bare markers."""
        assert render(BlockQuote(children=[para("a"), para("b")])) == "> a\n>\n> b"

    def test_softbreak_lines_are_prefixed(self):
        """Test that every line of the quote gets a marker."""
        assert render(BlockQuote(children=[para("a", Softbreak(), "b")])) == "> a\n> b"

    def test_nested_quote(self):
        """Test quotes inside quotes."""
        assert render(BlockQuote(children=[BlockQuote(children=[para("q")])])) == "> > q"

    def test_quote_in_list_item(self):
        """Test that quote lines are indented inside list items."""
        quote = BlockQuote(children=[para("a", Softbreak(), "b")])
        assert render(bullets(item(quote))) == "- > a\n  > b"

    def test_list_in_quote(self):
        """Test a list inside a quote."""
        assert render(BlockQuote(children=[bullets(item("a"), item("b"))])) == "> - a\n> - b"


@pytest.mark.unit
class TestCodeBlocks:
    """Tests for fenced code."""

    def test_info_string(self):
        """Test the info string after the opening fence."""
        assert render(CodeBlock(text="x = 1\n", info="python")) == "```python\nx = 1\n```"

    def test_fence_longer_than_content_backticks(self):
        """Test that the fence outgrows backtick runs in the code."""
        assert render(CodeBlock(text="a ```` b\n")) == "`````\na ```` b\n`````"

    def test_minimum_fence_length(self):
        """Test the code_fence_min option."""
        assert render(CodeBlock(text="x\n"), code_fence_min=5) == "`````\nx\n`````"

    def test_empty_code_block(self):
        """Test a code block without content."""
        assert render(CodeBlock(text="")) == "```\n```"

    def test_text_without_trailing_newline(self):
        """Test code text that does not end with a newline."""
        assert render(CodeBlock(text="x")) == "```\nx\n```"


@pytest.mark.unit
class TestInline:
    """Tests for inline nodes."""

    def test_emphasis_and_strong(self):
        """Test emphasis delimiters."""
        result = render(para(Emph(children=[Text(text="a")]), " ", Strong(children=[Text(text="b")])))
        assert result == "*a* **b**"

    def test_nested_emphasis(self):
        """Test strong inside emphasis."""
        assert render(para(Emph(children=[Strong(children=[Text(text="x")])]))) == "***x***"

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("x", "`x`"),
            ("a`b", "``a`b``"),
            ("`a", "`` `a ``"),
            ("a``", "``` a`` ```"),
            (" a ", "`  a  `"),
            ("  ", "`  `"),
        ],
    )
    def test_code_span(self, code, expected):
        """Test code span delimiters and padding."""
        assert render(para(Code(text=code))) == expected

    def test_link(self):
        """Test an inline link without title."""
        assert render(para(Link(destination="http://x.y", children=[Text(text="site")]))) == "[site](http://x.y)"

    def test_link_with_title(self):
        """Test title quoting."""
        link = Link(destination="http://x.y", title='say "hi"', children=[Text(text="site")])
        assert render(para(link)) == '[site](http://x.y "say \\"hi\\"")'

    def test_link_destination_with_space(self):
        """Test that destinations with spaces are wrapped in angle brackets."""
        assert render(para(Link(destination="a b.html", children=[Text(text="x")]))) == "[x](<a b.html>)"

    def test_image(self):
        """Test images with alt text."""
        assert render(para(Image(destination="a.png", title="T", children=[Text(text="alt")]))) == '![alt](a.png "T")'

    def test_html_inline_verbatim(self):
        """Test that inline HTML is not escaped."""
        assert render(para("a ", HtmlInline(text="<b>"), "x", HtmlInline(text="</b>"))) == "a <b>x</b>"

    def test_breaks(self):
        """Test soft and hard breaks."""
        assert render(para("a", Softbreak(), "b", Linebreak(), "c")) == "a\nb\\\nc"

    def test_adjacent_strong_runs_merge(self):
        """Test that neighbouring strong nodes render as one strong span."""
        result = render(para(Strong(children=[Text(text="a")]), Strong(children=[Text(text="b")])))
        assert result == "**ab**"

    def test_adjacent_emphasis_runs_merge(self):
        """Test that neighbouring emphasis nodes render as one emphasis span."""
        result = render(para(Emph(children=[Text(text="a ")]), Emph(children=[Text(text="b")]), "c"))
        assert result == "*a b*c"

    def test_strong_then_emphasis(self):
        """Test different delimiters side by side."""
        result = render(para(Strong(children=[Text(text="a")]), Emph(children=[Text(text="b")])))
        assert result == "**a***b*"

    def test_whitespace_moved_outside_delimiters(self):
        """Test that spaces at the edges of emphasis are written outside it."""
        result = render(para("x", Strong(children=[Text(text=" bold ")]), "y"))
        assert result == "x **bold** y"

    def test_whitespace_only_emphasis(self):
        """Test that emphasis around only whitespace renders the whitespace."""
        assert render(para("a", Emph(children=[Text(text=" ")]), "b")) == "a b"

    def test_trailing_hard_break_moved_outside(self):
        """Test that a hard break ending an emphasis span follows the closing delimiter."""
        result = render(para(Emph(children=[Text(text="a"), Linebreak()]), "b"))
        assert result == "*a*\\\nb"

    def test_adjacent_code_spans_merge(self):
        """Test that neighbouring code spans render as one span."""
        assert render(para(Code(text="a"), Code(text="b"))) == "`ab`"

    def test_exclamation_before_link(self):
        """Test that a "!" before a link does not make it an image."""
        result = render(para("wow!", Link(destination="u", children=[Text(text="x")])))
        assert result == "wow\\![x](u)"

    @pytest.mark.parametrize(
        "children,expected",
        [
            (["a ##"], "## a \\##"),
            (["C#"], "## C#"),
            (["#"], "## \\#"),
            (["a ", Code(text="#")], "## a `#`"),
        ],
    )
    def test_heading_trailing_hashes(self, children, expected):
        """Test that hashes ending a heading's text are not read as a closing sequence."""
        heading = Heading(level="2", children=[Text(text=c) if isinstance(c, str) else c for c in children])
        assert render(heading) == expected

    def test_adjacent_text_nodes_merge(self):
        """Test that split text is escaped as one string."""
        assert render(para("&", "copy;")) == "\\&copy;"


@pytest.mark.unit
class TestEscaping:
    """Tests for escaping text content."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("*not emph*", "\\*not emph\\*"),
            ("# not heading", "\\# not heading"),
            ("issue #1", "issue #1"),
            ("snake_case_name", "snake_case_name"),
            ("_word_", "\\_word\\_"),
            ("[x](y)", "\\[x\\](y)"),
            ("a < b", "a \\< b"),
            ("back\\slash", "back\\\\slash"),
            ("`tick`", "\\`tick\\`"),
            ("{braces}", "\\{braces\\}"),
            ("- not a list", "\\- not a list"),
            ("+ plus", "\\+ plus"),
            ("> not quoted", "\\> not quoted"),
            ("===", "\\==="),
            ("1. not ordered", "1\\. not ordered"),
            ("12) paren", "12\\) paren"),
            ("a - b > c", "a - b > c"),
            ("2.5 units", "2.5 units"),
            ("&copy; 2024", "\\&copy; 2024"),
            ("&#169; &#xA9;", "\\&#169; \\&#xA9;"),
            ("fish & chips", "fish & chips"),
            ("AT&T;", "AT\\&T;"),
        ],
    )
    def test_escape_special(self, text, expected):
        """Test escaping with the default options."""
        assert render(para(text)) == expected

    def test_escape_disabled(self):
        """Test that escaping can be switched off."""
        assert render(para("*raw* _text_"), escape_special=False) == "*raw* _text_"

    def test_title_character_reference_escaped(self):
        """Test that a title keeps a literal character reference."""
        link = Link(destination="x", title="&amp;", children=[Text(text="t")])
        assert render(para(link)) == '[t](x "\\&amp;")'

    def test_code_is_never_escaped(self):
        """Test that code spans and blocks keep their text."""
        assert render(para(Code(text="*x*")), CodeBlock(text="*y*\n")) == "`*x*`\n\n```\n*y*\n```"


@pytest.mark.unit
class TestCiceroNodes:
    """Tests for clause and variable rendering."""

    def test_clause_is_transparent(self):
        """Test that clause content renders as ordinary blocks."""
        clause = Clause(clauseid="c", src="s", children=[para("a"), para("b")])
        assert render(clause, para("c")) == "a\n\nb\n\nc"

    def test_variable_with_children(self):
        """Test a variable rendering its child text."""
        variable = Variable(id="amount", value="100", children=[Text(text="100")])
        assert render(para("Pay ", variable)) == "Pay 100"

    def test_variable_without_children(self):
        """Test a childless variable falling back to its value."""
        assert render(para(Variable(id="v", value="a*b"))) == "a\\*b"

    def test_computed_variable(self):
        """Test a computed value."""
        assert render(para("Due ", ComputedVariable(value="2025-01-01"))) == "Due 2025-01-01"


@pytest.mark.unit
class TestRendererInput:
    """Tests for input handling and errors."""

    def test_dict_input(self):
        """Test rendering a tagged dict."""
        doc = Document(children=[Heading(level="1", children=[Text(text="T")]), para("body")])
        assert MarkdownRenderer().render_to_string(ast_to_dict(doc)) == "# T\n\nbody"

    def test_invalid_dict(self):
        """Test that an invalid dict fails validation."""
        with pytest.raises(ValidationError):
            MarkdownRenderer().render_to_string({"$class": COMMON_NS_PREFIX + "Bogus"})

    def test_non_document_root(self):
        """Test that only documents can be rendered."""
        with pytest.raises(RenderingError, match="Expected a Document"):
            MarkdownRenderer().render_to_string(para("x"))

    def test_non_node_child(self):
        """Test that foreign objects in the tree are rendering errors."""
        with pytest.raises(RenderingError, match="Cannot render str"):
            MarkdownRenderer().render_to_string(Document(children=["text"]))
        with pytest.raises(RenderingError):
            MarkdownRenderer().render_to_string(Document(children=[Paragraph(children=[42])]))

    def test_wrong_options_type(self):
        """Test that parser options are rejected."""
        with pytest.raises(InvalidOptionsError, match="MarkdownRendererOptions"):
            MarkdownRenderer(MarkdownParserOptions())

    def test_renderer_is_reusable(self):
        """Test that state does not leak between renders."""
        renderer = MarkdownRenderer()
        first = renderer.render_to_string(Document(children=[bullets(item("a", bullets(item("b"))))]))
        second = renderer.render_to_string(Document(children=[bullets(item("a", bullets(item("b"))))]))
        assert first == second == "- a\n  - b"

    def test_render_to_path(self, tmp_path):
        """Test writing to a file path."""
        path = tmp_path / "out.md"
        MarkdownRenderer().render(Document(children=[para("café")]), path)
        assert path.read_text(encoding="utf-8") == "café"

    def test_render_to_streams(self):
        """Test writing to text and binary streams."""
        doc = Document(children=[para("x")])
        text_stream, binary_stream = StringIO(), BytesIO()
        MarkdownRenderer().render(doc, text_stream)
        MarkdownRenderer().render(doc, binary_stream)
        assert text_stream.getvalue() == "x"
        assert binary_stream.getvalue() == b"x"

    def test_render_to_unsupported_output(self):
        """Test that non-writable outputs are rejected."""
        with pytest.raises(TypeError, match="Unsupported output type"):
            MarkdownRenderer().render(Document(), 42)
