"""Unit tests for the typed canonical node classes and visitor dispatch."""

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
    get_node_children,
)
from markbridge.ast.visitors import NodeVisitor
from markbridge.constants import COMMONMARK_XMLNS


def _make_recording_visitor():
    """Create a visitor class whose visit methods return their own name."""

    def make_method(name):
        def method(self, node):
            return name

        return method

    namespace = {name: make_method(name) for name in NodeVisitor.__abstractmethods__}
    return type("RecordingVisitor", (NodeVisitor,), namespace)()


@pytest.mark.unit
class TestNodeDefaults:
    """Tests for node construction."""

    def test_document_defaults(self):
        """Test that a document starts empty with the CommonMark xmlns."""
        doc = Document()
        assert doc.children == []
        assert doc.xmlns == COMMONMARK_XMLNS

    def test_children_lists_are_independent(self):
        """Test that default children lists are not shared."""
        first, second = Paragraph(), Paragraph()
        first.children.append(Text(text="x"))
        assert second.children == []

    @pytest.mark.parametrize("level", ["1", "2", "3", "4", "5", "6"])
    def test_heading_valid_levels(self, level):
        """Test the six accepted heading levels."""
        assert Heading(level=level).level == level

    @pytest.mark.parametrize("level", ["0", "7", "h1", ""])
    def test_heading_invalid_levels(self, level):
        """Test that other levels are rejected."""
        with pytest.raises(ValueError, match="Heading level"):
            Heading(level=level)

    def test_list_flags(self):
        """Test the ordered and tight helpers."""
        assert List(list_type="ordered", tight="true").ordered
        assert List(list_type="ordered", tight="true").is_tight
        assert not List(list_type="bullet").ordered
        assert not List(list_type="bullet", tight="false").is_tight
        assert not List(list_type="bullet").is_tight

    def test_link_title_defaults_to_empty(self):
        """Test that links and images default to an empty title."""
        assert Link(destination="x").title == ""
        assert Image(destination="x").title == ""


@pytest.mark.unit
class TestGetNodeChildren:
    """Tests for get_node_children."""

    def test_container_returns_own_list(self):
        """Test that the live children list is returned."""
        para = Paragraph(children=[Text(text="a")])
        children = get_node_children(para)
        assert children is para.children

    @pytest.mark.parametrize("node", [Text(text="a"), Code(text="b"), ThematicBreak(), Softbreak(), Linebreak()])
    def test_leaf_returns_empty(self, node):
        """Test that leaves have no children."""
        assert get_node_children(node) == []


@pytest.mark.unit
class TestVisitorDispatch:
    """Tests for accept/visit dispatch."""

    @pytest.mark.parametrize(
        "node,method",
        [
            (Document(), "visit_document"),
            (Paragraph(), "visit_paragraph"),
            (Heading(level="1"), "visit_heading"),
            (BlockQuote(), "visit_block_quote"),
            (List(list_type="bullet"), "visit_list"),
            (Item(), "visit_item"),
            (CodeBlock(), "visit_code_block"),
            (HtmlBlock(), "visit_html_block"),
            (ThematicBreak(), "visit_thematic_break"),
            (Text(), "visit_text"),
            (Emph(), "visit_emph"),
            (Strong(), "visit_strong"),
            (Code(), "visit_code"),
            (Link(destination="x"), "visit_link"),
            (Image(destination="x"), "visit_image"),
            (HtmlInline(), "visit_html_inline"),
            (Softbreak(), "visit_softbreak"),
            (Linebreak(), "visit_linebreak"),
            (Clause(clauseid="c", src="s"), "visit_clause"),
            (Variable(id="v", value="1"), "visit_variable"),
            (ComputedVariable(value="1"), "visit_computed_variable"),
        ],
    )
    def test_accept_calls_matching_visit(self, node, method):
        """Test that each node dispatches to its own visit method."""
        visitor = _make_recording_visitor()
        assert node.accept(visitor) == method

    def test_visitor_is_abstract(self):
        """Test that a visitor missing methods cannot be created."""

        class Partial(NodeVisitor):
            def visit_text(self, node):
                return node.text

        with pytest.raises(TypeError):
            Partial()
