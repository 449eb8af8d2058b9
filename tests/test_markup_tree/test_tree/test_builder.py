"""Comprehensive tests for the tree building engine.

Tests node behaviour, the open-element stack, the pure build_tree function
and the diagnostic-reporting TreeBuilder.
"""

import pytest

from markup_tree.shared import DiagnosticSeverity, ParserConfig
from markup_tree.tokenization import Token, TokenType, tokenize
from markup_tree.tree import (
    DEFAULT_ROOT_NAME,
    Node,
    OpenElementStack,
    ParseResult,
    TreeBuilder,
    build_tree,
)


class TestNode:
    """Test Node functionality and traversal helpers."""

    def test_element_creation(self) -> None:
        """Test creating an element node."""
        node = Node.element("div")

        assert node.name == "div"
        assert node.is_text is False
        assert node.children == []

    def test_text_creation(self) -> None:
        """Test creating a text node."""
        node = Node.text("hello")

        assert node.name == "hello"
        assert node.is_text is True
        assert node.children == []

    def test_add_child_preserves_order(self) -> None:
        """Test children are kept in insertion order."""
        parent = Node.element("p")
        first = Node.text("a")
        second = Node.element("b")
        third = Node.text("c")

        parent.add_child(first)
        parent.add_child(second)
        parent.add_child(third)

        assert parent.children == [first, second, third]
        assert parent.children[1] is second

    def test_add_child_to_text_node_raises_error(self) -> None:
        """Test a text node cannot get children."""
        node = Node.text("leaf")

        with pytest.raises(ValueError, match="Text nodes cannot have children"):
            node.add_child(Node.element("a"))

    def test_text_node_created_with_children_raises_error(self) -> None:
        """Test constructing a text node with children is rejected."""
        with pytest.raises(ValueError, match="Text nodes cannot have children"):
            Node(name="x", is_text=True, children=[Node.element("a")])

    def test_add_child_with_invalid_type_raises_error(self) -> None:
        """Test adding a non-Node raises TypeError."""
        parent = Node.element("p")

        with pytest.raises(TypeError, match="Child must be a Node instance"):
            parent.add_child("not_a_node")  # type: ignore

    def test_iter_is_pre_order(self) -> None:
        """Test iteration visits nodes in document order."""
        root = build_tree(tokenize("<a>1<b>2</b></a><c>3</c>"))

        assert [node.name for node in root.iter()] == [
            "document", "a", "1", "b", "2", "c", "3",
        ]

    def test_element_names_excludes_self_and_text(self) -> None:
        """Test element_names lists only descendant elements."""
        root = build_tree(tokenize("x<a><b>y</b></a><c></c>"))

        assert root.element_names() == ["a", "b", "c"]

    def test_text_content(self) -> None:
        """Test text content concatenates descendant text in order."""
        root = build_tree(tokenize("hi <b>bold</b> end"))

        assert root.text_content == "hi bold end"

    def test_depth(self) -> None:
        """Test subtree height calculation."""
        assert Node.element("empty").depth == 0
        assert build_tree(tokenize("<a><b>x</b></a>")).depth == 3

    def test_structural_equality(self) -> None:
        """Test nodes compare by structure, not identity."""
        left = build_tree(tokenize("<a>x</a>"))
        right = build_tree(tokenize("<a>x</a>"))
        different = build_tree(tokenize("<a>y</a>"))

        assert left is not right
        assert left == right
        assert left != different
        assert Node.text("a") != Node.element("a")

    def test_to_dict(self) -> None:
        """Test converting a subtree to a dictionary."""
        root = build_tree(tokenize("<a>x</a>"))

        assert root.to_dict() == {
            "name": "document",
            "is_text": False,
            "children": [
                {
                    "name": "a",
                    "is_text": False,
                    "children": [{"name": "x", "is_text": True}],
                },
            ],
        }


class TestOpenElementStack:
    """Test the open-element stack."""

    def test_starts_with_root(self) -> None:
        """Test a new stack holds only the root."""
        root = Node.element("document")
        stack = OpenElementStack(root)

        assert stack.root is root
        assert stack.current is root
        assert stack.depth == 1
        assert stack.names() == ["document"]

    def test_push_and_pop(self) -> None:
        """Test push changes the current element and pop restores it."""
        root = Node.element("document")
        child = Node.element("a")
        stack = OpenElementStack(root)

        stack.push(child)
        assert stack.current is child
        assert stack.depth == 2

        assert stack.pop() is child
        assert stack.current is root

    def test_root_is_never_popped(self) -> None:
        """Test popping with only the root open is a no-op."""
        root = Node.element("document")
        stack = OpenElementStack(root)

        assert stack.pop() is None
        assert stack.pop() is None
        assert stack.current is root
        assert stack.depth == 1


class TestBuildTree:
    """Test the pure build_tree function."""

    def test_nested_scenario(self) -> None:
        """Test document -> a -> b -> 'x'."""
        root = build_tree(tokenize("<a><b>x</b></a>"))

        assert root.name == "document"
        assert len(root.children) == 1
        a = root.children[0]
        assert a.name == "a" and not a.is_text
        assert len(a.children) == 1
        b = a.children[0]
        assert b.name == "b" and not b.is_text
        assert len(b.children) == 1
        assert b.children[0].name == "x"
        assert b.children[0].is_text

    def test_mixed_content_scenario(self) -> None:
        """Test text, element, text as siblings under the root."""
        root = build_tree(tokenize("hi <b>bold</b> end"))

        assert [(child.name, child.is_text) for child in root.children] == [
            ("hi ", True), ("b", False), (" end", True),
        ]
        bold = root.children[1]
        assert len(bold.children) == 1
        assert bold.children[0].name == "bold"
        assert bold.children[0].is_text

    def test_unclosed_element_scenario(self) -> None:
        """Test an unclosed element is still attached to the root."""
        root = build_tree(tokenize("<div>"))

        assert len(root.children) == 1
        assert root.children[0].name == "div"
        assert root.children[0].children == []

    def test_empty_input_yields_bare_root(self) -> None:
        """Test zero tokens produce only the root."""
        root = build_tree([])

        assert root.name == DEFAULT_ROOT_NAME
        assert root.is_text is False
        assert root.children == []

    def test_stray_end_tag_does_not_crash(self) -> None:
        """Test an end tag with nothing open keeps the root current."""
        root = build_tree(tokenize("</x><a></a>"))

        assert [child.name for child in root.children] == ["a"]

    def test_extra_end_tags_attach_following_content_to_root(self) -> None:
        """Test content after too many end tags attaches to the root."""
        root = build_tree(tokenize("<a></a></a></a>tail<b></b>"))

        assert [child.name for child in root.children] == ["a", "tail", "b"]

    def test_mismatched_end_tag_pops_current_element(self) -> None:
        """Test end tag names are not matched against the open element."""
        root = build_tree(tokenize("<b><i>x</b>y</i>z"))

        b = root.children[0]
        assert b.name == "b"
        assert [child.name for child in b.children] == ["i", "y"]
        assert [child.name for child in root.children] == ["b", "z"]

    @pytest.mark.parametrize("markup, expected", [
        ("<a><b></b><c><d></d></c></a>", ["a", "b", "c", "d"]),
        ("<x></x><y><z></z></y>", ["x", "y", "z"]),
        ("<html><body><div>Hello <b>world</b></div></body></html>",
         ["html", "body", "div", "b"]),
        ("t<p>u<q>v</q>w</p>", ["p", "q"]),
    ])
    def test_pre_order_names_match_source_order(self, markup, expected) -> None:
        """Test element names in pre-order follow start tag order in the source."""
        root = build_tree(tokenize(markup))
        start_tags = [
            token.value for token in tokenize(markup)
            if token.type is TokenType.START_TAG
        ]

        assert root.element_names() == expected
        assert root.element_names() == start_tags

    def test_idempotent_pipeline(self) -> None:
        """Test running the pipeline twice yields structurally identical trees."""
        markup = "a<b>c<d>e</d></b>f<g>"

        assert build_tree(tokenize(markup)) == build_tree(tokenize(markup))

    def test_custom_root_name(self) -> None:
        """Test the synthetic root name can be changed."""
        root = build_tree(tokenize("<a></a>"), root_name="root")

        assert root.name == "root"

    def test_accepts_any_iterable(self) -> None:
        """Test tokens may come from a generator."""
        tokens = (token for token in tokenize("<a>x</a>"))

        assert build_tree(tokens).element_names() == ["a"]


class TestTreeBuilder:
    """Test TreeBuilder reporting."""

    def test_builds_same_tree_as_pure_function(self) -> None:
        """Test reporting does not change the produced structure."""
        markup = "</z>hi <b>bold</i> end<u>"
        result = TreeBuilder().build(tokenize(markup))

        assert isinstance(result, ParseResult)
        assert result.root == build_tree(tokenize(markup))

    def test_balanced_input(self) -> None:
        """Test a well-formed input has no diagnostics."""
        result = TreeBuilder().build(tokenize("<a><b>x</b></a>"))

        assert result.is_balanced
        assert result.open_elements == ["document"]
        assert result.stray_end_tags == 0
        assert result.mismatched_end_tags == 0
        assert result.diagnostics == []
        assert result.element_count == 2
        assert result.text_count == 1

    def test_unclosed_elements_reported(self) -> None:
        """Test unclosed elements stay on the stack and are reported."""
        result = TreeBuilder().build(tokenize("<div>"))

        assert result.open_elements == ["document", "div"]
        assert not result.is_balanced
        infos = result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)
        assert len(infos) == 1
        assert infos[0].details == {"open_elements": ["div"]}

    def test_stray_end_tag_reported(self) -> None:
        """Test an end tag with only the root open is a warning."""
        result = TreeBuilder().build(tokenize("<a></a></b>"))

        assert result.stray_end_tags == 1
        assert result.open_elements == ["document"]
        assert not result.is_balanced
        assert result.has_warnings
        warnings = result.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)
        assert len(warnings) == 1
        assert warnings[0].position == {"token_index": 2}
        assert "</b>" in warnings[0].message

    def test_mismatched_end_tag_reported(self) -> None:
        """Test a mismatched end tag is reported but not fixed."""
        result = TreeBuilder().build(tokenize("<b>x</i>"))

        assert result.mismatched_end_tags == 1
        assert result.is_balanced
        infos = result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)
        assert len(infos) == 1
        assert infos[0].details == {"expected": "b", "found": "i"}

    def test_mismatched_end_tag_reporting_disabled(self) -> None:
        """Test mismatch diagnostics can be turned off."""
        config = ParserConfig(report_mismatched_end_tags=False)
        result = TreeBuilder(config=config).build(tokenize("<b>x</i>"))

        assert result.mismatched_end_tags == 1
        assert result.diagnostics == []

    def test_config_root_name(self) -> None:
        """Test the configured root name is used."""
        result = TreeBuilder(config=ParserConfig(root_name="body")).build([])

        assert result.root.name == "body"
        assert result.open_elements == ["body"]

    def test_correlation_id_propagates_to_diagnostics(self) -> None:
        """Test diagnostics carry the builder's correlation ID."""
        result = TreeBuilder(correlation_id="req-42").build(tokenize("</x>"))

        assert result.correlation_id == "req-42"
        assert result.diagnostics[0].correlation_id == "req-42"

    def test_performance_metrics(self) -> None:
        """Test token and node counters."""
        result = TreeBuilder().build(tokenize("<a>x</a>y"))

        assert result.performance.tokens_consumed == 4
        assert result.performance.nodes_created == 3
        assert result.performance.processing_time_ms >= 0.0

    def test_summary(self) -> None:
        """Test summary dictionary contents."""
        result = TreeBuilder().build(tokenize("<a><b>x</b></a><c>"))
        summary = result.summary()

        assert summary["element_count"] == 3
        assert summary["text_count"] == 1
        assert summary["token_count"] == 6
        assert summary["max_depth"] == 3
        assert summary["is_balanced"] is False
        assert summary["open_elements"] == ["document", "c"]
        assert summary["diagnostics"][0]["severity"] == "INFO"

    def test_builder_is_reusable(self) -> None:
        """Test one builder instance produces independent results."""
        builder = TreeBuilder()
        first = builder.build(tokenize("<a>"))
        second = builder.build(tokenize("<b></b>"))

        assert first.root.element_names() == ["a"]
        assert second.root.element_names() == ["b"]
        assert second.is_balanced

    def test_token_sequence_is_retained(self) -> None:
        """Test the consumed tokens are kept on the result."""
        tokens = [Token(TokenType.TEXT, "x")]
        result = TreeBuilder().build(tokens)

        assert result.tokens == tokens

    def test_quiet_config_keeps_stray_and_unclosed_reports(self) -> None:
        """Test the quiet preset still reports stray and unclosed elements."""
        result = TreeBuilder(ParserConfig.quiet()).build(tokenize("</x><a>b</i><c>"))

        assert [diag.severity for diag in result.diagnostics] == [
            DiagnosticSeverity.WARNING,
            DiagnosticSeverity.INFO,
        ]
        assert result.mismatched_end_tags == 1
        assert result.diagnostics[1].details == {"open_elements": ["c"]}


NESTING_DEPTH = 5000


class TestDeepNesting:
    """Test tree helpers on nesting far beyond the interpreter recursion limit."""

    @pytest.fixture
    def deep_markup(self) -> str:
        return "<a>" * NESTING_DEPTH + "x" + "</a>" * NESTING_DEPTH

    def test_depth(self, deep_markup: str) -> None:
        """Test subtree height of a deep chain."""
        root = build_tree(tokenize(deep_markup))

        assert root.depth == NESTING_DEPTH + 1

    def test_structural_equality(self, deep_markup: str) -> None:
        """Test equal and unequal deep trees compare without error."""
        tokens = tokenize(deep_markup)

        assert build_tree(tokens) == build_tree(tokens)
        assert build_tree(tokens) != build_tree(tokenize(deep_markup.replace("x", "y")))

    def test_to_dict(self, deep_markup: str) -> None:
        """Test dictionary conversion keeps the full chain."""
        data = build_tree(tokenize(deep_markup)).to_dict()

        levels = 0
        while not data["is_text"]:
            data = data["children"][0]
            levels += 1
        assert levels == NESTING_DEPTH + 1
        assert data == {"name": "x", "is_text": True}

    def test_summary(self, deep_markup: str) -> None:
        """Test the parse summary of a deep but balanced document."""
        summary = TreeBuilder().build(tokenize(deep_markup)).summary()

        assert summary["max_depth"] == NESTING_DEPTH + 1
        assert summary["element_count"] == NESTING_DEPTH
        assert summary["is_balanced"] is True

    def test_unclosed_deep_chain(self) -> None:
        """Test a deep chain left open at end of input."""
        result = TreeBuilder().build(tokenize("<a>" * NESTING_DEPTH))

        assert len(result.open_elements) == NESTING_DEPTH + 1
        assert result.root.depth == NESTING_DEPTH
