"""Tests for codeboss.template module."""

import pytest

from codeboss.exceptions import MalformedTemplateError
from codeboss.template import (
    ChoiceNode,
    LiteralNode,
    count_variants,
    expand_template,
    parse_template,
    template_variants,
)


class TestParseTemplate:
    """Tests for parse_template function."""

    def test_plain_text_is_one_literal(self):
        """Test that text without braces parses to a single literal."""
        assert parse_template("Fix bug") == [LiteralNode("Fix bug")]

    def test_choice_between_literals(self):
        """Test parsing a simple choice."""
        nodes = parse_template("{a|b}")

        assert nodes == [ChoiceNode([[LiteralNode("a")], [LiteralNode("b")]])]

    def test_empty_alternative(self):
        """Test that an empty alternative is kept as an empty sequence."""
        nodes = parse_template("{|x}")

        assert nodes == [ChoiceNode([[], [LiteralNode("x")]])]

    def test_nested_choice(self):
        """Test that choices nest inside alternatives."""
        nodes = parse_template("{a{x|y}|b}")

        inner = ChoiceNode([[LiteralNode("x")], [LiteralNode("y")]])
        assert nodes == [ChoiceNode([[LiteralNode("a"), inner], [LiteralNode("b")]])]

    def test_escaped_characters_are_literal(self):
        """Test that escaped braces and pipes become literal text."""
        nodes = parse_template(r"\{a\|b\} \\")

        assert nodes == [LiteralNode("{a|b} \\")]

    def test_top_level_pipe_and_closing_brace_are_literal(self):
        """Test that '|' and '}' outside a choice are plain text."""
        assert parse_template("a|b}") == [LiteralNode("a|b}")]

    def test_unclosed_brace_raises(self):
        """Test that an unclosed choice is rejected."""
        with pytest.raises(MalformedTemplateError) as exc_info:
            parse_template("Fix {a|b")

        assert "position 4" in str(exc_info.value)

    def test_unclosed_nested_brace_raises(self):
        """Test that an unclosed inner choice is rejected."""
        with pytest.raises(MalformedTemplateError):
            parse_template("{a{x|y|b}")


class TestCountVariants:
    """Tests for count_variants function."""

    def test_product_of_choices(self):
        """Test that choices in sequence multiply."""
        assert template_variants("{a|b}{c|d}") == 4

    def test_empty_alternative_counts(self):
        """Test that an empty alternative is a variant of its own."""
        assert template_variants("{|x}") == 2

    def test_nested_alternatives_add(self):
        """Test that nested choices add within their alternative."""
        assert template_variants("{a{x|y}|b}") == 3

    def test_plain_text_has_one_variant(self):
        """Test that a template with no choices has one variant."""
        assert template_variants("Fix bug") == 1

    def test_empty_template_has_one_variant(self):
        """Test that the empty template expands to the empty string only."""
        assert count_variants(parse_template("")) == 1

    def test_readme_example(self):
        """Test a realistic optional-word template."""
        assert template_variants("{Fix|Fixed} {the |}bug{|.}") == 8

    def test_large_counts_are_exact(self):
        """Test that counts beyond float precision stay exact."""
        template = "{0|1|2|3|4|5|6|7|8|9}" * 20

        assert template_variants(template) == 10 ** 20


class TestExpandTemplate:
    """Tests for expand_template function."""

    def test_enumeration_order(self):
        """Test that the earliest choice varies slowest."""
        variants = list(expand_template(parse_template("{a|b}{c|d}")))

        assert variants == ["ac", "ad", "bc", "bd"]

    def test_expansion_matches_count(self):
        """Test that expansion yields exactly count_variants items."""
        nodes = parse_template("{Fix|Fixed} {the |}{bug|issue}{|.}")

        variants = list(expand_template(nodes))

        assert len(variants) == count_variants(nodes)
        assert "Fix the bug" in variants
        assert "Fixed issue." in variants

    def test_nested_expansion(self):
        """Test expansion of nested choices."""
        variants = list(expand_template(parse_template("{a{x|y}|b}")))

        assert variants == ["ax", "ay", "b"]

    def test_expansion_is_lazy(self):
        """Test that variants can be taken without expanding everything."""
        nodes = parse_template("{0|1|2|3|4|5|6|7|8|9}" * 30)

        first = next(expand_template(nodes))

        assert first == "0" * 30
