"""Commit message template compiler.

Templates describe a set of equivalent commit messages:
- ``{a|b|c}`` is a choice between alternatives
- alternatives may be empty (``{|the }`` makes a word optional)
- choices nest (``{a{x|y}|b}``)
- ``\\{``, ``\\}``, ``\\|`` and ``\\\\`` are escapes for the literal characters

Contains:
- LiteralNode, ChoiceNode: Template AST nodes
- parse_template: Parse a template string into an AST
- count_variants: Exact number of variants an AST expands to
- expand_template: Lazily yield every variant
- template_variants: Parse and count in one step
"""

from dataclasses import dataclass, field
from typing import Iterator, Union

from codeboss.exceptions import MalformedTemplateError

ESCAPABLE = "{|}\\"


@dataclass(frozen=True)
class LiteralNode:
    """Literal text copied verbatim into every variant."""

    value: str


@dataclass(frozen=True)
class ChoiceNode:
    """A choice between alternative node sequences."""

    alternatives: list[list["Node"]] = field(default_factory=list)


Node = Union[LiteralNode, ChoiceNode]


class _Parser:
    """Recursive descent parser over a template string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def parse_sequence(self, stop_chars: str) -> list[Node]:
        nodes: list[Node] = []
        literal = []

        while self.pos < len(self.text):
            ch = self.text[self.pos]

            if ch == "\\" and self.pos + 1 < len(self.text) and self.text[self.pos + 1] in ESCAPABLE:
                literal.append(self.text[self.pos + 1])
                self.pos += 2
                continue

            if ch in stop_chars:
                break

            if ch == "{":
                if literal:
                    nodes.append(LiteralNode("".join(literal)))
                    literal = []
                self.pos += 1
                nodes.append(self.parse_choice())
            else:
                literal.append(ch)
                self.pos += 1

        if literal:
            nodes.append(LiteralNode("".join(literal)))
        return nodes

    def parse_choice(self) -> ChoiceNode:
        start = self.pos - 1
        alternatives = []

        while True:
            alternatives.append(self.parse_sequence("|}"))

            if self.pos >= len(self.text):
                raise MalformedTemplateError(
                    f"Unclosed brace in template (choice opened at position {start})"
                )

            ch = self.text[self.pos]
            self.pos += 1
            if ch == "}":
                return ChoiceNode(alternatives)


def parse_template(text: str) -> list[Node]:
    """Parse a template string into a list of nodes.

    Args:
        text: The template string.

    Returns:
        The top-level node sequence.

    Raises:
        MalformedTemplateError: If a choice group is never closed.
    """
    # Outside a choice, '|' and '}' are plain text
    return _Parser(text).parse_sequence("")


def count_variants(nodes: list[Node]) -> int:
    """Count the variants a node sequence expands to.

    Choices in a sequence combine as a Cartesian product; the alternatives of
    one choice add up. An empty sequence counts as one variant (the empty
    string).
    """
    count = 1
    for node in nodes:
        if isinstance(node, ChoiceNode):
            count *= sum(count_variants(alt) for alt in node.alternatives)
    return count


def expand_template(nodes: list[Node]) -> Iterator[str]:
    """Yield every variant of a node sequence.

    Variants are produced lazily, earliest choice varying slowest.
    """
    if not nodes:
        yield ""
        return

    first, rest = nodes[0], nodes[1:]
    if isinstance(first, LiteralNode):
        for suffix in expand_template(rest):
            yield first.value + suffix
        return

    for alternative in first.alternatives:
        for prefix in expand_template(alternative):
            for suffix in expand_template(rest):
                yield prefix + suffix


def template_variants(text: str) -> int:
    """Parse a template and return its variant count."""
    return count_variants(parse_template(text))
