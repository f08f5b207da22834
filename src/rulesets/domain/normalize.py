"""Rule tokenizer — flatten heterogeneous rule specs into tokens.

A rule spec is any of:

- a blank value (``None``, whitespace-only string, empty list/tuple/dict)
- a pipe-delimited string (``"required|string|max:255"``)
- a ``"regex:..."`` string, which is never split on ``|``
- a bare scalar (``0``, ``1.5``, ``True``)
- a nested list/tuple of specs, or a mapping whose values are specs
- an already-built token
- anything else, kept as an opaque custom rule reference

Pure functions, no infrastructure dependencies.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, TypeAlias

from rulesets.domain.merge import unique_strict
from rulesets.domain.tokens import OpaqueToken, TextToken, Token

RuleSpec: TypeAlias = Any

REGEX_PREFIX = "regex:"
RULE_SEPARATOR = "|"


def is_blank(spec: RuleSpec) -> bool:
    """Whether *spec* contributes no tokens at all.

    Examples:
        >>> is_blank("   ")
        True
        >>> is_blank(0)
        False
    """
    if spec is None:
        return True
    if isinstance(spec, str):
        return not spec.strip()
    if isinstance(spec, (list, tuple, Mapping)):
        return len(spec) == 0
    return False


def split_rule_string(rule: str) -> list[TextToken]:
    """Split a pipe-delimited rule string into text tokens.

    Strings starting with ``regex:`` are returned whole so that regex
    alternation is not mistaken for the rule separator.

    Examples:
        >>> [t.value for t in split_rule_string(" required || max:5 ")]
        ['required', 'max:5']
        >>> [t.value for t in split_rule_string("regex:/^a|b$/")]
        ['regex:/^a|b$/']
    """
    if rule.startswith(REGEX_PREFIX):
        return [TextToken(rule)]
    pieces = (piece.strip() for piece in rule.split(RULE_SEPARATOR))
    return [TextToken(piece) for piece in pieces if piece]


def _flatten(spec: RuleSpec) -> Iterator[Token]:
    # explicit stack, so nesting depth is not bound by the recursion limit
    stack: list[RuleSpec] = [spec]
    while stack:
        item = stack.pop()
        if isinstance(item, (TextToken, OpaqueToken)):
            yield item
        elif is_blank(item):
            continue
        elif isinstance(item, str):
            yield from split_rule_string(item)
        elif isinstance(item, (list, tuple)):
            stack.extend(reversed(item))
        elif isinstance(item, Mapping):
            stack.extend(reversed(list(item.values())))
        elif isinstance(item, (int, float)):
            # bool is an int subclass and lands here too
            yield TextToken(item)
        else:
            yield OpaqueToken(item)


def normalize(*specs: RuleSpec) -> list[Token]:
    """Flatten *specs* depth-first into a strictly deduplicated token list.

    Examples:
        >>> [t.value for t in normalize("required|string", ["max:255"])]
        ['required', 'string', 'max:255']
        >>> normalize()
        []
    """
    tokens: list[Token] = []
    for spec in specs:
        tokens.extend(_flatten(spec))
    return unique_strict(tokens)


def flatten_keys(*keys: Any) -> list[str]:
    """Flatten field names given individually or as nested lists.

    Blank entries are skipped; non-string keys are coerced with ``str``.
    """
    result: list[str] = []
    stack: list[Any] = list(reversed(keys))
    while stack:
        key = stack.pop()
        if isinstance(key, (list, tuple, set, frozenset)):
            stack.extend(reversed(list(key)))
        elif key is None or (isinstance(key, str) and not key):
            continue
        else:
            result.append(key if isinstance(key, str) else str(key))
    return result
