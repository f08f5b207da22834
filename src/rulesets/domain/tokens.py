"""Directive tokens and the two equality policies used to deduplicate them.

A token is one atomic rule reference inside a field's rule sequence:

- :class:`TextToken` wraps a rule keyword string (``"required"``,
  ``"max:255"``, a whole ``"regex:..."`` guard) or a bare scalar the
  caller passed directly (``0``, ``1.5``, ``True``).
- :class:`OpaqueToken` wraps anything else (custom rule objects,
  callables, unsupported values). It is never decomposed or inspected.

INVARIANT: opaque tokens compare by identity of the wrapped reference,
under every policy.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

Scalar: TypeAlias = str | int | float | bool
EqualityPolicy: TypeAlias = Literal["strict", "loose"]

EQUALITY_POLICIES: tuple[str, ...] = ("strict", "loose")


@dataclass(frozen=True, eq=False)
class TextToken:
    """A rule keyword (or bare scalar) kept with its original Python type."""

    value: Scalar

    def unwrap(self) -> Scalar:
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TextToken):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))


@dataclass(frozen=True, eq=False)
class OpaqueToken:
    """A custom rule reference, compared by identity only."""

    ref: Any

    def unwrap(self) -> Any:
        return self.ref

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OpaqueToken):
            return NotImplemented
        return self.ref is other.ref

    def __hash__(self) -> int:
        return id(self.ref)


Token: TypeAlias = TextToken | OpaqueToken


def strict_key(token: Token) -> Hashable:
    """Dedup key matching on type and value (text) or identity (opaque).

    Examples:
        >>> strict_key(TextToken("0")) == strict_key(TextToken(0))
        False
    """
    if isinstance(token, TextToken):
        return ("text", type(token.value), token.value)
    return ("opaque", id(token.ref))


def loose_key(token: Token) -> Hashable:
    """Dedup key matching text tokens on their string form.

    Examples:
        >>> loose_key(TextToken("0")) == loose_key(TextToken(0))
        True
    """
    if isinstance(token, TextToken):
        return ("text", str(token.value))
    return ("opaque", id(token.ref))


_KEYS: dict[str, Callable[[Token], Hashable]] = {
    "strict": strict_key,
    "loose": loose_key,
}


def key_for(policy: EqualityPolicy) -> Callable[[Token], Hashable]:
    """Return the dedup key function for *policy*.

    Unknown policy names fall back to ``strict``.
    """
    return _KEYS.get(policy, strict_key)


def token_values(tokens: list[Token]) -> list[Any]:
    """Unwrap tokens back into the values the caller passed in."""
    return [token.unwrap() for token in tokens]


def describe_token(token: Token) -> Scalar:
    """Return a printable form of *token* for human and JSON output.

    Text tokens render as their value. Opaque tokens render as
    ``<custom:Name>`` using the callable's or the object's class name.
    """
    if isinstance(token, TextToken):
        return token.value
    ref = token.ref
    name = getattr(ref, "__qualname__", None) or type(ref).__qualname__
    return f"<custom:{name}>"
