"""Order-preserving dedup, union, and prepend over token sequences.

Pure functions over lists of tokens. The equality policy is chosen by the
caller: normalization always uses ``strict``; the builder passes its own
configured policy when combining with an existing sequence.
"""

from __future__ import annotations

from collections.abc import Iterable

from rulesets.domain.tokens import EqualityPolicy, Token, key_for


def unique(tokens: Iterable[Token], *, equality: EqualityPolicy = "strict") -> list[Token]:
    """Keep the first occurrence of each token, in first-seen order."""
    key = key_for(equality)
    seen: set[object] = set()
    result: list[Token] = []
    for token in tokens:
        k = key(token)
        if k in seen:
            continue
        seen.add(k)
        result.append(token)
    return result


def unique_strict(tokens: Iterable[Token]) -> list[Token]:
    """Strict dedup: type + value for text tokens, identity for opaque ones."""
    return unique(tokens, equality="strict")


def union(
    existing: list[Token],
    new: list[Token],
    *,
    equality: EqualityPolicy = "strict",
) -> list[Token]:
    """Append the tokens of *new* that are not already present.

    Under ``strict``, *existing* is returned in its original order and is
    never deduplicated against itself. Under ``loose`` the whole result is
    deduplicated, so loosely equal tokens already in *existing* collapse
    to their first occurrence as well.
    """
    if equality == "loose":
        return unique([*existing, *new], equality="loose")
    key = key_for(equality)
    seen = {key(token) for token in existing}
    result = list(existing)
    for token in new:
        k = key(token)
        if k in seen:
            continue
        seen.add(k)
        result.append(token)
    return result


def prepend(
    existing: list[Token],
    new: list[Token],
    *,
    equality: EqualityPolicy = "strict",
) -> list[Token]:
    """Move *new* to the front, dropping its matches from *existing*.

    Examples:
        existing ``[required, string]`` + new ``[required, nullable]``
        gives ``[required, nullable, string]``.
    """
    key = key_for(equality)
    head = unique_strict(new)
    head_keys = {key(token) for token in head}
    tail = [token for token in existing if key(token) not in head_keys]
    return unique([*head, *tail], equality=equality)
