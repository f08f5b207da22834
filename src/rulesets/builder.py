"""RuleBuilder — fluent composition of per-field rule sequences.

Example::

    rules = (
        RuleBuilder.new({"email": "required|string|email"})
        .add("email", "max:255")
        .prepend("email", "nullable")
        .get()
    )
    # {"email": ["nullable", "required", "string", "email", "max:255"]}

INVARIANT: no builder operation raises for any rule spec shape. Blank
specs contribute nothing; unsupported values become opaque tokens.

The builder is a single-owner mutable object. It carries no locking.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from rulesets.domain.merge import prepend as prepend_tokens
from rulesets.domain.merge import union
from rulesets.domain.normalize import RuleSpec, flatten_keys, normalize
from rulesets.domain.tokens import EQUALITY_POLICIES, EqualityPolicy, Token, token_values

if TYPE_CHECKING:
    from rulesets.config.models import BuilderConfig

logger = logging.getLogger(__name__)


class RuleSnapshot(Mapping[str, tuple[Any, ...]]):
    """Read-only, ordered view of a builder's rules at one point in time.

    Values are tuples of the caller's original rule values; opaque rules
    are returned as the same objects that were passed in.
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Mapping[str, list[Any]]) -> None:
        self._rules: dict[str, tuple[Any, ...]] = {k: tuple(v) for k, v in rules.items()}

    def __getitem__(self, key: str) -> tuple[Any, ...]:
        return self._rules[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleSnapshot({self._rules!r})"

    def fields(self) -> list[str]:
        return list(self._rules)

    def to_dict(self) -> dict[str, list[Any]]:
        """Return a plain, independently mutable ``dict`` of lists."""
        return {k: list(v) for k, v in self._rules.items()}


class RuleBuilder:
    """Accumulates an ordered, deduplicated rule list per field name.

    Every mutating method returns the builder itself so calls chain.

    Attributes:
        merge_equality: Dedup policy used when new tokens are combined
            with a field's existing tokens (``add``, ``merge``,
            ``prepend``). Fresh normalization is always strict.
    """

    def __init__(
        self,
        rules: Mapping[str, RuleSpec] | None = None,
        *,
        merge_equality: EqualityPolicy = "strict",
    ) -> None:
        if merge_equality not in EQUALITY_POLICIES:
            logger.warning("Unknown merge equality %r, using strict", merge_equality)
            merge_equality = "strict"
        self.merge_equality: EqualityPolicy = merge_equality
        self._rules: dict[str, list[Token]] = {}
        for key, spec in (rules or {}).items():
            self._rules[key] = normalize(spec)

    @classmethod
    def new(cls, rules: Mapping[str, RuleSpec] | None = None, **kwargs: Any) -> RuleBuilder:
        return cls(rules, **kwargs)

    @classmethod
    def from_config(
        cls,
        rules: Mapping[str, RuleSpec] | None = None,
        config: BuilderConfig | None = None,
    ) -> RuleBuilder:
        """Build with the ``[builder]`` section of ``rulesets.toml``."""
        if config is None:
            return cls(rules)
        return cls(rules, merge_equality=config.merge_equality)

    # --- Mutations ---

    def clear(self) -> RuleBuilder:
        self._rules = {}
        return self

    def set(self, key: str, *specs: RuleSpec) -> RuleBuilder:
        """Replace the rules of *key* entirely."""
        self._rules[key] = normalize(*specs)
        return self

    def add(self, key: str, *specs: RuleSpec) -> RuleBuilder:
        """Append rules to *key*, skipping ones it already has."""
        existing = self._rules.get(key, [])
        self._rules[key] = union(existing, normalize(*specs), equality=self.merge_equality)
        return self

    def merge(self, rules: Mapping[str, RuleSpec]) -> RuleBuilder:
        """``add`` every field of *rules*; unknown fields are created."""
        for key, spec in rules.items():
            self.add(key, spec)
        return self

    def remove(self, *keys: Any) -> RuleBuilder:
        """Delete fields. Keys may be nested lists; missing keys are ignored."""
        missing: list[str] = []
        for key in flatten_keys(*keys):
            if self._rules.pop(key, None) is None:
                missing.append(key)
        if missing:
            logger.debug("remove() ignored missing fields: %s", ", ".join(missing))
        return self

    def prepend(self, key: str, *specs: RuleSpec) -> RuleBuilder:
        """Put rules at the front of *key*, exactly once."""
        existing = self._rules.get(key, [])
        self._rules[key] = prepend_tokens(
            existing, normalize(*specs), equality=self.merge_equality
        )
        return self

    def prepend_all(self, spec: RuleSpec, *exclude: Any) -> RuleBuilder:
        """``prepend`` *spec* to every field except those in *exclude*."""
        skipped = set(flatten_keys(*exclude))
        for key in list(self._rules):
            if key not in skipped:
                self.prepend(key, spec)
        return self

    def when(self, condition: Any, callback: Callable[[RuleBuilder], Any]) -> RuleBuilder:
        """Call ``callback(self)`` only if *condition* is truthy."""
        if condition:
            callback(self)
        return self

    # --- Reads ---

    def get(self) -> dict[str, list[Any]]:
        """Return a fresh ``{field: [rule, ...]}`` dict of the current rules."""
        return {key: token_values(tokens) for key, tokens in self._rules.items()}

    def collect(self) -> RuleSnapshot:
        """Return an immutable :class:`RuleSnapshot` of the current rules."""
        return RuleSnapshot(self.get())

    def tokens(self, key: str) -> list[Token]:
        """Return a copy of the raw token list for *key* (empty if absent)."""
        return list(self._rules.get(key, []))

    def has(self, key: str) -> bool:
        return key in self._rules

    def keys(self) -> list[str]:
        return list(self._rules)

    def __contains__(self, key: object) -> bool:
        return key in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleBuilder({self.get()!r}, merge_equality={self.merge_equality!r})"
