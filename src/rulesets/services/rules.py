"""RulesetService — inspect rule specs and ruleset classes.

Two operations back the CLI:

- ``normalize``: tokenize raw rule specs the way a builder would.
- ``show``: import a ruleset by ``module:attribute`` and report its
  normalized rules, messages, and attributes.

Neither method raises. Failures come back as ``ok=False`` results.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from rulesets.builder import RuleBuilder
from rulesets.contracts import Ruleset
from rulesets.domain.tokens import TextToken, Token, describe_token
from rulesets.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from rulesets.config.models import BuilderConfig

logger = logging.getLogger(__name__)

_MISSING = object()


def _describe(tokens: list[Token]) -> list[Any]:
    return [describe_token(token) for token in tokens]


def _error(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=detail),
    )


def _names_field(message_key: str, fields: Iterable[str]) -> bool:
    # field names may contain dots themselves, e.g. "items.*.name"
    return any(message_key == f or message_key.startswith(f + ".") for f in fields)


class RulesetService:
    """Builder-backed operations for the command line.

    Args:
        config: ``[builder]`` config; controls the merge equality policy
            of every builder this service creates.
    """

    def __init__(self, config: BuilderConfig | None = None) -> None:
        self._config = config

    def _builder(self) -> RuleBuilder:
        return RuleBuilder.from_config(config=self._config)

    def normalize(self, specs: Sequence[Any], *, field: str = "field") -> ServiceResult:
        """Tokenize *specs* as ``RuleBuilder().set(field, *specs)`` would."""
        builder = self._builder().set(field, *specs)
        tokens = builder.tokens(field)
        warnings: list[str] = []
        if specs and not tokens:
            warnings.append("All specs were blank; no rules produced")
        opaque = sum(1 for token in tokens if not isinstance(token, TextToken))
        return ServiceResult(
            ok=True,
            op="normalize",
            data={
                "field": field,
                "tokens": _describe(tokens),
                "count": len(tokens),
                "opaque_count": opaque,
            },
            warnings=warnings,
        )

    def show(self, target: str) -> ServiceResult:
        """Import ``module:attribute`` and report the ruleset it names."""
        module_name, sep, attr = target.partition(":")
        if not sep or not module_name or not attr:
            return _error(
                "show",
                "INVALID_TARGET",
                f"Expected 'module:attribute', got {target!r}",
                target=target,
            )

        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            logger.debug("Import of %s failed", module_name, exc_info=True)
            return _error("show", "IMPORT_FAILED", str(exc), module=module_name)

        obj: Any = module
        for part in attr.split("."):
            obj = getattr(obj, part, _MISSING)
            if obj is _MISSING:
                return _error(
                    "show",
                    "NOT_FOUND",
                    f"{module_name} has no attribute {attr!r}",
                    module=module_name,
                    attribute=attr,
                )

        try:
            ruleset = obj() if inspect.isclass(obj) else obj
            if not isinstance(ruleset, Ruleset):
                return _error(
                    "show",
                    "NOT_A_RULESET",
                    f"{target} does not provide rules(), messages(), and attributes()",
                    target=target,
                )
            builder = self._builder().merge(ruleset.rules())
            messages = dict(ruleset.messages())
            attributes = dict(ruleset.attributes())
        except Exception as exc:
            logger.debug("Ruleset %s raised", target, exc_info=True)
            return _error("show", "RULESET_FAILED", f"{type(exc).__name__}: {exc}", target=target)

        rules = {key: _describe(builder.tokens(key)) for key in builder.keys()}
        warnings = [
            f"Message key {key!r} refers to unknown field"
            for key in messages
            if not _names_field(key, rules)
        ]
        return ServiceResult(
            ok=True,
            op="show",
            data={
                "target": target,
                "rules": rules,
                "messages": messages,
                "attributes": attributes,
                "field_count": len(rules),
            },
            warnings=warnings,
            meta={"merge_equality": builder.merge_equality},
        )
