"""rulesets — compose and normalize field validation rules."""

from __future__ import annotations

from rulesets.builder import RuleBuilder, RuleSnapshot
from rulesets.contracts import (
    BaseModelRuleset,
    BaseRuleset,
    CustomRule,
    ModelRuleset,
    Ruleset,
    RulesetPayload,
    ValidatorFactory,
)
from rulesets.domain.normalize import normalize
from rulesets.domain.tokens import OpaqueToken, TextToken, Token

__version__ = "0.1.0"

__all__ = [
    "BaseModelRuleset",
    "BaseRuleset",
    "CustomRule",
    "ModelRuleset",
    "OpaqueToken",
    "RuleBuilder",
    "RuleSnapshot",
    "Ruleset",
    "RulesetPayload",
    "TextToken",
    "Token",
    "ValidatorFactory",
    "__version__",
    "normalize",
]
