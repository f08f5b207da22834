"""Rule provider contracts — custom rules, rulesets, and the validator hand-off.

A *ruleset* groups three mappings for one validation call site:

- ``rules()``       field -> rule specs (usually built with :class:`RuleBuilder`)
- ``messages()``    ``"field.rule"`` -> custom error message
- ``attributes()``  field -> display label

Evaluation belongs to an external validation engine. This module only
packages a ruleset into a :class:`RulesetPayload` and passes it to a
caller-supplied :class:`ValidatorFactory`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, Field

from rulesets.builder import RuleBuilder
from rulesets.domain.normalize import RuleSpec, normalize
from rulesets.domain.tokens import EqualityPolicy, token_values

V = TypeVar("V")
V_co = TypeVar("V_co", covariant=True)


@runtime_checkable
class CustomRule(Protocol):
    """A custom rule object, kept opaque by the builder."""

    def passes(self, attribute: str, value: Any) -> bool: ...

    def message(self) -> str: ...


@runtime_checkable
class Ruleset(Protocol):
    """Anything that provides rules, messages, and attributes."""

    def rules(self) -> Mapping[str, RuleSpec]: ...

    def messages(self) -> Mapping[str, str]: ...

    def attributes(self) -> Mapping[str, str]: ...


class ValidatorFactory(Protocol[V_co]):
    """Builds a validator of the external engine from a ruleset payload."""

    def __call__(
        self,
        data: Mapping[str, Any],
        rules: dict[str, list[Any]],
        messages: dict[str, str],
        attributes: dict[str, str],
    ) -> V_co: ...


class RulesetPayload(BaseModel):
    """Normalized snapshot of a ruleset, ready for a validation engine.

    Attributes:
        rules: Field -> ordered rule values (opaque rules kept as-is).
        messages: ``"field.rule"`` -> custom error message.
        attributes: Field -> display label.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    rules: dict[str, list[Any]] = Field(default_factory=dict)
    messages: dict[str, str] = Field(default_factory=dict)
    attributes: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_ruleset(cls, ruleset: Ruleset) -> RulesetPayload:
        """Normalize every field of ``ruleset.rules()`` into rule lists."""
        rules = {key: token_values(normalize(spec)) for key, spec in ruleset.rules().items()}
        return cls(
            rules=rules,
            messages=dict(ruleset.messages()),
            attributes=dict(ruleset.attributes()),
        )


class BaseRuleset(ABC):
    """Base class for rulesets; subclasses implement :meth:`rules`.

    Usage::

        class UserRuleset(BaseRuleset):
            def rules(self):
                return (
                    self.builder({"email": "email|max:64"})
                    .prepend_all("required")
                    .get()
                )

            def messages(self):
                return {"email.required": "We need your email."}

    Attributes:
        merge_equality: Merge policy for builders created via :meth:`builder`.
    """

    merge_equality: ClassVar[EqualityPolicy] = "strict"

    @classmethod
    def new(cls) -> BaseRuleset:
        return cls()

    @abstractmethod
    def rules(self) -> Mapping[str, RuleSpec]:
        """Return the field -> rule spec mapping."""

    def messages(self) -> Mapping[str, str]:
        return {}

    def attributes(self) -> Mapping[str, str]:
        return {}

    def builder(self, rules: Mapping[str, RuleSpec] | None = None) -> RuleBuilder:
        """Start a :class:`RuleBuilder` seeded with *rules*."""
        return RuleBuilder(rules, merge_equality=self.merge_equality)

    def payload(self) -> RulesetPayload:
        return RulesetPayload.from_ruleset(self)

    def make_validator(self, factory: ValidatorFactory[V], data: Mapping[str, Any]) -> V:
        """Hand this ruleset and *data* to an external validator factory."""
        payload = self.payload()
        return factory(data, payload.rules, payload.messages, payload.attributes)


@runtime_checkable
class ModelRuleset(Ruleset, Protocol):
    """A ruleset bound to one model instance."""

    def model(self) -> Any: ...


class BaseModelRuleset(BaseRuleset):
    """Base class for rulesets that validate against a bound model.

    Subclasses set :attr:`model_class`. Constructing without a model
    instantiates ``model_class()``; :meth:`for_model` binds an existing one.

    Usage::

        class ProfileRuleset(BaseModelRuleset):
            model_class = Profile

            def rules(self):
                return {"handle": ["required", f"max:{self.model().max_handle}"]}

        ProfileRuleset.for_model(profile).payload()

    Raises:
        NotImplementedError: ``model_class`` is not set on the subclass.
        TypeError: ``model_class`` is not a class, or the given model is
            not an instance of it.
    """

    model_class: ClassVar[type[Any] | None] = None

    def __init__(self, model: Any = None) -> None:
        self._model: Any = None
        if model is None:
            model = self._make_model()
        self._bind(model)

    @classmethod
    def for_model(cls, model: Any) -> BaseModelRuleset:
        if model is None:
            raise TypeError(f"{cls.__name__}.for_model() needs a model instance, got None")
        return cls(model)

    @classmethod
    def _model_class(cls) -> type[Any]:
        model_class = cls.model_class
        if model_class is None:
            raise NotImplementedError(f"Set model_class on {cls.__name__}")
        if not isinstance(model_class, type):
            raise TypeError(f"{cls.__name__}.model_class must be a class, got {model_class!r}")
        return model_class

    def _make_model(self) -> Any:
        return self._model_class()()

    def _bind(self, model: Any) -> None:
        model_class = self._model_class()
        if not isinstance(model, model_class):
            raise TypeError(
                f"Model instance must be an instance of {model_class.__qualname__}, "
                f"got {type(model).__qualname__}"
            )
        self._model = model

    def model(self) -> Any:
        """Return the bound model instance."""
        model = getattr(self, "_model", None)
        if model is None:
            raise RuntimeError(
                f"{type(self).__name__} must be instantiated with a model before calling model()"
            )
        return model
