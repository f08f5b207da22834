"""Tests for RuleBuilder — fluent composition of field rules."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from rulesets.builder import RuleBuilder, RuleSnapshot
from rulesets.config.models import BuilderConfig
from rulesets.domain.tokens import TextToken
from tests.conftest import PassingRule


class TestConstruction:
    def test_empty(self) -> None:
        assert RuleBuilder().get() == {}

    def test_seed_values_normalized(self) -> None:
        rules = RuleBuilder.new({"email": "required|email", "age": ["int", "min:12"]}).get()
        assert rules == {"email": ["required", "email"], "age": ["int", "min:12"]}

    def test_seed_blank_value_gives_empty_field(self) -> None:
        assert RuleBuilder({"notes": None}).get() == {"notes": []}

    def test_unknown_policy_falls_back(self) -> None:
        builder = RuleBuilder(merge_equality="fuzzy")  # type: ignore[arg-type]
        assert builder.merge_equality == "strict"

    def test_from_config(self) -> None:
        builder = RuleBuilder.from_config({"a": "x"}, BuilderConfig(merge_equality="loose"))
        assert builder.merge_equality == "loose"
        assert builder.get() == {"a": ["x"]}

    def test_from_config_none(self) -> None:
        assert RuleBuilder.from_config().merge_equality == "strict"


class TestSetAndAdd:
    def test_set_overwrites_while_add_appends(self) -> None:
        rules = RuleBuilder().set("email", "required|email").add("email", "max:191").get()
        assert rules["email"] == ["required", "email", "max:191"]

    def test_set_replaces(self) -> None:
        rules = RuleBuilder({"x": "a|b"}).set("x", "c").get()
        assert rules["x"] == ["c"]

    def test_set_keeps_string_and_int_distinct(self) -> None:
        rules = RuleBuilder.new().set("f", ["0", 0, "in:0,1"]).get()
        assert rules["f"] == ["0", 0, "in:0,1"]
        assert [type(v) for v in rules["f"]] == [str, int, str]

    def test_add_creates_field(self) -> None:
        rules = RuleBuilder().add("name", "string", "min:4|max:32", ["not_in:hello,world"]).get()
        assert rules["name"] == ["string", "min:4", "max:32", "not_in:hello,world"]

    def test_add_skips_duplicates(self) -> None:
        rules = RuleBuilder({"x": "a|b"}).add("x", "b|c").get()
        assert rules["x"] == ["a", "b", "c"]

    def test_add_strict_keeps_int_after_string(self) -> None:
        rules = RuleBuilder({"f": "0"}).add("f", 0).get()
        assert rules["f"] == ["0", 0]

    def test_add_loose_skips_int_after_string(self) -> None:
        rules = RuleBuilder({"f": "0"}, merge_equality="loose").add("f", 0).get()
        assert rules["f"] == ["0"]

    def test_add_loose_collapses_existing_variants(self) -> None:
        builder = RuleBuilder(merge_equality="loose").set("f", ["in:0,1", "0", 0])
        assert builder.get()["f"] == ["in:0,1", "0", 0]
        assert builder.add("f", "string").get()["f"] == ["in:0,1", "0", "string"]

    def test_variadic_and_single_list_agree(self) -> None:
        spec = ["required|string", ["email", ["max:255"]], "nullable|email", ["string"]]
        a = RuleBuilder().set("f", spec).get()["f"]
        b = RuleBuilder().set("f", *spec).get()["f"]
        assert a == b

    def test_blank_add_is_noop(self) -> None:
        rules = RuleBuilder({"x": "a"}).add("x", None, "", []).get()
        assert rules["x"] == ["a"]


class TestMerge:
    def test_dedupes_into_existing(self) -> None:
        rules = RuleBuilder({"email": "required|email"}).merge({"email": ["email", "max:64"]}).get()
        assert rules["email"] == ["required", "email", "max:64"]

    def test_adds_new_keys(self) -> None:
        rules = (
            RuleBuilder({"name": "required|string"})
            .merge({"name": "max:50", "email": "nullable|email"})
            .get()
        )
        assert rules == {
            "name": ["required", "string", "max:50"],
            "email": ["nullable", "email"],
        }

    def test_merge_then_remove(self) -> None:
        rules = (
            RuleBuilder()
            .set("name", "required|string")
            .merge({"name": ["max:50"], "email": "nullable|email"})
            .remove("name")
            .get()
        )
        assert rules == {"email": ["nullable", "email"]}


class TestRemoveAndClear:
    def test_removes_keys(self) -> None:
        rules = RuleBuilder({"a": "string", "b": "integer", "c": "boolean"}).remove("b", "c").get()
        assert rules == {"a": ["string"]}

    def test_nested_key_lists(self) -> None:
        rules = RuleBuilder({"a": "x", "b": "x", "c": "x"}).remove(["a", ["b"]]).get()
        assert list(rules) == ["c"]

    def test_deeply_nested_keys(self) -> None:
        keys: list[object] = ["a"]
        for _ in range(5000):
            keys = [keys]
        rules = RuleBuilder({"a": "x", "b": "x"}).remove(keys).get()
        assert rules == {"b": ["x"]}

    def test_deeply_nested_spec(self) -> None:
        spec: list[object] = ["required"]
        for _ in range(5000):
            spec = [spec]
        builder = RuleBuilder().set("a", spec).add("a", spec).prepend("a", spec)
        assert builder.get() == {"a": ["required"]}

    def test_missing_key_is_noop(self) -> None:
        rules = RuleBuilder({"x": "int"}).remove("nope").get()
        assert rules == {"x": ["int"]}

    def test_missing_key_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="rulesets.builder"):
            RuleBuilder({"x": "int"}).remove("nope", "x")
        assert "nope" in caplog.text

    def test_clear_then_set(self) -> None:
        rules = RuleBuilder({"email": "required|email"}).clear().set("username", "required").get()
        assert rules == {"username": ["required"]}


class TestPrepend:
    def test_add_and_prepend(self) -> None:
        rules = (
            RuleBuilder.new({"email": "required|string|email"})
            .add("email", "max:255")
            .prepend("email", "nullable")
            .get()
        )
        assert rules["email"] == ["nullable", "required", "string", "email", "max:255"]

    def test_flat_and_deduped_from_tail(self) -> None:
        rules = RuleBuilder({"x": ["required", "string"]}).prepend("x", ["required", "nullable"])
        assert rules.get()["x"] == ["required", "nullable", "string"]

    def test_prepend_creates_field(self) -> None:
        assert RuleBuilder().prepend("x", "required").get() == {"x": ["required"]}

    def test_prepend_custom_rule(self) -> None:
        rule = PassingRule()
        rules = RuleBuilder({"x": ["string", rule]}).prepend("x", rule).get()
        assert rules["x"][0] is rule
        assert rules["x"][1:] == ["string"]


class TestPrependAll:
    def test_with_exclusions(self) -> None:
        rules = (
            RuleBuilder({"name": ["string"], "email": ["email"]})
            .prepend_all("required", ["email"])
            .get()
        )
        assert rules == {"name": ["required", "string"], "email": ["email"]}

    def test_without_exclusions(self) -> None:
        rules = RuleBuilder({"a": "x", "b": "required|y"}).prepend_all("required").get()
        assert rules == {"a": ["required", "x"], "b": ["required", "y"]}

    def test_variadic_exclusions(self) -> None:
        rules = RuleBuilder({"a": "x", "b": "y", "c": "z"}).prepend_all("sometimes", "a", "b").get()
        assert rules == {"a": ["x"], "b": ["y"], "c": ["sometimes", "z"]}

    def test_fluent_composition(self) -> None:
        rules = (
            RuleBuilder(
                {
                    "email": "email|max:64",
                    "profession": "string",
                    "age": "int|min:12",
                    "weight": "int",
                }
            )
            .add("name", "string", "min:4|max:32", ["not_in:hello,world"])
            .remove("age", "weight")
            .prepend_all("required")
            .prepend("profession", "sometimes")
            .get()
        )
        assert "name" in rules
        assert rules["email"][0] == "required"
        assert rules["profession"] == ["sometimes", "required", "string"]
        assert "age" not in rules
        assert "weight" not in rules


class TestWhen:
    def test_true_invokes_once_with_builder(self) -> None:
        builder = RuleBuilder()
        callback = MagicMock()
        result = builder.when(True, callback)
        callback.assert_called_once_with(builder)
        assert result is builder

    def test_false_never_invokes(self) -> None:
        builder = RuleBuilder()
        callback = MagicMock()
        assert builder.when(False, callback) is builder
        callback.assert_not_called()

    def test_callback_mutates(self) -> None:
        on = RuleBuilder().when(True, lambda b: b.set("x", "required")).get()
        off = RuleBuilder().when(False, lambda b: b.set("x", "required")).get()
        assert "x" in on
        assert "x" not in off


class TestReads:
    def test_get_is_a_snapshot(self) -> None:
        builder = RuleBuilder({"x": "a"})
        snapshot = builder.get()
        snapshot["x"].append("b")
        snapshot["y"] = ["c"]
        assert builder.get() == {"x": ["a"]}

    def test_get_returns_original_objects(self) -> None:
        rule = PassingRule()
        assert RuleBuilder({"x": rule}).get()["x"][0] is rule

    def test_collect(self) -> None:
        collection = RuleBuilder({"title": "required|string"}).collect()
        assert isinstance(collection, RuleSnapshot)
        assert collection["title"] == ("required", "string")
        assert collection.get("title") == ("required", "string")
        assert collection.fields() == ["title"]
        assert collection.to_dict() == {"title": ["required", "string"]}

    def test_collect_is_immutable(self) -> None:
        collection = RuleBuilder({"title": "required"}).collect()
        with pytest.raises(TypeError):
            collection["title"] = ("x",)  # type: ignore[index]

    def test_collect_detached_from_builder(self) -> None:
        builder = RuleBuilder({"a": "x"})
        collection = builder.collect()
        builder.set("a", "y").set("b", "z")
        assert dict(collection) == {"a": ("x",)}

    def test_preserves_field_order(self) -> None:
        builder = RuleBuilder({"b": "x"}).set("a", "y").add("c", "z")
        assert builder.keys() == ["b", "a", "c"]
        assert list(builder.collect()) == ["b", "a", "c"]

    def test_membership_helpers(self) -> None:
        builder = RuleBuilder({"a": "x"})
        assert builder.has("a")
        assert "a" in builder
        assert "z" not in builder
        assert len(builder) == 1

    def test_tokens_copy(self) -> None:
        builder = RuleBuilder({"a": "x|y"})
        tokens = builder.tokens("a")
        assert tokens == [TextToken("x"), TextToken("y")]
        tokens.clear()
        assert builder.tokens("a") == [TextToken("x"), TextToken("y")]
        assert builder.tokens("missing") == []
