"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, rulesets.toml only contains
overrides. No config file is needed at all for default behavior.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- rulesets.toml sections ---


class BuilderConfig(BaseModel):
    """[builder] section.

    ``merge_equality`` picks the dedup policy used by ``add``, ``merge``,
    and ``prepend`` when combining with an existing rule sequence.
    ``strict`` matches type and value; ``loose`` matches the string form,
    so ``0`` and ``"0"`` collide.
    """

    model_config = {"frozen": True}

    merge_equality: Literal["strict", "loose"] = "strict"


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    table_width: int = Field(default=120, ge=40)


class RulesetsConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    builder: BuilderConfig = Field(default_factory=BuilderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
