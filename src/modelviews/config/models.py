"""Config sections with code-baked defaults.

The config file is sparse: it only lists what differs from these models.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from modelviews.domain.schema import DEFAULT_CORE_MODULE

DEFAULT_HEADER = "# This file is generated by modelviews. Do not edit."


class CodegenConfig(BaseModel):
    """[codegen] — how ``modelviews generate`` writes source.

    Attributes:
        core_module: Dotted module the generated code imports ``Patch`` and
            the view bases from (for projects that re-export or vendor
            modelviews).
        header: First line of every generated file; ``""`` for none.
    """

    model_config = {"frozen": True}

    core_module: str = DEFAULT_CORE_MODULE
    header: str = DEFAULT_HEADER

    @field_validator("core_module")
    @classmethod
    def _dotted_name(cls, value: str) -> str:
        if not all(part.isidentifier() for part in value.split(".")):
            raise ValueError(f"not a dotted module name: {value!r}")
        return value


class DeriveConfig(BaseModel):
    """[derive] — options for models declared on the fly by the CLI."""

    model_config = {"frozen": True}

    wire: bool = False
