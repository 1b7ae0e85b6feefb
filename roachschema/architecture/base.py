"""Base model for introspection results and configuration with YAML support."""

from __future__ import annotations

from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict


class ConfigBaseModel(BaseModel):
    """Base model for every value object produced by an introspection pass.

    Snapshots are handed to an external code generator, so each model can be
    rendered to a dictionary, a YAML document or JSON (``model_dump_json``).
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        use_enum_values=True,
        validate_assignment=True,
    )

    def to_yaml_str(self, **kwargs: Any) -> str:
        """Convert instance to a YAML string."""
        return yaml.safe_dump(
            self.model_dump(by_alias=True, exclude_none=True),
            default_flow_style=False,
            sort_keys=False,
            **kwargs,
        )

    def to_dict(self, **kwargs: Any) -> dict[str, Any]:
        """Convert instance to a dictionary, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True, **kwargs)
