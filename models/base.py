from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


Tier = Literal["high", "medium", "low"]
SearchDepth = Literal["shallow", "medium", "deep"]


class WireModel(BaseModel):
    """Shared config: camelCase on the wire, snake_case in Python, either accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
