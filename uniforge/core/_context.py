from __future__ import annotations

import uuid
from typing import Any

from pydantic import ConfigDict, Field

from .data_model import DataModel


class Context(DataModel):
    """Per-invocation context.

    Bound to exactly one configuration. Frozen, so a replaced
    configuration always means a new context.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    config: Any = None
    data: dict[str, Any] | None = None

    def get(self, key: str, default: Any = None) -> Any:
        if self.data is None:
            return default
        return self.data.get(key, default)
