from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import ChangeType


@dataclass(frozen=True)
class ChangeEvent:
    """Message pushed to observers: a ``type`` plus the changed entity."""

    type: ChangeType
    data: Optional[Any] = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"type": self.type.value}
        if self.data is not None:
            out["data"] = self.data
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)
