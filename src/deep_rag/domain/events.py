from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

Stage = Literal["decomposition", "retrieval", "aggregation", "complete"]


@dataclass(frozen=True)
class ProgressEvent:
    stage: Stage
    message: str
    data: Mapping[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"stage": self.stage, "message": self.message}
        if self.data is not None:
            out["data"] = dict(self.data)
        return out
