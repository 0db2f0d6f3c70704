from __future__ import annotations

from collections.abc import Callable

from deep_rag.domain.events import ProgressEvent

ProgressSink = Callable[[ProgressEvent], None]
