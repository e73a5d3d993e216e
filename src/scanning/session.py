from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field


@dataclass(slots=True)
class ScanSession:
    """
    One attempt at scanning one label. Abandoning the session makes any
    recognition still in flight for it irrelevant: its results are not
    assembled.
    """

    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    _abandoned: threading.Event = field(default_factory=threading.Event, repr=False)

    def abandon(self) -> None:
        self._abandoned.set()

    @property
    def abandoned(self) -> bool:
        return self._abandoned.is_set()
