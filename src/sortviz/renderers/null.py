from __future__ import annotations

from typing import Sequence

from sortviz.core.engine.router import EventHandler


class NullRenderer:
    """
    Renderer that subscribes to nothing. Lets a session run headless.
    """

    def subscriptions(self) -> Sequence[tuple[str, EventHandler]]:
        return []
