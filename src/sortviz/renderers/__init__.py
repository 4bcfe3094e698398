from __future__ import annotations

from sortviz.renderers.log import LogRenderer
from sortviz.renderers.mirror import MirrorRenderer
from sortviz.renderers.null import NullRenderer

__all__ = ["LogRenderer", "MirrorRenderer", "NullRenderer"]
