from .contracts import EventBus, TreeCopier
from .paths import PathProvider

__all__ = ["EventBus", "TreeCopier", "PathProvider"]
