from .scanner import iter_marker_sources
from .sync import SkillSynchronizer, owning_project, synchronize

__all__ = ["iter_marker_sources", "SkillSynchronizer", "owning_project", "synchronize"]
