"""skillsync: collect ``.claude/skills`` folders from local projects into one place."""

__version__ = "0.1.0"
