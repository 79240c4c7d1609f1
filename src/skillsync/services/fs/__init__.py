from .safe_io import canonical, fold_name, is_within, same_path, ensure_dir, subdir_names, list_subdirs, copy_tree_staged
from .lock import DestinationLock

__all__ = [
    "canonical",
    "fold_name",
    "is_within",
    "same_path",
    "ensure_dir",
    "subdir_names",
    "list_subdirs",
    "copy_tree_staged",
    "DestinationLock",
]
