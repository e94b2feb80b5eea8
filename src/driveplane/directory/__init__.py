"""Directory tree collaborator: file and folder records feeding the index."""

from driveplane.directory.snapshot import load_snapshot
from driveplane.directory.tree import DirectoryTree, FileRecord, FolderRecord

__all__ = [
    "DirectoryTree",
    "FileRecord",
    "FolderRecord",
    "load_snapshot",
]
