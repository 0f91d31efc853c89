from appforge.store.builds import BuildStore, FileBuildStore, InMemoryBuildStore

__all__ = ["BuildStore", "FileBuildStore", "InMemoryBuildStore"]
