class NodeNotFoundError(KeyError):
    """Raised when a node is not present in the cache."""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"No cached node for key '{self.key}'"


class StorageError(Exception):
    """Raised when the node store cannot be read or written."""
