from skilltree.store.cache import (
    FileNodeCache,
    MemoryNodeCache,
    NodeCache,
    get_cache,
)
from skilltree.store.exceptions import NodeNotFoundError, StorageError
from skilltree.store.keys import normalize_topic
from skilltree.store.models import Node, NodeContent, PracticeItem, Reference

__all__ = [
    "FileNodeCache",
    "MemoryNodeCache",
    "Node",
    "NodeCache",
    "NodeContent",
    "NodeNotFoundError",
    "PracticeItem",
    "Reference",
    "StorageError",
    "get_cache",
    "normalize_topic",
]
