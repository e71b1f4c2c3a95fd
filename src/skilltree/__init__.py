from skilltree.store.models import Node, NodeContent, PracticeItem, Reference
from skilltree.tree.builder import TreeBuilder

__all__ = ["Node", "NodeContent", "PracticeItem", "Reference", "TreeBuilder"]
