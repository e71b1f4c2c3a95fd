from skilltree.tree.builder import TreeBuilder

__all__ = ["TreeBuilder"]
