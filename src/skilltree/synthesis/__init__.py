from skilltree.synthesis.content import ContentSynthesizer
from skilltree.synthesis.exceptions import SynthesisError
from skilltree.synthesis.node import TreeSynthesizer

__all__ = ["ContentSynthesizer", "SynthesisError", "TreeSynthesizer"]
