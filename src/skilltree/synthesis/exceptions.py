class SynthesisError(Exception):
    """The model call failed or its output could not be turned into a node."""
