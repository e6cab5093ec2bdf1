"""
Exceptions raised by the bracket builder and resolution engine.
"""


class BracketError(Exception):
    """Base class for structural failures of the bracket."""


class BlueprintError(BracketError):
    """The bracket topology references missing nodes or has inconsistent links."""


class ResolutionError(BracketError):
    """Propagation did not reach a fixed point within the pass bound."""
