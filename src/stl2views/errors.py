"""Exceptions raised while turning STL bytes into projection views."""


class STLViewsError(Exception):
    """Base class for every error raised by stl2views."""


class ParseError(STLViewsError, ValueError):
    """The buffer could not be decoded into a valid mesh."""


class FormatError(ParseError):
    """Unrecognised structure: no vertex data, or a binary file that is too small."""


class TruncationError(ParseError):
    """The binary triangle count promises more bytes than the buffer holds."""


class DegenerateMeshError(ParseError):
    """Every triangle was degenerate, leaving no faces."""


class ZeroSizeError(ParseError):
    """All vertices coincide, so the mesh cannot be normalised."""


class ProcessingError(STLViewsError):
    """Single failure reported by the pipeline entry point."""
