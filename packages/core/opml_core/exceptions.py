"""
OPML Manager exceptions.

Feed validation never raises these; they cover reading and parsing
subscription lists.
"""


class OPMLError(Exception):
    """Base class for OPML Manager errors."""


class OPMLParseError(OPMLError, ValueError):
    """Raised when an OPML document cannot be parsed."""


class MissingBodyError(OPMLParseError):
    """Raised when an OPML document has no body element."""

    def __init__(self) -> None:
        super().__init__("No body tag found in OPML")


class CategoryNestingTooDeepError(OPMLParseError):
    """Raised when categories are nested beyond the supported depth."""

    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        super().__init__(f"Category nesting too deep: maximum depth is {max_depth} levels")
