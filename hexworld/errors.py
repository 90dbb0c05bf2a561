"""Exceptions raised by the hexworld core."""


class HexWorldError(Exception):
    """Base class for hexworld errors."""


class TemplateError(HexWorldError):
    """A rule document could not be parsed or validated."""

    def __init__(self, message: str, source: str = "<document>"):
        super().__init__(f"{source}: {message}")
        self.source = source
