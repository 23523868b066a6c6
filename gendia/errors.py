"""Error taxonomy shared by the parser, resolver and renderers."""
from __future__ import annotations

from typing import Optional


class GendiaError(ValueError):
    """Base class. Carries the offending directive text when there is one."""

    def __init__(self, message: str, directive: Optional[str] = None, lineno: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.directive = directive
        self.lineno = lineno

    def __str__(self) -> str:
        return self.message


class MalformedDirective(GendiaError):
    pass


class UnknownAnchor(GendiaError):
    pass


class InvalidDirection(GendiaError):
    pass


class DuplicateNode(GendiaError):
    pass


class MissingCenter(GendiaError):
    pass


class OptionsError(GendiaError):
    pass
