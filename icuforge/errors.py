"""Error definitions for the icuforge message toolkit."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class ErrorCategory(Enum):
    """Categorises handled errors for reporting."""

    PARSE = auto()
    TRANSLATION = auto()


class IcuforgeError(Exception):
    """Base exception for all custom errors."""


class ParseError(IcuforgeError):
    """Raised when a message is not valid ICU MessageFormat."""

    def __init__(
        self,
        message: str,
        source: str,
        position: Optional[int] = None,
    ) -> None:
        self.cause = message
        self.source = source
        self.position = position
        if position is None:
            super().__init__(message)
        else:
            super().__init__(f"{message} at position {position}")


class ConfigurationError(IcuforgeError):
    """Raised when settings are missing or invalid."""


class TranslationInputError(IcuforgeError):
    """Raised when supplied translation data cannot be understood."""


@dataclass
class ErrorRecord:
    """Stores context for a handled error."""

    category: ErrorCategory
    message: str
    details: Optional[str] = None
