"""Exception classes for arroyo.

Ordinary "no match" results are never errors: rules return None and the
pipeline moves on. These exceptions cover registry misuse and rule contract
violations, which the pipeline only lets escape in strict mode.
"""

from __future__ import annotations


class ArroyoError(Exception):
    """Base exception for all arroyo errors."""

    pass


class RegistryError(ArroyoError, ValueError):
    """Invalid extension registration.

    Raised by the registry builder for duplicate names or malformed
    extensions. Also a ValueError so callers validating input can catch it
    generically.
    """

    pass


class ExtensionError(ArroyoError):
    """An extension rule broke the tokenizer contract.

    Raised (in strict mode only) when a rule returns a token whose raw text is
    empty or is not a prefix of the remaining input, when a rule raises, or
    when nesting exceeds the configured depth.
    """

    def __init__(self, extension_name: str, message: str, offset: int | None = None) -> None:
        """Initialize extension error.

        Args:
            extension_name: Name of the offending rule
            message: Description of the violation
            offset: Length of the remaining input when it happened (optional)
        """
        self.extension_name = extension_name
        self.message = message
        self.offset = offset

        location = f" ({offset} chars remaining)" if offset is not None else ""
        super().__init__(f"Extension '{extension_name}'{location}: {message}")
