"""Exception hierarchy for pymppt.

Every error raised by the scaling engine, the record decoders, the field
resolver and the transports inherits from :class:`MpptError`, so callers can
use a single ``except MpptError`` at the command boundary.
"""

from __future__ import annotations


class MpptError(Exception):
    """Base exception for all pymppt errors."""

    pass


class InsufficientDataError(MpptError):
    """Register array is shorter than the operation requires."""

    def __init__(self, required: int, actual: int, what: str = "register block") -> None:
        """Initialize with the expected and received lengths.

        Args:
            required: Minimum number of registers needed
            actual: Number of registers actually supplied
            what: Name of the block being decoded (for the message)
        """
        self.required = required
        self.actual = actual
        super().__init__(f"{what} needs at least {required} registers, got {actual}")


class UnknownFieldError(MpptError, KeyError):
    """A field name has no entry in the register table.

    Also a ``KeyError`` so decoded records behave like ordinary mappings.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown field '{name}'")

    def __str__(self) -> str:
        return str(self.args[0])


class EncodingOverflowError(MpptError):
    """Encoding a value produced a raw value outside the 16-bit range.

    Raised before any register write is attempted.
    """

    def __init__(self, kind: str, value: float, raw: int | None = None) -> None:
        """Initialize with the offending value.

        Args:
            kind: Quantity kind that was encoding the value
            value: Physical value requested by the caller
            raw: Truncated raw value, or None when the value was not finite
        """
        self.kind = kind
        self.value = value
        self.raw = raw
        detail = f"raw {raw}" if raw is not None else "not a finite number"
        super().__init__(f"{kind} value {value} does not fit in a 16-bit register ({detail})")


__all__ = [
    "EncodingOverflowError",
    "InsufficientDataError",
    "MpptError",
    "UnknownFieldError",
]
