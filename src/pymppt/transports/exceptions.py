"""Transport-specific exceptions.

All transport exceptions inherit from :class:`~pymppt.exceptions.MpptError`
so callers can use a single ``except MpptError`` to catch both decoding and
bus failures.
"""

from __future__ import annotations

from pymppt.exceptions import MpptError


class TransportError(MpptError):
    """Base exception for all transport errors."""

    pass


class TransportConnectionError(TransportError):
    """Failed to connect to the device."""

    pass


class TransportTimeoutError(TransportError):
    """Operation timed out."""

    pass


class TransportReadError(TransportError):
    """Failed to read data from device."""

    pass


class TransportWriteError(TransportError):
    """Failed to write data to device."""

    pass
