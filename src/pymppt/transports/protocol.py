"""Base class shared by all transports."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from .exceptions import TransportConnectionError


class BaseTransport(ABC):
    """Register-level access to one charge controller.

    Subclasses implement connection management plus block reads and single
    register writes. Errors are raised as
    :class:`~pymppt.transports.exceptions.TransportError` subclasses and are
    never retried here.
    """

    transport_type: str = "base"

    def __init__(self, port: str) -> None:
        self._port = port
        self._connected = False

    @property
    def port(self) -> str:
        """Get the device path or identifier."""
        return self._port

    @property
    def is_connected(self) -> bool:
        """Check if the transport is connected."""
        return self._connected

    def _ensure_connected(self) -> None:
        """Raise if not connected."""
        if not self._connected:
            raise TransportConnectionError(
                f"{self.transport_type} transport for {self._port} is not connected"
            )

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection."""

    @abstractmethod
    async def read_registers(self, address: int, count: int) -> list[int]:
        """Read ``count`` contiguous 16-bit registers starting at ``address``."""

    @abstractmethod
    async def write_register(self, address: int, value: int) -> None:
        """Write a single 16-bit register."""

    async def __aenter__(self) -> BaseTransport:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.disconnect()
