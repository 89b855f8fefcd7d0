"""Transport interface.

This is the (small) contract that transport implementations follow. A
transport moves newline-terminated bytes to and from the module; it knows
nothing about JSON, which keeps :mod:`notelink.protocol` transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..protocol import errors


# Transport agnostic exceptions. The message of every transport error
# carries the {io} token, so that callers can match them with the same
# predicate used for errors reported by the module.

class TransportError(Exception):
    """Base class for all transport-layer errors."""

    tokens = (errors.IO,)

    def __init__(self, message: str) -> None:
        for token in self.tokens:
            if token not in message:
                message = message + ' ' + token
        super().__init__(message)

    def contains(self, token: str) -> bool:
        return errors.contains(str(self), token)


class TransportTimeout(TransportError):
    """A bounded wait for the module expired."""

    tokens = (errors.IO, errors.TIMEOUT)


class TransportConnectionError(TransportError):
    """The port reported end-of-file: the device is gone or unpowered."""


class TransportPortError(TransportError):
    """The port could not be opened, or is already in use."""


class TransportWriteError(TransportError):
    """Bytes could not be written to the port."""


class TransportProtocolError(TransportError):
    """The module responded in a way the link protocol does not allow."""


class Transport(ABC):
    """Minimal contract for a module transport.

    A transport is opened on construction of its owning Context and is
    not re-entrant; the Context serializes access to it.
    """

    name = None

    def __init__(self, port, port_config) -> None:
        self.port = port
        self.port_config = port_config

    @abstractmethod
    def open(self) -> None:
        """Acquire the underlying device."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying device."""

    @abstractmethod
    def reset(self) -> None:
        """Bring the link to a known idle state, raising on failure."""

    @abstractmethod
    def transact(self, data: bytes, no_response: bool = False,
                 segment: Optional[int] = None, delay: float = 0.0) -> bytes:
        """Send *data* and return the reply, which ends with a newline.

        When *no_response* is set, return as soon as *data* is written.
        An empty *data* sends nothing and only gathers a reply. If
        *segment* is set, pause *delay* seconds after every *segment*
        bytes written.
        """

    @property
    def is_open(self) -> bool:
        """Whether the transport currently holds its device."""
        return False
