"""Transport layer implementations."""

from .base import (
    Transport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
    TransportPortError,
    TransportWriteError,
    TransportProtocolError,
)

from .serial import SerialTransport
from .i2c import I2CTransport


interfaces = {
    SerialTransport.name: SerialTransport,
    I2CTransport.name: I2CTransport,
}


def create(interface, port=None, port_config=None):
    """Return an unopened transport for *interface*, one of the keys of
    :data:`interfaces`.
    """

    try:
        cls = interfaces[interface]
    except KeyError:
        raise ValueError(f"unknown module interface: {interface!r}")

    return cls(port, port_config)
