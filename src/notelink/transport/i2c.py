"""I2C transport.

The module has no register map. Every transfer from the host is
interpreted by its first byte:

* 1..127: a chunk of request data of that length follows.
* 0x80: the host is asking how many reply bytes are queued; the module
  answers the next one-byte read with the count.
* 0x80 + n: the host will now read the next n reply bytes.

Requests are therefore sent in chunks of at most 127 bytes, and replies are
pulled by alternating probes and reads until the module has no more data.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from smbus2 import SMBus, i2c_msg

from .base import (
    Transport,
    TransportConnectionError,
    TransportError,
    TransportPortError,
    TransportProtocolError,
    TransportTimeout,
    TransportWriteError,
)


logger = logging.getLogger(__name__)

default_port = '/dev/i2c-1'
default_address = 0x17

chunk_max = 127
probe = 0x80


def defaults():
    """Return the default (port, address) for the I2C transport."""
    return default_port, default_address


class I2CTransport(Transport):
    """Chunked, polled transport to the module at 7-bit address
    *port_config* on the I2C bus *port*. The bus may be named by its
    device path or by its number.
    """

    name = 'i2c'

    # Seconds.

    poll_interval = 0.1
    reply_timeout = 60
    reset_attempts = 5

    def __init__(self, port=None, port_config=None) -> None:
        if port is None:
            port = default_port
        if port_config is None:
            port_config = default_address

        super().__init__(port, int(port_config))
        self.bus = None

    @property
    def address(self) -> int:
        return self.port_config

    @property
    def is_open(self) -> bool:
        return self.bus is not None

    def open(self) -> None:
        bus = self.port

        try:
            bus = int(bus)
        except ValueError:
            pass

        try:
            self.bus = SMBus(bus)
        except (OSError, ValueError) as e:
            raise TransportPortError('error opening I2C bus %s: %s' % (self.port, e)) from e

        logger.debug('opened %s, address 0x%02x', self.port, self.address)

        try:
            self.reset()
        except Exception:
            self.close()
            raise

    def close(self) -> None:
        bus = self.bus
        self.bus = None

        if bus is not None:
            try:
                bus.close()
            except OSError as e:
                logger.debug('error closing %s: %s', self.port, e)

    def reset(self) -> None:
        """Drain any partial reply left over from an aborted transaction,
        then confirm the module answers a blank line with a blank line.
        """

        self._check_open()

        available = self._probe()
        while available > 0:
            logger.debug('reset %s: draining %d bytes', self.port, available)
            self._pull(available)
            available = self._probe()

        for attempt in range(self.reset_attempts):
            try:
                reply = self.transact(b'\n')
            except TransportError as e:
                logger.debug('reset %s, attempt %d: %s', self.port, attempt + 1, e)
                continue

            if reply == b'\r\n':
                return

            logger.debug('reset %s, attempt %d: unexpected reply %r', self.port, attempt + 1, reply)

        raise TransportProtocolError('module at 0x%02x on %s did not acknowledge reset' % (self.address, self.port))

    def transact(self, data: bytes, no_response: bool = False,
                 segment: Optional[int] = None, delay: float = 0.0) -> bytes:

        self._check_open()

        sent = 0

        for offset in range(0, len(data), chunk_max):
            chunk = bytes(data[offset:offset+chunk_max])
            self._write(bytes((len(chunk),)) + chunk)

            sent += len(chunk)
            if segment and sent >= segment:
                sent = 0
                time.sleep(delay)

        if no_response:
            return b''

        received = bytearray()
        expires = time.monotonic() + self.reply_timeout

        while True:
            available = self._probe()

            if available > 0:
                received += self._pull(available)
                expires = time.monotonic() + self.reply_timeout
                continue

            if received:
                break

            if time.monotonic() > expires:
                raise TransportTimeout('no reply from module at 0x%02x on %s in %d seconds' % (self.address, self.port, self.reply_timeout))

            time.sleep(self.poll_interval)

        return bytes(received)

    def _check_open(self) -> None:
        if self.bus is None:
            raise TransportConnectionError('I2C bus %s not open' % (self.port))

    def _probe(self) -> int:
        """Ask the module how many reply bytes it has queued."""

        self._write(bytes((probe,)))
        count = self._read(1)[0]

        if count > chunk_max:
            raise TransportProtocolError('module reported %d bytes available, maximum is %d' % (count, chunk_max))

        return count

    def _pull(self, count: int) -> bytes:
        count = min(count, chunk_max)
        self._write(bytes((probe + count,)))
        data = self._read(count)
        logger.debug('%s: received %d bytes', self.port, len(data))
        return data

    def _write(self, data: bytes) -> None:
        message = i2c_msg.write(self.address, data)

        try:
            self.bus.i2c_rdwr(message)
        except OSError as e:
            raise TransportWriteError('write error to 0x%02x on %s: %s' % (self.address, self.port, e)) from e

    def _read(self, count: int) -> bytes:
        message = i2c_msg.read(self.address, count)

        try:
            self.bus.i2c_rdwr(message)
        except OSError as e:
            raise TransportConnectionError('read error from 0x%02x on %s: %s' % (self.address, self.port, e)) from e

        data = bytes(message)

        if len(data) != count:
            raise TransportProtocolError('short read from 0x%02x on %s: %d of %d bytes' % (self.address, self.port, len(data), count))

        return data


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
