"""Serial (UART or USB CDC) transport.

Requests and replies are single lines of JSON. The module discards any
partial command when it receives a blank line, which is what the reset
procedure relies on to bring the link back to a known state.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from serial import Serial, SerialException
from serial.tools import list_ports

from .base import (
    Transport,
    TransportConnectionError,
    TransportPortError,
    TransportTimeout,
    TransportWriteError,
)


logger = logging.getLogger(__name__)

default_speed = 115200

# USB identifiers of the module.

vendor_id = 0x30A4
product_id = 0x0001


def ports():
    """Enumerate serial ports, returning three lists of device names: all
    ports, the USB ports among them, and the USB ports that belong to a
    module. If no port matches the module's product id exactly, any port
    with the module vendor's id is reported as a module port.
    """

    all_ports = list()
    usb_ports = list()
    module_ports = list()
    vendor_ports = list()

    for port in list_ports.comports():
        all_ports.append(port.device)

        if port.vid is None:
            continue

        usb_ports.append(port.device)

        if port.vid == vendor_id:
            vendor_ports.append(port.device)
            if port.pid == product_id:
                module_ports.append(port.device)

    if len(module_ports) == 0:
        module_ports = vendor_ports

    return all_ports, usb_ports, module_ports


def default_port():
    """Return the (port, speed) to use when none was specified: the first
    module port found, or None if there is no module attached.
    """

    all_ports, usb_ports, module_ports = ports()

    if module_ports:
        return module_ports[0], default_speed

    return None, default_speed


class SerialTransport(Transport):
    """Line-oriented transport over a serial port opened at *port_config*
    baud, 8-N-1.
    """

    name = 'serial'

    # Seconds; a read that returns nothing within *timeout* is retried.

    timeout = 0.5
    reset_delay = 0.5
    reset_attempts = 10

    # A read that comes back empty faster than this is a failed device
    # rather than a timeout.

    eof_threshold = 0.001

    def __init__(self, port, port_config=None) -> None:
        if port_config is None:
            port_config = default_speed

        super().__init__(port, int(port_config))
        self.device = None

    @property
    def is_open(self) -> bool:
        return self.device is not None

    def open(self) -> None:
        try:
            self.device = Serial(self.port, baudrate=self.port_config, timeout=self.timeout)
        except (SerialException, OSError, ValueError) as e:
            raise TransportPortError('error opening port %s: %s' % (self.port, e)) from e

        logger.debug('opened %s at %d baud', self.port, self.port_config)

        try:
            self.reset()
        except Exception:
            self.close()
            raise

    def close(self) -> None:
        device = self.device
        self.device = None

        if device is not None:
            try:
                device.close()
            except (SerialException, OSError) as e:
                logger.debug('error closing %s: %s', self.port, e)

    def reset(self) -> None:
        """Write blank lines until the module answers with nothing but line
        endings, draining whatever partial reply may have been pending.
        """

        self._check_open()

        for attempt in range(self.reset_attempts):
            logger.debug('reset %s, attempt %d', self.port, attempt + 1)
            self._write(b'\n\n')
            time.sleep(self.reset_delay)

            data = self._read()
            if self._idle(data):
                return

            logger.debug('reset %s: discarding %r', self.port, data)

        raise TransportTimeout('module on %s did not return to idle after %d attempts' % (self.port, self.reset_attempts))

    @staticmethod
    def _idle(data: bytes) -> bool:
        """An idle module answers blank lines with blank lines."""

        if b'\n' not in data:
            return False

        for byte in data:
            if byte != 0x0D and byte != 0x0A:
                return False

        return True

    def transact(self, data: bytes, no_response: bool = False,
                 segment: Optional[int] = None, delay: float = 0.0) -> bytes:

        self._check_open()

        if data:
            self._write(data, segment, delay)

        if no_response:
            return b''

        buffer = b''

        while True:
            chunk = self._read()
            if len(chunk) == 0:
                continue

            buffer += chunk
            if b'\n' not in buffer:
                continue

            lines = buffer.split(b'\n')

            if lines[-1] != b'':
                # Still collecting a partial line.
                buffer = lines[-1]
                continue

            if not data:
                # Only gathering a reply, which may be binary.
                return buffer

            line = lines[-2]
            if line.startswith(b'{'):
                return line + b'\n'

            # Trace output left over from a monitoring session.
            logger.debug('%s: dropping non-JSON line %r', self.port, line)
            buffer = b''

    def _check_open(self) -> None:
        if self.device is None:
            raise TransportConnectionError('port %s not open' % (self.port))

    def _read(self) -> bytes:
        """Read whatever is pending, waiting up to :attr:`timeout` for at
        least one byte. An empty return means the read timed out.
        """

        began = time.monotonic()

        try:
            data = self.device.read(self.device.in_waiting or 1)
        except (SerialException, OSError) as e:
            raise TransportConnectionError('error reading from module on %s: %s' % (self.port, e)) from e

        if len(data) == 0 and time.monotonic() - began < self.eof_threshold:
            raise TransportConnectionError('hardware failure on %s' % (self.port))

        return data

    def _write(self, data: bytes, segment: Optional[int] = None, delay: float = 0.0) -> None:
        if not segment:
            segment = len(data)

        offset = 0

        while offset < len(data):
            if offset > 0:
                time.sleep(delay)

            chunk = data[offset:offset+segment]
            logger.debug('%s: writing %d bytes', self.port, len(chunk))

            try:
                self.device.write(chunk)
            except (SerialException, OSError) as e:
                raise TransportWriteError('error transmitting to module on %s: %s' % (self.port, e)) from e

            offset += len(chunk)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
