import json
import pytest
import time

import notelink
import notelink.transport.i2c
import notelink.transport.serial


class FakeModule:
    """ The request-handling half of a module. Replies are queued per
        request type; a request with nothing queued gets an empty object.
        The last reply queued for a request type is repeated.
    """

    def __init__(self):
        self.requests = list()
        self.frames = list()
        self.replies = dict()


    def reply(self, req, *replies):
        self.replies.setdefault(req, list()).extend(replies)


    def handle(self, line):

        if not line.startswith(b'{'):
            self.frames.append(line)
            return None

        request = json.loads(line)
        self.requests.append(request)

        if 'req' not in request:
            return None

        try:
            queued = self.replies[request['req']]
        except KeyError:
            reply = dict()
        else:
            if len(queued) > 1:
                reply = queued.pop(0)
            else:
                reply = queued[0]

        if isinstance(reply, bytes):
            return reply

        return json.dumps(reply).encode() + b'\n'


class FakeSerial:
    """ Stands in for serial.Serial, with a FakeModule on the other end.
    """

    def __init__(self, module, port, baudrate=115200, timeout=None):
        self.module = module
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.written = list()
        self.incoming = b''
        self.outgoing = b''
        self.closed = False
        self.eof = False


    @property
    def in_waiting(self):
        return len(self.outgoing)


    def write(self, data):
        self.written.append(bytes(data))
        self.incoming += bytes(data)

        while b'\n' in self.incoming:
            line, self.incoming = self.incoming.split(b'\n', 1)

            if line.rstrip(b'\r') == b'':
                self.outgoing += b'\r\n'
                continue

            reply = self.module.handle(line)
            if reply is not None:
                self.outgoing += reply

        return len(data)


    def read(self, size=1):
        if self.eof:
            return b''

        if len(self.outgoing) == 0:
            time.sleep(0.01)
            return b''

        data = self.outgoing[:size]
        self.outgoing = self.outgoing[size:]
        return data


    def close(self):
        self.closed = True


class FakeI2CModule:
    """ The I2C side of a module: reassembles length-prefixed chunks into
        lines, and answers probes and pulls. After each reply is queued the
        first *latency* probes report nothing available.
    """

    def __init__(self, module):
        self.module = module
        self.incoming = b''
        self.outgoing = b''
        self.chunks = list()
        self.probes = 0
        self.pulls = list()
        self.latency = 0
        self.waiting = 0
        self.report_max = 127
        self.blank_reply = b'\r\n'
        self.expect = None


    def available(self):
        if self.waiting > 0:
            self.waiting -= 1
            return 0
        return min(len(self.outgoing), self.report_max)


    def receive(self, data):
        first = data[0]

        if first == 0x80:
            self.expect = 'count'
            self.probes += 1
            return

        if first > 0x80:
            self.expect = first - 0x80
            self.pulls.append(self.expect)
            return

        chunk = data[1:]
        assert len(chunk) == first
        self.chunks.append(len(chunk))
        self.incoming += chunk

        while b'\n' in self.incoming:
            line, self.incoming = self.incoming.split(b'\n', 1)

            if line == b'':
                self.outgoing += self.blank_reply
                continue

            reply = self.module.handle(line)
            if reply is not None:
                self.outgoing += reply
                self.waiting = self.latency


    def transmit(self, length):
        expect = self.expect
        self.expect = None

        if expect == 'count':
            assert length == 1
            return bytes((self.available(),))

        assert expect == length
        data = self.outgoing[:length]
        self.outgoing = self.outgoing[length:]
        return data


class FakeMessage:
    """ Stands in for smbus2.i2c_msg.
    """

    def __init__(self, kind, address, data=b'', length=0):
        self.kind = kind
        self.addr = address
        self.data = data
        self.len = length


    @classmethod
    def write(cls, address, data):
        return cls('write', address, bytes(data), len(data))


    @classmethod
    def read(cls, address, length):
        return cls('read', address, b'', length)


    def __bytes__(self):
        return bytes(self.data)


class FakeSMBus:

    def __init__(self, device, bus):
        self.device = device
        self.bus = bus
        self.closed = False
        self.transfers = list()


    def i2c_rdwr(self, *messages):
        for message in messages:
            self.transfers.append((message.kind, message.addr))

            if message.kind == 'write':
                self.device.receive(message.data)
            else:
                message.data = self.device.transmit(message.len)


    def close(self):
        self.closed = True


@pytest.fixture
def module():
    return FakeModule()


@pytest.fixture
def serial_ports(monkeypatch, module):
    """ Replace the serial port with a FakeSerial. Returns the dictionary of
        ports opened so far, keyed by name.
    """

    opened = dict()

    def factory(port, baudrate=115200, timeout=None):
        fake = FakeSerial(module, port, baudrate, timeout)
        opened[port] = fake
        return fake

    monkeypatch.setattr(notelink.transport.serial, 'Serial', factory)
    monkeypatch.setattr(notelink.transport.serial.SerialTransport, 'reset_delay', 0.01)
    monkeypatch.setattr(notelink.Context, 'retry_delay', 0.01)
    monkeypatch.setattr(notelink.Context, 'restart_delay', 0)

    return opened


@pytest.fixture
def i2c_device(monkeypatch, module):
    """ Replace the I2C bus with a FakeSMBus talking to a FakeI2CModule.
    """

    device = FakeI2CModule(module)

    def factory(bus):
        return FakeSMBus(device, bus)

    monkeypatch.setattr(notelink.transport.i2c, 'SMBus', factory)
    monkeypatch.setattr(notelink.transport.i2c, 'i2c_msg', FakeMessage)
    monkeypatch.setattr(notelink.transport.i2c.I2CTransport, 'poll_interval', 0.001)
    monkeypatch.setattr(notelink.Context, 'retry_delay', 0.01)
    monkeypatch.setattr(notelink.Context, 'restart_delay', 0)

    return device


@pytest.fixture
def serial_context(serial_ports):
    context = notelink.Context('serial', '/dev/ttyFAKE0', 115200)
    yield context
    context.close()


@pytest.fixture
def i2c_context(i2c_device):
    context = notelink.Context('i2c', '/dev/i2c-1', 0x17)
    yield context
    context.close()


@pytest.fixture
def home(tmp_path, monkeypatch):
    """ Point the settings directory at a temporary location.
    """

    monkeypatch.setattr(notelink.config.directory, 'found', str(tmp_path))
    for variable in ('NOTELINK_INTERFACE', 'NOTELINK_PORT', 'NOTELINK_PORT_CONFIG'):
        monkeypatch.delenv(variable, raising=False)

    return tmp_path


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
