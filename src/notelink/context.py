""" The :class:`Context` is the handle for one attached module. It owns the
    transport for the module's port, serializes access to it, and layers
    the request policy on top: line termination, write segmentation, reset
    after errors, retries, optional CRC framing, and a debug trace of
    everything sent and received.
"""

import contextlib
import logging
import threading
import time

from . import cobs
from . import config
from . import transport as transports
from . import useragent
from .protocol import crc
from .protocol import errors
from .protocol import fields
from .protocol.request import Request, Response, RequestError
from .transport import TransportError, TransportPortError, TransportProtocolError


logger = logging.getLogger(__name__)

# Segmentation applied while uploading binary data, for modules that cannot
# keep up with a continuous stream.

bulk_segment = 1024
bulk_delay = 0.030

# Binary frames are COBS-encoded with this mask so that the newline can
# serve as the frame delimiter.

binary_mask = 0x0A

_ports = dict()
_ports_lock = threading.Lock()


class Context:
    """ A connection to one module through one transport. Only one
        :class:`Context` may be open on a given port at a time within a
        process; requests from multiple threads are serialized here.

        :ivar debug: Log every request and response at INFO level.
        :ivar pretty: Indent the JSON in the debug trace.
        :ivar crc: Append a CRC to every request, and check the one on
                   every reply.
        :ivar disable_ua: Do not add a user agent to ``hub.set`` requests.
        :ivar segment: If set, the number of bytes written before pausing
                       for *delay* seconds.
        :ivar retries: How many times a request is retried after an I/O
                       error.
    """

    retries = 5
    retry_delay = 0.5
    restart_delay = 8

    def __init__(self, interface, port, port_config=None, debug=False, pretty=False, crc=False, disable_ua=False, segment=None, delay=0.0):

        if port is None or port == '':
            raise TransportPortError('no %s port available for the module' % (interface))

        self.transport = transports.create(interface, port, port_config)
        self.interface = self.transport.name
        self.port = self.transport.port
        self.port_config = self.transport.port_config

        self.debug = debug
        self.pretty = pretty
        self.crc = crc
        self.disable_ua = disable_ua
        self.segment = segment
        self.delay = delay

        self.seqno = 0
        self.reset_required = False
        self.reopen_required = False

        self.lock = threading.RLock()
        self.key = (self.interface, str(self.port))

        with _ports_lock:
            if self.key in _ports:
                raise TransportPortError('%s port %s is already in use' % (self.interface, self.port))
            _ports[self.key] = self

        try:
            self.transport.open()
        except Exception:
            self._release()
            raise


    def __enter__(self):
        return self


    def __exit__(self, *exc):
        self.close()


    def __repr__(self):
        return 'Context(%r, %r, %r)' % self.identify()


    def _release(self):
        with _ports_lock:
            if _ports.get(self.key) is self:
                del _ports[self.key]


    def close(self):
        """ Close the transport and release the port for use by another
            :class:`Context`.
        """

        with self.lock:
            self.transport.close()
            self._release()


    def identify(self):
        """ Return the (interface, port, port_config) of this connection.
        """

        return (self.interface, self.port, self.port_config)


    def reopen(self):
        """ Close and re-open the transport, which also resets it. This is
            done automatically before the next request after the module
            was told to restart.
        """

        with self.lock:
            logger.debug('reopening %s port %s', self.interface, self.port)
            self.transport.close()
            self.reopen_required = False
            self.reset_required = False
            self.transport.open()


    def reset(self):
        with self.lock:
            self.reset_required = False
            self.transport.reset()


    @contextlib.contextmanager
    def bulk(self):
        """ Apply the bulk upload segmentation for the duration of a
            ``with`` block.
        """

        with self.lock:
            segment = self.segment
            delay = self.delay

            self.segment = bulk_segment
            self.delay = bulk_delay

            try:
                yield self
            finally:
                self.segment = segment
                self.delay = delay


    def _prepare(self):
        if self.reopen_required:
            self.reopen()
        elif self.reset_required:
            self.reset()


    def _exchange(self, data, no_response=False, segment=None, delay=None):
        """ Hand *data* to the transport as-is. If the transport fails, it
            is reset before the original error propagates.
        """

        if segment is None:
            segment = self.segment
        if delay is None:
            delay = self.delay

        with self.lock:
            self._prepare()

            try:
                return self.transport.transact(data, no_response, segment, delay)
            except TransportError as e:
                logger.debug('%s port %s: %s', self.interface, self.port, e)
                self._recover()
                raise


    def _recover(self):
        try:
            self.reset()
        except TransportError as e:
            logger.warning('unable to reset %s port %s: %s', self.interface, self.port, e)
            self.reset_required = True


    def _trace(self, prefix, thing):
        if self.debug == False:
            return

        if isinstance(thing, (bytes, bytearray)):
            text = bytes(thing).decode('utf-8', 'replace').rstrip('\r\n')
        elif self.pretty:
            text = thing.pretty().decode()
        else:
            text = thing.encode().decode()

        logger.info('%s %s', prefix, text)


    def transact(self, data, no_response=False):
        """ Send one request, already encoded as JSON bytes, and return the
            raw reply bytes including the trailing newline. The request is
            given exactly one newline terminator. An empty *data* sends
            nothing and waits for a reply. Errors are raised after the
            transport has been reset; nothing is retried.
        """

        data = bytes(data)

        if data:
            data = data.rstrip(b'\r\n') + b'\n'
            self._trace('>', data)

        reply = self._exchange(data, no_response)

        if reply:
            self._trace('<', reply)

        return reply


    def transaction(self, request):
        """ Send a :class:`~notelink.protocol.request.Request` (or a
            dictionary of request fields) and return the
            :class:`~notelink.protocol.request.Response`.

            Errors reported by the module are returned in the response's
            *err* field, not raised; call
            :meth:`~notelink.protocol.request.Response.raise_for_error` to
            raise them. A request that fails with an I/O error, either in
            the transport or as reported by the module, is retried up to
            :attr:`retries` times. Requests that restart the module are
            never retried.

            A command (a request with a *cmd* field rather than a *req*
            field) expects no reply, and an empty response is returned.
        """

        if request is None:
            return self.response()

        if isinstance(request, Request):
            pass
        elif isinstance(request, dict):
            request = Request.from_dict(request)
        else:
            request = Request.decode(request)

        if request.req:
            req_type = request.req
            no_response = False
        elif request.cmd:
            req_type = request.cmd
            no_response = True
        else:
            raise RequestError('request has neither a req nor a cmd field')

        if self.disable_ua == False and req_type == fields.HUB_SET and request.body is None:
            request.body = useragent.user_agent(self.interface, self.port)

        self._trace('>', request)

        data = request.encode() + b'\n'

        with self.lock:
            seqno = self.seqno

            if self.crc and no_response == False:
                data = crc.add(data, seqno)

            try:
                response = self._transaction(request, req_type, data, no_response, seqno)
            finally:
                self.seqno = (seqno + 1) & 0xFFFF

            if req_type == fields.CARD_RESTART or (req_type == fields.CARD_RESTORE and request.reset == False):
                logger.debug('waiting for module on %s to restart', self.port)
                self.reopen_required = True
                time.sleep(self.restart_delay)

        if no_response:
            return Response(request=request)

        self._trace('<', response)
        return response


    def _transaction(self, request, req_type, data, no_response, seqno):

        attempt = 0
        crc_added = self.crc and no_response == False

        while True:

            error = None
            response = None

            try:
                reply = self._exchange(data, no_response)
            except TransportError as e:
                error = e
            else:
                if no_response:
                    return None

                if crc_added:
                    try:
                        reply = crc.check(reply, seqno)
                    except crc.CRCError as e:
                        error = TransportProtocolError('%s: %s' % (req_type, e))

            if error is None:
                try:
                    response = Response.decode(reply, request)
                except RequestError as e:
                    error = e

            if req_type in fields.restarts:
                if error is not None:
                    raise error
                return response

            if error is None:
                if response.error_contains(errors.IO) and not response.error_contains(errors.NOT_SUPPORTED):
                    if attempt >= self.retries:
                        return response
                    retry = response.err
                else:
                    return response
            elif errors.contains(error, errors.IO) and not errors.contains(error, errors.NOT_SUPPORTED):
                if attempt >= self.retries:
                    raise error
                retry = error
            else:
                raise error

            attempt += 1
            logger.warning('retrying %s (attempt %d of %d) after I/O error: %s', req_type, attempt, self.retries, retry)
            if not isinstance(error, TransportError):
                self.reset_required = True
            time.sleep(self.retry_delay)


    def request(self, req_type, **kwargs):
        """ Shorthand for sending ``Request(req_type, **kwargs)`` with
            :meth:`transaction`.
        """

        return self.transaction(Request(req_type, **kwargs))


    def command(self, cmd_type, **kwargs):
        """ Send a command, which produces no reply.
        """

        self.transaction(Request(cmd=cmd_type, **kwargs))


    def response(self):
        """ Wait for and return one reply without sending anything, for
            requests that produce more than one.
        """

        reply = self.transact(b'')
        return Response.decode(reply)


    def send_binary(self, data):
        """ Send *data* as a single binary frame: COBS-encoded so that it
            contains no newline, then newline-terminated. The bulk
            segmentation is always applied.
        """

        frame = cobs.encode(data, binary_mask) + b'\n'
        logger.debug('sending %d byte binary frame (%d bytes encoded)', len(data), len(frame))
        self._exchange(frame, True, bulk_segment, bulk_delay)


    def receive_binary(self):
        """ Wait for one binary frame from the module and return its
            decoded contents.
        """

        frame = self._exchange(b'', False)

        if frame.endswith(b'\n'):
            frame = frame[:-1]

        return cobs.decode(bytearray(frame), binary_mask)


# end of class Context



def open(interface=None, port=None, port_config=None, **options):
    """ Open and return a :class:`Context` for the module. Anything not
        specified is taken from :func:`notelink.config.defaults`; if only
        the *interface* is given, the port defaults apply to that
        interface. Additional keyword arguments are passed to the
        :class:`Context` constructor.
    """

    if interface is None or port is None or port_config is None:
        default_interface, default_port, default_config = config.defaults()

        if interface is None:
            interface = default_interface
            if port is None:
                port = default_port
            if port_config is None:
                port_config = default_config
        elif interface == default_interface:
            if port is None:
                port = default_port
            if port_config is None:
                port_config = default_config
        else:
            default_port, default_config = config.interface_defaults(interface)
            if port is None:
                port = default_port
            if port_config is None:
                port_config = default_config

    return Context(interface, port, port_config, **options)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
