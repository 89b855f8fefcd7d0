""" A class representation of the JSON request/response envelope exchanged
    with the module. A request is tagged by its *req* field; every other
    field is optional, and the envelope itself knows nothing about which
    fields belong to which request type. Fields this version has never
    heard of are carried through unchanged.
"""

import itertools
import threading

from .. import json
from . import errors
from . import fields


class RequestError(ValueError):
    """ A request or reply could not be interpreted as a JSON envelope.
    """


class Request:
    """ The :class:`Request` is a thin encapsulation of one JSON object sent
        to the module. Keyword arguments become attributes, and attributes
        become JSON fields: ``Request('note.add', file='data.qo', body={})``
        encodes as ``{"req":"note.add","file":"data.qo","body":{}}``.

        Reading a field that was never set returns its empty value (False
        for the boolean flags, None for everything else) rather than raising
        :class:`AttributeError`. Fields can also be accessed with dictionary
        syntax, which is the only option for JSON keys that are not valid
        Python identifiers.

        Unless an *id* is supplied, each new request with a *req* type is
        assigned a locally unique identification number; the module echoes
        it in the reply. Commands, which carry *cmd* instead, are sent with
        no id.
    """

    omit = set(('omit',))
    assign_id = True

    def __init__(self, req=None, id=None, **kwargs):

        # Commands draw no reply to match, and go out without an id.

        if id is None and self.assign_id == True and req is not None:
            id = _id_next()

        self.req = req
        self.id = id

        for key,value in kwargs.items():
            setattr(self, key, value)


    def __getattr__(self, name):

        # Only invoked when regular attribute lookup fails.

        if name.startswith('__'):
            raise AttributeError(name)

        try:
            field = fields.known[name]
        except KeyError:
            raise AttributeError("%s has no field '%s'" % (type(self).__name__, name))

        return field.initial()


    def __contains__(self, key):
        return key in vars(self) and key not in self.omit


    def __eq__(self, other):
        if isinstance(other, Request):
            return self.to_dict() == other.to_dict()
        if isinstance(other, dict):
            return self.to_dict() == other
        return NotImplemented


    def __getitem__(self, key):
        if key in self.omit:
            raise KeyError(key)
        try:
            return vars(self)[key]
        except KeyError:
            raise KeyError(key)


    def __setitem__(self, key, value):
        setattr(self, key, value)


    def __delitem__(self, key):
        try:
            del vars(self)[key]
        except KeyError:
            raise KeyError(key)


    def __repr__(self):
        return self.encode().decode()


    def get(self, key, default=None):
        try:
            return self[key]
        except KeyError:
            return default


    def to_dict(self):
        """ Return the JSON-ready dictionary for this envelope, with empty
            fields left out. The *req* field, if set, is always first.
        """

        result = dict()
        attributes = vars(self)

        keys = list(attributes.keys())
        if 'req' in keys:
            keys.remove('req')
            keys.insert(0, 'req')

        for key in keys:
            if key in self.omit:
                continue

            value = attributes[key]

            try:
                field = fields.known[key]
            except KeyError:
                if value is None:
                    continue
                result[key] = value
            else:
                if field.omitted(value):
                    continue
                result[key] = field.encode(value)

        return result


    def encode(self):
        """ Return the JSON encoding of this envelope, as bytes, without a
            line terminator.
        """

        return json.dumps(self.to_dict())


    def pretty(self):
        return json.pretty(self.to_dict())


    @classmethod
    def from_dict(cls, data):
        """ Construct an envelope from a decoded JSON object. Known fields
            are decoded to their Python form (base64 payloads to bytes,
            notefile and note maps to their record classes); all others
            are set as-is.
        """

        if isinstance(data, Request):
            data = data.to_dict()

        if not isinstance(data, dict):
            raise RequestError('%s must be a JSON object, not %s' % (cls.__name__.lower(), type(data).__name__))

        instance = cls.__new__(cls)

        for key,value in data.items():
            try:
                field = fields.known[key]
            except KeyError:
                pass
            else:
                try:
                    value = field.decode(value)
                except (TypeError, ValueError) as e:
                    raise RequestError('invalid %r field: %s' % (key, e)) from e

            setattr(instance, key, value)

        return instance


    @classmethod
    def decode(cls, data):
        """ Construct an envelope from its JSON encoding. Raises
            :class:`RequestError` if *data* is not a JSON object.
        """

        try:
            decoded = json.loads(data)
        except (json.DecodeError, ValueError, TypeError) as e:
            raise RequestError('%s is not valid JSON: %s' % (cls.__name__.lower(), e)) from e

        return cls.from_dict(decoded)


# end of class Request



class Response(Request):
    """ A reply from the module. Structurally identical to a request, with
        the addition of the *err* field. The error text is free-form with
        embedded machine-readable tokens; see :mod:`notelink.protocol.errors`.

        :ivar request: The request this is a response to, if known.
    """

    omit = set(('omit', 'request'))
    assign_id = False

    def __init__(self, req=None, id=None, request=None, **kwargs):
        Request.__init__(self, req, id, **kwargs)
        self.request = request


    @classmethod
    def decode(cls, data, request=None):
        """ Construct a response from the JSON bytes received from the
            module. Since the text came off the wire, a failure to parse it
            is reported as an I/O error.
        """

        try:
            response = super().decode(data)
        except RequestError as e:
            if isinstance(data, str):
                text = data
            else:
                text = bytes(data).decode('utf-8', 'replace')
            text = text.strip()
            raise RequestError('error unmarshaling reply from module: %s %s: %s' % (e, errors.IO, text)) from e

        response.request = request
        return response


    @classmethod
    def from_dict(cls, data):
        response = super().from_dict(data)
        response.request = None
        return response


    def error_contains(self, token):
        """ Return True if the *err* field carries *token*.
        """

        return errors.contains(self.err, token)


    def error_text(self):
        """ Return the *err* field with every token removed.
        """

        return errors.strip(self.err)


    def raise_for_error(self):
        """ Raise :class:`~notelink.protocol.errors.ModuleError` if the
            module reported an error; otherwise return this response.
        """

        if self.err:
            if self.request is None:
                req = None
            else:
                req = self.request.req
            raise errors.ModuleError(self.err, req)

        return self


# end of class Response



_id_min = 1
_id_max = 0xFFFFFFFF
_id_lock = threading.Lock()
_id_ticker = itertools.count(_id_min)


def _id_next():
    """ Return the next request identification number. Zero is never used,
        since a zero id would be omitted from the wire.
    """

    global _id_ticker
    _id_lock.acquire()
    id = next(_id_ticker)

    if id >= _id_max:
        _id_ticker = itertools.count(_id_min)

        if id > _id_max:
            id = next(_id_ticker)

    _id_lock.release()
    return id


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
