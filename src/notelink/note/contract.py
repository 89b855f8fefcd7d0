""" Shared machinery for the JSON data contracts exchanged with the module
    and the hub. A contract is a plain Python object whose attributes map to
    short JSON keys; the mapping is declared once, as the :attr:`fields`
    class attribute of each :class:`Contract` subclass.

    Output follows the conventions of the other side: empty values are left
    out entirely, binary fields travel as base64 text, and keys this
    version does not recognize are carried along untouched so that a
    round-trip through an older client loses nothing.
"""

import base64
import copy


class Field:
    """ Description of a single contract attribute.

        :ivar key: The JSON key used on the wire.
        :ivar default: Value (or zero-argument factory) for an unset field.
        :ivar kind: None for a plain JSON value, ``'bytes'`` for a binary
                    field carried as base64, or a :class:`Contract` subclass
                    for a nested record.
        :ivar container: None, ``list``, or ``dict`` when the field holds a
                         sequence or string-keyed map of *kind* values.
        :ivar omit: ``'empty'`` to leave out any empty value (None, False,
                    zero, empty string or container), ``'none'`` to leave
                    out only None.
    """

    def __init__(self, key, default=None, kind=None, container=None, omit='empty'):

        self.key = key
        self.default = default
        self.kind = kind
        self.container = container
        self.omit = omit


    def initial(self):
        if callable(self.default):
            return self.default()
        return self.default


    def omitted(self, value):
        if value is None:
            return True
        if self.omit == 'none':
            return False
        if value is False or value == '' or value == 0:
            return True
        if isinstance(value, (list, tuple, dict, bytes, bytearray)) and len(value) == 0:
            return True
        if isinstance(value, Contract) and len(value.to_dict()) == 0:
            return True
        return False


    def encode(self, value):
        if self.container is list:
            return [self._encode_one(item) for item in value]
        if self.container is dict:
            return {key: self._encode_one(item) for key, item in value.items()}
        return self._encode_one(value)


    def decode(self, value):
        if value is None:
            return self.initial()
        if self.container is list:
            return [self._decode_one(item) for item in value]
        if self.container is dict:
            return {key: self._decode_one(item) for key, item in value.items()}
        return self._decode_one(value)


    def _encode_one(self, value):
        if self.kind == 'bytes':
            if isinstance(value, str):
                # Already base64.
                return value
            return base64.b64encode(bytes(value)).decode('ascii')
        if isinstance(value, Contract):
            return value.to_dict()
        return value


    def _decode_one(self, value):
        if self.kind == 'bytes':
            if isinstance(value, (bytes, bytearray)):
                return bytes(value)
            return base64.b64decode(value)
        if self.kind is not None:
            return self.kind.from_dict(value)
        return value


# end of class Field



class Contract:
    """ Base class for JSON data contracts. Subclasses declare :attr:`fields`,
        an ordered dictionary of attribute name to :class:`Field`. Keyword
        arguments to the constructor set attributes by name.

        :ivar extra: JSON keys received that this contract does not declare.
    """

    fields = dict()

    def __init__(self, **kwargs):

        for attribute, field in self.fields.items():
            setattr(self, attribute, field.initial())

        self.extra = dict()

        for attribute, value in kwargs.items():
            if attribute in self.fields:
                setattr(self, attribute, value)
            else:
                raise TypeError('%s has no field %r' % (type(self).__name__, attribute))


    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()


    def __repr__(self):
        return '%s(%r)' % (type(self).__name__, self.to_dict())


    def copy(self):
        """ Return a deep copy of this record.
        """

        return copy.deepcopy(self)


    def to_dict(self):
        """ Return the JSON-ready dictionary form of this record.
        """

        result = dict()

        for attribute, field in self.fields.items():
            value = getattr(self, attribute)
            if field.omitted(value):
                continue
            result[field.key] = field.encode(value)

        for key, value in self.extra.items():
            if key not in result:
                result[key] = value

        return result


    @classmethod
    def from_dict(cls, data):
        """ Construct a new instance from its decoded JSON dictionary form.
        """

        if data is None:
            return cls()

        if not isinstance(data, dict):
            raise TypeError('%s expects a JSON object, got %s' % (cls.__name__, type(data).__name__))

        instance = cls()
        known = set()

        for attribute, field in cls.fields.items():
            known.add(field.key)
            try:
                value = data[field.key]
            except KeyError:
                continue
            setattr(instance, attribute, field.decode(value))

        for key, value in data.items():
            if key not in known:
                instance.extra[key] = value

        return instance


# end of class Contract


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
