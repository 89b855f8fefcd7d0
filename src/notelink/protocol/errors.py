""" Machine-readable error tokens. A module reports failures as free-form
    text in the ``err`` field of a response; embedded anywhere in that text
    are zero or more brace-delimited tokens, such as ``{io}``, that a caller
    can match on to choose a recovery policy. Tokens are never translated
    into distinct exception classes.
"""

import re


TIMEOUT = '{timeout}'
CLOSED = '{closed}'
IO = '{io}'
CONNECTED = '{connected}'
DISCONNECTED = '{disconnected}'
CONNECTING = '{connecting}'
CONNECT_FAILURE = '{connect-failure}'
WAIT_SERVICE = '{wait-service}'
WAIT_DATA = '{wait-data}'
WAIT_GATEWAY = '{wait-gateway}'
WAIT_MODULE = '{wait-module}'
NETWORK = '{network}'
DFU_NOT_READY = '{dfu-not-ready}'
AUTH = '{auth}'
TICKET = '{ticket}'
NO_HANDLER = '{no-handler}'
IDLE = '{idle}'
DEVICE_NOEXIST = '{device-noexist}'
DEVICE_NONE = '{device-none}'
DEVICE_DISABLED = '{device-disabled}'
PRODUCT_NOEXIST = '{product-noexist}'
PRODUCT_NONE = '{product-none}'
APP_NOEXIST = '{app-noexist}'
APP_NONE = '{app-none}'
APP_DELETED = '{app-deleted}'
APP_EXISTS = '{app-exists}'
FLEET_NOEXIST = '{fleet-noexist}'
ACCESS_DENIED = '{access-denied}'
DO_NOT_ROUTE = '{do-not-route}'
WEB_PAYLOAD = '{web-payload}'
HUB_MODE = '{hub-mode}'
TEMPLATE_INCOMPATIBLE = '{template-incompatible}'
SYNTAX = '{syntax}'
INCOMPATIBLE = '{incompatible}'
TOO_BIG = '{too-big}'
NOT_JSON = '{not-json}'
NOT_SUPPORTED = '{not-supported}'
GPS_INACTIVE = '{gps-inactive}'
NOTEFILE_BAD_NAME = '{notefile-bad-name}'
NOTEFILE_IN_USE = '{notefile-in-use}'
NOTEFILE_EXISTS = '{notefile-exists}'
NOTEFILE_NOEXIST = '{notefile-noexist}'
NOTEFILE_QUEUE_DISALLOWED = '{notefile-queue-disallowed}'
NOTE_NOEXIST = '{note-noexist}'
NOTE_EXISTS = '{note-exists}'
FILE_NOEXIST = '{file-noexist}'
TRACKER_NOEXIST = '{tracker-noexist}'
TRACKER_EXISTS = '{tracker-exists}'


canonical = frozenset((
    TIMEOUT, CLOSED, IO, CONNECTED, DISCONNECTED, CONNECTING,
    CONNECT_FAILURE, WAIT_SERVICE, WAIT_DATA, WAIT_GATEWAY, WAIT_MODULE,
    NETWORK, DFU_NOT_READY, AUTH, TICKET, NO_HANDLER, IDLE, DEVICE_NOEXIST,
    DEVICE_NONE, DEVICE_DISABLED, PRODUCT_NOEXIST, PRODUCT_NONE,
    APP_NOEXIST, APP_NONE, APP_DELETED, APP_EXISTS, FLEET_NOEXIST,
    ACCESS_DENIED, DO_NOT_ROUTE, WEB_PAYLOAD, HUB_MODE,
    TEMPLATE_INCOMPATIBLE, SYNTAX, INCOMPATIBLE, TOO_BIG, NOT_JSON,
    NOT_SUPPORTED, GPS_INACTIVE, NOTEFILE_BAD_NAME, NOTEFILE_IN_USE,
    NOTEFILE_EXISTS, NOTEFILE_NOEXIST, NOTEFILE_QUEUE_DISALLOWED,
    NOTE_NOEXIST, NOTE_EXISTS, FILE_NOEXIST, TRACKER_NOEXIST,
    TRACKER_EXISTS,
))

_token_pattern = re.compile(r'\{[^{}\s]*\}')
_whitespace = re.compile(r'\s+')


def text(error):
    """ Coerce *error*, which may be None, a string, or an exception, into
        the string that token matching operates on.
    """

    if error is None:
        return ''
    if isinstance(error, str):
        return error
    return str(error)


def contains(error, token):
    """ Return True if the error string (or exception) *error* contains
        *token*. The braces are optional when specifying the token, so
        ``contains(err, 'io')`` and ``contains(err, '{io}')`` are equivalent.
    """

    if not token.startswith('{'):
        token = '{' + token + '}'

    return token in text(error)


def tokens(error):
    """ Return the list of tokens embedded in *error*, in order of
        appearance.
    """

    return _token_pattern.findall(text(error))


def strip(error):
    """ Return *error* with every brace-delimited token removed and the
        remaining whitespace collapsed, suitable for display to a person.
    """

    stripped = _token_pattern.sub(' ', text(error))
    stripped = _whitespace.sub(' ', stripped)
    return stripped.strip()


class ModuleError(Exception):
    """ Raised when the caller asks for a response carrying an ``err``
        field to be treated as an exception. The complete error text,
        tokens included, is retained as :attr:`error`; the string form of
        the exception is the same text.

        :ivar request: The ``req`` (or ``cmd``) that produced the error.
    """

    def __init__(self, error, request=None):

        self.error = text(error)
        self.request = request

        if request:
            message = request + ': ' + self.error
        else:
            message = self.error

        Exception.__init__(self, message)


    def contains(self, token):
        return contains(self.error, token)


    def pretty(self):
        return strip(self.error)


# end of class ModuleError


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
