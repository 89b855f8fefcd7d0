""" The JSON request/response protocol spoken by the module: the envelope,
    its vocabulary, the optional CRC framing, and the error token
    convention. Nothing here depends on how the bytes reach the module.
"""

from . import crc
from . import errors
from . import fields
from . import request

from .errors import ModuleError
from .request import Request, Response, RequestError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
