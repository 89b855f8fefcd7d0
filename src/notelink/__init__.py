""" Host-side client for an attached cellular/Wi-Fi IoT module. This
    includes the serial and I2C transports, the JSON request protocol the
    module speaks, and the data contracts shared with the hub, including
    the replication model for notes.
"""

# Utility components.

from . import json
from . import clock
from . import cobs

# Submodules used by multiple other components.

from . import protocol
from . import note
from . import config
home = config.directory

# Primary public-facing interfaces.

from . import transport
from . import context
from . import useragent

open = context.open

from .context import Context
from .note import Note
from .protocol import Request, Response, ModuleError, RequestError
from .transport import TransportError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
