""" Data contracts shared between the host, the module, and the hub, and
    the replication model that reconciles independently changed copies of
    a note.
"""

from . import access
from . import contract
from . import dfu
from . import event
from . import message
from . import notefile
from . import session

from .note import Note, History, NoteBodyError
from .note import update, compare, is_subsumed_by, merge
from .notefile import Notefile, NotefileInfo, NoteInfo, Tracker
from .event import Event, EventApp, EventLogEntry
from .session import DeviceSession, DeviceUsage, TowerLocation
from .dfu import DFUEnv, DFUState
from .message import Message, MessageAddress, MessageContact

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
