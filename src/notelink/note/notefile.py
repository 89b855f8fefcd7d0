""" Notefiles group notes by name. The suffix of a notefile's name tells
    both sides how its notes flow: ``.qo`` is an outbound queue (module to
    hub), ``.qi`` an inbound queue (hub to module), and ``.db`` a
    bidirectionally synchronized database. The records here are schema only;
    storage and synchronization of notefiles belong to the module and the
    hub.
"""

from .contract import Contract, Field
from .note import Note


outbound_queue_suffix = '.qo'
inbound_queue_suffix = '.qi'
database_suffix = '.db'

# Outbound and inbound queues that are never synchronized with the hub.

local_outbound_queue_suffix = '.qos'
local_inbound_queue_suffix = '.qis'
local_database_suffix = '.dbs'

sync_priority_lowest = -3
sync_priority_lower = -2
sync_priority_low = -1
sync_priority_normal = 0
sync_priority_high = 1
sync_priority_higher = 2
sync_priority_highest = 3


def is_outbound_queue(notefile_id):
    return notefile_id.endswith(outbound_queue_suffix) or notefile_id.endswith(local_outbound_queue_suffix)


def is_inbound_queue(notefile_id):
    return notefile_id.endswith(inbound_queue_suffix) or notefile_id.endswith(local_inbound_queue_suffix)


def is_queue(notefile_id):
    return is_outbound_queue(notefile_id) or is_inbound_queue(notefile_id)


def is_database(notefile_id):
    return notefile_id.endswith(database_suffix) or notefile_id.endswith(local_database_suffix)



class Tracker(Contract):
    """ Per-endpoint synchronization progress through a notefile.
    """

    fields = dict(
        change=Field('c', default=0),
        session_id=Field('i', default=0),
    )


class Notefile(Contract):
    """ The outermost JSON object of a stored notefile: its notes, keyed
        by note id, and the trackers of the endpoints that sync with it.
    """

    fields = dict(
        queue=Field('Q', default=False),
        notes=Field('N', default=dict, kind=Note, container=dict),
        trackers=Field('T', default=dict, kind=Tracker, container=dict),
        change=Field('C', default=0),
    )


class NotefileInfo(Contract):
    """ Parameters of a notefile as exchanged in requests such as
        ``file.add`` and ``file.changes``.
    """

    fields = dict(
        changes=Field('changes', default=0),
        sync_hub_endpoint_id=Field('sync_hub_endpoint', default=''),
        sync_priority=Field('sync_priority', default=0),
        sync_on_change=Field('sync_on_change', default=False),
        sync_period_secs=Field('sync_secs', default=0),
        req_time=Field('req_time', default=False),
        req_loc=Field('req_loc', default=False),
    )


class NoteInfo(Contract):
    """ The per-note information returned by requests that list notes.
    """

    fields = dict(
        body=Field('body', omit='none'),
        payload=Field('payload', kind='bytes', omit='none'),
        deleted=Field('deleted', default=False),
    )


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
