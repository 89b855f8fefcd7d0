""" Request vocabulary. Keep these in one place to avoid stringly-typed
    request handling: the request types understood by the module, and the
    table of envelope fields this version knows how to encode.
"""

from ..note.contract import Contract, Field
from ..note.notefile import NotefileInfo, NoteInfo


# Request types

FILES_ADD = 'files.add'
FILES_SET = 'files.set'
FILES_DELETE = 'files.delete'
FILES_GET = 'files.get'
FILES_SYNC = 'files.sync'
NOTES_GET = 'notes.get'
NOTE_ADD = 'note.add'
NOTE_EVENT = 'note.event'
NOTE_TEMPLATE = 'note.template'
NOTE_GET = 'note.get'
NOTE_UPDATE = 'note.update'
NOTE_DELETE = 'note.delete'
CARD_TIME = 'card.time'
CARD_CONTACT = 'card.contact'
CARD_ATTN = 'card.attn'
CARD_VERSION = 'card.version'
CARD_STATUS = 'card.status'
CARD_RESTART = 'card.restart'
CARD_RESTORE = 'card.restore'
CARD_LOCATION = 'card.location'
CARD_LOCATION_MODE = 'card.location.mode'
CARD_TEMP = 'card.temp'
CARD_VOLTAGE = 'card.voltage'
CARD_IO = 'card.io'
CARD_AUX = 'card.aux'
CARD_USAGE_GET = 'card.usage.get'
CARD_USAGE_TEST = 'card.usage.test'
CARD_USAGE_RATE = 'card.usage.rate'
HUB_SET = 'hub.set'
HUB_GET = 'hub.get'
HUB_STATUS = 'hub.status'
HUB_SYNC = 'hub.sync'
HUB_SYNC_STATUS = 'hub.sync.status'
SERVICE_ENV = 'service.env'
SERVICE_SET = 'service.set'
SERVICE_GET = 'service.get'
SERVICE_STATUS = 'service.status'
SERVICE_SIGNAL = 'service.signal'
SERVICE_SYNC = 'service.sync'
SERVICE_SYNC_STATUS = 'service.sync.status'
WEB_GET = 'web.get'
WEB_PUT = 'web.put'
WEB_POST = 'web.post'
DFU_STATUS = 'dfu.status'
DFU_GET = 'dfu.get'
DFU_SERVICE_GET = 'dfu.service.get'

# Requests after which the module reboots.

restarts = frozenset((CARD_RESTART, CARD_RESTORE))


class PinState(Contract):
    """ State of one AUX pin, as reported by ``card.aux``.
    """

    fields = dict(
        high=Field('high', default=False),
        count=Field('count', default=list, container=list),
    )


# Envelope fields with a known shape. Everything is omitted from the wire
# when empty, except the opaque body and payload, which are omitted only
# when absent. Fields missing from this table are carried verbatim.

known = dict()

def _declare(kind, names, default=None, **options):
    for name in names.split():
        known[name] = Field(name, default=default, kind=kind, **options)


_declare(None, 'req cmd err file tracker note status version name org role email '
               'area country zone mode host target product device route olc '
               'wireless sn text trace serial body_template', default=None)

_declare(None, 'id signals max changes seconds minutes hours days result port '
               'pad storage offset length total bytes_sent bytes_received '
               'notes_sent notes_received sessions_standard sessions_secure '
               'megabytes bytes_per_day payload_template time seqno', default=None)

_declare(None, 'lat lon value rate vmin vmax vavg daily weekly monthly', default=None)

_declare(None, 'deleted start stop delete usb connected secure template allow '
               'align limit reqtime reqloc verify reset', default=False)

_declare(None, 'files usage', default=None, container=list)

known['body'] = Field('body', omit='none')
known['payload'] = Field('payload', kind='bytes', omit='none')
known['info'] = Field('info', kind=NotefileInfo, container=dict)
known['notes'] = Field('notes', kind=NoteInfo, container=dict)
known['state'] = Field('state', kind=PinState, container=list)

del _declare


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
