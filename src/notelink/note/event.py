""" Events are the records the hub emits whenever a note changes, or when a
    request is handled on behalf of a device. The layout is owned by the hub
    and the JSON keys below are normative.
"""

from .contract import Contract, Field


add = 'note.add'
update = 'note.update'
delete = 'note.delete'
post = 'post'
put = 'put'
get = 'get'
no_action = ''


class EventLogEntry(Contract):
    """ Status of an event's delivery along one route.
    """

    fields = dict(
        attn=Field('attn', default=False),
        status=Field('status', default=''),
        text=Field('text', default=''),
    )


class EventContact(Contract):

    fields = dict(
        name=Field('name', default=''),
        affiliation=Field('org', default=''),
        role=Field('role', default=''),
        email=Field('email', default=''),
    )


class EventContacts(Contract):

    fields = dict(
        admin=Field('admin', kind=EventContact),
        tech=Field('tech', kind=EventContact),
    )


class EventApp(Contract):
    """ Provenance of an event: the project it belongs to.
    """

    fields = dict(
        app_uid=Field('uid', default=''),
        app_label=Field('label', default=''),
        contacts=Field('contacts', default=EventContacts, kind=EventContacts),
    )


class Event(Contract):
    """ A change notification emitted by the hub, carrying the note's body
        and payload along with routing metadata and a per-route log.
    """

    fields = dict(
        event_uid=Field('event', default=''),
        req=Field('req', default=''),
        rsp=Field('rsp', default=''),
        error=Field('err', default=''),
        note_id=Field('note', default=''),
        deleted=Field('deleted', default=False),
        sent=Field('queued', default=False),
        bulk=Field('bulk', default=False),
        notefile_id=Field('file', default=''),
        device_uid=Field('device', default=''),
        device_sn=Field('sn', default=''),
        product_uid=Field('product', default=''),
        endpoint_id=Field('endpoint', default=''),
        tower_country=Field('tower_country', default=''),
        tower_location=Field('tower_location', default=''),
        tower_timezone=Field('tower_timezone', default=''),
        tower_lat=Field('tower_lat', default=0.0),
        tower_lon=Field('tower_lon', default=0.0),
        when=Field('when', default=0),
        where=Field('where', default=''),
        where_lat=Field('where_lat', default=0.0),
        where_lon=Field('where_lon', default=0.0),
        where_location=Field('where_location', default=''),
        where_country=Field('where_country', default=''),
        where_timezone=Field('where_timezone', default=''),
        routed=Field('routed', default=0),
        updates=Field('updates', default=0),
        body=Field('body', omit='none'),
        payload=Field('payload', kind='bytes'),
        session_uid=Field('session', default=''),
        log_attn=Field('logattn', default=False),
        log=Field('log', default=dict, kind=EventLogEntry, container=dict),
        app=Field('project', default=EventApp, kind=EventApp),
    )


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
