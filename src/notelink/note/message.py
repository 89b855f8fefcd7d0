""" Person-to-person messages exchanged through notefiles, and the address
    book entries they are sent to. Outgoing messages are queued in
    :data:`outbox`, incoming ones arrive in :data:`inbox`, and both are
    filed in :data:`store` once handled.
"""

from .contract import Contract, Field


outbox = 'messages.qo'
inbox = 'messages.qi'
store = 'messages.db'
contact_store = 'contacts.db'

# The note in the contact store describing the owner of the device.

contact_owner_note_id = 'owner'

# An empty content type means plain ASCII content.

content_ascii = ''

tag_important = 'important'
tag_urgent = 'urgent'

# Store tags record how a message came to be in the store.

stag_sent = 'sent'
stag_received = 'received'


class MessageAddress(Contract):
    """ One device a contact can be reached at. *active* is the time the
        address was last seen in use.
    """

    fields = dict(
        hub=Field('hub', default=''),
        product_uid=Field('product', default=''),
        device_uid=Field('device', default=''),
        device_sn=Field('sn', default=''),
        active=Field('active', default=0),
    )


class MessageContact(Contract):

    fields = dict(
        name=Field('name', default=''),
        email=Field('email', default=''),
        store_tags=Field('stags', default=list, container=list),
        addresses=Field('addresses', default=list, kind=MessageAddress, container=list),
    )


class Message(Contract):
    """ A message from one contact to any number of others. The *body*
        carries structured content alongside the *content* text; an empty
        body is sent as-is.
    """

    fields = dict(
        uid=Field('id', default=''),
        sent=Field('sent', default=0),
        received=Field('received', default=0),
        sender=Field('from', default=MessageContact, kind=MessageContact),
        to=Field('to', default=list, kind=MessageContact, container=list),
        tags=Field('tags', default=list, container=list),
        store_tags=Field('stags', default=list, container=list),
        content_type=Field('type', default=''),
        content=Field('content', default=''),
        body=Field('body', omit='none'),
    )


    def is_important(self):
        return tag_important in self.tags


    def is_urgent(self):
        return tag_urgent in self.tags


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
