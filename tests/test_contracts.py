import pytest

import notelink
from notelink.note import notefile, event, session, dfu, message, access
from notelink.note import Note, Notefile, Tracker, NotefileInfo, NoteInfo


def test_notefile_suffixes():

    assert notefile.is_outbound_queue('data.qo') == True
    assert notefile.is_outbound_queue('data.qos') == True
    assert notefile.is_inbound_queue('commands.qi') == True
    assert notefile.is_queue('data.qo') == True
    assert notefile.is_queue('commands.qi') == True
    assert notefile.is_queue('state.db') == False
    assert notefile.is_database('state.db') == True
    assert notefile.is_database('data.qo') == False


def test_sync_priorities():

    priorities = (notefile.sync_priority_lowest, notefile.sync_priority_low,
                  notefile.sync_priority_normal, notefile.sync_priority_high,
                  notefile.sync_priority_highest)

    assert list(priorities) == sorted(priorities)
    assert notefile.sync_priority_normal == 0


def test_notefile_layout():

    stored = {
        'Q': True,
        'N': {'n1': {'b': {'a': 1}, 'u': 1, 'h': [{'w': 5, 'e': 'dev:A', 's': 1}]}},
        'T': {'hub': {'c': 4, 'i': 2}},
        'C': 4,
    }

    parsed = Notefile.from_dict(stored)
    assert parsed.queue == True
    assert isinstance(parsed.notes['n1'], Note)
    assert parsed.notes['n1'].endpoint_id() == 'dev:A'
    assert isinstance(parsed.trackers['hub'], Tracker)
    assert parsed.trackers['hub'].change == 4
    assert parsed.change == 4

    assert parsed.to_dict() == stored


def test_notefile_info():

    info = NotefileInfo(sync_hub_endpoint_id='hub', sync_on_change=True, sync_period_secs=60)
    assert info.to_dict() == {'sync_hub_endpoint': 'hub', 'sync_on_change': True, 'sync_secs': 60}


def test_note_info():

    info = NoteInfo(body={}, payload=b'')
    assert info.to_dict() == {'body': {}, 'payload': ''}
    assert NoteInfo().to_dict() == {}


def test_contract_rejects_unknown_attributes():

    with pytest.raises(TypeError):
        NotefileInfo(nonsense=True)

    with pytest.raises(TypeError):
        NotefileInfo.from_dict(['not', 'a', 'dict'])


def test_event_layout():

    received = {
        'event': '4d5b0c4e-2f50-4c1f-a1a0-8f1f0e1d2c3b',
        'file': 'data.qo',
        'note': 'n1',
        'device': 'dev:864475040000000',
        'product': 'product:com.example:sensor',
        'when': 1700000000,
        'body': {'temp': 21.5},
        'payload': 'AQID',
        'req': event.add,
        'tower_lat': 42.5,
        'log': {'route:1': {'attn': True, 'status': '500', 'text': 'server error'}},
        'project': {'uid': 'app:1', 'label': 'Sensors',
                    'contacts': {'admin': {'name': 'A. Person', 'email': 'a@example.com'}}},
        'brand_new_field': [1, 2, 3],
    }

    parsed = event.Event.from_dict(received)
    assert parsed.event_uid == received['event']
    assert parsed.notefile_id == 'data.qo'
    assert parsed.payload == b'\x01\x02\x03'
    assert parsed.body == {'temp': 21.5}
    assert parsed.tower_lat == 42.5
    assert isinstance(parsed.log['route:1'], event.EventLogEntry)
    assert parsed.log['route:1'].attn == True
    assert isinstance(parsed.app, event.EventApp)
    assert parsed.app.contacts.admin.email == 'a@example.com'
    assert parsed.app.contacts.tech is None
    assert parsed.extra == {'brand_new_field': [1, 2, 3]}

    assert parsed.to_dict() == received


def test_empty_event():

    assert event.Event().to_dict() == {}


def test_session_layout():

    received = {
        'session': 'sess:1',
        'device': 'dev:1',
        'tower': {'n': 'Boston', 'c': 'US', 'lat': 42.36, 'lon': -71.06, 'mcc': 310},
        'this': {'since': 10, 'bytes_rcvd': 100, 'notes_sent': 2},
        'period': {'duration': 3600},
    }

    parsed = session.DeviceSession.from_dict(received)
    assert isinstance(parsed.where, session.TowerLocation)
    assert parsed.where.name == 'Boston'
    assert parsed.this.rcvd_bytes == 100
    assert parsed.period.duration_secs == 3600
    assert parsed.next.to_dict() == {}

    assert parsed.to_dict() == received


def test_dfu_layout():

    received = {
        'card': {'type': 'card', 'file': 'notecard-5.1.1.bin', 'length': 1024,
                 'mode': dfu.phase_downloading, 'version': '5.1.1', 'dl_complete': True},
        'user': {'mode': dfu.phase_idle},
    }

    parsed = dfu.DFUEnv.from_dict(received)
    assert parsed.card.phase == 'downloading'
    assert parsed.card.download_complete == True
    assert parsed.user.phase in dfu.phases
    assert parsed.modem is None

    assert parsed.to_dict() == received


def test_contract_copy_is_deep():

    info = NotefileInfo(sync_priority=notefile.sync_priority_high)
    copied = info.copy()
    copied.sync_priority = notefile.sync_priority_low

    assert info.sync_priority == notefile.sync_priority_high
    assert info != copied


def test_message_layout():

    received = {
        'id': 'msg-42',
        'sent': 1700000000,
        'from': {'name': 'Ada', 'email': 'ada@example.com',
                 'addresses': [{'hub': 'a.example.com', 'device': 'dev:1', 'active': 1699990000}]},
        'to': [{'name': 'Grace', 'stags': [message.stag_received]}],
        'tags': [message.tag_urgent],
        'stags': [message.stag_sent],
        'content': 'water level high',
        'body': {},
        'priority': 2,
    }

    parsed = message.Message.from_dict(received)
    assert parsed.uid == 'msg-42'
    assert isinstance(parsed.sender, message.MessageContact)
    assert isinstance(parsed.sender.addresses[0], message.MessageAddress)
    assert parsed.sender.addresses[0].device_uid == 'dev:1'
    assert parsed.to[0].store_tags == ['received']
    assert parsed.content_type == message.content_ascii
    assert parsed.is_urgent() == True
    assert parsed.is_important() == False
    assert parsed.extra == {'priority': 2}

    # The empty body is kept; everything else round-trips unchanged.

    assert parsed.to_dict() == received


def test_empty_message():

    assert message.Message().to_dict() == {}
    assert notelink.note.Message is message.Message


def test_message_stores():

    assert notefile.is_outbound_queue(message.outbox) == True
    assert notefile.is_inbound_queue(message.inbox) == True
    assert notefile.is_database(message.store) == True
    assert notefile.is_database(message.contact_store) == True
    assert message.contact_owner_note_id == 'owner'


def test_access_resources():

    assert access.resource('dev') == access.resource_devices
    assert access.resource('dev', 'dev:864475040540000') == 'dev:864475040540000'
    assert access.resource('file', 'data.qo') == access.resource_notefile + 'data.qo'

    assert access.split('route:abc') == ('route', 'abc')
    assert access.is_wildcard(access.resource_apps) == True
    assert access.is_wildcard('app:123') == False

    with pytest.raises(ValueError):
        access.split('nokind')


def test_access_actions():

    assert access.allowed('app', access.action_monitor) == True
    assert access.allowed('dev', access.action_create) == False
    assert access.allowed('file', access.action_delete) == True
    assert access.allowed('unknown', access.action_read) == False


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
