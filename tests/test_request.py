import pytest

import notelink
from notelink.note import NotefileInfo, NoteInfo
from notelink.protocol import Request, Response, RequestError
from notelink.protocol import fields


def test_basics():

    request = Request(fields.NOTE_ADD, file='data.qo', body={'temp': 21})
    assert request.req == 'note.add'
    assert request.file == 'data.qo'
    assert request['body'] == {'temp': 21}
    assert isinstance(request.id, int)
    assert request.id > 0

    # Unset fields read as empty.

    assert request.note is None
    assert request.deleted == False
    assert request.payload is None


def test_ids_are_unique():

    ids = set(Request('card.version').id for count in range(100))
    assert len(ids) == 100


def test_commands_have_no_id():

    command = Request(cmd='card.attn', mode='arm')
    assert command.id is None
    assert command.to_dict() == {'cmd': 'card.attn', 'mode': 'arm'}

    assert Request(cmd='card.attn', id=12).id == 12


def test_encode():

    request = Request('note.add', id=7, file='data.qo', body={'temp': 21}, deleted=False, note=None)
    decoded = notelink.json.loads(request.encode())

    assert decoded == {'req': 'note.add', 'id': 7, 'file': 'data.qo', 'body': {'temp': 21}}
    assert list(decoded.keys())[0] == 'req'


def test_body_and_payload_omitted_only_when_absent():

    request = Request('note.add', id=1, body={}, payload=b'')
    encoded = request.to_dict()
    assert encoded['body'] == {}
    assert encoded['payload'] == ''

    request = Request('note.add', id=1)
    encoded = request.to_dict()
    assert 'body' not in encoded
    assert 'payload' not in encoded


def test_payload_base64():

    request = Request('note.add', id=1, payload=b'\x00\xff binary')
    encoded = request.to_dict()
    assert encoded['payload'] == 'AP8gYmluYXJ5'

    decoded = Request.decode(request.encode())
    assert decoded.payload == b'\x00\xff binary'


def test_unknown_fields_round_trip():

    text = b'{"req":"card.future","id":3,"widget":{"a":[1,2]},"flag":false,"gone":0}'

    request = Request.decode(text)
    assert request.widget == {'a': [1, 2]}
    assert request['flag'] == False

    encoded = request.to_dict()
    assert encoded['widget'] == {'a': [1, 2]}

    # Unknown fields are carried verbatim, even when empty.

    assert encoded['flag'] == False
    assert encoded['gone'] == 0


def test_dictionary_access():

    request = Request('card.version')
    request['from'] = 'somewhere'
    assert 'from' in request
    assert request.get('from') == 'somewhere'
    assert request.to_dict()['from'] == 'somewhere'

    del request['from']
    assert 'from' not in request
    assert request.get('from') is None

    with pytest.raises(KeyError):
        request['missing']

    with pytest.raises(AttributeError):
        request.missing


def test_notefile_maps():

    text = b'{"info":{"data.qo":{"changes":3,"sync_priority":1}},"notes":{"n1":{"body":{"a":1}},"n2":{"deleted":true}},"total":2}'

    response = Response.decode(text)
    assert isinstance(response.info['data.qo'], NotefileInfo)
    assert response.info['data.qo'].changes == 3
    assert response.info['data.qo'].sync_priority == 1
    assert isinstance(response.notes['n1'], NoteInfo)
    assert response.notes['n1'].body == {'a': 1}
    assert response.notes['n2'].deleted == True
    assert response.total == 2

    assert notelink.json.loads(response.encode()) == notelink.json.loads(text)


def test_dict_info_accepted():

    request = Request('file.changes', id=1, info={'data.qo': {'changes': 1}})
    assert request.to_dict()['info'] == {'data.qo': {'changes': 1}}


def test_response_errors():

    response = Response.decode(b'{"err":"can\'t reach service {io} {network}"}\n')
    assert response.id is None
    assert response.error_contains('{io}')
    assert response.error_contains('network')
    assert response.error_contains('{timeout}') == False
    assert response.error_text() == "can't reach service"

    with pytest.raises(notelink.ModuleError) as info:
        response.raise_for_error()

    assert info.value.contains('{io}')


def test_response_without_error():

    response = Response.decode(b'{"version":"notecard-5.1.1"}')
    assert response.err is None
    assert response.error_contains('{io}') == False
    assert response.raise_for_error() is response
    assert response.version == 'notecard-5.1.1'


def test_module_error_names_request():

    request = Request('note.get', file='data.db', note='missing')
    response = Response.decode(b'{"err":"note not found {note-noexist}"}', request)

    with pytest.raises(notelink.ModuleError) as info:
        response.raise_for_error()

    assert str(info.value) == 'note.get: note not found {note-noexist}'
    assert info.value.request == 'note.get'


def test_malformed_replies():

    with pytest.raises(RequestError) as info:
        Response.decode(b'{"partial":')

    assert '{io}' in str(info.value)

    with pytest.raises(RequestError):
        Response.decode(b'[1, 2, 3]')

    with pytest.raises(RequestError):
        Request.decode(b'not json')

    with pytest.raises(RequestError):
        Request.from_dict({'payload': 'not base64!'})


def test_request_error_is_value_error():
    assert issubclass(RequestError, ValueError)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
