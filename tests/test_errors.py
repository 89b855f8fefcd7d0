import pytest

import notelink
from notelink.protocol import errors


def test_contains():

    error = "can't reach service {io} {network}"

    assert errors.contains(error, errors.IO) == True
    assert errors.contains(error, 'io') == True
    assert errors.contains(error, '{network}') == True
    assert errors.contains(error, errors.TIMEOUT) == False

    assert errors.contains(None, errors.IO) == False
    assert errors.contains('', errors.IO) == False


def test_strip():

    assert errors.strip("can't reach service {io} {network}") == "can't reach service"
    assert errors.strip('{io}') == ''
    assert errors.strip('note not found {note-noexist} in file data.db') == 'note not found in file data.db'
    assert errors.strip(None) == ''


def test_tokens():

    found = errors.tokens('{timeout}transaction timed out {io}')
    assert found == ['{timeout}', '{io}']

    for token in found:
        assert token in errors.canonical


def test_module_error():

    error = errors.ModuleError('no such note {note-noexist}', 'note.get')

    assert str(error) == 'note.get: no such note {note-noexist}'
    assert error.contains(errors.NOTE_NOEXIST)
    assert error.pretty() == 'no such note'
    assert errors.contains(error, 'note-noexist')


def test_transport_errors_carry_io():

    error = notelink.transport.TransportWriteError('write failed')
    assert errors.contains(error, errors.IO)
    assert error.contains('io')

    error = notelink.transport.TransportTimeout('no reply')
    assert errors.contains(error, errors.IO)
    assert errors.contains(error, errors.TIMEOUT)

    error = notelink.transport.TransportError('already tagged {io}')
    assert str(error).count('{io}') == 1


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
