""" Optional integrity check for requests sent to the module. A request
    carries a ``"crc":"SSSS:CCCCCCCC"`` field, where SSSS is the host's
    request sequence number and CCCCCCCC the CRC-32 of the JSON object as it
    was before the field was added. Modules that understand the field echo
    one back on the reply; modules that don't simply omit it.
"""

import re
import zlib


field_length = len(',"crc":"SSSS:CCCCCCCC"')
_crc_pattern = re.compile(rb'[ ,]"crc":"([^":]*):([^"]*)"}$')


class CRCError(ValueError):
    """ The CRC field of a reply was malformed or did not match.
    """


def _split_terminator(data):
    """ Separate the JSON object from whatever follows its final closing
        brace, typically the newline terminator.
    """

    index = data.rfind(b'}')

    if index == -1:
        return data, b''

    return data[:index+1], data[index+1:]



def add(data, seqno):
    """ Return *data*, a JSON-encoded request as bytes, with a CRC field
        appended. Any terminator after the closing brace is preserved.
    """

    data = bytes(data)

    if len(data) < 2:
        return data

    body, terminator = _split_terminator(data)
    crc = zlib.crc32(body) & 0xFFFFFFFF

    body = body[:-1]

    if b':' in body:
        body += b','
    else:
        body += b' '

    field = '"crc":"%04X:%08X"}' % (seqno & 0xFFFF, crc)
    return body + field.encode() + terminator



def check(data, seqno):
    """ Verify and remove the CRC field of a reply, returning the stripped
        JSON bytes. A reply without a CRC field is returned unchanged.
        :class:`CRCError` is raised if the field is malformed, or if its
        sequence number or checksum do not match.
    """

    data = bytes(data)

    if len(data) < 2:
        return data

    body, terminator = _split_terminator(data)

    if len(body) < field_length + 2:
        return data

    match = _crc_pattern.search(body)

    if match is None:
        return data

    stripped = body[:match.start()] + b'}'

    try:
        received_seqno = int(match.group(1), 16)
    except ValueError:
        raise CRCError('badly formatted CRC seqno')

    try:
        received_crc = int(match.group(2), 16)
    except ValueError:
        raise CRCError('badly formatted hex CRC')

    if received_seqno != seqno & 0xFFFF:
        raise CRCError('sequence number mismatch (%d != %d)' % (received_seqno, seqno & 0xFFFF))

    if received_crc != zlib.crc32(stripped) & 0xFFFFFFFF:
        raise CRCError('CRC mismatch')

    return stripped + terminator


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
