""" Consistent Overhead Byte Stuffing (COBS), with an optional XOR mask.

    The encoded form of any buffer contains no zero bytes, so a reader can
    find frame boundaries by scanning for a single delimiter. When a *mask*
    is supplied every emitted byte is XOR'd with it; the encoded stream then
    never contains the mask value, which lets the mask itself (typically a
    newline) serve as the delimiter on a line-oriented link.
"""

# The largest code byte. A block of this many bytes carries 254 data bytes
# and no implied trailing zero.

full_block = 0xFF


def max_encoded_length(length):
    """ Return the worst-case encoded size for an input of *length* bytes.
    """

    return length + 1 + (length + 253) // 254


def encode(data, mask=0):
    """ COBS-encode the bytes-like *data*, XOR'ing each output byte with
        *mask*. Returns a new :class:`bytes`; the delimiter is not appended.
    """

    mask = int(mask) & 0xFF
    output = bytearray(max_encoded_length(len(data)))

    code_index = 0
    code = 1
    position = 1

    for byte in data:

        # A full block is only closed once another byte follows it, so that
        # input ending on a block boundary needs no trailing code byte.

        if code == full_block:
            output[code_index] = code ^ mask
            code_index = position
            position += 1
            code = 1

        if byte == 0:
            output[code_index] = code ^ mask
            code_index = position
            position += 1
            code = 1
            continue

        output[position] = byte ^ mask
        position += 1
        code += 1

    output[code_index] = code ^ mask
    return bytes(output[:position])


def decode_into(buffer, mask=0):
    """ Decode the COBS frame held in the bytearray *buffer*, in place.
        Decoding stops at the end of the buffer or at the first delimiter,
        which is any byte equal to *mask* (a zero after unmasking). Returns
        the number of recovered bytes, which occupy the front of *buffer*.
    """

    mask = int(mask) & 0xFF
    end = len(buffer)
    read = 0
    write = 0

    while read < end:
        code = buffer[read] ^ mask
        if code == 0:
            break

        read += 1
        block_end = read + code - 1
        if block_end > end:
            raise ValueError('COBS frame truncated')

        while read < block_end:
            byte = buffer[read] ^ mask
            if byte == 0:
                raise ValueError('COBS frame contains an unexpected zero')
            buffer[write] = byte
            write += 1
            read += 1

        # A zero is implied between blocks, except after a full block.

        if code != full_block and read < end and buffer[read] ^ mask != 0:
            buffer[write] = 0
            write += 1

    return write


def decode(data, mask=0):
    """ Decode a COBS frame, returning the recovered :class:`bytes`. If
        *data* is a :class:`bytearray` it is decoded in place and the
        returned value is a copy of its leading portion.
    """

    if isinstance(data, bytearray):
        buffer = data
    else:
        buffer = bytearray(data)

    length = decode_into(buffer, mask)
    return bytes(buffer[:length])


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
