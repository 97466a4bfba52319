"""Byte cursor and null-terminated string tables.

Reads are addressed by absolute position. Writes append, except for
write_bytes/write_u32 which patch regions that already exist (the header).
"""

import logging

from construct import Int32ul

from .errors import OutOfBounds, InvalidString, MalformedStructuredInput

logger = logging.getLogger(__name__)

class Cursor:
    __slots__ = "data",

    def __init__(self, data=b""):
        self.data = bytearray(data)

    def __len__(self):
        return len(self.data)

    def getvalue(self):
        return bytes(self.data)

    def read_bytes(self, pos, length):
        if pos < 0 or length < 0 or pos + length > len(self.data):
            raise OutOfBounds(pos, length, len(self.data))
        return bytes(self.data[pos:pos + length])

    def read_u32(self, pos):
        return Int32ul.parse(self.read_bytes(pos, Int32ul.sizeof()))

    def read_cstring(self, pos):
        """Returns (string, position after the terminator)."""
        if pos < 0 or pos > len(self.data):
            raise OutOfBounds(pos, 1, len(self.data))
        end = self.data.find(b"\x00", pos)
        if end == -1:
            raise InvalidString("unterminated string at 0x%x" % pos)
        try:
            text = self.data[pos:end].decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidString("string at 0x%x is not valid UTF-8: %s" % (pos, e)) from e
        return text, end + 1

    def write_bytes(self, pos, data):
        if pos < 0 or pos + len(data) > len(self.data):
            raise OutOfBounds(pos, len(data), len(self.data))
        self.data[pos:pos + len(data)] = data

    def write_u32(self, pos, value):
        self.write_bytes(pos, Int32ul.build(value))

    def append_bytes(self, data):
        pos = len(self.data)
        self.data += data
        return pos

    def reserve(self, length):
        return self.append_bytes(b"\x00" * length)

    def align(self, alignment):
        pad = -len(self.data) % alignment
        if pad:
            self.reserve(pad)
        return len(self.data)


def encode_cstring(text, path=None):
    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise MalformedStructuredInput(path, "string %r is not encodable as UTF-8: %s" % (text, e)) from e
    if b"\x00" in data:
        raise MalformedStructuredInput(path, "string %r contains a null byte" % text)
    return data + b"\x00"

def read_string_table(cursor, pos, count):
    """Reads count packed strings starting at pos, returns (names, end)."""
    names = []
    for _ in range(count):
        name, pos = cursor.read_cstring(pos)
        names.append(name)
    return names, pos

def write_string_table(cursor, names, path="names"):
    """Appends names in order, returns the offset of each one."""
    offsets = []
    for idx, name in enumerate(names):
        offsets.append(cursor.append_bytes(encode_cstring(name, "%s[%d]" % (path, idx))))
    logger.debug("wrote %d strings for %s", len(names), path)
    return offsets
