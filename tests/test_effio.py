import pytest

from efftool.effio import Cursor, read_string_table, write_string_table, encode_cstring
from efftool.errors import OutOfBounds, TruncatedInput, InvalidString, MalformedStructuredInput

def test_u32_is_little_endian():
    c = Cursor(b"\x01\x02\x03\x04\xff\xff")
    assert c.read_u32(0) == 0x04030201

def test_read_past_end():
    c = Cursor(b"abc")
    with pytest.raises(OutOfBounds) as e:
        c.read_bytes(2, 2)
    assert isinstance(e.value, TruncatedInput)
    assert e.value.pos == 2 and e.value.size == 3
    with pytest.raises(OutOfBounds):
        c.read_u32(0)
    assert c.read_bytes(3, 0) == b""

def test_append_returns_offset():
    c = Cursor()
    assert c.append_bytes(b"ab") == 0
    assert c.append_bytes(b"cd") == 2
    assert c.getvalue() == b"abcd"

def test_backpatch_reserved_region():
    c = Cursor()
    c.reserve(8)
    c.append_bytes(b"tail")
    c.write_u32(4, 0x00020000)
    assert c.getvalue() == b"\x00" * 4 + b"\x00\x00\x02\x00" + b"tail"
    with pytest.raises(OutOfBounds):
        c.write_u32(10, 1)

def test_align():
    c = Cursor(b"x")
    assert c.align(16) == 16
    assert c.align(16) == 16
    assert c.getvalue() == b"x" + b"\x00" * 15

def test_read_string_table():
    c = Cursor(b"top\x00hip\x00\x00head\x00rest")
    names, end = read_string_table(c, 0, 4)
    assert names == ["top", "hip", "", "head"]
    assert end == 14

def test_read_string_missing_terminator():
    with pytest.raises(InvalidString):
        read_string_table(Cursor(b"top\x00hip"), 0, 2)

def test_read_string_bad_utf8():
    with pytest.raises(InvalidString):
        Cursor(b"\xff\xfe\x00").read_cstring(0)

def test_write_string_table():
    c = Cursor(b"HDR!")
    assert write_string_table(c, ["top", "ジョイント", ""]) == [4, 8, 24]
    names, end = read_string_table(c, 4, 3)
    assert names == ["top", "ジョイント", ""]
    assert end == len(c)

def test_embedded_null_rejected():
    with pytest.raises(MalformedStructuredInput) as e:
        write_string_table(Cursor(), ["ok", "bad\x00name"], "parent_joint_names")
    assert e.value.path == "parent_joint_names[1]"
    with pytest.raises(MalformedStructuredInput):
        encode_cstring("\x00")

def test_unencodable_string_rejected():
    with pytest.raises(MalformedStructuredInput) as e:
        write_string_table(Cursor(), ["top", "\ud800"], "parent_joint_names")
    assert e.value.path == "parent_joint_names[1]"
