"""JSON reading/writing and field checks for structured documents.

Every check takes the dotted path of the value it looks at so a bad
document reports exactly which field is wrong.
"""

import json

from .errors import MalformedStructuredInput

INT_RANGES = {
    "i8":  (-0x80, 0x7F),
    "u8":  (0, 0xFF),
    "i16": (-0x8000, 0x7FFF),
    "i32": (-0x80000000, 0x7FFFFFFF),
}

def dumps(doc):
    return json.dumps(doc, indent=2, ensure_ascii=False) + "\n"

def loads(data):
    try:
        return json.loads(data)
    except ValueError as e:
        raise MalformedStructuredInput("", "invalid JSON: %s" % e) from e

def join(path, key):
    if isinstance(key, int):
        return "%s[%d]" % (path, key)
    return "%s.%s" % (path, key) if path else key

def obj(value, path):
    if not isinstance(value, dict):
        raise MalformedStructuredInput(path, "expected an object, got %s" % type(value).__name__)
    return value

def field(value, key, path):
    obj(value, path)
    if key not in value:
        raise MalformedStructuredInput(join(path, key), "missing field")
    return value[key]

def array(value, path):
    if not isinstance(value, list):
        raise MalformedStructuredInput(path, "expected an array, got %s" % type(value).__name__)
    return value

def integer(value, path, kind):
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedStructuredInput(path, "expected an integer, got %r" % (value,))
    lo, hi = INT_RANGES[kind]
    if not lo <= value <= hi:
        raise MalformedStructuredInput(path, "%d does not fit in %s" % (value, kind))
    return value

def boolean(value, path):
    if not isinstance(value, bool):
        raise MalformedStructuredInput(path, "expected true or false, got %r" % (value,))
    return value

def string(value, path):
    if not isinstance(value, str):
        raise MalformedStructuredInput(path, "expected a string, got %r" % (value,))
    if "\x00" in value:
        raise MalformedStructuredInput(path, "string contains a null byte")
    return value

def int_field(value, key, path, kind):
    return integer(field(value, key, path), join(path, key), kind)

def str_field(value, key, path):
    return string(field(value, key, path), join(path, key))

def items(value, key, path):
    """Yields (path, item) for each element of the array at value[key]."""
    sub = join(path, key)
    for idx, item in enumerate(array(field(value, key, path), sub)):
        yield join(sub, idx), item
