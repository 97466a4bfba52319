import numpy as np

from collections import namedtuple

from .effstructs import FLAG_BITS, FLAG_NAMES

EffectHandleFlags = namedtuple("EffectHandleFlags", FLAG_NAMES)

def decode_raw(data):
    """4 flag bytes -> 32 bools, least significant bit of byte 0 first."""
    if len(data) != FLAG_BITS // 8:
        raise ValueError("flags must be %d bytes, got %d" % (FLAG_BITS // 8, len(data)))
    bits = np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8), bitorder="little")
    return [bool(b) for b in bits]

def encode_raw(bits):
    if len(bits) != FLAG_BITS:
        raise ValueError("expected %d flag bits, got %d" % (FLAG_BITS, len(bits)))
    return np.packbits(np.array(bits, dtype=np.uint8), bitorder="little").tobytes()

def to_named(data):
    return EffectHandleFlags(*decode_raw(data))

def from_named(flags):
    return encode_raw(list(flags))

__all__ = ["EffectHandleFlags", "decode_raw", "encode_raw", "to_named", "from_named"]
