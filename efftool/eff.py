import logging

from collections import namedtuple
from construct import Array, ConstructError

from . import effstructs, jsonio
from .effio import Cursor, read_string_table, write_string_table
from .effstructs import (
    MAGIC, VERSION, RESOURCE_ALIGNMENT, NO_RESOURCE,
    EffHeader, SECTION_COUNTS, LAYOUT,
)
from .errors import (
    BadSignature, TruncatedInput, InvalidHeader, MalformedStructuredInput,
)

logger = logging.getLogger(__name__)

EffectHandle = namedtuple("EffectHandle", """
    flags
    emitter_set_handle
    effect_model_entry_handle
    effect_group_element_start
    effect_group_element_count
""")

EffectGroupElement = namedtuple("EffectGroupElement", "emitter_set_start_frame emitter_set_handle")
EffectModelEntry = namedtuple("EffectModelEntry", "unk")


class TableCodec:
    """Fixed stride array of one record kind."""

    def __init__(self, struct, record):
        self.struct = struct
        self.record = record
        self.stride = struct.sizeof()

    def decode(self, cursor, pos, count):
        data = cursor.read_bytes(pos, self.stride * count)
        return [
            self.record(*(rec[f] for f in self.record._fields))
            for rec in Array(count, self.struct).parse(data)
        ]

    def encode(self, cursor, records, path="records"):
        start = len(cursor)
        for idx, rec in enumerate(records):
            try:
                data = self.struct.build(rec._asdict())
            except ConstructError as e:
                raise MalformedStructuredInput(jsonio.join(path, idx), str(e)) from e
            cursor.append_bytes(data)
        return len(cursor) - start, len(records)

TABLES = {
    "effect_handles":           TableCodec(effstructs.EffectHandle, EffectHandle),
    "effect_group_elements":    TableCodec(effstructs.EffectGroupElement, EffectGroupElement),
    "effect_model_entries":     TableCodec(effstructs.EffectModelEntry, EffectModelEntry),
}

NAME_TABLES = ("effect_handle_names", "effect_model_names", "parent_joint_names")

MAX_COUNT = 0x7FFF


def check_layout(layout):
    if sorted(layout) != sorted(LAYOUT):
        raise ValueError("layout must order exactly these sections: %s" % ", ".join(LAYOUT))

def resource_alignment_factor(size):
    return ((size + RESOURCE_ALIGNMENT) & ~(RESOURCE_ALIGNMENT - 1)) // RESOURCE_ALIGNMENT

def read_header(cursor):
    if cursor.read_bytes(0, len(MAGIC)) != MAGIC:
        raise BadSignature("missing %r magic" % MAGIC)
    header = EffHeader.parse(cursor.read_bytes(0, EffHeader.sizeof()))
    if header.version != VERSION:
        logger.warning("unexpected version 0x%08x, will be written as 0x%08x", header.version, VERSION)
    for key in set(SECTION_COUNTS.values()):
        if header[key] < 0:
            raise InvalidHeader("negative %s (%d)" % (key, header[key]))
    return header

def read_resource(cursor, pos, factor):
    if factor == NO_RESOURCE:
        return None
    alignment = factor * RESOURCE_ALIGNMENT if factor >= 1 else 1
    start = pos + (-pos % alignment)
    if start > len(cursor):
        raise TruncatedInput("resource at 0x%x starts past end of file (0x%x)" % (start, len(cursor)))
    return cursor.read_bytes(start, len(cursor) - start)


class EffFile:
    __slots__ = (
        "effect_handles",
        "effect_group_elements",
        "effect_model_entries",
        "effect_handle_names",
        "effect_model_names",
        "parent_joint_names",
        "resource_data",
    )

    def __init__(self, effect_handles=None, effect_group_elements=None, effect_model_entries=None,
                 effect_handle_names=None, effect_model_names=None, parent_joint_names=None,
                 resource_data=None):
        self.effect_handles = list(effect_handles or [])
        self.effect_group_elements = list(effect_group_elements or [])
        self.effect_model_entries = list(effect_model_entries or [])
        self.effect_handle_names = list(effect_handle_names or [])
        self.effect_model_names = list(effect_model_names or [])
        self.parent_joint_names = list(parent_joint_names or [])
        self.resource_data = resource_data

    def __eq__(self, other):
        if not isinstance(other, EffFile):
            return NotImplemented
        return all(getattr(self, k) == getattr(other, k) for k in self.__slots__)

    def __repr__(self):
        return "<EffFile handles=%d elements=%d models=%d resource=%s>" % (
            len(self.effect_handles), len(self.effect_group_elements), len(self.effect_model_entries),
            "none" if self.resource_data is None else "%d bytes" % len(self.resource_data))

    def counts(self):
        return {
            "effect_handle_count": len(self.effect_handles),
            "effect_model_count": len(self.effect_model_entries),
            "effect_group_element_count": len(self.effect_group_elements),
        }

    @classmethod
    def parse(cls, data, layout=LAYOUT):
        check_layout(layout)
        cursor = Cursor(data)
        header = read_header(cursor)

        pos = EffHeader.sizeof()
        sections = {}
        for name in layout:
            count = header[SECTION_COUNTS[name]]
            logger.debug("%s: %d entries at 0x%x", name, count, pos)
            if name in TABLES:
                codec = TABLES[name]
                sections[name] = codec.decode(cursor, pos, count)
                pos += codec.stride * count
            else:
                sections[name], pos = read_string_table(cursor, pos, count)

        resource = read_resource(cursor, pos, header.resource_alignment_factor)
        return cls(resource_data=resource, **sections)

    def check_counts(self):
        counts = self.counts()
        for name in LAYOUT:
            count = counts[SECTION_COUNTS[name]]
            if count > MAX_COUNT:
                raise MalformedStructuredInput(name, "%d entries, at most %d fit" % (count, MAX_COUNT))
            if len(getattr(self, name)) != count:
                raise MalformedStructuredInput(name,
                    "has %d entries, expected %d" % (len(getattr(self, name)), count))
        return counts

    def build(self, layout=LAYOUT):
        check_layout(layout)
        counts = self.check_counts()

        cursor = Cursor()
        cursor.reserve(EffHeader.sizeof())
        for name in layout:
            logger.debug("%s: %d entries at 0x%x", name, len(getattr(self, name)), len(cursor))
            if name in TABLES:
                TABLES[name].encode(cursor, getattr(self, name), name)
            else:
                write_string_table(cursor, getattr(self, name), name)

        factor = NO_RESOURCE
        if self.resource_data is not None:
            factor = resource_alignment_factor(len(cursor))
            cursor.align(factor * RESOURCE_ALIGNMENT)
            cursor.append_bytes(self.resource_data)

        header = dict(counts, magic=MAGIC, version=VERSION, resource_alignment_factor=factor)
        cursor.write_bytes(0, EffHeader.build(header))
        return cursor.getvalue()

    def to_dict(self):
        return {
            "effect_handles": [
                dict(h._asdict(), flags=list(h.flags)) for h in self.effect_handles
            ],
            "effect_group_elements": [e._asdict() for e in self.effect_group_elements],
            "effect_model_entries": [m._asdict() for m in self.effect_model_entries],
            "effect_handle_names": list(self.effect_handle_names),
            "effect_model_names": list(self.effect_model_names),
            "parent_joint_names": list(self.parent_joint_names),
        }

    @classmethod
    def from_dict(cls, doc, resource_data=None):
        jsonio.obj(doc, "")
        handles = []
        for path, item in jsonio.items(doc, "effect_handles", ""):
            handles.append(EffectHandle(
                flags=read_flag_bytes(item, path),
                emitter_set_handle=jsonio.int_field(item, "emitter_set_handle", path, "i32"),
                effect_model_entry_handle=jsonio.int_field(item, "effect_model_entry_handle", path, "i32"),
                effect_group_element_start=jsonio.int_field(item, "effect_group_element_start", path, "i16"),
                effect_group_element_count=jsonio.int_field(item, "effect_group_element_count", path, "i16"),
            ))
        elements = [
            EffectGroupElement(
                emitter_set_start_frame=jsonio.int_field(item, "emitter_set_start_frame", path, "i16"),
                emitter_set_handle=jsonio.int_field(item, "emitter_set_handle", path, "i16"),
            )
            for path, item in jsonio.items(doc, "effect_group_elements", "")
        ]
        models = [
            EffectModelEntry(unk=jsonio.int_field(item, "unk", path, "i8"))
            for path, item in jsonio.items(doc, "effect_model_entries", "")
        ]
        names = {
            key: [jsonio.string(item, path) for path, item in jsonio.items(doc, key, "")]
            for key in NAME_TABLES
        }
        eff = cls(handles, elements, models, resource_data=resource_data, **names)
        eff.check_counts()
        return eff

def read_flag_bytes(item, path):
    flags = jsonio.field(item, "flags", path)
    path = jsonio.join(path, "flags")
    jsonio.array(flags, path)
    if len(flags) != 4:
        raise MalformedStructuredInput(path, "expected 4 bytes, got %d" % len(flags))
    return bytes(jsonio.integer(b, jsonio.join(path, idx), "u8") for idx, b in enumerate(flags))

__all__ = [
    "EffectHandle", "EffectGroupElement", "EffectModelEntry",
    "TableCodec", "TABLES", "EffFile", "resource_alignment_factor",
]
