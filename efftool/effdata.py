"""Hand-editable view of an EFF file.

Handles carry their own name, their flags as named booleans, the name of
their effect model and their group elements inline. Converting back
recomputes every index; a model name that no entry has yet gets a new entry
(unk = 0) appended instead of failing.
"""

import logging

from collections import namedtuple

from . import jsonio
from .eff import EffFile, EffectHandle, EffectGroupElement, EffectModelEntry
from .effstructs import LAYOUT, FLAG_NAMES
from .errors import UnresolvedReference, MalformedStructuredInput
from .flags import EffectHandleFlags, to_named, from_named

logger = logging.getLogger(__name__)

EffectHandleData = namedtuple("EffectHandleData", """
    name
    flags
    emitter_set_handle
    effect_model_name
    effect_group
""")

EffectGroupElementData = namedtuple("EffectGroupElementData", """
    emitter_set_start_frame
    emitter_set_handle
    parent_joint_name
""")

EffectModelEntryData = namedtuple("EffectModelEntryData", "name unk")


def resolve_model_name(eff, handle, path):
    idx = handle.effect_model_entry_handle
    if idx == 0:
        return ""
    if not 1 <= idx <= len(eff.effect_model_names):
        raise UnresolvedReference("%s.effect_model_entry_handle: %d, file has %d effect models"
            % (path, idx, len(eff.effect_model_names)))
    return eff.effect_model_names[idx - 1]

def resolve_group(eff, handle, path):
    count = handle.effect_group_element_count
    if count == 0:
        return []
    start = handle.effect_group_element_start - 1
    if count < 0 or start < 0 or start + count > len(eff.effect_group_elements):
        raise UnresolvedReference("%s: group elements %d..%d, file has %d"
            % (path, start + 1, start + count, len(eff.effect_group_elements)))
    return [
        EffectGroupElementData(e.emitter_set_start_frame, e.emitter_set_handle, joint)
        for e, joint in zip(eff.effect_group_elements[start:start + count],
                            eff.parent_joint_names[start:start + count])
    ]


class EffData:
    __slots__ = "effect_handles", "effect_model_entries", "resource_data"

    def __init__(self, effect_handles=None, effect_model_entries=None, resource_data=None):
        self.effect_handles = list(effect_handles or [])
        self.effect_model_entries = list(effect_model_entries or [])
        self.resource_data = resource_data

    def __eq__(self, other):
        if not isinstance(other, EffData):
            return NotImplemented
        return all(getattr(self, k) == getattr(other, k) for k in self.__slots__)

    def __repr__(self):
        return "<EffData handles=%d models=%d>" % (len(self.effect_handles), len(self.effect_model_entries))

    @classmethod
    def from_eff(cls, eff):
        handles = []
        for idx, (handle, name) in enumerate(zip(eff.effect_handles, eff.effect_handle_names)):
            path = "effect_handles[%d]" % idx
            handles.append(EffectHandleData(
                name=name,
                flags=to_named(handle.flags),
                emitter_set_handle=handle.emitter_set_handle,
                effect_model_name=resolve_model_name(eff, handle, path),
                effect_group=resolve_group(eff, handle, path),
            ))
        models = [
            EffectModelEntryData(name, model.unk)
            for model, name in zip(eff.effect_model_entries, eff.effect_model_names)
        ]
        return cls(handles, models, eff.resource_data)

    def to_eff(self):
        models = list(self.effect_model_entries)
        model_index = {}
        for idx, model in enumerate(models):
            model_index.setdefault(model.name, idx + 1)

        handles = []
        elements = []
        joints = []
        for handle in self.effect_handles:
            model_handle = 0
            if handle.effect_model_name:
                model_handle = model_index.get(handle.effect_model_name)
                if model_handle is None:
                    models.append(EffectModelEntryData(handle.effect_model_name, 0))
                    model_handle = model_index[handle.effect_model_name] = len(models)
                    logger.info("registered new effect model %r for handle %r",
                        handle.effect_model_name, handle.name)

            start = len(elements) + 1 if handle.effect_group else 0
            for element in handle.effect_group:
                elements.append(EffectGroupElement(element.emitter_set_start_frame, element.emitter_set_handle))
                joints.append(element.parent_joint_name)

            handles.append(EffectHandle(
                flags=from_named(handle.flags),
                emitter_set_handle=handle.emitter_set_handle,
                effect_model_entry_handle=model_handle,
                effect_group_element_start=start,
                effect_group_element_count=len(handle.effect_group),
            ))

        return EffFile(
            effect_handles=handles,
            effect_group_elements=elements,
            effect_model_entries=[EffectModelEntry(model.unk) for model in models],
            effect_handle_names=[handle.name for handle in self.effect_handles],
            effect_model_names=[model.name for model in models],
            parent_joint_names=joints,
            resource_data=self.resource_data,
        )

    @classmethod
    def parse(cls, data, layout=LAYOUT):
        return cls.from_eff(EffFile.parse(data, layout))

    def build(self, layout=LAYOUT):
        return self.to_eff().build(layout)

    def to_dict(self):
        return {
            "effect_handles": [
                dict(handle._asdict(),
                     flags=handle.flags._asdict(),
                     effect_group=[e._asdict() for e in handle.effect_group])
                for handle in self.effect_handles
            ],
            "effect_model_entries": [model._asdict() for model in self.effect_model_entries],
        }

    @classmethod
    def from_dict(cls, doc, resource_data=None):
        jsonio.obj(doc, "")
        handles = [
            EffectHandleData(
                name=jsonio.str_field(item, "name", path),
                flags=read_named_flags(item, path),
                emitter_set_handle=jsonio.int_field(item, "emitter_set_handle", path, "i32"),
                effect_model_name=jsonio.str_field(item, "effect_model_name", path),
                effect_group=[
                    EffectGroupElementData(
                        emitter_set_start_frame=jsonio.int_field(e, "emitter_set_start_frame", p, "i16"),
                        emitter_set_handle=jsonio.int_field(e, "emitter_set_handle", p, "i16"),
                        parent_joint_name=jsonio.str_field(e, "parent_joint_name", p),
                    )
                    for p, e in jsonio.items(item, "effect_group", path)
                ],
            )
            for path, item in jsonio.items(doc, "effect_handles", "")
        ]
        models = [
            EffectModelEntryData(
                name=jsonio.str_field(item, "name", path),
                unk=jsonio.int_field(item, "unk", path, "i8"),
            )
            for path, item in jsonio.items(doc, "effect_model_entries", "")
        ]
        return cls(handles, models, resource_data)

def read_named_flags(item, path):
    flags = jsonio.obj(jsonio.field(item, "flags", path), jsonio.join(path, "flags"))
    path = jsonio.join(path, "flags")
    for key in flags:
        if key not in FLAG_NAMES:
            raise MalformedStructuredInput(jsonio.join(path, key), "unknown flag")
    return EffectHandleFlags(*(
        jsonio.boolean(jsonio.field(flags, name, path), jsonio.join(path, name))
        for name in FLAG_NAMES
    ))

__all__ = [
    "EffectHandleData", "EffectGroupElementData", "EffectModelEntryData", "EffData",
]
