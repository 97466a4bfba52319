from construct import *

MAGIC = b"EFFN"
VERSION = 0x00020000

# resource alignment factor is in units of this
RESOURCE_ALIGNMENT = 0x1000
NO_RESOURCE = -1

EffHeader = Struct(
    "magic"                         / Bytes(4),
    "version"                       / Int32ul,
    "effect_handle_count"           / Int16sl,
    "effect_model_count"            / Int16sl,
    "effect_group_element_count"    / Int16sl,
    "resource_alignment_factor"     / Int16sl,
)

EffectHandle = Struct(
    "flags"                         / Bytes(4),
    "emitter_set_handle"            / Int32sl,
    "effect_model_entry_handle"     / Int32sl, # 1 based, 0 = none
    "effect_group_element_start"    / Int16sl, # 1 based, 0 = empty
    "effect_group_element_count"    / Int16sl,
)

EffectGroupElement = Struct(
    "emitter_set_start_frame"       / Int16sl,
    "emitter_set_handle"            / Int16sl,
)

EffectModelEntry = Struct(
    "unk"                           / Int8sl, # only ever 0 or 1
)

# section name -> header count field
SECTION_COUNTS = {
    "effect_handles":           "effect_handle_count",
    "effect_group_elements":    "effect_group_element_count",
    "effect_model_entries":     "effect_model_count",
    "effect_handle_names":      "effect_handle_count",
    "effect_model_names":       "effect_model_count",
    "parent_joint_names":       "effect_group_element_count",
}

LAYOUT = (
    "effect_handles",
    "effect_group_elements",
    "effect_model_entries",
    "effect_handle_names",
    "effect_model_names",
    "parent_joint_names",
)

FLAG_BITS = 32

# bit n is (flags[n // 8] >> (n % 8)) & 1
FLAG_NAMES = tuple("unk_%02d" % (n + 1) for n in range(FLAG_BITS))
FLAG_NAMES = FLAG_NAMES[:18] + ("hit_effect",) + FLAG_NAMES[19:23] + ("update_always",) + FLAG_NAMES[24:]

__all__ = [
    "MAGIC", "VERSION", "RESOURCE_ALIGNMENT", "NO_RESOURCE",
    "EffHeader", "EffectHandle", "EffectGroupElement", "EffectModelEntry",
    "SECTION_COUNTS", "LAYOUT", "FLAG_BITS", "FLAG_NAMES",
]
