"""Read and write EFF effect binding files from Super Smash Bros. Ultimate."""

from .errors import *
from .eff import EffFile, EffectHandle, EffectGroupElement, EffectModelEntry
from .effdata import EffData, EffectHandleData, EffectGroupElementData, EffectModelEntryData
from .flags import EffectHandleFlags

__version__ = "0.1.0"
