"""Host extension registration"""

from .converter_extension import EXTENSION_ID, DataURLConverterExtension, register
from .runtime import ExtensionRuntime, get_extension_runtime, register_extension
from .types import ArgumentSpec, BlockSpec, Extension, ExtensionInfo, MenuSpec

__all__ = [
    "EXTENSION_ID",
    "DataURLConverterExtension",
    "register",
    "ExtensionRuntime",
    "get_extension_runtime",
    "register_extension",
    "ArgumentSpec",
    "BlockSpec",
    "Extension",
    "ExtensionInfo",
    "MenuSpec",
]
