"""
Data URL Converter extension

One reporter block, ``convert [DATAURL] to [FORMAT]``, backed by
DataURLConverter. The FORMAT menu is generated from ConversionFormat.
"""
from __future__ import annotations

from typing import Any, Mapping

from ..converter import ConversionFormat, DataURLConverter
from .runtime import ExtensionRuntime, get_extension_runtime
from .types import ArgumentSpec, BlockSpec, ExtensionInfo, MenuSpec

EXTENSION_ID = "dataURLConverter"
EXTENSION_NAME = "Data URL Converter"


class DataURLConverterExtension:
    """Host-facing wrapper around DataURLConverter."""

    def __init__(self, converter: DataURLConverter | None = None):
        self.converter = converter or DataURLConverter()

    def get_info(self) -> ExtensionInfo:
        return ExtensionInfo(
            id=EXTENSION_ID,
            name=EXTENSION_NAME,
            blocks=[
                BlockSpec(
                    opcode="convertDataURL",
                    block_type="reporter",
                    text="convert [DATAURL] to [FORMAT]",
                    arguments={
                        "DATAURL": ArgumentSpec(type="string", default_value="data:video/mp4;base64,..."),
                        "FORMAT": ArgumentSpec(type="string", menu="formats"),
                    },
                )
            ],
            menus={
                "formats": MenuSpec(accept_reporters=True, items=ConversionFormat.menu_items()),
            },
        )

    async def convert_data_url(self, args: Mapping[str, Any]) -> str:
        return await self.converter.convert_data_url(args)


def register(runtime: ExtensionRuntime | None = None, converter: DataURLConverter | None = None) -> DataURLConverterExtension:
    """Create the extension and register it with a runtime (default: process-wide)."""
    extension = DataURLConverterExtension(converter)
    (runtime or get_extension_runtime()).register(extension)
    return extension
