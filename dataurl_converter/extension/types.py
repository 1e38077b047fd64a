"""Extension type definitions

The manifest shape a block-based host reads from ``get_info()``.
Fields are snake_case in Python and camelCase on the host side.
"""
from __future__ import annotations

import re
from typing import Any, Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field, model_validator

_PLACEHOLDER_RE = re.compile(r"\[([A-Z0-9_]+)\]")


class _HostModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_host_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ArgumentSpec(_HostModel):
    """One block argument"""

    type: Literal["string", "number", "boolean"] = "string"
    default_value: Any | None = Field(default=None, alias="defaultValue")
    menu: str | None = None


class BlockSpec(_HostModel):
    """One block; ``text`` references arguments as [NAME]"""

    opcode: str
    block_type: Literal["reporter", "command", "boolean"] = Field(alias="blockType")
    text: str
    arguments: dict[str, ArgumentSpec] = {}

    @model_validator(mode="after")
    def _check_placeholders(self) -> "BlockSpec":
        placeholders = set(_PLACEHOLDER_RE.findall(self.text))
        missing = placeholders - set(self.arguments)
        if missing:
            raise ValueError(f"Block {self.opcode} text references undefined arguments: {sorted(missing)}")
        return self


class MenuSpec(_HostModel):
    """Fixed menu; with accept_reporters the host also allows free values"""

    accept_reporters: bool = Field(default=False, alias="acceptReporters")
    items: list[str]


class ExtensionInfo(_HostModel):
    """Extension manifest returned by get_info()"""

    id: str
    name: str
    blocks: list[BlockSpec] = []
    menus: dict[str, MenuSpec] = {}

    @model_validator(mode="after")
    def _check_menus(self) -> "ExtensionInfo":
        for block in self.blocks:
            for arg_name, arg in block.arguments.items():
                if arg.menu and arg.menu not in self.menus:
                    raise ValueError(f"Argument {block.opcode}.{arg_name} uses unknown menu {arg.menu!r}")
        return self

    def get_block(self, opcode: str) -> BlockSpec | None:
        return next((b for b in self.blocks if b.opcode == opcode), None)


class Extension(Protocol):
    """
    Extension protocol

    Extensions must implement:
    - get_info() -> ExtensionInfo
    and one handler per block opcode (camelCase opcode, snake_case method).
    """

    def get_info(self) -> ExtensionInfo:
        ...
