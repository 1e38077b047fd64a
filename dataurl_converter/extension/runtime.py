"""Extension runtime: holds registered extensions and dispatches block calls.

Plays the host's part: reads each extension's manifest at registration and
routes ``invoke(extension_id, opcode, args)`` to the matching handler.
"""
from __future__ import annotations

import inspect
import re
from typing import Any, Mapping

from ..logging import create_subsystem_logger
from .types import Extension, ExtensionInfo

logger = create_subsystem_logger("extension")

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def handler_name_for_opcode(opcode: str) -> str:
    """convertDataURL -> convert_data_url"""
    return _CAMEL_BOUNDARY_RE.sub("_", opcode).lower()


class ExtensionRuntime:
    """
    Runtime for extensions: stores manifests, validates arguments and
    dispatches block invocations.
    """

    def __init__(self):
        self._extensions: dict[str, Extension] = {}
        self._infos: dict[str, ExtensionInfo] = {}

    def register(self, extension: Extension) -> ExtensionInfo:
        """Register an extension (raises ValueError if its id is taken)."""
        info = extension.get_info()
        if info.id in self._extensions:
            raise ValueError(f"Extension '{info.id}' already registered")

        for block in info.blocks:
            if self._resolve_handler(extension, block.opcode) is None:
                raise ValueError(f"Extension '{info.id}' has no handler for block '{block.opcode}'")

        self._extensions[info.id] = extension
        self._infos[info.id] = info
        logger.info(f"Registered extension {info.id} ({len(info.blocks)} blocks)")
        return info

    def unregister(self, extension_id: str) -> None:
        self._extensions.pop(extension_id, None)
        self._infos.pop(extension_id, None)

    def get_info(self, extension_id: str) -> ExtensionInfo:
        try:
            return self._infos[extension_id]
        except KeyError:
            raise KeyError(f"Unknown extension: {extension_id}") from None

    def list_extensions(self) -> list[ExtensionInfo]:
        return list(self._infos.values())

    async def invoke(self, extension_id: str, opcode: str, args: Mapping[str, Any] | None = None) -> Any:
        """
        Invoke a block.

        Missing arguments take their manifest defaults. Values for menus that
        do not accept reporters must be menu items.

        Raises:
            KeyError: Unknown extension or opcode
            ValueError: Menu value outside a closed menu
        """
        info = self.get_info(extension_id)
        block = info.get_block(opcode)
        if block is None:
            raise KeyError(f"Extension '{extension_id}' has no block '{opcode}'")

        resolved: dict[str, Any] = {}
        for name, spec in block.arguments.items():
            value = (args or {}).get(name, spec.default_value)
            if spec.menu:
                menu = info.menus[spec.menu]
                if not menu.accept_reporters and value not in menu.items:
                    raise ValueError(f"{value!r} is not an item of menu '{spec.menu}'")
            resolved[name] = value

        handler = self._resolve_handler(self._extensions[extension_id], opcode)
        logger.debug(f"Invoking {extension_id}.{opcode}")
        try:
            result = handler(resolved)
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            logger.exception(f"Block {extension_id}.{opcode} failed")
            raise
        return result

    @staticmethod
    def _resolve_handler(extension: Extension, opcode: str):
        for name in (handler_name_for_opcode(opcode), opcode):
            handler = getattr(extension, name, None)
            if callable(handler):
                return handler
        return None


_runtime: ExtensionRuntime | None = None


def get_extension_runtime() -> ExtensionRuntime:
    """Return the process-wide runtime."""
    global _runtime
    if _runtime is None:
        _runtime = ExtensionRuntime()
    return _runtime


def register_extension(extension: Extension) -> ExtensionInfo:
    """Register an extension with the process-wide runtime."""
    return get_extension_runtime().register(extension)
