"""Logging setup for the converter."""

from __future__ import annotations

from .subsystem import ROOT_LOGGER_NAME, SubsystemLogger, create_subsystem_logger, setup_logging

__all__ = [
    "create_subsystem_logger",
    "SubsystemLogger",
    "setup_logging",
    "ROOT_LOGGER_NAME",
]
