"""Managed configuration files."""

from confnode.files.config_file import ConfigFile, DefaultSource
from confnode.files.state_machine import ConfigState, ConfigStateError


__all__ = [
    "ConfigFile",
    "ConfigState",
    "ConfigStateError",
    "DefaultSource",
]
