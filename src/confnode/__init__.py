"""Format-agnostic configuration trees with YAML, JSON and HOCON codecs."""

from confnode.binding import Binding, bind, defaults_tree, describe
from confnode.codecs import (
    Codec,
    CodecDescriptor,
    CodecRegistry,
    HoconCodec,
    JsonCodec,
    YamlCodec,
    default_registry,
)
from confnode.errors import (
    ConfigError,
    ConfigIOError,
    ParseError,
    SerializationError,
    TypeMismatchError,
    ValidationError,
)
from confnode.files import ConfigFile, ConfigState, ConfigStateError
from confnode.io import dumps, load, loads, save
from confnode.merge import merge, merge_all
from confnode.node import ABSENT, ConfigTree, Node, NodeKind, node_path, parse_path
from confnode.transform import Migration, Transformation


__version__ = "1.0.0"

__all__ = [
    "ABSENT",
    "Binding",
    "Codec",
    "CodecDescriptor",
    "CodecRegistry",
    "ConfigError",
    "ConfigFile",
    "ConfigIOError",
    "ConfigState",
    "ConfigStateError",
    "ConfigTree",
    "HoconCodec",
    "JsonCodec",
    "Migration",
    "Node",
    "NodeKind",
    "ParseError",
    "SerializationError",
    "Transformation",
    "TypeMismatchError",
    "ValidationError",
    "YamlCodec",
    "bind",
    "default_registry",
    "defaults_tree",
    "describe",
    "dumps",
    "load",
    "loads",
    "merge",
    "merge_all",
    "node_path",
    "parse_path",
    "save",
]
