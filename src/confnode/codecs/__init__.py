"""Format codecs translating text to and from configuration trees."""

from confnode.codecs.base import Codec, CodecDescriptor
from confnode.codecs.hocon_codec import HOCON_DESCRIPTOR, HoconCodec
from confnode.codecs.json_codec import JSON_DESCRIPTOR, JsonCodec
from confnode.codecs.registry import CodecRegistry, default_registry
from confnode.codecs.yaml_codec import YAML_DESCRIPTOR, YamlCodec


__all__ = [
    "HOCON_DESCRIPTOR",
    "JSON_DESCRIPTOR",
    "YAML_DESCRIPTOR",
    "Codec",
    "CodecDescriptor",
    "CodecRegistry",
    "HoconCodec",
    "JsonCodec",
    "YamlCodec",
    "default_registry",
]
