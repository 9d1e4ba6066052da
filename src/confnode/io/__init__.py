"""Reading and writing configuration files."""

from confnode.io.atomic import AtomicWriter, WrittenFile
from confnode.io.loader import dumps, load, loads, read_source, save


__all__ = [
    "AtomicWriter",
    "WrittenFile",
    "dumps",
    "load",
    "loads",
    "read_source",
    "save",
]
