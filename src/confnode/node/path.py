"""Node path helpers.

A path is a tuple of segments: ``str`` keys address mapping children and
``int`` indices address sequence elements. The empty tuple is the root.
Dotted strings such as ``"servers[0].host"`` are accepted wherever a path is.
"""

import re
from typing import TypeAlias

from confnode.errors import ValidationError


PathSegment: TypeAlias = str | int
NodePath: TypeAlias = tuple[PathSegment, ...]
PathLike: TypeAlias = NodePath | str

# A key, optionally followed by one or more [index] suffixes
_SEGMENT_PATTERN = re.compile(r"^(?P<key>[^\[\]]*)(?P<indices>(\[-?\d+\])*)$")
_INDEX_PATTERN = re.compile(r"\[(-?\d+)\]")


def node_path(*segments: PathSegment) -> NodePath:
    """Build a path from segments.

    Raises:
        ValidationError: If a segment is neither str nor int.
    """
    for segment in segments:
        if isinstance(segment, bool) or not isinstance(segment, str | int):
            raise ValidationError(f"invalid path segment: {segment!r}")
    return tuple(segments)


def parse_path(text: str) -> NodePath:
    """Parse a dotted path string.

    ``""`` is the root, ``"a.b"`` is ``("a", "b")`` and ``"a[0].b"`` is
    ``("a", 0, "b")``.

    Args:
        text: Dotted path.

    Returns:
        Path tuple.

    Raises:
        ValidationError: If the text is not a well-formed path.
    """
    if text == "":
        return ()

    segments: list[PathSegment] = []
    for part in text.split("."):
        match = _SEGMENT_PATTERN.match(part)
        if match is None:
            raise ValidationError(f"malformed path: {text!r}")
        key = match.group("key")
        indices = match.group("indices")
        if key:
            segments.append(key)
        elif not indices:
            raise ValidationError(f"empty segment in path: {text!r}")
        segments.extend(int(index) for index in _INDEX_PATTERN.findall(indices))
    return tuple(segments)


def as_path(path: PathLike) -> NodePath:
    """Normalize a path-like value to a path tuple."""
    if isinstance(path, str):
        return parse_path(path)
    return node_path(*path)
