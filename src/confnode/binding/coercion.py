"""Conversion between nodes and typed Python values.

Supported targets are ``bool``, ``int``, ``float``, ``str``, enums,
``Optional``/``Union``/``Literal``, ``Any``, ``Node``, ``list``, ``tuple``,
``set``, ``frozenset``, ``dict``, dataclasses and pydantic models. Records
bind each field to a sub-path named after the field, or after the override
given by ``field(metadata={"name": ...})`` (dataclasses) or
``Field(alias=...)`` (pydantic).
"""

import dataclasses
import types
from collections.abc import Callable, Mapping, MutableSequence, Sequence
from collections.abc import Set as AbstractSet
from enum import Enum
from typing import (
    Annotated,
    Any,
    Final,
    Literal,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from confnode.errors import TypeMismatchError, ValidationError
from confnode.node import Node, NodeKind, NodePath


_TRUE_STRINGS: Final = frozenset({"true", "yes", "on"})
_FALSE_STRINGS: Final = frozenset({"false", "no", "off"})

_LIST_ORIGINS: Final = (list, Sequence, MutableSequence)
_SET_ORIGINS: Final = (set, frozenset, AbstractSet)
_DICT_ORIGINS: Final = (dict, Mapping)
_UNION_ORIGINS: Final = (Union, types.UnionType)


def describe_type(target: Any) -> str:
    """Human-readable name of a type hint."""
    if isinstance(target, type) and get_origin(target) is None:
        return target.__name__
    return str(target).replace("typing.", "")


def _mismatch(node: Node, target: Any, path: NodePath) -> TypeMismatchError:
    return TypeMismatchError(
        f"cannot read {node.kind.value} node as {describe_type(target)}",
        path=path,
        expected=describe_type(target),
        actual=node.kind.value,
    )


def _unwrap(target: Any) -> tuple[Any, Any, tuple[Any, ...]]:
    """Strip ``Annotated`` and return ``(target, origin, args)``."""
    while get_origin(target) is Annotated:
        target = get_args(target)[0]
    return target, get_origin(target), get_args(target)


def admits_none(target: Any) -> bool:
    """True when ``None`` (a NULL node) is a valid value of ``target``."""
    target, origin, args = _unwrap(target)
    if target is Any or target is object or target is Node:
        return True
    if target is type(None):
        return True
    if origin in _UNION_ORIGINS:
        return any(admits_none(option) for option in args)
    if origin is Literal:
        return None in args
    return False


def _record_key(field: dataclasses.Field[Any]) -> str:
    return str(field.metadata.get("name", field.name))


def _model_key(name: str, model: type[BaseModel]) -> str:
    alias = model.model_fields[name].alias
    return alias or name


def read_value(node: Node, target: Any, path: NodePath = ()) -> Any:
    """Coerce a node to a value of type ``target``.

    Args:
        node: Source node.
        target: Type hint to produce.
        path: Path of ``node``, used in error messages.

    Returns:
        The typed value.

    Raises:
        TypeMismatchError: If the node cannot be coerced.
        ValidationError: If the value violates a constraint (set duplicates,
            tuple length, missing record fields, pydantic validation).
    """
    target, origin, args = _unwrap(target)

    if target is Any or target is object:
        return node.to_python()
    if target is Node:
        return node.copy()
    if origin in _UNION_ORIGINS:
        return _read_union(node, target, args, path)
    if origin is Literal:
        return _read_literal(node, target, args, path)
    if target is type(None):
        if node.is_null:
            return None
        raise _mismatch(node, target, path)

    container = origin or target
    if container in _LIST_ORIGINS:
        item_type = args[0] if args else Any
        items = _items(node, target, path)
        return [
            read_value(item, item_type, path + (i,)) for i, item in enumerate(items)
        ]
    if container is tuple:
        return _read_tuple(node, target, args, path)
    if container in _SET_ORIGINS:
        return _read_set(node, target, container, args, path)
    if container in _DICT_ORIGINS:
        return _read_dict(node, target, args, path)

    if isinstance(target, type):
        reader = _SCALAR_READERS.get(target)
        if reader is not None:
            return reader(node, path)
        if issubclass(target, Enum):
            return _read_enum(node, target, path)
        if dataclasses.is_dataclass(target):
            return _read_dataclass(node, target, path)
        if issubclass(target, BaseModel):
            return _read_model(node, target, path)

    raise TypeMismatchError(
        f"unsupported binding type {describe_type(target)}",
        path=path,
        expected=describe_type(target),
    )


def _read_bool(node: Node, path: NodePath) -> bool:
    if node.kind is NodeKind.BOOLEAN:
        return bool(node.value)
    if node.kind is NodeKind.STRING:
        text = node.value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise _mismatch(node, bool, path)


def _read_int(node: Node, path: NodePath) -> int:
    if node.kind is NodeKind.NUMBER:
        if isinstance(node.value, int):
            return node.value
        if node.value.is_integer():
            return int(node.value)
    elif node.kind is NodeKind.STRING:
        try:
            return int(node.value.strip())
        except ValueError:
            pass
    raise _mismatch(node, int, path)


def _read_float(node: Node, path: NodePath) -> float:
    if node.kind is NodeKind.NUMBER:
        return float(node.value)
    if node.kind is NodeKind.STRING:
        try:
            return float(node.value.strip())
        except ValueError:
            pass
    raise _mismatch(node, float, path)


def _read_str(node: Node, path: NodePath) -> str:
    if node.kind is NodeKind.STRING:
        return str(node.value)
    if node.kind is NodeKind.BOOLEAN:
        return "true" if node.value else "false"
    if node.kind is NodeKind.NUMBER:
        return str(node.value)
    raise _mismatch(node, str, path)


_SCALAR_READERS: Final[dict[type, Callable[[Node, NodePath], Any]]] = {
    bool: _read_bool,
    int: _read_int,
    float: _read_float,
    str: _read_str,
}


def _read_enum(node: Node, target: type[Enum], path: NodePath) -> Enum:
    if node.is_scalar and not node.is_null:
        for member in target:
            if type(member.value) is type(node.value) and member.value == node.value:
                return member
        if node.kind is NodeKind.STRING:
            wanted = node.value.strip()
            for member in target:
                if str(member.value) == wanted or member.name.lower() == wanted.lower():
                    return member
    raise TypeMismatchError(
        f"{node.to_python()!r} is not a valid {target.__name__}",
        path=path,
        expected=" | ".join(str(member.value) for member in target),
        actual=node.kind.value,
    )


def _is_natural(option: Any, node: Node) -> bool:
    """True when ``option`` reads ``node`` without any coercion."""
    option, origin, _ = _unwrap(option)
    container = origin or option
    if node.kind is NodeKind.BOOLEAN:
        return option is bool
    if node.kind is NodeKind.NUMBER:
        return option is type(node.value)
    if node.kind is NodeKind.STRING:
        return option is str
    if node.kind is NodeKind.SEQUENCE:
        return (
            container in _LIST_ORIGINS
            or container in _SET_ORIGINS
            or container is tuple
        )
    return False


def _read_union(
    node: Node, target: Any, args: tuple[Any, ...], path: NodePath
) -> Any:
    if node.is_null and type(None) in args:
        return None
    # Prefer options matching the node kind exactly, so ``str | int`` keeps 5
    ordered = sorted(
        (option for option in args if option is not type(None)),
        key=lambda option: not _is_natural(option, node),
    )
    for option in ordered:
        try:
            return read_value(node, option, path)
        except TypeMismatchError:
            continue
    raise _mismatch(node, target, path)


def _read_literal(
    node: Node, target: Any, args: tuple[Any, ...], path: NodePath
) -> Any:
    value = node.to_python()
    for option in args:
        if type(option) is type(value) and option == value:
            return option
    raise _mismatch(node, target, path)


def _items(node: Node, target: Any, path: NodePath) -> list[Node]:
    if node.kind is not NodeKind.SEQUENCE:
        raise _mismatch(node, target, path)
    return list(node.value)


def _read_tuple(
    node: Node, target: Any, args: tuple[Any, ...], path: NodePath
) -> tuple[Any, ...]:
    items = _items(node, target, path)
    if not args or (len(args) == 2 and args[1] is Ellipsis):
        item_type = args[0] if args else Any
        return tuple(
            read_value(item, item_type, path + (i,)) for i, item in enumerate(items)
        )
    if len(items) != len(args):
        raise ValidationError(
            f"expected {len(args)} elements, found {len(items)}",
            path=path,
        )
    return tuple(
        read_value(item, item_type, path + (i,))
        for i, (item, item_type) in enumerate(zip(items, args, strict=True))
    )


def _read_set(
    node: Node,
    target: Any,
    container: Any,
    args: tuple[Any, ...],
    path: NodePath,
) -> set[Any] | frozenset[Any]:
    item_type = args[0] if args else Any
    result: set[Any] = set()
    for i, item in enumerate(_items(node, target, path)):
        value = read_value(item, item_type, path + (i,))
        try:
            duplicate = value in result
        except TypeError as e:
            raise TypeMismatchError(
                f"set elements must be hashable, got {type(value).__name__}",
                path=path + (i,),
            ) from e
        if duplicate:
            raise ValidationError(f"duplicate set element {value!r}", path=path + (i,))
        result.add(value)
    return frozenset(result) if container is frozenset else result


def _read_key(key: str, key_type: Any, path: NodePath) -> Any:
    if key_type is Any or key_type is str:
        return key
    return read_value(Node.string(key), key_type, path)


def _read_dict(
    node: Node, target: Any, args: tuple[Any, ...], path: NodePath
) -> dict[Any, Any]:
    if node.kind is not NodeKind.MAPPING:
        raise _mismatch(node, target, path)
    key_type, value_type = args if args else (Any, Any)
    result: dict[Any, Any] = {}
    for key, child in node.value.items():
        child_path = path + (key,)
        typed_key = _read_key(key, key_type, child_path)
        result[typed_key] = read_value(child, value_type, child_path)
    return result


def _read_dataclass(node: Node, target: Any, path: NodePath) -> Any:
    if node.kind is not NodeKind.MAPPING:
        raise _mismatch(node, target, path)
    hints = get_type_hints(target, include_extras=True)
    kwargs: dict[str, Any] = {}
    for field in dataclasses.fields(target):
        if not field.init:
            continue
        key = _record_key(field)
        child = node.value.get(key)
        field_type = hints[field.name]
        if child is None or (child.is_null and not admits_none(field_type)):
            has_default = (
                field.default is not dataclasses.MISSING
                or field.default_factory is not dataclasses.MISSING
            )
            if has_default:
                continue
            raise ValidationError(f"missing required field {key!r}", path=path)
        kwargs[field.name] = read_value(child, field_type, path + (key,))

    try:
        return target(**kwargs)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"invalid {target.__name__}: {e}", path=path) from e


def _read_model(node: Node, target: type[BaseModel], path: NodePath) -> BaseModel:
    if node.kind is not NodeKind.MAPPING:
        raise _mismatch(node, target, path)
    data: dict[str, Any] = {}
    for name, field in target.model_fields.items():
        key = _model_key(name, target)
        child = node.value.get(key)
        # Leave absent fields to the model's own defaults
        if child is None or (child.is_null and not admits_none(field.annotation)):
            continue
        data[key] = read_value(child, field.annotation, path + (key,))

    try:
        return target.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(
            f"invalid {target.__name__}: {e.error_count()} errors",
            path=path,
            details={
                "errors": [
                    {
                        "loc": ".".join(str(loc) for loc in err["loc"]),
                        "msg": err["msg"],
                        "type": err["type"],
                    }
                    for err in e.errors()
                ]
            },
        ) from e


def _write_mismatch(value: Any, target: Any, path: NodePath) -> TypeMismatchError:
    return TypeMismatchError(
        f"cannot write {type(value).__name__} value as {describe_type(target)}",
        path=path,
        expected=describe_type(target),
        actual=type(value).__name__,
    )


def write_value(value: Any, target: Any, path: NodePath = ()) -> Node:
    """Convert a typed value to a node.

    Args:
        value: Value to convert.
        target: Type hint the value must satisfy.
        path: Destination path, used in error messages.

    Returns:
        New node holding the value.

    Raises:
        TypeMismatchError: If the value does not match ``target``.
        ValidationError: If the value violates a constraint.
    """
    target, origin, args = _unwrap(target)

    if target is Any or target is object:
        return _write_any(value, path)
    if target is Node:
        if isinstance(value, Node):
            return value.copy()
        raise _write_mismatch(value, target, path)
    if origin in _UNION_ORIGINS:
        return _write_union(value, target, args, path)
    if origin is Literal:
        if any(type(option) is type(value) and option == value for option in args):
            return _write_any(value, path)
        raise _write_mismatch(value, target, path)
    if target is type(None):
        if value is None:
            return Node.null()
        raise _write_mismatch(value, target, path)

    container = origin or target
    if container in _LIST_ORIGINS:
        item_type = args[0] if args else Any
        items = _sequence_of(value, target, path)
        return Node.sequence(
            [write_value(item, item_type, path + (i,)) for i, item in enumerate(items)]
        )
    if container is tuple:
        return _write_tuple(value, target, args, path)
    if container in _SET_ORIGINS:
        return _write_set(value, target, args, path)
    if container in _DICT_ORIGINS:
        return _write_dict(value, target, args, path)

    if isinstance(target, type):
        if issubclass(target, Enum):
            return _write_enum(value, target, path)
        if target is bool:
            if isinstance(value, bool):
                return Node.boolean(value)
        elif target is int:
            if isinstance(value, int) and not isinstance(value, bool):
                return Node.number(int(value))
        elif target is float:
            if isinstance(value, int | float) and not isinstance(value, bool):
                return Node.number(float(value))
        elif target is str:
            if isinstance(value, str):
                return Node.string(value)
        elif dataclasses.is_dataclass(target):
            if isinstance(value, target):
                return _write_dataclass(value, path)
        elif issubclass(target, BaseModel):
            if isinstance(value, target):
                return _write_model(value, path)
        else:
            raise TypeMismatchError(
                f"unsupported binding type {describe_type(target)}",
                path=path,
                expected=describe_type(target),
            )
        raise _write_mismatch(value, target, path)

    raise TypeMismatchError(
        f"unsupported binding type {describe_type(target)}",
        path=path,
        expected=describe_type(target),
    )


def _write_any(value: Any, path: NodePath) -> Node:
    """Convert a value using its runtime type."""
    if isinstance(value, Node):
        return value.copy()
    if isinstance(value, Enum):
        return _write_enum(value, type(value), path)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _write_dataclass(value, path)
    if isinstance(value, BaseModel):
        return _write_model(value, path)
    if isinstance(value, Mapping):
        return _write_dict(value, dict, (), path)
    if isinstance(value, set | frozenset):
        return _write_set(value, set, (), path)
    if isinstance(value, list | tuple):
        return Node.sequence(
            [_write_any(item, path + (i,)) for i, item in enumerate(value)]
        )
    try:
        return Node.from_python(value)
    except TypeError as e:
        raise TypeMismatchError(str(e), path=path, actual=type(value).__name__) from e


def _write_union(
    value: Any, target: Any, args: tuple[Any, ...], path: NodePath
) -> Node:
    if value is None:
        if type(None) in args:
            return Node.null()
        raise _write_mismatch(value, target, path)
    for option in args:
        if option is type(None):
            continue
        try:
            return write_value(value, option, path)
        except TypeMismatchError:
            continue
    raise _write_mismatch(value, target, path)


def _write_enum(value: Any, target: type[Enum], path: NodePath) -> Node:
    if not isinstance(value, target):
        try:
            value = target(value)
        except ValueError as e:
            raise _write_mismatch(value, target, path) from e
    raw = value.value
    if isinstance(raw, bool | int | float | str):
        return Node.from_python(raw)
    return Node.string(value.name)


def _sequence_of(value: Any, target: Any, path: NodePath) -> list[Any]:
    if isinstance(value, str | bytes) or not isinstance(value, list | tuple):
        raise _write_mismatch(value, target, path)
    return list(value)


def _write_tuple(
    value: Any, target: Any, args: tuple[Any, ...], path: NodePath
) -> Node:
    items = _sequence_of(value, target, path)
    if not args or (len(args) == 2 and args[1] is Ellipsis):
        item_type = args[0] if args else Any
        return Node.sequence(
            [write_value(item, item_type, path + (i,)) for i, item in enumerate(items)]
        )
    if len(items) != len(args):
        raise ValidationError(
            f"expected {len(args)} elements, found {len(items)}", path=path
        )
    return Node.sequence(
        [
            write_value(item, item_type, path + (i,))
            for i, (item, item_type) in enumerate(zip(items, args, strict=True))
        ]
    )


def _write_set(value: Any, target: Any, args: tuple[Any, ...], path: NodePath) -> Node:
    if isinstance(value, set | frozenset):
        items = list(value)
    else:
        items = _sequence_of(value, target, path)
        seen: list[Any] = []
        for i, item in enumerate(items):
            if item in seen:
                raise ValidationError(
                    f"duplicate set element {item!r}", path=path + (i,)
                )
            seen.append(item)

    # Sets have no order of their own; sort when possible for stable output
    try:
        items = sorted(items)
    except TypeError:
        pass
    item_type = args[0] if args else Any
    return Node.sequence(
        [write_value(item, item_type, path + (i,)) for i, item in enumerate(items)]
    )


def _write_key(key: Any, path: NodePath) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, Enum):
        return str(key.value) if isinstance(key.value, str | int) else key.name
    if isinstance(key, int) and not isinstance(key, bool):
        return str(key)
    raise TypeMismatchError(
        f"unsupported mapping key type {type(key).__name__}",
        path=path,
        expected="str | int | Enum",
        actual=type(key).__name__,
    )


def _write_dict(value: Any, target: Any, args: tuple[Any, ...], path: NodePath) -> Node:
    if not isinstance(value, Mapping):
        raise _write_mismatch(value, target, path)
    value_type = args[1] if args else Any
    children: dict[str, Node] = {}
    for key, item in value.items():
        name = _write_key(key, path)
        children[name] = write_value(item, value_type, path + (name,))
    return Node.mapping(children)


def _write_dataclass(value: Any, path: NodePath) -> Node:
    hints = get_type_hints(type(value), include_extras=True)
    children: dict[str, Node] = {}
    for field in dataclasses.fields(value):
        if not field.init:
            continue
        key = _record_key(field)
        children[key] = write_value(
            getattr(value, field.name), hints[field.name], path + (key,)
        )
    return Node.mapping(children)


def _write_model(value: BaseModel, path: NodePath) -> Node:
    model = type(value)
    children: dict[str, Node] = {}
    for name, field in model.model_fields.items():
        key = _model_key(name, model)
        children[key] = write_value(
            getattr(value, name), field.annotation, path + (key,)
        )
    return Node.mapping(children)
