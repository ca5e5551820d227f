"""KRM resource objects backed by round-trip YAML that keeps comments and field order."""

from __future__ import annotations

import copy
import dataclasses
import io
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError
from ruamel.yaml.representer import RoundTripRepresenter
from ruamel.yaml.scalarbool import ScalarBoolean


class _Representer(RoundTripRepresenter):
    """Round-trip representer that writes null values explicitly."""

    def represent_none(self, data: Any) -> Any:
        return self.represent_scalar("tag:yaml.org,2002:null", "null")


_Representer.add_representer(type(None), _Representer.represent_none)


def _yaml() -> YAML:
    yaml = YAML(typ="rt")
    yaml.Representer = _Representer
    yaml.preserve_quotes = True
    yaml.width = 4096
    return yaml


def _dump(data: Any) -> str:
    stream = io.StringIO()
    _yaml().dump(data, stream)
    return stream.getvalue()


def _load_documents(text: str | bytes | None) -> list[Any]:
    if text is None:
        raise ValueError("cannot parse nil input")
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8")
    try:
        documents = list(_yaml().load_all(text))
    except YAMLError as exc:
        raise ValueError(f"invalid YAML: {exc}") from exc
    return [doc for doc in documents if doc is not None]


def _to_plain(value: Any) -> Any:
    """Convert YAML nodes, dataclasses and containers into plain Python data."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: _to_plain(getattr(value, field.name))
            for field in dataclasses.fields(value)
            if getattr(value, field.name) is not None
        }
    if isinstance(value, Mapping):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    if isinstance(value, Enum):
        return _to_plain(value.value)
    if isinstance(value, (bool, ScalarBoolean)):
        return bool(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, str):
        return str(value)
    return value


def _to_commented(value: Any) -> Any:
    if isinstance(value, Mapping):
        result = CommentedMap()
        for key, item in value.items():
            result[key] = _to_commented(item)
        return result
    if isinstance(value, list):
        return CommentedSeq(_to_commented(item) for item in value)
    return value


@dataclass(frozen=True)
class GroupVersionKind:
    """The group, version and kind of a Kubernetes resource type."""

    group: str
    version: str
    kind: str


def _split_api_version(api_version: str) -> tuple[str, str]:
    group, sep, version = api_version.rpartition("/")
    if not sep:
        return "", api_version
    return group, version


class KubeObject:
    """A single KRM resource held as a round-trip YAML mapping."""

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        if data is None:
            self._data = CommentedMap()
            return
        plain = _to_plain(data)
        if not isinstance(plain, dict):
            raise TypeError(f"expected a mapping, got {type(data).__name__}")
        self._data = _to_commented(plain)

    @classmethod
    def _from_node(cls, node: CommentedMap) -> KubeObject:
        obj = cls.__new__(cls)
        obj._data = node
        return obj

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind()}/{self.name()})"

    def __str__(self) -> str:
        return self.to_yaml()

    def _string_field(self, *fields: str) -> str:
        value = self.nested_get(*fields)
        return value if isinstance(value, str) else ""

    def api_version(self) -> str:
        return self._string_field("apiVersion")

    def kind(self) -> str:
        return self._string_field("kind")

    def name(self) -> str:
        return self._string_field("metadata", "name")

    def namespace(self) -> str:
        return self._string_field("metadata", "namespace")

    def annotations(self) -> dict[str, str]:
        value = self.nested_get("metadata", "annotations")
        if not isinstance(value, dict):
            return {}
        return {str(key): str(item) for key, item in value.items()}

    def group_version_kind(self) -> GroupVersionKind:
        group, version = _split_api_version(self.api_version())
        return GroupVersionKind(group, version, self.kind())

    def nested_get(self, *fields: str) -> Any:
        """Return a plain copy of the value at the field path, or None if it is missing."""
        node: Any = self._data
        for field in fields:
            if not isinstance(node, Mapping) or field not in node:
                return None
            node = node[field]
        return _to_plain(node)

    def nested_string(self, *fields: str) -> str | None:
        value = self.nested_get(*fields)
        if value is None:
            return None
        if not isinstance(value, str):
            raise TypeError(f"{'.'.join(fields)} is not a string, got {type(value).__name__}")
        return value

    def nested_int(self, *fields: str) -> int | None:
        value = self.nested_get(*fields)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{'.'.join(fields)} is not an integer, got {type(value).__name__}")
        return value

    def set_nested_field(self, value: Any, *fields: str) -> None:
        """Set the value at the field path, creating intermediate mappings."""
        if not fields:
            raise ValueError("at least one field is required")
        node: Any = self._data
        for field in fields[:-1]:
            child = node.get(field)
            if child is None:
                child = CommentedMap()
                node[field] = child
            elif not isinstance(child, MutableMapping):
                raise TypeError(f"field {field!r} is not a mapping")
            node = child
        node[fields[-1]] = _to_commented(_to_plain(value))

    def set_nested_string(self, value: str, *fields: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"expected a string, got {type(value).__name__}")
        self.set_nested_field(value, *fields)

    def to_dict(self) -> dict[str, Any]:
        return _to_plain(self._data)

    def to_yaml(self) -> str:
        return _dump(self._data)


def parse_kube_object(text: str | bytes | None) -> KubeObject:
    """Parse YAML text holding exactly one resource."""
    documents = _load_documents(text)
    if len(documents) != 1:
        raise ValueError(f"expected exactly one object, got {len(documents)}")
    document = documents[0]
    if not isinstance(document, CommentedMap):
        raise ValueError("expected a YAML mapping for a KRM resource")
    return KubeObject._from_node(document)


def parse_kube_objects(text: str | bytes | None) -> list[KubeObject]:
    """Parse a multi-document YAML stream into resources."""
    objects = []
    for document in _load_documents(text):
        if not isinstance(document, CommentedMap):
            raise ValueError("expected a YAML mapping for a KRM resource")
        objects.append(KubeObject._from_node(document))
    return objects


def new_from_typed_object(value: Any) -> KubeObject:
    """Build a resource from a mapping or dataclass instance."""
    if value is None:
        raise ValueError("cannot convert nil object")
    plain = _to_plain(value)
    if not isinstance(plain, dict):
        raise TypeError(f"expected a mapping or dataclass, got {type(value).__name__}")
    return KubeObject(plain)


def kube_object_to_dict(obj: KubeObject | None) -> dict[str, Any]:
    """Return the resource as plain Python data."""
    if obj is None:
        raise ValueError("cannot convert nil KubeObject")
    return obj.to_dict()


def set_nested_field_keep_formatting(obj: KubeObject, value: Any, *fields: str) -> None:
    """Set a field (or the whole object) while keeping comments and field order."""
    old = obj._data
    if fields:
        target = KubeObject._from_node(copy.deepcopy(old))
        target.set_nested_field(value, *fields)
    else:
        target = new_from_typed_object(value)
    obj._data = _copy_formatting(old, target._data)


# --- formatting transfer ---------------------------------------------------


def _kind_of(node: Any) -> str:
    if isinstance(node, Mapping):
        return "map"
    if isinstance(node, list):
        return "seq"
    return "scalar"


def _scalar_text(value: Any) -> str:
    if isinstance(value, (bool, ScalarBoolean)):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _copy_node_comment(src: Any, dst: Any) -> None:
    commented = (CommentedMap, CommentedSeq)
    if isinstance(src, commented) and isinstance(dst, commented):
        dst.ca.comment = copy.copy(src.ca.comment)


def _copy_formatting(src: Any, dst: Any) -> Any:
    if _kind_of(src) != _kind_of(dst):
        return dst
    if isinstance(dst, CommentedMap) and isinstance(src, CommentedMap):
        return _copy_map_formatting(src, dst)
    if isinstance(dst, CommentedSeq) and isinstance(src, CommentedSeq):
        return _copy_list_formatting(src, dst)
    return dst


def _find_key(keys: list[Any], key: str, start: int) -> int | None:
    for position, candidate in enumerate(keys[start:], start):
        if isinstance(candidate, str) and candidate == key:
            return position
    return None


def _copy_map_formatting(src: CommentedMap, dst: CommentedMap) -> CommentedMap:
    keys = list(dst)
    matched = set()
    start = 0
    for key in src:
        if not isinstance(key, str):
            continue
        position = _find_key(keys, key, start)
        if position is None:
            continue
        keys[start], keys[position] = keys[position], keys[start]
        matched.add(key)
        start += 1

    result = CommentedMap()
    _copy_node_comment(src, result)
    for key in keys:
        value = dst[key]
        if key in matched:
            value = _copy_formatting(src[key], value)
            items = src.ca.items
        else:
            items = dst.ca.items
        result[key] = value
        if key in items:
            result.ca.items[key] = copy.copy(items[key])
    return result


def _copy_list_formatting(src: CommentedSeq, dst: CommentedSeq) -> CommentedSeq:
    _copy_node_comment(src, dst)
    for index, item in enumerate(src):
        position = next(
            (pos for pos, candidate in enumerate(dst) if _should_copy_formatting(item, candidate)),
            None,
        )
        if position is None:
            continue
        if index in src.ca.items:
            dst.ca.items[position] = copy.copy(src.ca.items[index])
        dst[position] = _copy_formatting(item, dst[position])
    return dst


def _should_copy_formatting(src: Any, dst: Any) -> bool:
    kind = _kind_of(src)
    if kind != _kind_of(dst):
        return False
    if kind == "scalar":
        return _scalar_text(src) == _scalar_text(dst)
    if kind == "map":
        for key, value in src.items():
            if not isinstance(key, str) or key not in dst:
                return False
            if not _should_copy_formatting(value, dst[key]):
                return False
        return True
    return True


# --- extended object ---------------------------------------------------------


def _field_of(value: Any, field: str) -> Any:
    if value is None:
        raise ValueError("cannot read a field of a nil value")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        if not hasattr(value, field):
            raise ValueError(f"type {type(value).__name__!r} doesn't have a {field!r} field")
        return getattr(value, field)
    if isinstance(value, Mapping):
        if field not in value:
            raise ValueError(f"type {type(value).__name__!r} doesn't have a {field!r} field")
        return value[field]
    raise ValueError(
        f"type {type(value).__name__!r} is not a struct, so it doesn't have a {field!r} field"
    )


class KubeObjectExt(KubeObject):
    """A resource with helpers that update it while keeping its YAML formatting."""

    def to_struct(self) -> dict[str, Any]:
        return self.to_dict()

    def unsafe_set_spec(self, spec: Any) -> None:
        set_nested_field_keep_formatting(self, spec, "spec")

    def unsafe_set_status(self, status: Any) -> None:
        set_nested_field_keep_formatting(self, status, "status")

    def set_from_typed_object(self, value: Any) -> None:
        set_nested_field_keep_formatting(self, value)

    def set_spec(self, value: Any) -> None:
        set_nested_field_keep_formatting(self, _field_of(value, "spec"), "spec")

    def set_status(self, value: Any) -> None:
        set_nested_field_keep_formatting(self, _field_of(value, "status"), "status")

    def set_nested_field_keep_formatting(self, value: Any, *fields: str) -> None:
        set_nested_field_keep_formatting(self, value, *fields)


def ext_from_kube_object(obj: KubeObject | None) -> KubeObjectExt:
    """Wrap an existing resource; the wrapper shares its data."""
    if obj is None:
        raise ValueError("cannot initialize with a nil object")
    return KubeObjectExt._from_node(obj._data)


def ext_from_yaml(text: str | bytes | None) -> KubeObjectExt:
    return ext_from_kube_object(parse_kube_object(text))


def ext_from_typed_object(value: Any) -> KubeObjectExt:
    if value is None:
        raise ValueError("cannot initialize with nil pointer")
    return ext_from_kube_object(new_from_typed_object(value))