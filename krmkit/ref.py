"""Helpers for validating and comparing Kubernetes object references."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from krmkit.kubeobject import KubeObject


class InvalidReferenceError(ValueError):
    """Raised when an object reference lacks required fields."""


@dataclass(frozen=True)
class ObjectReference:
    """A reference to a Kubernetes object by api version, kind, name and namespace."""

    api_version: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""


def validate_gvk_ref(ref: ObjectReference) -> ObjectReference:
    """Return ref if its api version and kind are set; raise InvalidReferenceError otherwise."""
    if not ref.api_version or not ref.kind:
        raise InvalidReferenceError(f"gvk not initialized, got: {ref!r}")
    return ref


def is_wildcard_ref(ref: ObjectReference) -> bool:
    """Return True if both api version and kind are '*'."""
    return ref.api_version == "*" and ref.kind == "*"


def validate_gvkn_ref(ref: ObjectReference) -> ObjectReference:
    """Return ref if its api version, kind and name are set; raise InvalidReferenceError otherwise."""
    if not ref.api_version or not ref.kind or not ref.name:
        raise InvalidReferenceError(f"gvk or name not initialized, got: {ref!r}")
    return ref


def get_gvk_ref_from_gvkn_ref(ref: ObjectReference) -> ObjectReference:
    """Return a new reference holding only the api version and kind of ref."""
    return ObjectReference(api_version=ref.api_version, kind=ref.kind)


def _is_gvkn_valid(ref: ObjectReference) -> bool:
    try:
        validate_gvkn_ref(ref)
    except InvalidReferenceError:
        return False
    return True


def is_refs_valid(refs: Sequence[ObjectReference]) -> bool:
    """Return True if there are one or two references and all are fully initialized."""
    if not 1 <= len(refs) <= 2:
        return False
    return all(_is_gvkn_valid(ref) for ref in refs)


def is_gvknn_equal(current: KubeObject, new: KubeObject) -> bool:
    """Return True if both objects share api version, kind and name."""
    return (
        current.api_version() == new.api_version()
        and current.kind() == new.kind()
        and current.name() == new.name()
    )


def get_refs_string(*refs: ObjectReference) -> str:
    """Render references as space separated 'kind/name' items."""
    return " ".join(f"{ref.kind}/{ref.name}" for ref in refs)