"""Selecting resources of a given type from a list of resources."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from krmkit.kubeobject import GroupVersionKind, KubeObject


def filter_by_type(
    objs: Iterable[KubeObject], gvk: GroupVersionKind
) -> tuple[list[dict[str, Any]], list[KubeObject]]:
    """Split objects into plain data of those matching gvk and the remaining objects."""
    matching: list[dict[str, Any]] = []
    rest: list[KubeObject] = []
    for obj in objs:
        if obj.group_version_kind() == gvk:
            matching.append(obj.to_dict())
        else:
            rest.append(obj)
    return matching, rest


def get_singleton(objs: Iterable[KubeObject], gvk: GroupVersionKind) -> dict[str, Any]:
    """Return the one object of type gvk; raise ValueError unless exactly one exists."""
    matching, _ = filter_by_type(objs, gvk)
    if len(matching) != 1:
        raise ValueError(
            f"expected exactly 1 instance of {gvk.kind} in the kpt package, but got {len(matching)}"
        )
    return matching[0]