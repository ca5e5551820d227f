"""Network attachment definitions and the CNI configuration they carry."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator, Sequence
from dataclasses import Field, dataclass, field, fields, is_dataclass
from enum import IntEnum
from typing import Any

from krmkit.kubeobject import (
    KubeObject,
    KubeObjectExt,
    ext_from_kube_object,
    ext_from_typed_object,
    ext_from_yaml,
)

CNI_VERSION = "0.3.1"
MODE_BRIDGE = "bridge"
MODE_L2 = "l2"
STATIC_NAD_TYPE = "static"
TUNING_TYPE = "tuning"
CONFIG_PATH = ("spec", "config")


class NadError(ValueError):
    """Raised for invalid network attachment definition data or arguments."""


class CniSpecType(IntEnum):
    OTHER = 0
    VLAN_CLAIM_ONLY = 1
    IP_VLAN = 2
    SRIOV = 3
    MAC_VLAN = 4
    VLAN = 5
    BRIDGE = 6


def _attr(name: str, default: Any) -> Any:
    return field(
        default=default,
        metadata={"json": name, "omit_empty": True, "scalar": type(default)},
    )


def _list_attr(name: str, item_type: type) -> Any:
    return field(
        default_factory=list,
        metadata={"json": name, "omit_empty": True, "item": item_type},
    )


def _struct_attr(name: str, struct_type: type) -> Any:
    return field(
        default_factory=struct_type,
        metadata={"json": name, "omit_empty": False, "struct": struct_type},
    )


@dataclass
class Capabilities:
    ips: bool = _attr("ips", False)
    mac: bool = _attr("mac", False)


@dataclass
class Address:
    address: str = _attr("address", "")
    gateway: str = _attr("gateway", "")


@dataclass
class Route:
    destination: str = _attr("dst", "")
    gateway: str = _attr("gw", "")


@dataclass
class VlanTrunk:
    min_id: int = _attr("minID", 0)
    max_id: int = _attr("maxID", 0)
    id: int = _attr("id", 0)


@dataclass
class Ipam:
    type: str = _attr("type", "")
    addresses: list[Address] = _list_attr("addresses", Address)
    routes: list[Route] = _list_attr("routes", Route)


@dataclass
class PluginCniType:
    type: str = _attr("type", "")
    capabilities: Capabilities = _struct_attr("capabilities", Capabilities)
    master: str = _attr("master", "")
    mode: str = _attr("mode", "")
    ipam: Ipam = _struct_attr("ipam", Ipam)
    vlan_id: int = _attr("vlanId", 0)
    link_in_container: bool = _attr("linkInContainer", False)
    bridge: str = _attr("bridge", "")
    vlan: int = _attr("vlan", 0)
    vlan_trunk: list[VlanTrunk] = _list_attr("vlanTrunk", VlanTrunk)
    name: str = _attr("name", "")


@dataclass
class NadConfig:
    cni_version: str = _attr("cniVersion", "")
    vlan: int = _attr("vlan", 0)
    plugins: list[PluginCniType] = _list_attr("plugins", PluginCniType)

    @classmethod
    def from_json(cls, text: str) -> NadConfig:
        """Parse a CNI configuration; unknown keys are ignored."""
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError) as exc:
            raise NadError(f"invalid NAD Config, {exc}") from exc
        if data is None:
            return cls()
        try:
            return _decode(cls, data)
        except NadError as exc:
            raise NadError(f"invalid NAD Config, {exc}") from exc

    def to_json(self) -> str:
        """Serialize compactly, leaving out empty fields."""
        text = json.dumps(_encode(self), separators=(",", ":"), ensure_ascii=False)
        for char, escape in (
            ("<", "\\u003c"),
            (">", "\\u003e"),
            ("&", "\\u0026"),
            ("\u2028", "\\u2028"),
            ("\u2029", "\\u2029"),
        ):
            text = text.replace(char, escape)
        return text


# --- JSON mapping ------------------------------------------------------------


def _decode(cls: type, data: Any) -> Any:
    if not isinstance(data, dict):
        raise NadError(f"cannot unmarshal {type(data).__name__} into {cls.__name__}")
    lowered = {}
    for key in data:
        lowered.setdefault(key.lower(), key)
    kwargs = {}
    for f in fields(cls):
        name = f.metadata["json"]
        if name in data:
            raw = data[name]
        elif name.lower() in lowered:
            raw = data[lowered[name.lower()]]
        else:
            continue
        if raw is None:
            continue
        kwargs[f.name] = _decode_field(f, raw, name)
    return cls(**kwargs)


def _decode_field(f: Field, raw: Any, name: str) -> Any:
    meta = f.metadata
    if "item" in meta:
        if not isinstance(raw, list):
            raise NadError(f"field {name} expects a list, got {type(raw).__name__}")
        return [_decode(meta["item"], item) for item in raw]
    if "struct" in meta:
        return _decode(meta["struct"], raw)
    return _check_scalar(meta["scalar"], raw, name)


def _check_scalar(tp: type, raw: Any, name: str) -> Any:
    if tp is bool:
        valid = isinstance(raw, bool)
    elif tp is int:
        valid = isinstance(raw, int) and not isinstance(raw, bool)
    else:
        valid = isinstance(raw, tp)
    if not valid:
        raise NadError(
            f"cannot unmarshal {type(raw).__name__} into field {name} of type {tp.__name__}"
        )
    return raw


def _encode(obj: Any) -> dict[str, Any]:
    result = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if f.metadata.get("omit_empty", True) and not value:
            continue
        result[f.metadata["json"]] = _encode_value(value)
    return result


def _encode_value(value: Any) -> Any:
    if is_dataclass(value):
        return _encode(value)
    if isinstance(value, list):
        return [_encode_value(item) for item in value]
    return value


# --- defaults per CNI type ---------------------------------------------------


def _static_ipam() -> Ipam:
    return Ipam(type=STATIC_NAD_TYPE)


def _ips_plugin(mode: str) -> PluginCniType:
    return PluginCniType(capabilities=Capabilities(ips=True), mode=mode, ipam=_static_ipam())


_DEFAULT_PLUGINS: dict[CniSpecType, Callable[[], list[PluginCniType]]] = {
    CniSpecType.IP_VLAN: lambda: [_ips_plugin(MODE_L2)],
    CniSpecType.MAC_VLAN: lambda: [
        _ips_plugin(MODE_BRIDGE),
        PluginCniType(capabilities=Capabilities(mac=True), type=TUNING_TYPE),
    ],
    CniSpecType.SRIOV: lambda: [_ips_plugin(MODE_BRIDGE)],
    CniSpecType.VLAN: lambda: [PluginCniType(ipam=_static_ipam())],
    CniSpecType.BRIDGE: lambda: [PluginCniType(ipam=_static_ipam())],
    CniSpecType.OTHER: lambda: [_ips_plugin(MODE_BRIDGE)],
}

_CNI_TYPES = {
    "ipvlan": CniSpecType.IP_VLAN,
    "macvlan": CniSpecType.MAC_VLAN,
    "sriov": CniSpecType.SRIOV,
    "vlan": CniSpecType.VLAN,
    "bridge": CniSpecType.BRIDGE,
}


def _main_plugins(config: NadConfig) -> Iterator[PluginCniType]:
    return (plugin for plugin in config.plugins if plugin.type != TUNING_TYPE)


@dataclass
class NadStruct:
    """A NetworkAttachmentDefinition resource together with its CNI spec type."""

    k: KubeObjectExt
    cni_spec_type: CniSpecType = CniSpecType.OTHER

    @classmethod
    def from_kube_object(cls, obj: KubeObject | None) -> NadStruct:
        return cls(ext_from_kube_object(obj))

    @classmethod
    def from_yaml(cls, text: str | bytes | None) -> NadStruct:
        return cls(ext_from_yaml(text))

    @classmethod
    def from_typed_object(cls, value: Any) -> NadStruct:
        return cls(ext_from_typed_object(value))

    def _nad_config(self) -> NadConfig:
        config = NadConfig.from_json(self.config_spec() or "{}")
        config.cni_version = CNI_VERSION
        if not config.plugins:
            defaults = _DEFAULT_PLUGINS.get(self.cni_spec_type)
            if defaults is not None:
                config.plugins = defaults()
        return config

    def _store(self, config: NadConfig) -> None:
        self.k.set_nested_string(config.to_json(), *CONFIG_PATH)

    def config_spec(self) -> str:
        """Return the raw spec.config string, or '' when missing or not a string."""
        try:
            value = self.k.nested_string(*CONFIG_PATH)
        except TypeError:
            return ""
        return value or ""

    def cni_type(self) -> str:
        return next((p.type for p in _main_plugins(self._nad_config())), "")

    def vlan(self) -> int:
        return self._nad_config().vlan

    def nad_master(self) -> str:
        return next((p.master for p in _main_plugins(self._nad_config())), "")

    def ipam_addresses(self) -> list[Address]:
        return next((p.ipam.addresses for p in _main_plugins(self._nad_config())), [])

    def set_config_spec(self, config: str) -> None:
        self.k.set_nested_string(config, *CONFIG_PATH)

    def set_cni_type(self, cni_type: str) -> None:
        if not cni_type:
            raise NadError("unknown cniType")
        self.cni_spec_type = _CNI_TYPES.get(cni_type, self.cni_spec_type)
        config = self._nad_config()
        for plugin in _main_plugins(config):
            plugin.type = cni_type
        self._store(config)

    def set_vlan(self, vlan: int) -> None:
        if vlan == 0:
            raise NadError("unknown vlanType")
        config = self._nad_config()
        config.vlan = vlan
        self._store(config)

    def _update_plugins(self, update: Callable[[PluginCniType], None]) -> None:
        config = self._nad_config()
        for plugin in _main_plugins(config):
            update(plugin)
        self._store(config)

    def set_vlan_id(self, vlan_id: int) -> None:
        if vlan_id == 0:
            raise NadError("unknown vlanID")
        self._update_plugins(lambda plugin: setattr(plugin, "vlan_id", vlan_id))

    def set_bridge_vlan(self, vlan_id: int) -> None:
        if vlan_id == 0:
            raise NadError("unknown vlanID")
        self._update_plugins(lambda plugin: setattr(plugin, "vlan", vlan_id))

    def set_bridge_trunk(self, vlan_id: int) -> None:
        if vlan_id == 0:
            raise NadError("unknown vlanID")
        self._update_plugins(lambda plugin: setattr(plugin, "vlan_trunk", [VlanTrunk(id=vlan_id)]))

    def set_bridge_name(self, vlan_id: int) -> None:
        if vlan_id == 0:
            raise NadError("unknown vlanID")
        bridge = f"cni{vlan_id}"

        def update(plugin: PluginCniType) -> None:
            plugin.bridge = bridge
            plugin.name = bridge

        self._update_plugins(update)

    def set_nad_master(self, master: str) -> None:
        if not master:
            raise NadError("unknown nad master interface")
        self._update_plugins(lambda plugin: setattr(plugin, "master", master))

    def set_ipam_addresses(self, addresses: Sequence[Address] | None) -> None:
        if addresses is None:
            raise NadError("unknown IPAM addresses")
        self._update_plugins(lambda plugin: setattr(plugin.ipam, "addresses", list(addresses)))

    def set_ipam_routes(self, routes: Sequence[Route] | None) -> None:
        if routes is None:
            return
        self._update_plugins(lambda plugin: setattr(plugin.ipam, "routes", list(routes)))