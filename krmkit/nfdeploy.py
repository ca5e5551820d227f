"""State gathered while specializing an NFDeployment from its requirement resources."""

from __future__ import annotations

import copy
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

from krmkit.ref import ObjectReference


@dataclass(frozen=True)
class IPv4:
    """An IPv4 prefix assigned to an interface, with an optional gateway."""

    address: str
    gateway: str | None = None


@dataclass(frozen=True)
class IPv6:
    """An IPv6 prefix assigned to an interface, with an optional gateway."""

    address: str
    gateway: str | None = None


@dataclass
class InterfaceConfig:
    """Addressing and VLAN of one network function interface."""

    name: str
    ipv4: IPv4 | None = None
    ipv6: IPv6 | None = None
    vlan_id: int | None = None


@dataclass
class DataNetwork:
    """A data network with the prefixes of its address pools."""

    name: str | None = None
    pool: list[str] = field(default_factory=list)


@dataclass
class NetworkInstance:
    """A network instance with the interfaces and data networks attached to it."""

    name: str
    interfaces: list[str] = field(default_factory=list)
    data_networks: list[DataNetwork] = field(default_factory=list)


@dataclass(frozen=True)
class ParameterRef:
    """A reference to a parameter resource of an NFDeployment."""

    name: str | None
    kind: str
    api_version: str


@dataclass
class NfDeployState:
    """Collects interfaces, network instances, capacity and parameter references.

    ``capacity`` holds the spec of the Capacity requirement, if one was seen.
    """

    capacity: Mapping[str, Any] | None = None
    network_instances: dict[str, NetworkInstance] = field(default_factory=dict)
    interface_configs: dict[str, list[InterfaceConfig]] = field(default_factory=dict)
    param_refs: list[ParameterRef] = field(default_factory=list)

    def set_interface_config(
        self, interface_config: InterfaceConfig, network_instance_name: str
    ) -> None:
        """Record an interface under a network instance; empty instance names are ignored."""
        if not network_instance_name:
            return
        self.interface_configs.setdefault(network_instance_name, []).append(interface_config)

    def _instance(self, network_instance_name: str) -> NetworkInstance:
        instance = self.network_instances.get(network_instance_name)
        if instance is None:
            instance = NetworkInstance(name=network_instance_name)
            self.network_instances[network_instance_name] = instance
        return instance

    def add_dnn_to_network_instance(self, dnn: DataNetwork, network_instance_name: str) -> None:
        self._instance(network_instance_name).data_networks.append(dnn)

    def add_interface_to_network_instance(
        self, interface_name: str, network_instance_name: str
    ) -> None:
        self._instance(network_instance_name).interfaces.append(interface_name)

    def all_network_instances(self) -> list[NetworkInstance]:
        """Return every network instance, sorted by name."""
        return sorted(self.network_instances.values(), key=lambda instance: instance.name)

    def all_interface_configs(self) -> list[InterfaceConfig]:
        """Return the interfaces of all network instances, sorted by name."""
        configs = [config for group in self.interface_configs.values() for config in group]
        return sorted(configs, key=lambda config: config.name)

    def fill_capacity_details(self, nf_spec: MutableMapping[str, Any]) -> None:
        """Copy the recorded capacity into the NFDeployment spec, if there is one."""
        if self.capacity is None:
            return
        nf_spec["capacity"] = copy.deepcopy(dict(self.capacity))

    def add_dependency_ref(self, ref: ObjectReference) -> None:
        """Add a parameter reference unless an equal one is already present."""
        candidate = ParameterRef(name=ref.name, kind=ref.kind, api_version=ref.api_version)
        if candidate not in self.param_refs:
            self.param_refs.append(candidate)