from krmkit.nfdeploy import (
    DataNetwork,
    InterfaceConfig,
    IPv4,
    IPv6,
    NfDeployState,
    ParameterRef,
)
from krmkit.ref import ObjectReference


def test_set_interface_config_ignores_empty_network_instance():
    state = NfDeployState()
    state.set_interface_config(InterfaceConfig(name="n3"), "")
    assert state.interface_configs == {}


def test_set_interface_config_appends_in_order():
    state = NfDeployState()
    first = InterfaceConfig(name="n3", ipv4=IPv4("10.0.0.3/24", "10.0.0.1"), vlan_id=10)
    second = InterfaceConfig(name="n6", ipv6=IPv6("fd00::3/64"))
    state.set_interface_config(first, "vpc-ran")
    state.set_interface_config(second, "vpc-ran")
    assert state.interface_configs == {"vpc-ran": [first, second]}


def test_add_dnn_creates_then_appends():
    state = NfDeployState()
    dnn1 = DataNetwork(name="internet", pool=["10.1.0.0/16"])
    dnn2 = DataNetwork(name="ims", pool=[])
    state.add_dnn_to_network_instance(dnn1, "vpc-internet")
    state.add_dnn_to_network_instance(dnn2, "vpc-internet")
    instance = state.network_instances["vpc-internet"]
    assert instance.name == "vpc-internet"
    assert instance.data_networks == [dnn1, dnn2]
    assert instance.interfaces == []


def test_interfaces_and_dnns_share_network_instance():
    state = NfDeployState()
    dnn = DataNetwork(name="internet")
    state.add_dnn_to_network_instance(dnn, "vpc-internet")
    state.add_interface_to_network_instance("n6", "vpc-internet")
    state.add_interface_to_network_instance("n6b", "vpc-internet")
    instance = state.network_instances["vpc-internet"]
    assert instance.interfaces == ["n6", "n6b"]
    assert instance.data_networks == [dnn]
    assert len(state.network_instances) == 1


def test_all_network_instances_sorted_by_name():
    state = NfDeployState()
    for name in ["vpc-ran", "vpc-internet", "vpc-cp"]:
        state.add_interface_to_network_instance("eth", name)
    names = [instance.name for instance in state.all_network_instances()]
    assert names == sorted(["vpc-ran", "vpc-internet", "vpc-cp"])


def test_all_network_instances_empty():
    assert NfDeployState().all_network_instances() == []


def test_all_interface_configs_flattened_and_sorted():
    state = NfDeployState()
    n6 = InterfaceConfig(name="n6")
    n3 = InterfaceConfig(name="n3")
    n4 = InterfaceConfig(name="n4")
    state.set_interface_config(n6, "vpc-internet")
    state.set_interface_config(n3, "vpc-ran")
    state.set_interface_config(n4, "vpc-ran")
    assert state.all_interface_configs() == [n3, n4, n6]


def test_fill_capacity_details_without_capacity_leaves_spec():
    spec = {"provider": "upf.free5gc.io"}
    NfDeployState().fill_capacity_details(spec)
    assert spec == {"provider": "upf.free5gc.io"}


def test_fill_capacity_details_copies_capacity():
    capacity = {"maxUplinkThroughput": "1G", "maxSessions": 1000}
    state = NfDeployState(capacity=capacity)
    spec = {"provider": "upf.free5gc.io"}
    state.fill_capacity_details(spec)
    assert spec["capacity"] == capacity
    assert spec["provider"] == "upf.free5gc.io"


def test_add_dependency_ref_deduplicates():
    state = NfDeployState()
    ref = ObjectReference(api_version="v1", kind="ConfigMap", name="smf-config")
    state.add_dependency_ref(ref)
    state.add_dependency_ref(ref)
    assert state.param_refs == [ParameterRef(name="smf-config", kind="ConfigMap", api_version="v1")]


def test_add_dependency_ref_keeps_distinct_refs():
    state = NfDeployState()
    state.add_dependency_ref(ObjectReference(api_version="v1", kind="ConfigMap", name="cfg"))
    state.add_dependency_ref(ObjectReference(api_version="v1", kind="Secret", name="cfg"))
    assert [ref.kind for ref in state.param_refs] == ["ConfigMap", "Secret"]