import json

from ruamel.yaml import YAML

from krmkit.templates import (
    ConfigurationValues,
    NadTemplateValues,
    render_configuration,
    render_nad,
)


def _load(text):
    return YAML(typ="safe").load(text)


def test_configuration_fills_addresses():
    values = ConfigurationValues(n2="10.0.0.3", n3="10.1.0.3", amf=["172.1.0.254", "172.1.0.253"])
    data = _load(render_configuration(values))
    assert data["ngapIp"] == "10.0.0.3"
    assert data["gtpIp"] == "10.1.0.3"
    assert data["amfConfigs"] == [
        {"address": "172.1.0.254", "port": 38412},
        {"address": "172.1.0.253", "port": 38412},
    ]


def test_configuration_fixed_fields():
    data = _load(render_configuration(ConfigurationValues(n2="a", n3="b", amf=["c"])))
    assert data["mcc"] == "208"
    assert data["mnc"] == "93"
    assert data["linkIp"] == "0.0.0.0"
    assert data["ignoreStreamIds"] is True


def test_configuration_without_amf():
    text = render_configuration(ConfigurationValues(n2="a", n3="b"))
    assert text.endswith("amfConfigs:\n")
    assert _load(text)["amfConfigs"] is None


def test_nad_round_trips_through_json():
    values = [
        NadTemplateValues(name="gnb-n2", interface="n2", ips="10.0.0.3/24", gateways="10.0.0.1"),
        NadTemplateValues(name="gnb-n3", interface="n3", ips="10.1.0.3/24", gateways="10.1.0.1"),
    ]
    data = json.loads(render_nad(values))
    assert data == [
        {"name": "gnb-n2", "interface": "n2", "ips": ["10.0.0.3/24"], "gateways": ["10.0.0.1"]},
        {"name": "gnb-n3", "interface": "n3", "ips": ["10.1.0.3/24"], "gateways": ["10.1.0.1"]},
    ]


def test_nad_single_entry_layout():
    text = render_nad([NadTemplateValues(name="x", interface="n2", ips="1.1.1.1/32", gateways="1.1.1.0")])
    assert text.startswith("[\n {\n  \"name\": \"x\",")
    assert text.endswith("\n }\n]\n")
    assert " },\n {" not in text


def test_nad_empty_list_renders_one_empty_object():
    assert json.loads(render_nad([])) == [{}]