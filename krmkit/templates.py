"""Rendering of the UERANSIM gNB configuration and network annotation."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

_CONFIGURATION_HEAD = """\
mcc: '208'          # Mobile Country Code value
mnc: '93'           # Mobile Network Code value (2 or 3 digits)
nci: '0x000000010'  # NR Cell Identity (36-bit)
idLength: 32        # NR gNB ID length in bits [22...32]
tac: 1              # Tracking Area Code
# List of supported S-NSSAIs by this gNB
slices:
  - sst: 0x1
    sd: 0x010203
# Indicates whether or not SCTP stream number errors should be ignored.
ignoreStreamIds: true

linkIp: 0.0.0.0   # gNB's local IP address for Radio Link Simulation (Usually same with local IP)
# gNB's local IP address for N2 Interface (Usually same with local IP)
"""

_AMF_PORT = 38412


@dataclass
class ConfigurationValues:
    """Addresses filled into the gNB configuration."""

    n2: str = ""
    n3: str = ""
    amf: list[str] = field(default_factory=list)


@dataclass
class NadTemplateValues:
    """One network attachment entry of the pod networks annotation."""

    name: str
    interface: str
    ips: str
    gateways: str


def render_configuration(values: ConfigurationValues) -> str:
    """Render the gNB configuration file."""
    amf_entries = "".join(
        f"\n  - address: {amf}\n    port: {_AMF_PORT}" for amf in values.amf
    )
    return (
        _CONFIGURATION_HEAD
        + f"ngapIp: {values.n2}\n"
        + f"gtpIp: {values.n3}    # gNB's local IP address for N3 Interface (Usually same with local IP)\n"
        + "\n# List of AMF address information\n"
        + "amfConfigs:"
        + amf_entries
        + "\n"
    )


def _nad_entry(value: NadTemplateValues) -> str:
    return (
        f'\n  "name": "{value.name}",'
        f'\n  "interface": "{value.interface}",'
        f'\n  "ips": ["{value.ips}"],'
        f'\n  "gateways": ["{value.gateways}"]'
    )


def render_nad(values: Sequence[NadTemplateValues]) -> str:
    """Render the JSON list used as the pod networks annotation."""
    body = "\n },\n {".join(_nad_entry(value) for value in values)
    return "[\n {" + body + "\n }\n]\n"