# SPDX-License-Identifier: LGPL-3.0-or-later
# vmi2domain/converter/slirp.py
"""
QEMU user-mode (slirp) network arguments.

Produces one `-netdev` pair per slirp interface:

    -netdev user,id=<iface>,net=<cidr>,dnssearch=<dom>...,hostfwd=tcp::<port>-:<port>...
"""
from __future__ import annotations

import ipaddress
from typing import List, Sequence

from ..config.config_loader import ConverterConfig
from ..core.exceptions import ConfigurationError
from ..core.list_utils import dedup_preserve_order
from ..libvirt.domain_model import QemuArg
from ..vmi.model import Interface, Network, Port


def vm_network_cidr(network: Network, config: ConverterConfig) -> str:
    """The guest CIDR: the pod network's vmNetworkCIDR if set, else the configured default."""
    cidr = network.pod.vm_network_cidr if network.pod is not None else ""
    if not cidr:
        return config.default_vm_cidr
    # A bare address parses as a /32 network; QEMU needs an explicit prefix.
    if "/" not in cidr:
        raise ConfigurationError(msg=f"Failed parsing CIDR {cidr}")
    try:
        ipaddress.ip_network(cidr, strict=False)
    except ValueError as e:
        raise ConfigurationError(msg=f"Failed parsing CIDR {cidr}", cause=e)
    return cidr


def port_forward_clauses(ports: Sequence[Port], default_protocol: str = "TCP") -> List[str]:
    """
    `hostfwd=` clauses for the interface ports.

    QEMU exits on duplicate forwards, so repeated (protocol, port) pairs are
    emitted once, in first-seen order. Protocols compare case-insensitively
    since the clause is lowercased anyway.
    """
    pairs = []
    for p in ports:
        if p.port == 0:
            raise ConfigurationError(msg="Port must be configured")
        pairs.append((p.protocol or default_protocol, p.port))

    return [
        f"hostfwd={protocol.lower()}::{port}-:{port}"
        for protocol, port in dedup_preserve_order(pairs, key=lambda pp: (pp[0].upper(), pp[1]))
    ]


def build_slirp_netdev_value(
    iface: Interface,
    network: Network,
    search_domains: Sequence[str],
    config: ConverterConfig,
) -> str:
    parts = [f"user,id={iface.name}", f"net={vm_network_cidr(network, config)}"]
    parts.extend(f"dnssearch={dom}" for dom in search_domains)
    parts.extend(port_forward_clauses(iface.ports, config.default_protocol))
    return ",".join(parts)


def create_slirp_network(
    iface: Interface,
    network: Network,
    search_domains: Sequence[str],
    config: ConverterConfig,
) -> List[QemuArg]:
    """The `-netdev <value>` argument pair for one slirp interface."""
    return [QemuArg("-netdev"), QemuArg(build_slirp_netdev_value(iface, network, search_domains, config))]


__all__ = [
    "vm_network_cidr",
    "port_forward_clauses",
    "build_slirp_netdev_value",
    "create_slirp_network",
]
