# SPDX-License-Identifier: LGPL-3.0-or-later
# vmi2domain/converter/podiface.py
"""
Names the CNI layer gives guest networks inside the pod.

The pod network is always the primary interface (eth0). Multus attaches
secondary networks as net1, net2, ... in the order they are declared in the
VMI, counting only secondary Multus networks.
"""
from __future__ import annotations

from typing import Optional

from ..core.exceptions import NetworkReferenceError
from ..vmi.model import Interface, Network, VirtualMachineInstanceSpec

PRIMARY_POD_INTERFACE_NAME = "eth0"


def is_secondary_multus_network(network: Network) -> bool:
    return network.multus is not None and not network.multus.default


def find_interface_by_network_name(spec: VirtualMachineInstanceSpec, network: Network) -> Optional[Interface]:
    for iface in spec.interfaces:
        if iface.name == network.name:
            return iface
    return None


def _find_multus_index(spec: VirtualMachineInstanceSpec, network: Network) -> int:
    idx = 0
    for candidate in spec.networks:
        if is_secondary_multus_network(candidate):
            # multus pod interfaces start from 1
            idx += 1
            if candidate.name == network.name:
                return idx
    return -1


def compose_pod_interface_name(
    spec: VirtualMachineInstanceSpec,
    network: Network,
    *,
    primary_name: str = PRIMARY_POD_INTERFACE_NAME,
) -> str:
    if is_secondary_multus_network(network):
        idx = _find_multus_index(spec, network)
        if idx == -1:
            raise NetworkReferenceError(msg=f"Network name {network.name} not found")
        return f"net{idx}"
    return primary_name


def get_pod_interface_name(
    spec: VirtualMachineInstanceSpec,
    iface_name: str,
    *,
    primary_name: str = PRIMARY_POD_INTERFACE_NAME,
) -> str:
    """Pod-side name of the network the named interface is attached to."""
    for network in spec.networks:
        if network.pod is None and network.multus is None:
            continue
        iface = find_interface_by_network_name(spec, network)
        if iface is not None and iface.name == iface_name:
            return compose_pod_interface_name(spec, network, primary_name=primary_name)
    raise NetworkReferenceError(msg=f"Interface {iface_name} not found")


__all__ = [
    "PRIMARY_POD_INTERFACE_NAME",
    "is_secondary_multus_network",
    "find_interface_by_network_name",
    "compose_pod_interface_name",
    "get_pod_interface_name",
]
