# SPDX-License-Identifier: LGPL-3.0-or-later
# vmi2domain/converter/vhostuser.py
"""
Vhost-user socket lookup.

The CNI layer reports attached devices through the Multus
`k8s.v1.cni.cncf.io/network-status` annotation; vhost-user entries carry a
`device-info` block with the unix socket path and mode:

    [{"name": "default/net1",
      "interface": "net1",
      "device-info": {"type": "vhost-user", "version": "1.0.0",
                      "vhost-user": {"mode": "server", "path": "/var/lib/cni/vhostuser/net1"}}}]
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from ..core.exceptions import ConfigurationError, DeviceInfoLookupError

DEVICE_INFO_TYPE_VHOST_USER = "vhost-user"
NETWORK_STATUS_ANNOTATION = "k8s.v1.cni.cncf.io/network-status"


@dataclass(frozen=True)
class PodNetInterface:
    """One device reported for the pod by the CNI layer."""

    device_type: str
    network_status_name: str
    vhost_user_path: str = ""
    vhost_user_mode: str = ""


def parse_network_status(text: str) -> List[PodNetInterface]:
    """Build PodNetInterface records from a network-status annotation value.

    Entries without a `device-info` block describe plain kernel interfaces
    and are skipped.
    """
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(msg="network-status is not valid JSON", cause=e)
    if not isinstance(data, list):
        raise ConfigurationError(msg="network-status must be a JSON list")

    out: List[PodNetInterface] = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ConfigurationError(msg="network-status entries must be JSON objects")
        info = entry.get("device-info")
        if not isinstance(info, dict):
            continue
        device_type = str(info.get("type") or "")
        vhost = info.get(DEVICE_INFO_TYPE_VHOST_USER) or {}
        if not isinstance(vhost, dict):
            raise ConfigurationError(
                msg=f"network-status device-info for {entry.get('name')!r} has a malformed vhost-user block"
            )
        out.append(
            PodNetInterface(
                device_type=device_type,
                network_status_name=str(entry.get("name") or ""),
                vhost_user_path=str(vhost.get("path") or ""),
                vhost_user_mode=str(vhost.get("mode") or ""),
            )
        )
    return out


def get_vhostuser_info(
    pod_iface_name: str,
    pod_net_interfaces: Optional[Sequence[PodNetInterface]],
) -> Tuple[str, str]:
    """Return (socket path, mode) reported for the given pod interface."""
    if pod_net_interfaces is None:
        raise DeviceInfoLookupError(msg="PodNetInterfaces cannot be nil for vhostuser interface")

    for iface in pod_net_interfaces:
        if iface.device_type != DEVICE_INFO_TYPE_VHOST_USER:
            continue
        # Status names may be namespaced: "<namespace>/<name>".
        if iface.network_status_name.rsplit("/", 1)[-1] == pod_iface_name:
            return iface.vhost_user_path, iface.vhost_user_mode

    raise DeviceInfoLookupError(msg=f"Unable to get vhostuser interface info for {pod_iface_name}")


__all__ = [
    "DEVICE_INFO_TYPE_VHOST_USER",
    "NETWORK_STATUS_ANNOTATION",
    "PodNetInterface",
    "parse_network_status",
    "get_vhostuser_info",
]
