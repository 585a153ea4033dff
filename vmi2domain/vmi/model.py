# SPDX-License-Identifier: LGPL-3.0-or-later
# vmi2domain/vmi/model.py
"""
VirtualMachineInstance spec model (the subset the network converter reads).

Manifests use the Kubernetes camelCase layout:

    spec:
      domain:
        cpu: {cores: 2}
        devices:
          networkInterfaceMultiqueue: true
          interfaces:
            - name: default
              masquerade: {}
              ports: [{port: 80}]
      networks:
        - name: default
          pod: {}

Every interface carries exactly one binding; that is enforced when the
manifest is parsed, so the converter can dispatch on `binding.method`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, Union

from ..core.exceptions import ConfigurationError


class InterfaceBindingMethod(Enum):
    """How a guest NIC is wired to the pod network."""

    BRIDGE = "bridge"
    MASQUERADE = "masquerade"
    SLIRP = "slirp"
    MACVTAP = "macvtap"
    SRIOV = "sriov"
    VHOSTUSER = "vhostuser"


@dataclass(frozen=True)
class BridgeBinding:
    method: ClassVar[InterfaceBindingMethod] = InterfaceBindingMethod.BRIDGE


@dataclass(frozen=True)
class MasqueradeBinding:
    method: ClassVar[InterfaceBindingMethod] = InterfaceBindingMethod.MASQUERADE


@dataclass(frozen=True)
class SlirpBinding:
    method: ClassVar[InterfaceBindingMethod] = InterfaceBindingMethod.SLIRP


@dataclass(frozen=True)
class MacvtapBinding:
    method: ClassVar[InterfaceBindingMethod] = InterfaceBindingMethod.MACVTAP


@dataclass(frozen=True)
class SRIOVBinding:
    method: ClassVar[InterfaceBindingMethod] = InterfaceBindingMethod.SRIOV


@dataclass(frozen=True)
class VhostuserBinding:
    method: ClassVar[InterfaceBindingMethod] = InterfaceBindingMethod.VHOSTUSER


Binding = Union[BridgeBinding, MasqueradeBinding, SlirpBinding, MacvtapBinding, SRIOVBinding, VhostuserBinding]

BINDING_TYPES: Dict[str, Type[Any]] = {
    InterfaceBindingMethod.BRIDGE.value: BridgeBinding,
    InterfaceBindingMethod.MASQUERADE.value: MasqueradeBinding,
    InterfaceBindingMethod.SLIRP.value: SlirpBinding,
    InterfaceBindingMethod.MACVTAP.value: MacvtapBinding,
    InterfaceBindingMethod.SRIOV.value: SRIOVBinding,
    InterfaceBindingMethod.VHOSTUSER.value: VhostuserBinding,
}


@dataclass
class Port:
    """Port to forward into the guest; empty protocol means TCP."""

    port: int
    protocol: str = ""
    name: str = ""


@dataclass
class Interface:
    name: str
    binding: Binding
    model: str = ""
    pci_address: str = ""
    boot_order: Optional[int] = None
    ports: List[Port] = field(default_factory=list)


@dataclass
class PodNetwork:
    vm_network_cidr: str = ""


@dataclass
class MultusNetwork:
    network_name: str = ""
    default: bool = False


@dataclass
class Network:
    """A network source. Exactly one of `pod`/`multus` should be set; the converter checks it."""

    name: str
    pod: Optional[PodNetwork] = None
    multus: Optional[MultusNetwork] = None


@dataclass
class CPU:
    cores: int = 0
    sockets: int = 0
    threads: int = 0


@dataclass
class Resources:
    requests: Dict[str, str] = field(default_factory=dict)
    limits: Dict[str, str] = field(default_factory=dict)


@dataclass
class VirtualMachineInstanceSpec:
    name: str = ""
    interfaces: List[Interface] = field(default_factory=list)
    networks: List[Network] = field(default_factory=list)
    cpu: Optional[CPU] = None
    resources: Resources = field(default_factory=Resources)
    network_interface_multiqueue: Optional[bool] = None

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "VirtualMachineInstanceSpec":
        """Parse a VirtualMachineInstance manifest, or a bare `spec` mapping."""
        if not isinstance(manifest, Mapping):
            raise ConfigurationError(msg="VirtualMachineInstance manifest must be a mapping")

        name = ""
        spec: Mapping[str, Any] = manifest
        if "spec" in manifest:
            name = str(_mapping(manifest.get("metadata"), "metadata").get("name") or "")
            spec = _mapping(manifest.get("spec"), "spec")

        domain = _mapping(spec.get("domain"), "spec.domain")
        devices = _mapping(domain.get("devices"), "spec.domain.devices")

        interfaces = [
            interface_from_dict(_mapping(raw, f"spec.domain.devices.interfaces[{i}]"))
            for i, raw in enumerate(_sequence(devices.get("interfaces"), "spec.domain.devices.interfaces"))
        ]
        networks = [
            network_from_dict(_mapping(raw, f"spec.networks[{i}]"))
            for i, raw in enumerate(_sequence(spec.get("networks"), "spec.networks"))
        ]

        cpu = None
        if domain.get("cpu") is not None:
            raw_cpu = _mapping(domain.get("cpu"), "spec.domain.cpu")
            cpu = CPU(
                cores=_uint(raw_cpu.get("cores", 0), "cpu.cores"),
                sockets=_uint(raw_cpu.get("sockets", 0), "cpu.sockets"),
                threads=_uint(raw_cpu.get("threads", 0), "cpu.threads"),
            )

        raw_res = _mapping(domain.get("resources"), "spec.domain.resources")
        resources = Resources(
            requests={str(k): str(v) for k, v in _mapping(raw_res.get("requests"), "resources.requests").items()},
            limits={str(k): str(v) for k, v in _mapping(raw_res.get("limits"), "resources.limits").items()},
        )

        mq = devices.get("networkInterfaceMultiqueue")
        if mq is not None and not isinstance(mq, bool):
            raise ConfigurationError(msg=f"networkInterfaceMultiqueue must be a boolean, got {mq!r}")

        return cls(
            name=name,
            interfaces=interfaces,
            networks=networks,
            cpu=cpu,
            resources=resources,
            network_interface_multiqueue=mq,
        )


def _mapping(v: Any, where: str) -> Mapping[str, Any]:
    if v is None:
        return {}
    if not isinstance(v, Mapping):
        raise ConfigurationError(msg=f"{where} must be a mapping, got {type(v).__name__}")
    return v


def _sequence(v: Any, where: str) -> List[Any]:
    if v is None:
        return []
    if not isinstance(v, (list, tuple)):
        raise ConfigurationError(msg=f"{where} must be a list, got {type(v).__name__}")
    return list(v)


def _uint(v: Any, where: str) -> int:
    if isinstance(v, bool) or not isinstance(v, int) or v < 0:
        raise ConfigurationError(msg=f"{where} must be a non-negative integer, got {v!r}")
    return v


def binding_from_dict(raw: Mapping[str, Any], iface_name: str) -> Binding:
    """Pick the single binding key of an interface; zero or several is a configuration error."""
    present: Tuple[str, ...] = tuple(k for k in BINDING_TYPES if raw.get(k) is not None)
    if not present:
        raise ConfigurationError(
            msg=f"interface {iface_name} must have a binding method",
            context={"choices": sorted(BINDING_TYPES)},
        )
    if len(present) > 1:
        raise ConfigurationError(
            msg=f"interface {iface_name} must have only one binding method, got: {', '.join(present)}"
        )
    return BINDING_TYPES[present[0]]()


def port_from_dict(raw: Mapping[str, Any]) -> Port:
    port = raw.get("port", 0)
    if isinstance(port, bool) or not isinstance(port, int):
        raise ConfigurationError(msg=f"port must be an integer, got {port!r}")
    if not 0 <= port <= 65535:
        raise ConfigurationError(msg=f"port {port} is out of range")
    return Port(port=port, protocol=str(raw.get("protocol") or ""), name=str(raw.get("name") or ""))


def interface_from_dict(raw: Mapping[str, Any]) -> Interface:
    name = str(raw.get("name") or "")
    if not name:
        raise ConfigurationError(msg="interface name is required")

    boot_order = raw.get("bootOrder")
    if boot_order is not None:
        if isinstance(boot_order, bool) or not isinstance(boot_order, int) or boot_order < 1:
            raise ConfigurationError(msg=f"interface {name}: bootOrder must be a positive integer")

    ports = [port_from_dict(_mapping(p, f"interface {name} ports")) for p in _sequence(raw.get("ports"), "ports")]

    return Interface(
        name=name,
        binding=binding_from_dict(raw, name),
        model=str(raw.get("model") or ""),
        pci_address=str(raw.get("pciAddress") or ""),
        boot_order=boot_order,
        ports=ports,
    )


def network_from_dict(raw: Mapping[str, Any]) -> Network:
    name = str(raw.get("name") or "")
    if not name:
        raise ConfigurationError(msg="network name is required")

    pod = None
    if raw.get("pod") is not None:
        pod = PodNetwork(vm_network_cidr=str(_mapping(raw["pod"], f"network {name} pod").get("vmNetworkCIDR") or ""))

    multus = None
    if raw.get("multus") is not None:
        m = _mapping(raw["multus"], f"network {name} multus")
        multus = MultusNetwork(network_name=str(m.get("networkName") or ""), default=bool(m.get("default", False)))

    return Network(name=name, pod=pod, multus=multus)


__all__ = [
    "InterfaceBindingMethod",
    "BridgeBinding",
    "MasqueradeBinding",
    "SlirpBinding",
    "MacvtapBinding",
    "SRIOVBinding",
    "VhostuserBinding",
    "Binding",
    "Port",
    "Interface",
    "PodNetwork",
    "MultusNetwork",
    "Network",
    "CPU",
    "Resources",
    "VirtualMachineInstanceSpec",
    "binding_from_dict",
    "interface_from_dict",
    "network_from_dict",
    "port_from_dict",
]
