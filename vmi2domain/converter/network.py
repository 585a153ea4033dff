# SPDX-License-Identifier: LGPL-3.0-or-later
# vmi2domain/converter/network.py
"""
VMI interfaces -> libvirt domain interfaces.

The converter walks the declared interfaces in order and, per binding
method, produces a libvirt <interface> record:

  bridge / masquerade / macvtap  -> type='ethernet' on a pre-created tap device
  slirp                          -> type='user' plus a QEMU `-netdev user,...` argument
  vhostuser                      -> type='vhostuser' on the CNI-provided unix socket
  sriov                          -> skipped (attached as a host device elsewhere)

A conversion is all-or-nothing: the first error propagates and nothing is
returned. Non-fatal events (model downgrades) come back as warnings in the
result; DomainInterfaceConverter logs them.
"""
from __future__ import annotations

import copy
import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..core.exceptions import CapabilityError, ConfigurationError, NetworkReferenceError, Vmi2DomainError
from ..core.logger import Log
from ..libvirt.domain_model import (
    ConversionResult,
    ConversionWarning,
    DomainInterface,
    InterfaceDriver,
    InterfaceSource,
    InterfaceTarget,
)
from ..libvirt.pci import parse_pci_address
from ..vmi.model import Interface, InterfaceBindingMethod, Network, VirtualMachineInstanceSpec
from .context import ConverterContext
from .podiface import get_pod_interface_name
from .queues import calculate_network_queues
from .slirp import create_slirp_network
from .vhostuser import get_vhostuser_info

# Models QEMU's slirp backend can drive.
SLIRP_MODELS = ("e1000", "rtl8139")
SLIRP_FALLBACK_MODEL = "e1000"
DEFAULT_MODEL = "virtio"

WARN_MODEL_DOWNGRADED = "model-downgraded"


def validate_networks_types(networks: Sequence[Network]) -> None:
    for network in networks:
        if network.pod is not None and network.multus is not None:
            raise ConfigurationError(msg=f"network {network.name} must have only one network type")
        if network.pod is None and network.multus is None:
            raise ConfigurationError(msg=f"network {network.name} must have a network type")


def index_networks_by_name(networks: Sequence[Network], *, strict: bool = False) -> Dict[str, Network]:
    """
    Name -> private copy of each network.

    Later duplicates overwrite earlier ones unless strict is set, in which
    case a duplicate name is a configuration error.
    """
    by_name: Dict[str, Network] = {}
    for network in networks:
        if strict and network.name in by_name:
            raise ConfigurationError(msg=f"duplicate network name {network.name}")
        by_name[network.name] = copy.deepcopy(network)
    return by_name


def get_interface_model(iface: Interface) -> Tuple[str, Optional[ConversionWarning]]:
    """Effective NIC model, plus a warning when a slirp model had to be replaced."""
    if iface.binding.method is InterfaceBindingMethod.SLIRP:
        if iface.model not in SLIRP_MODELS:
            return SLIRP_FALLBACK_MODEL, ConversionWarning(
                interface=iface.name,
                code=WARN_MODEL_DOWNGRADED,
                message=(
                    f"The network interface type of {iface.name} was changed to {SLIRP_FALLBACK_MODEL} "
                    "due to unsupported interface type by qemu slirp network"
                ),
            )
        return iface.model, None
    return iface.model or DEFAULT_MODEL, None


def _set_boot_or_disable_rom(domain_iface: DomainInterface, iface: Interface) -> None:
    # Without a boot order the NIC option ROM would still try to PXE boot.
    if iface.boot_order is not None:
        domain_iface.boot_order = iface.boot_order
    else:
        domain_iface.rom_enabled = "no"


def _configure_vhostuser(
    domain_iface: DomainInterface,
    spec: VirtualMachineInstanceSpec,
    iface: Interface,
    ctx: ConverterContext,
) -> None:
    cfg = ctx.config
    pod_iface_name = get_pod_interface_name(spec, iface.name, primary_name=cfg.primary_pod_interface_name)
    path, mode = get_vhostuser_info(pod_iface_name, ctx.pod_net_interfaces)

    parts = path.split("/")
    device = parts[-1]
    if len(parts) == 1:
        path = cfg.vhostuser_socket_dir + path

    domain_iface.source = InterfaceSource(type="unix", path=path, mode=mode)
    domain_iface.target = InterfaceTarget(device=device)
    domain_iface.driver = InterfaceDriver(
        rx_queue_size=cfg.vhostuser_queue_size,
        tx_queue_size=cfg.vhostuser_queue_size,
    )


def _build_interface(
    spec: VirtualMachineInstanceSpec,
    iface: Interface,
    network: Network,
    ctx: ConverterContext,
    result: ConversionResult,
) -> DomainInterface:
    method = iface.binding.method

    model, warning = get_interface_model(iface)
    if warning is not None:
        result.warnings.append(warning)

    domain_iface = DomainInterface(model_type=model, alias=iface.name)

    if model == "virtio":
        if ctx.virtio_net_prohibited:
            raise CapabilityError(msg="In-kernel virtio-net device emulation '/dev/vhost-net' not present")
        if spec.network_interface_multiqueue:
            domain_iface.driver = InterfaceDriver(name="vhost", queues=calculate_network_queues(spec, ctx))

    if iface.pci_address:
        try:
            domain_iface.address = parse_pci_address(iface.pci_address)
        except ValueError as e:
            raise ConfigurationError(msg=f"failed to configure interface {iface.name}: {e}", cause=e)

    if method is InterfaceBindingMethod.BRIDGE or method is InterfaceBindingMethod.MASQUERADE:
        # Pre-configured tap devices: https://libvirt.org/formatdomain.html#elementsNICSEthernet
        domain_iface.type = "ethernet"
        _set_boot_or_disable_rom(domain_iface, iface)
    elif method is InterfaceBindingMethod.SLIRP:
        domain_iface.type = "user"
        result.qemu_args.extend(create_slirp_network(iface, network, ctx.search_domains(), ctx.config))
    elif method is InterfaceBindingMethod.MACVTAP:
        if network.multus is None:
            raise ConfigurationError(msg=f"macvtap interface {iface.name} requires Multus meta-cni")
        domain_iface.type = "ethernet"
        _set_boot_or_disable_rom(domain_iface, iface)
    elif method is InterfaceBindingMethod.VHOSTUSER:
        domain_iface.type = "vhostuser"
        _configure_vhostuser(domain_iface, spec, iface, ctx)
    else:  # pragma: no cover
        raise ConfigurationError(msg=f"interface {iface.name}: unsupported binding method {method.value}")

    return domain_iface


def create_domain_interfaces(spec: VirtualMachineInstanceSpec, ctx: ConverterContext) -> ConversionResult:
    """
    Convert every non-SR-IOV interface of the spec, in declaration order.

    Errors raised while building an interface carry `interface` and `binding`
    in their context.
    """
    validate_networks_types(spec.networks)
    networks = index_networks_by_name(spec.networks, strict=ctx.config.strict_network_names)

    result = ConversionResult()
    for iface in spec.interfaces:
        network = networks.get(iface.name)
        if network is None:
            raise NetworkReferenceError(msg=f"failed to find network {iface.name}")
        if iface.binding.method is InterfaceBindingMethod.SRIOV:
            continue
        try:
            domain_iface = _build_interface(spec, iface, network, ctx, result)
        except Vmi2DomainError as e:
            raise e.with_context(interface=iface.name, binding=iface.binding.method.value)
        result.interfaces.append(domain_iface)

    return result


class DomainInterfaceConverter:
    """
    Logging front end over create_domain_interfaces().

    Usage:
        conv = DomainInterfaceConverter(logger, ConverterContext(pod_net_interfaces=...))
        result = conv.convert(spec)
    """

    def __init__(self, logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None, ctx: Optional[ConverterContext] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.ctx = ctx or ConverterContext()

    def convert(self, spec: VirtualMachineInstanceSpec) -> ConversionResult:
        result = create_domain_interfaces(spec, self.ctx)
        log = Log.bind(self.logger, vmi=spec.name or "vmi")
        for w in result.warnings:
            log.bind(iface=w.interface, code=w.code).warning("%s", w.message)
        log.debug("Converted %d interface(s), %d qemu arg(s)", len(result.interfaces), len(result.qemu_args))
        return result

    def convert_interfaces(self, spec: VirtualMachineInstanceSpec) -> List[DomainInterface]:
        return self.convert(spec).interfaces


__all__ = [
    "SLIRP_MODELS",
    "DEFAULT_MODEL",
    "WARN_MODEL_DOWNGRADED",
    "validate_networks_types",
    "index_networks_by_name",
    "get_interface_model",
    "create_domain_interfaces",
    "DomainInterfaceConverter",
]
