# SPDX-License-Identifier: LGPL-3.0-or-later
# vmi2domain/converter/context.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ..config.config_loader import ConverterConfig
from ..vmi.model import VirtualMachineInstanceSpec
from .dns import read_resolv_conf
from .queues import calculate_requested_vcpus, get_cpu_topology
from .vhostuser import PodNetInterface

VCPUCalculator = Callable[[VirtualMachineInstanceSpec], int]
ResolvConfReader = Callable[[], Tuple[List[str], List[str]]]


@dataclass
class ConverterContext:
    """
    Everything one conversion needs from outside the VMI spec.

    virtio_net_prohibited: /dev/vhost-net is missing and emulation is not allowed
    pod_net_interfaces: device info reported by the CNI layer (None when unknown)
    vcpu_calculator / resolv_conf_reader: overridable collaborators; defaults
    derive vCPUs from the spec and read config.resolv_conf
    """

    virtio_net_prohibited: bool = False
    pod_net_interfaces: Optional[List[PodNetInterface]] = None
    vcpu_calculator: Optional[VCPUCalculator] = None
    resolv_conf_reader: Optional[ResolvConfReader] = None
    config: ConverterConfig = field(default_factory=ConverterConfig)

    def requested_vcpus(self, spec: VirtualMachineInstanceSpec) -> int:
        if self.vcpu_calculator is not None:
            return self.vcpu_calculator(spec)
        return calculate_requested_vcpus(get_cpu_topology(spec))

    def search_domains(self) -> List[str]:
        if self.resolv_conf_reader is not None:
            _nameservers, domains = self.resolv_conf_reader()
        else:
            _nameservers, domains = read_resolv_conf(self.config.resolv_conf)
        return list(domains)


__all__ = ["ConverterContext", "VCPUCalculator", "ResolvConfReader"]
