# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vmi2domain/__init__.py
"""
vmi2domain - VirtualMachineInstance network interfaces to libvirt domain XML

Usage as a library:

    from vmi2domain import ConverterContext, DomainInterfaceConverter, VirtualMachineInstanceSpec

    spec = VirtualMachineInstanceSpec.from_manifest(yaml.safe_load(text))
    result = DomainInterfaceConverter(logger, ConverterContext()).convert(spec)
    result.interfaces   # ordered libvirt <interface> records
    result.qemu_args    # `-netdev user,...` pairs for slirp interfaces
"""

__version__ = "0.1.0"

from .config import ConverterConfig
from .converter import ConverterContext, DomainInterfaceConverter, create_domain_interfaces
from .vmi import VirtualMachineInstanceSpec

__all__ = [
    "__version__",
    "ConverterConfig",
    "ConverterContext",
    "DomainInterfaceConverter",
    "create_domain_interfaces",
    "VirtualMachineInstanceSpec",
]
