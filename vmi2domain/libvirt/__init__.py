# vmi2domain/libvirt/__init__.py
from .domain_model import (
    ConversionResult,
    ConversionWarning,
    DomainInterface,
    InterfaceDriver,
    InterfaceSource,
    InterfaceTarget,
    PciAddress,
    QemuArg,
)
from .pci import parse_pci_address

__all__ = [
    "ConversionResult",
    "ConversionWarning",
    "DomainInterface",
    "InterfaceDriver",
    "InterfaceSource",
    "InterfaceTarget",
    "PciAddress",
    "QemuArg",
    "parse_pci_address",
]
