# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vmi2domain/libvirt/domain_model.py
"""
Libvirt domain records produced by the network converter.

These mirror the libvirt <interface> element and the QEMU command-line
passthrough block; interface_xml.py renders them.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional

InterfaceType = Literal["ethernet", "user", "vhostuser"]


@dataclass(frozen=True)
class PciAddress:
    domain: str
    bus: str
    slot: str
    function: str
    type: str = "pci"


@dataclass
class InterfaceDriver:
    name: str = ""
    queues: Optional[int] = None
    rx_queue_size: Optional[int] = None
    tx_queue_size: Optional[int] = None


@dataclass
class InterfaceSource:
    type: str = ""
    path: str = ""
    mode: str = ""


@dataclass
class InterfaceTarget:
    device: str


@dataclass
class DomainInterface:
    model_type: str
    alias: str
    type: Optional[InterfaceType] = None
    address: Optional[PciAddress] = None
    boot_order: Optional[int] = None
    rom_enabled: Optional[str] = None
    driver: Optional[InterfaceDriver] = None
    source: Optional[InterfaceSource] = None
    target: Optional[InterfaceTarget] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class QemuArg:
    value: str


@dataclass(frozen=True)
class ConversionWarning:
    """Non-fatal event raised while converting one interface."""

    interface: str
    code: str
    message: str


@dataclass
class ConversionResult:
    interfaces: List[DomainInterface] = field(default_factory=list)
    qemu_args: List[QemuArg] = field(default_factory=list)
    warnings: List[ConversionWarning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interfaces": [i.to_dict() for i in self.interfaces],
            "qemuArgs": [a.value for a in self.qemu_args],
            "warnings": [asdict(w) for w in self.warnings],
        }


__all__ = [
    "InterfaceType",
    "PciAddress",
    "InterfaceDriver",
    "InterfaceSource",
    "InterfaceTarget",
    "DomainInterface",
    "QemuArg",
    "ConversionWarning",
    "ConversionResult",
]
