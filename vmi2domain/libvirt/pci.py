# SPDX-License-Identifier: LGPL-3.0-or-later
# vmi2domain/libvirt/pci.py
from __future__ import annotations

import re

from .domain_model import PciAddress

# domain:bus:slot.function, e.g. 0000:81:01.0
_PCI_ADDRESS_RE = re.compile(r"^([\da-fA-F]{4}):([\da-fA-F]{2}):([\da-fA-F]{2})\.([0-7])$")


def parse_pci_address(address: str) -> PciAddress:
    """Parse a `DDDD:BB:SS.F` string into a libvirt PCI address element."""
    m = _PCI_ADDRESS_RE.match(address or "")
    if m is None:
        raise ValueError(f"failed to parse PCI address {address!r}")
    domain, bus, slot, function = m.groups()
    return PciAddress(
        domain=f"0x{domain}",
        bus=f"0x{bus}",
        slot=f"0x{slot}",
        function=f"0x{function}",
    )


__all__ = ["parse_pci_address"]
