# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vmi2domain/libvirt/interface_xml.py
"""Libvirt XML for converted interfaces and QEMU passthrough args."""
from __future__ import annotations

from typing import Iterable, List, Optional
from xml.sax.saxutils import escape as _xml_escape

from .domain_model import DomainInterface, InterfaceDriver, QemuArg

QEMU_NAMESPACE = "http://libvirt.org/schemas/domain/qemu/1.0"

# libvirt only keeps aliases that carry this prefix
USER_ALIAS_PREFIX = "ua-"


def _xml(s: object) -> str:
    """Escape for XML text/attribute contexts."""
    return _xml_escape(str(s), entities={"'": "&apos;", '"': "&quot;"})


def _indent(lines: Iterable[str], pad: str) -> List[str]:
    return [pad + ln for ln in lines]


def _driver_xml(driver: InterfaceDriver) -> str:
    attrs = ""
    if driver.name:
        attrs += f" name='{_xml(driver.name)}'"
    if driver.queues is not None:
        attrs += f" queues='{driver.queues}'"
    if driver.rx_queue_size is not None:
        attrs += f" rx_queue_size='{driver.rx_queue_size}'"
    if driver.tx_queue_size is not None:
        attrs += f" tx_queue_size='{driver.tx_queue_size}'"
    return f"<driver{attrs}/>"


def render_interface_xml(iface: DomainInterface, *, indent: str = "") -> str:
    """Render one <interface> element."""
    if not iface.type:
        raise ValueError(f"interface {iface.alias} has no type")

    body: List[str] = []
    if iface.source is not None:
        src = iface.source
        attrs = f" type='{_xml(src.type)}'" if src.type else ""
        attrs += f" path='{_xml(src.path)}'" if src.path else ""
        attrs += f" mode='{_xml(src.mode)}'" if src.mode else ""
        body.append(f"<source{attrs}/>")
    if iface.target is not None:
        body.append(f"<target dev='{_xml(iface.target.device)}'/>")
    body.append(f"<model type='{_xml(iface.model_type)}'/>")
    if iface.driver is not None:
        body.append(_driver_xml(iface.driver))
    body.append(f"<alias name='{USER_ALIAS_PREFIX}{_xml(iface.alias)}'/>")
    if iface.address is not None:
        a = iface.address
        body.append(
            f"<address type='{_xml(a.type)}' domain='{_xml(a.domain)}' bus='{_xml(a.bus)}'"
            f" slot='{_xml(a.slot)}' function='{_xml(a.function)}'/>"
        )
    if iface.boot_order is not None:
        body.append(f"<boot order='{iface.boot_order}'/>")
    if iface.rom_enabled is not None:
        body.append(f"<rom enabled='{_xml(iface.rom_enabled)}'/>")

    lines = [f"<interface type='{_xml(iface.type)}'>", *_indent(body, "  "), "</interface>"]
    return "\n".join(_indent(lines, indent))


def render_interfaces_xml(interfaces: Iterable[DomainInterface], *, indent: str = "    ") -> str:
    return "\n".join(render_interface_xml(i, indent=indent) for i in interfaces)


def render_qemu_commandline_xml(args: Iterable[QemuArg], *, indent: str = "  ") -> Optional[str]:
    """
    Render the <qemu:commandline> passthrough block.

    Returns None when there is nothing to pass. The enclosing <domain> must
    declare xmlns:qemu='http://libvirt.org/schemas/domain/qemu/1.0'.
    """
    arg_lines = [f"  <qemu:arg value='{_xml(a.value)}'/>" for a in args]
    if not arg_lines:
        return None
    lines = ["<qemu:commandline>", *arg_lines, "</qemu:commandline>"]
    return "\n".join(_indent(lines, indent))


def render_domain_fragment_xml(
    name: str,
    interfaces: Iterable[DomainInterface],
    qemu_args: Iterable[QemuArg],
) -> str:
    """
    Render a standalone <domain> holding just the network devices and the
    QEMU passthrough arguments, for inspection or merging into a full domain.
    """
    qemu_xml = render_qemu_commandline_xml(qemu_args)
    return (
        f"""<domain type='kvm' xmlns:qemu='{QEMU_NAMESPACE}'>
  <name>{_xml(name or "vmi")}</name>
  <devices>
{render_interfaces_xml(interfaces)}
  </devices>
"""
        + (qemu_xml + "\n" if qemu_xml else "")
        + "</domain>\n"
    )


__all__ = [
    "QEMU_NAMESPACE",
    "USER_ALIAS_PREFIX",
    "render_interface_xml",
    "render_interfaces_xml",
    "render_qemu_commandline_xml",
    "render_domain_fragment_xml",
]
