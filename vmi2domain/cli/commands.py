# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vmi2domain/cli/commands.py
"""Glue between parsed CLI args and the converter."""
from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, TextIO

import yaml
from rich.console import Console
from rich.table import Table

from ..config.config_loader import Config
from ..converter.context import ConverterContext
from ..converter.network import DomainInterfaceConverter
from ..converter.vhostuser import NETWORK_STATUS_ANNOTATION, PodNetInterface, parse_network_status
from ..core.exceptions import Fatal, wrap_fatal
from ..core.logger import Log
from ..libvirt.domain_model import ConversionResult
from ..libvirt.interface_xml import render_domain_fragment_xml
from ..vmi.model import VirtualMachineInstanceSpec


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).expanduser().read_text(encoding="utf-8")
    except OSError as e:
        raise wrap_fatal(f"cannot read {path}: {e.strerror or e}", e, code=2, path=path)


def load_manifest(path: str) -> Dict[str, Any]:
    """Load a VMI manifest; JSON is accepted since it is valid YAML."""
    try:
        data = yaml.safe_load(_read_text(path))
    except yaml.YAMLError as e:
        raise wrap_fatal(f"invalid YAML in {path}", e, code=2, path=path)
    if not isinstance(data, dict):
        raise Fatal(code=2, msg=f"{path} must contain a VirtualMachineInstance mapping")
    return data


def load_pod_net_interfaces(
    manifest: Mapping[str, Any],
    network_status_path: Optional[str],
) -> Optional[List[PodNetInterface]]:
    """Device info from --network-status, else from the manifest annotation, else None."""
    if network_status_path:
        return parse_network_status(_read_text(network_status_path))
    annotations = (manifest.get("metadata") or {}).get("annotations") or {}
    raw = annotations.get(NETWORK_STATUS_ANNOTATION)
    if raw:
        return parse_network_status(str(raw))
    return None


def build_context(args: argparse.Namespace, conf: Mapping[str, Any], manifest: Mapping[str, Any]) -> ConverterContext:
    cfg = Config.converter_config(conf)
    overrides: Dict[str, Any] = {}
    if args.resolv_conf:
        overrides["resolv_conf"] = args.resolv_conf
    if args.strict_network_names is not None:
        overrides["strict_network_names"] = bool(args.strict_network_names)
    if overrides:
        cfg = dataclasses.replace(cfg, **overrides)

    return ConverterContext(
        virtio_net_prohibited=bool(args.virtio_net_prohibited),
        pod_net_interfaces=load_pod_net_interfaces(manifest, args.network_status),
        config=cfg,
    )


def print_summary(result: ConversionResult, *, file: Optional[TextIO] = None) -> None:
    console = Console(file=file)
    table = Table(title="Domain interfaces")
    table.add_column("Alias")
    table.add_column("Type")
    table.add_column("Model")
    table.add_column("Queues", justify="right")
    table.add_column("Boot/ROM")
    table.add_column("Source")
    for i in result.interfaces:
        queues = str(i.driver.queues) if i.driver and i.driver.queues is not None else ""
        boot = f"boot {i.boot_order}" if i.boot_order is not None else (f"rom {i.rom_enabled}" if i.rom_enabled else "")
        source = f"{i.source.type}:{i.source.path} ({i.source.mode})" if i.source else ""
        table.add_row(i.alias, i.type or "", i.model_type, queues, boot, source)
    console.print(table)
    if result.qemu_args:
        console.print("QEMU args: " + " ".join(a.value for a in result.qemu_args), highlight=False)


def run(args: argparse.Namespace, conf: Mapping[str, Any], logger: logging.Logger, *, out: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    manifest = load_manifest(args.manifest)
    spec = VirtualMachineInstanceSpec.from_manifest(manifest)
    log = Log.bind(logger, vmi=spec.name or args.manifest)
    log.info("Converting %d interface(s)", len(spec.interfaces))

    ctx = build_context(args, conf, manifest)
    result = DomainInterfaceConverter(log, ctx).convert(spec)

    if args.output == "json":
        out.write(json.dumps(result.to_dict(), indent=2) + "\n")
    elif args.output == "summary":
        print_summary(result, file=out)
    else:
        out.write(render_domain_fragment_xml(spec.name, result.interfaces, result.qemu_args))
    return 0


__all__ = ["load_manifest", "load_pod_net_interfaces", "build_context", "print_summary", "run"]
