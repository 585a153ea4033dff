# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vmi2domain/config/config_loader.py
"""
YAML configuration for vmi2domain.

Two layers:
  - Config: load/merge YAML files and feed them into argparse as defaults
  - ConverterConfig: the immutable knobs the network converter runs with
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from ..core.exceptions import ConfigurationError, Fatal

_CONFIG_SUFFIXES = (".yaml", ".yml", ".json")


@dataclass(frozen=True)
class ConverterConfig:
    """Host/cluster constants the converter needs.

    Passed into every conversion so tests can vary them without touching
    process-wide state.
    """

    primary_pod_interface_name: str = "eth0"
    # Upper bound of queues a tap device supports.
    multiqueue_max_queues: int = 8
    vhostuser_socket_dir: str = "/var/lib/cni/vhostuser/"
    default_vm_cidr: str = "10.0.2.0/24"
    default_protocol: str = "TCP"
    vhostuser_queue_size: int = 1024
    resolv_conf: str = "/etc/resolv.conf"
    strict_network_names: bool = False

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ConverterConfig":
        """Build from the `converter:` section of a config file.

        Unknown keys are rejected so that typos do not silently fall back to defaults.
        """
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationError(msg=f"converter config must be a mapping, got {type(data).__name__}")

        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigurationError(msg=f"unknown converter config keys: {', '.join(unknown)}")

        values: Dict[str, Any] = {}
        for key, raw in data.items():
            default = getattr(cls, key)
            if isinstance(default, bool):
                if not isinstance(raw, bool):
                    raise ConfigurationError(msg=f"converter.{key} must be a boolean, got {raw!r}")
                values[key] = raw
            elif isinstance(default, int):
                if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
                    raise ConfigurationError(msg=f"converter.{key} must be a positive integer, got {raw!r}")
                values[key] = raw
            else:
                if not isinstance(raw, str) or not raw.strip():
                    raise ConfigurationError(msg=f"converter.{key} must be a non-empty string, got {raw!r}")
                values[key] = raw.strip()
        return replace(cls(), **values)


class Config:
    """Load, merge and apply YAML config files (later files override earlier ones)."""

    @staticmethod
    def expand_configs(logger: logging.Logger, paths: Sequence[str]) -> List[Path]:
        """
        Expand config arguments: files are taken as-is, directories contribute
        their *.yaml/*.yml/*.json files in name order.
        """
        out: List[Path] = []
        for raw in paths:
            p = Path(raw).expanduser()
            if p.is_dir():
                found = sorted(x for x in p.iterdir() if x.is_file() and x.suffix in _CONFIG_SUFFIXES)
                logger.debug("Config dir %s: %d file(s)", p, len(found))
                out.extend(found)
            else:
                out.append(p)
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: Path) -> Dict[str, Any]:
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise Fatal(code=2, msg=f"cannot read config {path}: {e}", cause=e)
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise Fatal(code=2, msg=f"invalid YAML in config {path}", cause=e)
        if data is None:
            logger.debug("Config %s is empty", path)
            return {}
        if not isinstance(data, dict):
            raise Fatal(code=2, msg=f"config {path} must contain a mapping at top level")
        logger.debug("Loaded config %s (%d key(s))", path, len(data))
        return data

    @staticmethod
    def merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
        """Deep-merge mappings; scalars and lists from `override` win."""
        out = dict(base)
        for k, v in override.items():
            if isinstance(v, Mapping) and isinstance(out.get(k), Mapping):
                out[k] = Config.merge(dict(out[k]), v)
            else:
                out[k] = v
        return out

    @staticmethod
    def load_many(logger: logging.Logger, paths: Sequence[Path]) -> Dict[str, Any]:
        conf: Dict[str, Any] = {}
        for p in paths:
            conf = Config.merge(conf, Config.load_one(logger, p))
        return conf

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Mapping[str, Any]) -> None:
        """
        Feed top-level config keys that match argparse dests in as defaults,
        so explicit CLI flags still override them.
        """
        dests = {a.dest for a in parser._actions}
        defaults = {k.replace("-", "_"): v for k, v in conf.items() if k.replace("-", "_") in dests}
        if defaults:
            logger.debug("Config defaults: %s", ", ".join(sorted(defaults)))
            parser.set_defaults(**defaults)

    @staticmethod
    def converter_config(conf: Mapping[str, Any]) -> ConverterConfig:
        return ConverterConfig.from_mapping(conf.get("converter"))


__all__ = ["Config", "ConverterConfig"]
