# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vmi2domain/cli/parser.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional, Sequence, Tuple

from ..config.config_loader import Config
from ..core.exceptions import Fatal
from ..core.logger import Log, c

OUTPUT_FORMATS = ("xml", "json", "summary")


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from .. import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file or directory (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged config and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -v, -vv, -vvv")
    p.add_argument("-q", "--quiet", action="count", default=0, help="Less output: -q, -qq")
    p.add_argument("--log-file", dest="log_file", default=None, help="Write logs to file.")
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit NDJSON logs on stderr.")


def _add_conversion_inputs(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "manifest",
        nargs="?",
        default=None,
        help="VirtualMachineInstance manifest (YAML or JSON), or '-' for stdin.",
    )
    p.add_argument(
        "--network-status",
        dest="network_status",
        default=None,
        help=(
            "File holding the Multus network-status JSON. Defaults to the manifest's "
            "k8s.v1.cni.cncf.io/network-status annotation when present."
        ),
    )
    p.add_argument(
        "--virtio-net-prohibited",
        dest="virtio_net_prohibited",
        action="store_true",
        help="Host has no /dev/vhost-net and emulation is not allowed; virtio NICs fail.",
    )
    p.add_argument(
        "--resolv-conf",
        dest="resolv_conf",
        default=None,
        help="resolv.conf to take slirp DNS search domains from (default: converter.resolv_conf).",
    )
    p.add_argument(
        "--strict-network-names",
        dest="strict_network_names",
        action="store_true",
        default=None,
        help="Fail on duplicate network names instead of letting the last one win.",
    )


def _add_output(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-o",
        "--output",
        dest="output",
        choices=OUTPUT_FORMATS,
        default="xml",
        help="xml: domain fragment with <interface> and <qemu:commandline>; json: records; summary: table.",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="vmi2domain",
        description=c("vmi2domain: VirtualMachineInstance interfaces → libvirt domain", "green", ["bold"]),
    )
    _add_global_config_logging(p)
    _add_conversion_inputs(p)
    _add_output(p)
    return p


def _build_preparser() -> argparse.ArgumentParser:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", action="append", default=[])
    pre.add_argument("-v", "--verbose", action="count", default=0)
    pre.add_argument("-q", "--quiet", action="count", default=0)
    pre.add_argument("--log-file", dest="log_file", default=None)
    pre.add_argument("--json-logs", dest="json_logs", action="store_true")
    pre.add_argument("--dump-config", action="store_true")
    return pre


def _load_merged_config(logger: logging.Logger, cfgs: Sequence[str]) -> Dict[str, Any]:
    if not cfgs:
        return {}
    return Config.load_many(logger, Config.expand_configs(logger, list(cfgs)))


def parse_args_with_config(
    argv: Optional[Sequence[str]] = None,
    logger: Optional[logging.Logger] = None,
) -> Tuple[argparse.Namespace, Dict[str, Any], logging.Logger]:
    """
    Flow:
      Phase 0: parse ONLY global flags needed to locate config/logging
      Phase 1: load+merge config files
      Phase 2: apply config as defaults onto the parser
      Phase 3: full parse to get final args
      Phase 4: validate
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    parser = build_parser()

    args0, _rest = _build_preparser().parse_known_args(argv)

    if logger is None:
        logger = Log.setup(
            args0.verbose,
            args0.log_file,
            quiet=args0.quiet,
            json_logs=args0.json_logs,
        )

    conf = _load_merged_config(logger, args0.config or [])

    if args0.dump_config:
        print(json.dumps(conf, indent=2, sort_keys=True, default=str))
        raise SystemExit(0)

    Config.apply_as_defaults(logger, parser, conf)

    args = parser.parse_args(argv)

    if not args.manifest:
        raise Fatal(code=2, msg="a VirtualMachineInstance manifest is required (positional or `manifest:` in config)")

    return args, conf, logger


__all__ = ["OUTPUT_FORMATS", "build_parser", "parse_args_with_config"]
