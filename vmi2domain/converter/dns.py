# SPDX-License-Identifier: LGPL-3.0-or-later
# vmi2domain/converter/dns.py
"""resolv.conf parsing for the user-mode (slirp) network backend."""
from __future__ import annotations

import ipaddress
import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)

NAMESERVER_PREFIX = "nameserver"
SEARCH_PREFIX = "search"
DEFAULT_NAMESERVER = "8.8.8.8"
DEFAULT_SEARCH_DOMAIN = "cluster.local"


def parse_nameservers(content: str) -> List[str]:
    """IPv4 nameservers in file order; falls back to a public resolver when none are usable."""
    nameservers: List[str] = []
    for line in content.splitlines():
        words = line.split()
        if len(words) < 2 or words[0] != NAMESERVER_PREFIX:
            continue
        try:
            addr = ipaddress.ip_address(words[1])
        except ValueError:
            logger.debug("Skipping unparsable nameserver %r", words[1])
            continue
        if addr.version == 4:
            nameservers.append(str(addr))
    if not nameservers:
        nameservers.append(DEFAULT_NAMESERVER)
    return nameservers


def parse_search_domains(content: str) -> List[str]:
    """
    Search domains from every `search` line, lowercased.

    Kubernetes only allows lower-case domain names; DNS itself is case-insensitive.
    """
    domains: List[str] = []
    for line in content.splitlines():
        words = line.split()
        if not words or words[0] != SEARCH_PREFIX:
            continue
        domains.extend(w.lower() for w in words[1:])
    if not domains:
        domains.append(DEFAULT_SEARCH_DOMAIN)
    return domains


def read_resolv_conf(path: str = "/etc/resolv.conf") -> Tuple[List[str], List[str]]:
    """
    Read and parse a resolver config file.

    Returns (nameservers, search_domains). OSError propagates to the caller.
    """
    with open(path, encoding="utf-8") as f:
        content = f.read()

    nameservers = parse_nameservers(content)
    search_domains = parse_search_domains(content)

    logger.info("Found nameservers in %s: %s", path, " ".join(nameservers))
    logger.info("Found search domains in %s: %s", path, " ".join(search_domains))
    return nameservers, search_domains


__all__ = ["parse_nameservers", "parse_search_domains", "read_resolv_conf"]
