# SPDX-License-Identifier: LGPL-3.0-or-later
# vmi2domain/converter/queues.py
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from ..core.exceptions import ConfigurationError
from ..vmi.model import VirtualMachineInstanceSpec

if TYPE_CHECKING:  # pragma: no cover
    from .context import ConverterContext

logger = logging.getLogger(__name__)

# <number><suffix>, suffix one of: binary SI, decimal SI, or a decimal exponent
_QUANTITY_RE = re.compile(r"^([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE]([+-]?[0-9]+)|(Ki|Mi|Gi|Ti|Pi|Ei|[numkMGTPE])?)$")

_SUFFIXES = {
    "Ki": Decimal(2) ** 10,
    "Mi": Decimal(2) ** 20,
    "Gi": Decimal(2) ** 30,
    "Ti": Decimal(2) ** 40,
    "Pi": Decimal(2) ** 50,
    "Ei": Decimal(2) ** 60,
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}


@dataclass(frozen=True)
class CPUTopology:
    sockets: int = 1
    cores: int = 1
    threads: int = 1


def parse_cpu_quantity(quantity: str) -> int:
    """
    Whole CPUs for a Kubernetes CPU quantity, rounded up.

    Accepts the resource.Quantity forms: plain ("2", "1.5"), decimal SI
    ("500m", "100u", "2k"), binary SI ("1Ki") and exponent ("1e3"). Signed
    values are rejected.
    """
    m = _QUANTITY_RE.match(str(quantity).strip())
    if m is None:
        raise ConfigurationError(msg=f"invalid CPU quantity {quantity!r}")
    number, exponent, suffix = m.groups()
    value = Decimal(number)
    if exponent is not None:
        value = value.scaleb(int(exponent))
    elif suffix:
        value *= _SUFFIXES[suffix]
    return int(math.ceil(value))


def get_cpu_topology(spec: VirtualMachineInstanceSpec) -> CPUTopology:
    """
    Guest CPU topology: 1 socket/1 core/1 thread unless the spec says otherwise.

    When the CPU section sets none of cores/sockets/threads, the socket count
    follows the CPU limit, else the CPU request.
    """
    cores = sockets = threads = 1
    cpu = spec.cpu
    if cpu is not None:
        cores = cpu.cores or 1
        sockets = cpu.sockets or 1
        threads = cpu.threads or 1

    if cpu is None or (cpu.cores == 0 and cpu.sockets == 0 and cpu.threads == 0):
        quantity: Optional[str] = spec.resources.limits.get("cpu") or spec.resources.requests.get("cpu")
        if quantity:
            sockets = max(1, parse_cpu_quantity(quantity))

    return CPUTopology(sockets=sockets, cores=cores, threads=threads)


def calculate_requested_vcpus(topology: CPUTopology) -> int:
    return topology.cores * topology.sockets * topology.threads


def calculate_network_queues(spec: VirtualMachineInstanceSpec, ctx: "ConverterContext") -> int:
    """Queues per virtio NIC: one per requested vCPU, capped at what a tap device supports."""
    queues = ctx.requested_vcpus(spec)
    cap = ctx.config.multiqueue_max_queues
    if queues > cap:
        logger.debug("Capped the number of queues to be the current maximum of tap device queues: %d", cap)
        queues = cap
    return queues


__all__ = [
    "CPUTopology",
    "parse_cpu_quantity",
    "get_cpu_topology",
    "calculate_requested_vcpus",
    "calculate_network_queues",
]
