# vmi2domain/converter/__init__.py
from .context import ConverterContext
from .network import (
    DomainInterfaceConverter,
    create_domain_interfaces,
    get_interface_model,
    index_networks_by_name,
    validate_networks_types,
)
from .podiface import compose_pod_interface_name, get_pod_interface_name
from .queues import calculate_network_queues
from .slirp import create_slirp_network
from .vhostuser import PodNetInterface, get_vhostuser_info, parse_network_status

__all__ = [
    "ConverterContext",
    "DomainInterfaceConverter",
    "create_domain_interfaces",
    "get_interface_model",
    "index_networks_by_name",
    "validate_networks_types",
    "compose_pod_interface_name",
    "get_pod_interface_name",
    "calculate_network_queues",
    "create_slirp_network",
    "PodNetInterface",
    "get_vhostuser_info",
    "parse_network_status",
]
