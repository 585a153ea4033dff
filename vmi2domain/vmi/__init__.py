# vmi2domain/vmi/__init__.py
from .model import (
    CPU,
    BridgeBinding,
    Interface,
    InterfaceBindingMethod,
    MacvtapBinding,
    MasqueradeBinding,
    MultusNetwork,
    Network,
    PodNetwork,
    Port,
    Resources,
    SlirpBinding,
    SRIOVBinding,
    VhostuserBinding,
    VirtualMachineInstanceSpec,
)

__all__ = [
    "CPU",
    "BridgeBinding",
    "Interface",
    "InterfaceBindingMethod",
    "MacvtapBinding",
    "MasqueradeBinding",
    "MultusNetwork",
    "Network",
    "PodNetwork",
    "Port",
    "Resources",
    "SlirpBinding",
    "SRIOVBinding",
    "VhostuserBinding",
    "VirtualMachineInstanceSpec",
]
