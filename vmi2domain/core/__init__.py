# vmi2domain/core/__init__.py
from .exceptions import (
    CapabilityError,
    ConfigurationError,
    DeviceInfoLookupError,
    Fatal,
    NetworkReferenceError,
    Vmi2DomainError,
)

__all__ = [
    "Vmi2DomainError",
    "Fatal",
    "ConfigurationError",
    "NetworkReferenceError",
    "CapabilityError",
    "DeviceInfoLookupError",
]
