# vmi2domain/config/__init__.py
from .config_loader import Config, ConverterConfig

__all__ = ["Config", "ConverterConfig"]
