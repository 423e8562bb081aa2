"""Data layer - deployment documents."""

from .config_parser import ConfigLoader, ConfigParser

__all__ = ["ConfigLoader", "ConfigParser"]
