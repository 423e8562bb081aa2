"""Deployment and registry wiring for the collateralized lending protocol."""

__version__ = "0.1.0"
