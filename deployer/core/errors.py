"""Exception hierarchy for the deployment pipeline.

Every error is fatal to the run: nothing here is retried. Each exception
carries the label of the step that failed so an operator can tell from the
transaction log how far the run progressed.
"""

from typing import Any, Dict, Optional


class DeploymentError(Exception):
    """Base exception for all deployment errors."""

    def __init__(
        self,
        message: str,
        label: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.label = label
        self.context = context or {}

    def __str__(self) -> str:
        if self.label:
            return f"[{self.label}] {self.message}"
        return self.message


class ConfigError(DeploymentError):
    """Missing or invalid environment flag or document field."""


class RegistrarError(DeploymentError):
    """Misuse of the name registry."""


class DuplicateRegistration(RegistrarError):
    """A name is already bound and cannot be rebound."""

    def __init__(self, name: str, address: Optional[str] = None, label: Optional[str] = None):
        super().__init__(
            f"Name {name} is already registered" + (f" at {address}" if address else ""),
            label=label,
            context={"name": name, "address": address},
        )
        self.name = name
        self.address = address


class UnknownName(RegistrarError):
    """A name has no registration."""

    def __init__(self, name: str, label: Optional[str] = None):
        super().__init__(f"Name {name} is not registered", label=label, context={"name": name})
        self.name = name


class RemoteCallFailure(DeploymentError):
    """A deployment, initialization or provisioning call was rejected."""

    def __init__(self, label: str, reason: str, tx_hash: Optional[str] = None):
        super().__init__(reason, label=label, context={"tx_hash": tx_hash} if tx_hash else None)
        self.reason = reason
        self.tx_hash = tx_hash


class AlreadyInitialized(RemoteCallFailure):
    """A one-time initializer was called on an initialized component."""


class StablePoolsDisabled(DeploymentError):
    """The market list requests stable pools but the feature flag is off."""

    def __init__(self, symbols):
        symbols = list(symbols)
        super().__init__(
            f"Stable pools are unavailable, refusing to provision {', '.join(symbols)}",
            label="Provision pools",
            context={"symbols": symbols},
        )
        self.symbols = symbols


class InvalidStageTransition(DeploymentError):
    """A phase was started out of order."""
