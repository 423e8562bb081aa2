"""Persistence of deployment reports."""

from deployer.persistence.storage import DeploymentStorage

__all__ = ["DeploymentStorage"]
