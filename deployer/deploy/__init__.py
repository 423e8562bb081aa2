"""Deployment pipeline - contract deployment, registry wiring and pool provisioning."""

from deployer.deploy.contracts import CONTRACT_CATALOG, CatalogEntry, ContractDeployer, required_artifacts
from deployer.deploy.orchestrator import DeploymentOrchestrator
from deployer.deploy.parameters import ParametersConfigurer
from deployer.deploy.provisioner import PoolProvisioner
from deployer.deploy.registrar import DeploymentRegistrar

__all__ = [
    "CONTRACT_CATALOG",
    "CatalogEntry",
    "ContractDeployer",
    "required_artifacts",
    "DeploymentOrchestrator",
    "ParametersConfigurer",
    "PoolProvisioner",
    "DeploymentRegistrar",
]
