"""Contract catalog and the deployer that instantiates it."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from web3 import Web3

from deployer.core.constants import (
    ASSET_PARAMETERS_NAME,
    DEFI_CORE_NAME,
    INTEREST_RATE_LIBRARY_NAME,
    PRICE_MANAGER_NAME,
    PRT_NAME,
    REWARDS_DISTRIBUTION_NAME,
    ROLE_MANAGER_NAME,
    SYSTEM_PARAMETERS_NAME,
    SYSTEM_POOLS_FACTORY_NAME,
    SYSTEM_POOLS_REGISTRY_NAME,
    USER_INFO_REGISTRY_NAME,
)
from deployer.core.models import DeployedContracts, FeatureFlags, RegistrationKind
from deployer.deploy.registrar import REGISTRY_CONTRACT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    """A contract the deployer instantiates.

    ``registry_name`` is None for bare implementations (pool upgrade targets)
    that are referenced by address rather than by name.
    """

    contract: str
    registry_name: Optional[str] = None
    kind: RegistrationKind = RegistrationKind.PROXY
    stable_pools_only: bool = False


LIQUIDITY_POOL_CONTRACT = "LiquidityPool"
STABLE_POOL_CONTRACT = "StablePool"

# Deployment order; later entries may rely on earlier addresses
CONTRACT_CATALOG: List[CatalogEntry] = [
    CatalogEntry("DefiCore", DEFI_CORE_NAME),
    CatalogEntry("SystemParameters", SYSTEM_PARAMETERS_NAME),
    CatalogEntry("AssetParameters", ASSET_PARAMETERS_NAME),
    CatalogEntry("RewardsDistribution", REWARDS_DISTRIBUTION_NAME),
    CatalogEntry("UserInfoRegistry", USER_INFO_REGISTRY_NAME),
    CatalogEntry("SystemPoolsRegistry", SYSTEM_POOLS_REGISTRY_NAME),
    CatalogEntry("SystemPoolsFactory", SYSTEM_POOLS_FACTORY_NAME),
    CatalogEntry("PRT", PRT_NAME),
    CatalogEntry("RoleManager", ROLE_MANAGER_NAME),
    CatalogEntry(LIQUIDITY_POOL_CONTRACT),
    CatalogEntry(STABLE_POOL_CONTRACT, stable_pools_only=True),
    CatalogEntry("PriceManager", PRICE_MANAGER_NAME),
    CatalogEntry("InterestRateLibrary", INTEREST_RATE_LIBRARY_NAME, RegistrationKind.IMMUTABLE),
]

# Proxy registration order (differs from deployment order)
PROXY_REGISTRATION_ORDER = (
    DEFI_CORE_NAME,
    SYSTEM_PARAMETERS_NAME,
    ASSET_PARAMETERS_NAME,
    REWARDS_DISTRIBUTION_NAME,
    USER_INFO_REGISTRY_NAME,
    SYSTEM_POOLS_REGISTRY_NAME,
    SYSTEM_POOLS_FACTORY_NAME,
    PRICE_MANAGER_NAME,
    PRT_NAME,
    ROLE_MANAGER_NAME,
)

CONTRACT_BY_NAME = {e.registry_name: e.contract for e in CONTRACT_CATALOG if e.registry_name}


def catalog_for(flags: FeatureFlags) -> List[CatalogEntry]:
    """Catalog entries that apply under the given feature flags."""
    return [e for e in CONTRACT_CATALOG if flags.stable_pools_enabled or not e.stable_pools_only]


def required_artifacts(flags: FeatureFlags) -> List[str]:
    return [REGISTRY_CONTRACT] + [e.contract for e in catalog_for(flags)]


class ContractDeployer:
    """Deploys the registry (or attaches to one) and every catalog contract."""

    def __init__(self, chain, flags: FeatureFlags):
        self.chain = chain
        self.flags = flags

    async def _attach_or_deploy_registry(self, existing_registry: Optional[str]) -> DeployedContracts:
        if existing_registry:
            registry = Web3.to_checksum_address(existing_registry)
            logger.info(f"Re-attaching to existing Registry at {registry}")
            return DeployedContracts(registry=registry, reused_registry=True)

        registry = await self.chain.deploy(REGISTRY_CONTRACT)
        await self.chain.transact(
            REGISTRY_CONTRACT,
            registry,
            "__OwnableContractsRegistry_init",
            label="Init Registry contract",
        )
        return DeployedContracts(registry=registry)

    async def _bound_immutable(self, deployed: DeployedContracts, entry: CatalogEntry) -> Optional[str]:
        """Address of an immutable entry already bound on a re-attached registry."""
        if not deployed.reused_registry or entry.kind != RegistrationKind.IMMUTABLE:
            return None
        if not await self.chain.call(REGISTRY_CONTRACT, deployed.registry, "hasContract", entry.registry_name):
            return None
        return await self.chain.call(REGISTRY_CONTRACT, deployed.registry, "getContract", entry.registry_name)

    async def deploy_all(self, existing_registry: Optional[str] = None) -> DeployedContracts:
        """Deploy every catalog contract in order.

        A failure aborts immediately; contracts deployed before it stay on
        chain and are not rolled back.
        """
        deployed = await self._attach_or_deploy_registry(existing_registry)

        for entry in catalog_for(self.flags):
            bound = await self._bound_immutable(deployed, entry)
            if bound:
                logger.info(f"{entry.contract} already registered at {bound}, reusing it")
                deployed.addresses[entry.contract] = Web3.to_checksum_address(bound)
                deployed.reused.add(entry.contract)
                continue

            deployed.addresses[entry.contract] = await self.chain.deploy(entry.contract)

        logger.info(f"Deployed {len(deployed.addresses) - len(deployed.reused)} contracts")
        return deployed
