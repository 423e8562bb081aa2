"""Pool provisioning from the parsed market list."""

import logging
from typing import List, Sequence

from web3 import Web3

from deployer.core.constants import ZERO_ADDRESS
from deployer.core.errors import RemoteCallFailure, StablePoolsDisabled
from deployer.core.models import FeatureFlags, MarketDescriptor, ProvisionedPool
from deployer.core.units import asset_key_hex

logger = logging.getLogger(__name__)

POOLS_REGISTRY_CONTRACT = "SystemPoolsRegistry"


class PoolProvisioner:
    """Creates one pool per market descriptor through the pools registry.

    Descriptors are processed in document order. The first failing creation
    call aborts the batch; pools created before it stay registered.
    """

    def __init__(self, chain, pools_registry: str, flags: FeatureFlags):
        """
        Args:
            chain: ChainClient used to submit the creation calls
            pools_registry: Address of the SystemPoolsRegistry proxy
            flags: Feature flags of the run
        """
        self.chain = chain
        self.pools_registry = pools_registry
        self.flags = flags
        self.created: List[ProvisionedPool] = []

    def check(self, descriptors: Sequence[MarketDescriptor]) -> None:
        """Reject the whole batch if it needs stable pools and they are disabled."""
        if self.flags.stable_pools_enabled:
            return
        stable = [d.symbol for d in descriptors if d.is_stable]
        if stable:
            raise StablePoolsDisabled(stable)

    async def _create(self, descriptor: MarketDescriptor) -> str:
        if descriptor.is_stable:
            label = f"Create stable pool for {descriptor.symbol} asset"
            await self.chain.transact(
                POOLS_REGISTRY_CONTRACT,
                self.pools_registry,
                "addStablePool",
                descriptor.asset_address,
                descriptor.asset_key,
                descriptor.price_oracle_address,
                label=label,
            )
        else:
            label = f"Create liquidity pool for {descriptor.symbol} asset"
            await self.chain.transact(
                POOLS_REGISTRY_CONTRACT,
                self.pools_registry,
                "addLiquidityPool",
                descriptor.asset_address,
                descriptor.asset_key,
                descriptor.price_oracle_address,
                descriptor.symbol,
                descriptor.is_available_as_collateral,
                descriptor.is_available_as_collateral_with_prt,
                label=label,
            )
        return label

    async def pool_address(self, descriptor: MarketDescriptor) -> str:
        """Read the pool address registered under the descriptor's asset key."""
        info = await self.chain.call(POOLS_REGISTRY_CONTRACT, self.pools_registry, "poolsInfo", descriptor.asset_key)
        address = info[0] if info else None
        if not address or address == ZERO_ADDRESS:
            raise RemoteCallFailure(
                f"Read {descriptor.symbol} pool address",
                f"No pool registered for {descriptor.symbol}",
            )
        return Web3.to_checksum_address(address)

    async def provision(self, descriptors: Sequence[MarketDescriptor]) -> List[ProvisionedPool]:
        """Create every pool in order and return the created pool records."""
        self.check(descriptors)

        pools: List[ProvisionedPool] = []
        for descriptor in descriptors:
            await self._create(descriptor)

            logger.info(
                f"Pool creation parameters: symbol {descriptor.symbol} | "
                f"asset {descriptor.asset_address} | key {asset_key_hex(descriptor.symbol)} | "
                f"oracle {descriptor.price_oracle_address}"
                + (
                    ""
                    if descriptor.is_stable
                    else f" | collateral {descriptor.is_available_as_collateral}"
                )
            )

            address = await self.pool_address(descriptor)
            kind = "Stable Pool" if descriptor.is_stable else "Liquidity Pool"
            logger.info(f"{kind} {descriptor.symbol} ----- {address}")

            pool = ProvisionedPool(descriptor.symbol, descriptor.pool_type, descriptor.asset_key, address)
            self.created.append(pool)
            pools.append(pool)

        return pools
