"""Asset and system parameter setup that follows pool creation."""

import logging
from typing import Sequence

from deployer.core.models import MarketDescriptor, SystemParametersConfig
from deployer.core.units import percent_to_str

logger = logging.getLogger(__name__)

ASSET_PARAMETERS_CONTRACT = "AssetParameters"
REWARDS_DISTRIBUTION_CONTRACT = "RewardsDistribution"
SYSTEM_PARAMETERS_CONTRACT = "SystemParameters"


class ParametersConfigurer:
    """Pushes per-asset and system-wide parameters to their stores."""

    def __init__(self, chain, asset_parameters: str, rewards_distribution: str, system_parameters: str):
        self.chain = chain
        self.asset_parameters = asset_parameters
        self.rewards_distribution = rewards_distribution
        self.system_parameters = system_parameters

    async def configure_asset(self, descriptor: MarketDescriptor) -> None:
        """Set up the asset parameters of one market."""
        main = descriptor.main_params

        if descriptor.is_stable:
            await self.chain.transact(
                ASSET_PARAMETERS_CONTRACT,
                self.asset_parameters,
                "setupAnnualBorrowRate",
                descriptor.asset_key,
                descriptor.annual_borrow_rate,
                label=f"Setup annual borrow rate for {descriptor.symbol} stable pool",
            )
            await self.chain.transact(
                ASSET_PARAMETERS_CONTRACT,
                self.asset_parameters,
                "setupMainParameters",
                descriptor.asset_key,
                main.as_tuple(),
                label=f"Setup main parameters for {descriptor.symbol} stable pool",
            )
            logger.debug(
                f"{descriptor.symbol} stable pool: annual borrow rate {percent_to_str(descriptor.annual_borrow_rate)}, "
                f"collateralization ratio {percent_to_str(main.collateralization_ratio, True)}"
            )
            return

        await self.chain.transact(
            ASSET_PARAMETERS_CONTRACT,
            self.asset_parameters,
            "setupAllParameters",
            descriptor.asset_key,
            descriptor.all_pool_params(),
            label=f"Setup all parameters for {descriptor.symbol} liquidity pool",
        )
        rates = descriptor.interest_rate_params
        logger.debug(
            f"{descriptor.symbol} liquidity pool: collateralization ratio "
            f"{percent_to_str(main.collateralization_ratio, True)}, reserve factor "
            f"{percent_to_str(main.reserve_factor)}, base rate {percent_to_str(rates.base_percentage)}"
        )

    async def configure_rewards(self, descriptors: Sequence[MarketDescriptor]) -> None:
        """Set rewards per block for every market in one batch call."""
        keys = [d.asset_key for d in descriptors]
        rewards = [d.reward_per_block for d in descriptors]
        await self.chain.transact(
            REWARDS_DISTRIBUTION_CONTRACT,
            self.rewards_distribution,
            "setupRewardsPerBlockBatch",
            keys,
            rewards,
            label="Set rewards per block for all assets",
        )

    async def configure_system(self, params: SystemParametersConfig) -> None:
        await self.chain.transact(
            SYSTEM_PARAMETERS_CONTRACT,
            self.system_parameters,
            "setupLiquidationBoundary",
            params.liquidation_boundary,
            label="Setup liquidation boundary",
        )
        await self.chain.transact(
            SYSTEM_PARAMETERS_CONTRACT,
            self.system_parameters,
            "setupMinCurrencyAmount",
            params.min_currency_amount,
            label="Setup min currency amount",
        )
        logger.info(f"Liquidation boundary: {percent_to_str(params.liquidation_boundary)}")

    async def configure(
        self,
        descriptors: Sequence[MarketDescriptor],
        system: SystemParametersConfig,
        rewards_enabled: bool,
    ) -> None:
        for descriptor in descriptors:
            await self.configure_asset(descriptor)

        if rewards_enabled and descriptors:
            await self.configure_rewards(descriptors)
        elif not rewards_enabled:
            logger.info("No rewards asset configured, skipping rewards per block setup")

        await self.configure_system(system)
