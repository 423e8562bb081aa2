"""Market descriptor data models.

All percentage and amount fields hold normalized on-chain integers. Raw
document values never reach these classes; the config parser converts them
once while building the descriptor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class PoolType(Enum):
    """Pool variants known to the pools registry (values match the on-chain enum)."""

    STANDARD = 0
    STABLE = 1

    @classmethod
    def from_document(cls, value) -> "PoolType":
        """Document discriminator: "0" is a standard pool, anything else is stable."""
        return cls.STANDARD if str(value).strip() == "0" else cls.STABLE


@dataclass(frozen=True)
class FeatureFlags:
    """Process-wide switches, fixed for the duration of a run."""

    stable_pools_enabled: bool = False


@dataclass(frozen=True)
class MainPoolParams:
    """Main pool parameters (fixed-point percentages)."""

    collateralization_ratio: int
    collateralization_ratio_with_prt: int
    reserve_factor: int
    liquidation_discount: int
    max_utilization_ratio: int

    FIELDS = (
        "collateralizationRatio",
        "collateralizationRatioWithPRT",
        "reserveFactor",
        "liquidationDiscount",
        "maxUtilizationRatio",
    )

    def as_tuple(self) -> Tuple[int, ...]:
        return (
            self.collateralization_ratio,
            self.collateralization_ratio_with_prt,
            self.reserve_factor,
            self.liquidation_discount,
            self.max_utilization_ratio,
        )


@dataclass(frozen=True)
class InterestRateParams:
    """Interest rate curve parameters (fixed-point percentages)."""

    base_percentage: int
    first_slope: int
    second_slope: int
    utilization_breaking_point: int

    FIELDS = ("basePercentage", "firstSlope", "secondSlope", "utilizationBreakingPoint")

    def as_tuple(self) -> Tuple[int, ...]:
        return (self.base_percentage, self.first_slope, self.second_slope, self.utilization_breaking_point)


@dataclass(frozen=True)
class DistributionMinimums:
    """Minimum reward distribution parts (fixed-point percentages)."""

    min_supply_distr_part: int
    min_borrow_distr_part: int

    FIELDS = ("minSupplyDistrPart", "minBorrowDistrPart")

    def as_tuple(self) -> Tuple[int, ...]:
        return (self.min_supply_distr_part, self.min_borrow_distr_part)


@dataclass(frozen=True)
class MarketDescriptor:
    """One entry of the market list, ready to be provisioned."""

    symbol: str
    pool_type: PoolType
    asset_address: str
    price_oracle_address: str
    asset_key: bytes
    main_params: MainPoolParams
    reward_per_block: int  # wei

    # Standard pools only
    interest_rate_params: Optional[InterestRateParams] = None
    distribution_minimums: Optional[DistributionMinimums] = None
    is_available_as_collateral: bool = False
    is_available_as_collateral_with_prt: bool = False

    # Stable pools only
    annual_borrow_rate: Optional[int] = None

    @property
    def is_stable(self) -> bool:
        return self.pool_type == PoolType.STABLE

    def all_pool_params(self) -> Tuple[Tuple[int, ...], Tuple[int, ...], Tuple[int, ...]]:
        """The AllPoolParams struct for a standard pool."""
        if self.interest_rate_params is None or self.distribution_minimums is None:
            raise ValueError(f"{self.symbol} is not a standard pool")
        return (
            self.main_params.as_tuple(),
            self.interest_rate_params.as_tuple(),
            self.distribution_minimums.as_tuple(),
        )
