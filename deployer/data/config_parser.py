"""Deployment document loading and normalization.

Reads the market list and reputation token documents, checks every required
field and converts human units (percentages, token amounts) into on-chain
integers. This is the only place where the conversion happens.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from web3 import Web3

from config.settings import Settings, get_settings
from deployer.core.errors import ConfigError
from deployer.core.models import (
    DeploymentConfig,
    DistributionMinimums,
    FeatureFlags,
    InterestRateParams,
    MainPoolParams,
    MarketDescriptor,
    PoolType,
    ReputationTokenParams,
    SystemParametersConfig,
)
from deployer.core.units import asset_key, to_fixed_point, to_wei

logger = logging.getLogger(__name__)


class ConfigParser:
    """Parser for raw market and reputation token records."""

    def parse_bool(self, value: Any, field: str, where: str) -> bool:
        """Parse "true"/"false" strings as written in the documents."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise ConfigError(f"{where}: {field} must be true or false, got {value!r}")

    def parse_address(self, value: Any, field: str, where: str) -> str:
        if not isinstance(value, str) or not Web3.is_address(value):
            raise ConfigError(f"{where}: {field} is not a valid address ({value!r})")
        return Web3.to_checksum_address(value)

    def _require(self, record: Dict[str, Any], field: str, where: str, *aliases: str) -> Any:
        for key in (field,) + aliases:
            if key in record and record[key] not in (None, ""):
                return record[key]
        raise ConfigError(f"{where}: missing required field {field}")

    def _percent_group(self, raw: Any, fields: Sequence[str], group: str, where: str) -> List[int]:
        """Convert a list or named object of percentages, in struct order."""
        if isinstance(raw, dict):
            missing = [f for f in fields if f not in raw]
            if missing:
                raise ConfigError(f"{where}: {group} missing {', '.join(missing)}")
            values = [raw[f] for f in fields]
        elif isinstance(raw, (list, tuple)):
            if len(raw) != len(fields):
                raise ConfigError(f"{where}: {group} needs {len(fields)} values, got {len(raw)}")
            values = list(raw)
        else:
            raise ConfigError(f"{where}: {group} must be a list or an object")

        try:
            return [to_fixed_point(v) for v in values]
        except ConfigError as e:
            raise ConfigError(f"{where}: {group}: {e.message}")

    def parse_market(self, record: Dict[str, Any], index: int = 0) -> MarketDescriptor:
        """Build a normalized descriptor from one market list record."""
        if not isinstance(record, dict):
            raise ConfigError(f"Market #{index} must be an object")

        symbol = self._require(record, "symbol", f"Market #{index}")
        if not isinstance(symbol, str):
            raise ConfigError(f"Market #{index}: symbol must be a string, got {symbol!r}")
        where = f"Market #{index} ({symbol})"
        pool_type = PoolType.from_document(self._require(record, "poolType", where))

        main_params = MainPoolParams(
            *self._percent_group(
                self._require(record, "mainParams", where), MainPoolParams.FIELDS, "mainParams", where
            )
        )

        try:
            reward_per_block = to_wei(self._require(record, "rewardPerBlock", where))
        except ConfigError as e:
            raise ConfigError(f"{where}: rewardPerBlock: {e.message}")

        common = dict(
            symbol=symbol,
            pool_type=pool_type,
            asset_address=self.parse_address(self._require(record, "assetAddr", where), "assetAddr", where),
            price_oracle_address=self.parse_address(
                self._require(record, "chainlinkOracle", where, "priceFeedAddr"), "chainlinkOracle", where
            ),
            asset_key=asset_key(symbol),
            main_params=main_params,
            reward_per_block=reward_per_block,
        )

        if pool_type == PoolType.STABLE:
            try:
                annual_borrow_rate = to_fixed_point(self._require(record, "annualBorrowRate", where))
            except ConfigError as e:
                raise ConfigError(f"{where}: annualBorrowRate: {e.message}")
            return MarketDescriptor(annual_borrow_rate=annual_borrow_rate, **common)

        collateral = self.parse_bool(
            self._require(record, "isAvailableAsCollateral", where), "isAvailableAsCollateral", where
        )
        with_prt = record.get("isAvailableAsCollateralWithPrt")

        return MarketDescriptor(
            interest_rate_params=InterestRateParams(
                *self._percent_group(
                    self._require(record, "interestRateParams", where),
                    InterestRateParams.FIELDS,
                    "interestRateParams",
                    where,
                )
            ),
            distribution_minimums=DistributionMinimums(
                *self._percent_group(
                    self._require(record, "distributionMinimums", where),
                    DistributionMinimums.FIELDS,
                    "distributionMinimums",
                    where,
                )
            ),
            is_available_as_collateral=collateral,
            is_available_as_collateral_with_prt=(
                collateral if with_prt in (None, "") else self.parse_bool(with_prt, "isAvailableAsCollateralWithPrt", where)
            ),
            **common,
        )

    def parse_markets(self, records: Any) -> List[MarketDescriptor]:
        if not isinstance(records, list):
            raise ConfigError("Market list must be a JSON array")

        markets = [self.parse_market(record, i) for i, record in enumerate(records)]

        seen = {}
        for market in markets:
            if market.asset_key in seen:
                logger.warning(
                    f"{market.symbol} appears more than once in the market list; "
                    f"the pools registry decides whether the second creation succeeds"
                )
            seen[market.asset_key] = market.symbol
        return markets

    def parse_reputation_token(self, record: Any) -> ReputationTokenParams:
        if not isinstance(record, dict):
            raise ConfigError("PRT document must be a JSON object")
        where = "PRT data"
        params = record.get("prtParams", record.get("initParams"))
        if params is None:
            raise ConfigError(f"{where}: missing required field prtParams")
        return ReputationTokenParams(
            name=self._require(record, "name", where),
            symbol=self._require(record, "symbol", where),
            init_params=params,
        )


class ConfigLoader:
    """Loads and normalizes every document a deployment run consumes."""

    def __init__(self, settings: Optional[Settings] = None, parser: Optional[ConfigParser] = None):
        self.settings = settings or get_settings()
        self.parser = parser or ConfigParser()

    def _read_json(self, path: Path) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            raise ConfigError(f"Document not found: {path}")
        except json.JSONDecodeError as e:
            raise ConfigError(f"Document {path} is not valid JSON: {e}")

    def load_markets(self, path: Optional[Path] = None) -> List[MarketDescriptor]:
        path = path or self.settings.pools_data_path
        markets = self.parser.parse_markets(self._read_json(path))
        logger.info(f"Loaded {len(markets)} markets from {path}")
        return markets

    def load_reputation_token(self, path: Optional[Path] = None) -> Optional[ReputationTokenParams]:
        path = path or self.settings.prt_data_path
        if path is None:
            logger.warning("PRT_DATA_PATH is empty, PRT initialization will be skipped")
            return None
        return self.parser.parse_reputation_token(self._read_json(path))

    def load(self) -> DeploymentConfig:
        """Read everything up front so config errors surface before any deployment."""
        s = self.settings
        try:
            system_parameters = SystemParametersConfig(
                liquidation_boundary=to_fixed_point(s.liquidation_boundary),
                min_currency_amount=to_wei(s.min_currency_amount),
            )
            asset_key(s.native_asset_symbol)
            asset_key(s.rewards_asset_symbol)
        except ConfigError as e:
            raise ConfigError(e.message, label="Load configuration")

        return DeploymentConfig(
            flags=FeatureFlags(stable_pools_enabled=s.stable_pools_available),
            native_asset_symbol=s.native_asset_symbol,
            markets=self.load_markets(),
            system_parameters=system_parameters,
            rewards_asset_symbol=s.rewards_asset_symbol,
            rewards_asset_token=Web3.to_checksum_address(s.rewards_asset_token) if s.rewards_asset_token else "",
            governance_token=Web3.to_checksum_address(s.governance_token) if s.governance_token else "",
            reputation_token=self.load_reputation_token(),
        )
