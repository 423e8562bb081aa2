"""Unit tests for PoolProvisioner."""

import logging

import pytest
from web3 import Web3

from deployer.core.constants import ZERO_ADDRESS
from deployer.core.errors import RemoteCallFailure, StablePoolsDisabled
from deployer.core.models import FeatureFlags, PoolType
from deployer.core.units import asset_key, asset_key_hex
from deployer.data import ConfigParser
from deployer.deploy.provisioner import PoolProvisioner

from tests.conftest import DAI_ADDRESS, DAI_ORACLE, fake_address

POOLS_REGISTRY = fake_address(0x5000)


class TestPoolProvisioner:
    """Tests for pool creation."""

    @pytest.fixture
    def markets(self, dai_record, usdt_stable_record):
        return ConfigParser().parse_markets([dai_record, usdt_stable_record])

    def test_check_disabled_rejects_stable(self, chain, markets):
        provisioner = PoolProvisioner(chain, POOLS_REGISTRY, FeatureFlags(stable_pools_enabled=False))
        with pytest.raises(StablePoolsDisabled) as exc_info:
            provisioner.check(markets)
        assert exc_info.value.symbols == ["USDT"]

    def test_check_enabled(self, chain, markets):
        PoolProvisioner(chain, POOLS_REGISTRY, FeatureFlags(stable_pools_enabled=True)).check(markets)

    @pytest.mark.asyncio
    async def test_stable_while_disabled_creates_nothing(self, chain, markets):
        provisioner = PoolProvisioner(chain, POOLS_REGISTRY, FeatureFlags(stable_pools_enabled=False))

        with pytest.raises(StablePoolsDisabled):
            await provisioner.provision(markets)

        assert chain.fn_calls("addLiquidityPool") == []
        assert chain.fn_calls("addStablePool") == []
        assert provisioner.created == []

    @pytest.mark.asyncio
    async def test_standard_pool(self, chain, dai_record):
        markets = ConfigParser().parse_markets([dai_record])
        provisioner = PoolProvisioner(chain, POOLS_REGISTRY, FeatureFlags())

        pools = await provisioner.provision(markets)

        assert chain.fn_calls("addLiquidityPool") == [
            (
                Web3.to_checksum_address(DAI_ADDRESS),
                asset_key("DAI"),
                Web3.to_checksum_address(DAI_ORACLE),
                "DAI",
                True,
                True,
            )
        ]
        assert len(pools) == 1
        assert pools[0].symbol == "DAI"
        assert pools[0].pool_type == PoolType.STANDARD
        assert pools[0].address == chain.pools[asset_key("DAI")]
        assert pools[0].address != ZERO_ADDRESS
        assert chain.tx_log.labels() == ["Create liquidity pool for DAI asset"]

    @pytest.mark.asyncio
    async def test_document_order_and_stable_call(self, chain, markets):
        chain.stable_pools_available = True
        provisioner = PoolProvisioner(chain, POOLS_REGISTRY, FeatureFlags(stable_pools_enabled=True))

        pools = await provisioner.provision(markets)

        assert [p.symbol for p in pools] == ["DAI", "USDT"]
        assert chain.fn_names() == ["addLiquidityPool", "addStablePool"]
        assert len(chain.fn_calls("addStablePool")[0]) == 3
        assert chain.tx_log.labels()[-1] == "Create stable pool for USDT asset"

    @pytest.mark.asyncio
    async def test_failure_keeps_earlier_pools(self, chain, markets):
        # the pools registry refuses stable pools, so USDT creation reverts after DAI succeeded
        provisioner = PoolProvisioner(chain, POOLS_REGISTRY, FeatureFlags(stable_pools_enabled=True))

        with pytest.raises(RemoteCallFailure) as exc_info:
            await provisioner.provision(markets)

        assert exc_info.value.label == "Create stable pool for USDT asset"
        assert [p.symbol for p in provisioner.created] == ["DAI"]
        assert asset_key("DAI") in chain.pools

    @pytest.mark.asyncio
    async def test_zero_pool_address(self, chain, dai_record):
        markets = ConfigParser().parse_markets([dai_record])

        async def empty_info(contract_name, address, fn_name, *args):
            return (ZERO_ADDRESS, 0)

        chain.call = empty_info
        provisioner = PoolProvisioner(chain, POOLS_REGISTRY, FeatureFlags())

        with pytest.raises(RemoteCallFailure, match="No pool registered for DAI"):
            await provisioner.provision(markets)

    @pytest.mark.asyncio
    async def test_logs_creation_parameters(self, chain, dai_record, caplog):
        market = ConfigParser().parse_market(dai_record)
        provisioner = PoolProvisioner(chain, POOLS_REGISTRY, FeatureFlags(stable_pools_enabled=False))

        with caplog.at_level(logging.INFO, logger="deployer.deploy.provisioner"):
            await provisioner.provision([market])

        assert f"key {asset_key_hex('DAI')}" in caplog.text
        assert "collateral True" in caplog.text
