"""Pytest configuration and fixtures."""

import itertools
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest
from web3 import Web3

from config.settings import Settings
from deployer.chain.tx_log import TransactionLog
from deployer.core.constants import ZERO_ADDRESS
from deployer.core.errors import AlreadyInitialized, RemoteCallFailure
from deployer.core.models import (
    DeploymentConfig,
    FeatureFlags,
    ReputationTokenParams,
    SystemParametersConfig,
)
from deployer.core.units import to_fixed_point, to_wei
from deployer.data import ConfigParser

INITIALIZERS = {
    "__OwnableContractsRegistry_init",
    "defiCoreInitialize",
    "prtInitialize",
    "systemPoolsRegistryInitialize",
}

DAI_ADDRESS = "0x6b175474e89094c44da98b954eedeac495271d0f"
DAI_ORACLE = "0xaed0c38402a5d19df6e4c03f4e2dced6e29c1ee9"
USDT_ADDRESS = "0xdac17f958d2ee523a2206206994597c13d831ec7"
USDT_ORACLE = "0x3e7d1eab13ad0104d2750b8863b489d65364e32d"
REWARDS_TOKEN = "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984"


def fake_address(n: int) -> str:
    return Web3.to_checksum_address("0x" + f"{n:040x}")


class FakeArtifacts:
    """Artifact store stand-in that reports a configurable set as missing."""

    def __init__(self, missing: Optional[Set[str]] = None):
        self.missing_names = set(missing or ())

    def missing(self, names):
        return [n for n in names if n in self.missing_names]


class FakeChain:
    """In-memory chain with the same deploy/transact/call surface as ChainClient.

    Simulates the Registry (proxy/immutable bindings), one-time initializers
    and the pools registry, and records every submitted operation in order.
    """

    def __init__(self, fail_on: Optional[Set[str]] = None, chain_id: int = 31337):
        self.tx_log = TransactionLog()
        self.artifacts = FakeArtifacts()
        self.fail_on = set(fail_on or ())
        self._chain_id = chain_id
        self._counter = itertools.count(1)
        self._blocks = itertools.count(1)

        self.calls: List[Tuple[str, str, str, tuple]] = []
        self.reads: List[Tuple[str, str, tuple]] = []
        self.deployments: List[Tuple[str, str]] = []

        self.registry: Dict[str, str] = {}
        self.implementations: Dict[str, str] = {}
        self.initialized: Set[Tuple[str, str]] = set()
        self.pools: Dict[bytes, str] = {}
        self.stable_pools_available = False

    def _next_address(self) -> str:
        return fake_address(next(self._counter))

    def _record(self, label: str, contract_address: Optional[str] = None):
        block = next(self._blocks)
        return self.tx_log.record(
            label,
            "0x" + f"{block:064x}",
            block_number=block,
            gas_used=21000 + block,
            contract_address=contract_address,
        )

    async def chain_id(self) -> int:
        return self._chain_id

    async def close(self):
        pass

    async def deploy(self, contract_name: str, *args, label: Optional[str] = None) -> str:
        label = label or f"Deploy {contract_name}"
        if contract_name in self.fail_on:
            raise RemoteCallFailure(label, "out of gas")
        address = self._next_address()
        self.deployments.append((contract_name, address))
        self._record(label, contract_address=address)
        return address

    async def transact(self, contract_name: str, address: str, fn_name: str, *args, label: str):
        if fn_name in self.fail_on:
            raise RemoteCallFailure(label, "execution reverted")

        if fn_name in INITIALIZERS:
            if (fn_name, address) in self.initialized:
                raise AlreadyInitialized(label, "Initializable: contract is already initialized")
            self.initialized.add((fn_name, address))
        elif fn_name == "addProxyContract":
            name, implementation = args
            if name in self.registry:
                raise RemoteCallFailure(label, "execution reverted: name is taken")
            self.registry[name] = self._next_address()
            self.implementations[name] = implementation
        elif fn_name == "upgradeContract":
            name, implementation = args
            self.implementations[name] = implementation
        elif fn_name == "addContract":
            name, target = args
            if name in self.registry:
                raise RemoteCallFailure(label, "execution reverted: name is taken")
            self.registry[name] = target
        elif fn_name == "setupStablePoolsAvailability":
            self.stable_pools_available = args[0]
        elif fn_name == "addLiquidityPool":
            self.pools[args[1]] = self._next_address()
        elif fn_name == "addStablePool":
            if not self.stable_pools_available:
                raise RemoteCallFailure(label, "execution reverted: stable pools are unavailable")
            self.pools[args[1]] = self._next_address()

        self.calls.append((contract_name, address, fn_name, args))
        return self._record(label)

    async def call(self, contract_name: str, address: str, fn_name: str, *args) -> Any:
        self.reads.append((contract_name, fn_name, args))
        if fn_name == "hasContract":
            return args[0] in self.registry
        if fn_name == "getContract":
            return self.registry.get(args[0], ZERO_ADDRESS)
        if fn_name == "poolsInfo":
            return (self.pools.get(args[0], ZERO_ADDRESS), 0)
        raise RemoteCallFailure(f"Call {contract_name}.{fn_name}", "unknown function")

    def fn_calls(self, fn_name: str) -> List[tuple]:
        """Arguments of every submitted call to ``fn_name``, in order."""
        return [args for _, _, name, args in self.calls if name == fn_name]

    def fn_names(self) -> List[str]:
        return [name for _, _, name, _ in self.calls]


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def dai_record() -> Dict[str, Any]:
    """A standard market record as written in the market list document."""
    return {
        "symbol": "DAI",
        "poolType": "0",
        "assetAddr": DAI_ADDRESS,
        "chainlinkOracle": DAI_ORACLE,
        "mainParams": ["125", "110", "15", "8", "95"],
        "interestRateParams": ["0", "4", "100", "80"],
        "distributionMinimums": ["10", "10"],
        "rewardPerBlock": "0.5",
        "isAvailableAsCollateral": "true",
    }


@pytest.fixture
def usdt_stable_record() -> Dict[str, Any]:
    """A stable market record."""
    return {
        "symbol": "USDT",
        "poolType": "1",
        "assetAddr": USDT_ADDRESS,
        "priceFeedAddr": USDT_ORACLE,
        "mainParams": ["120", "105", "10", "5", "90"],
        "annualBorrowRate": "3.5",
        "rewardPerBlock": "1",
    }


@pytest.fixture
def prt_params() -> ReputationTokenParams:
    return ReputationTokenParams(
        name="Platform Reputation Token",
        symbol="PRT",
        init_params=[[to_wei(1000), 3600], [to_wei(500), 7200]],
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        native_asset_symbol="WETH",
        registry="",
        rewards_asset_symbol="",
        rewards_asset_token="",
        governance_token="",
        stable_pools_available=False,
        configure_parameters=True,
        pools_data_path=tmp_path / "poolsData.json",
        prt_data_path=tmp_path / "prtData.json",
        artifacts_dir=tmp_path / "artifacts",
        deployments_dir=tmp_path / "deployments",
    )


@pytest.fixture
def make_config(prt_params):
    """Factory for DeploymentConfig built from raw market records."""

    def _make(
        records,
        stable_pools_enabled: bool = False,
        rewards_asset_symbol: str = "",
        rewards_asset_token: str = "",
        governance_token: str = "",
        reputation_token=prt_params,
    ) -> DeploymentConfig:
        return DeploymentConfig(
            flags=FeatureFlags(stable_pools_enabled=stable_pools_enabled),
            native_asset_symbol="WETH",
            markets=ConfigParser().parse_markets(records),
            system_parameters=SystemParametersConfig(
                liquidation_boundary=to_fixed_point(50),
                min_currency_amount=to_wei("0.01"),
            ),
            rewards_asset_symbol=rewards_asset_symbol,
            rewards_asset_token=rewards_asset_token,
            governance_token=governance_token,
            reputation_token=reputation_token,
        )

    return _make
