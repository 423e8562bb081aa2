"""Three-phase deployment orchestration.

Deploy and register, initialize and inject, then provision pools. Each phase
is a method that only runs from the stage the previous one left behind, so a
run either walks PENDING -> DEPLOYED -> REGISTERED -> INITIALIZED ->
PROVISIONED or stops at the first failure.
"""

import logging
from typing import Dict, List, Optional

from web3 import Web3

from config.settings import Settings, get_settings
from deployer.core.constants import (
    ASSET_PARAMETERS_NAME,
    DEFI_CORE_NAME,
    GOVERNANCE_TOKEN_NAME,
    INJECTION_ORDER,
    INTEREST_RATE_LIBRARY_NAME,
    PRT_NAME,
    REWARDS_DISTRIBUTION_NAME,
    SYSTEM_PARAMETERS_NAME,
    SYSTEM_POOLS_REGISTRY_NAME,
    ZERO_ADDRESS,
    display_name,
)
from deployer.core.errors import ConfigError, DeploymentError, InvalidStageTransition
from deployer.core.models import (
    DeployedContracts,
    DeploymentConfig,
    DeploymentReport,
    DeploymentStage,
    PoolType,
    ProvisionedPool,
)
from deployer.core.units import asset_key
from deployer.deploy.contracts import (
    CONTRACT_BY_NAME,
    LIQUIDITY_POOL_CONTRACT,
    PROXY_REGISTRATION_ORDER,
    STABLE_POOL_CONTRACT,
    ContractDeployer,
    required_artifacts,
)
from deployer.deploy.parameters import ParametersConfigurer
from deployer.deploy.provisioner import POOLS_REGISTRY_CONTRACT, PoolProvisioner
from deployer.deploy.registrar import DeploymentRegistrar

logger = logging.getLogger(__name__)


class DeploymentOrchestrator:
    """Sequences a full protocol deployment against one chain."""

    def __init__(
        self,
        chain,
        config: DeploymentConfig,
        settings: Optional[Settings] = None,
        storage=None,
    ):
        """Initialize the orchestrator.

        Args:
            chain: ChainClient that submits every transaction
            config: Parsed and normalized deployment documents
            settings: Application settings (registry reuse, parameter step)
            storage: Optional DeploymentStorage the final report is saved to
        """
        self.chain = chain
        self.config = config
        self.settings = settings or get_settings()
        self.storage = storage

        self._stage = DeploymentStage.PENDING
        self.deployed: Optional[DeployedContracts] = None
        self.registrar: Optional[DeploymentRegistrar] = None
        self.provisioner: Optional[PoolProvisioner] = None
        self.rewards_token = ZERO_ADDRESS
        self.chain_id: Optional[int] = None

    @property
    def stage(self) -> DeploymentStage:
        return self._stage

    @property
    def pools(self) -> List[ProvisionedPool]:
        return list(self.provisioner.created) if self.provisioner else []

    def _expect(self, stage: DeploymentStage, phase: str) -> None:
        if self._stage != stage:
            raise InvalidStageTransition(
                f"{phase} requires stage {stage.value}, current stage is {self._stage.value}",
                label=phase,
            )

    def _advance(self) -> None:
        self._stage = self._stage.next
        logger.info(f"Deployment stage: {self._stage.value}")

    def preflight(self) -> None:
        """Fail before any chain call if artifacts or documents do not fit the run."""
        artifacts = getattr(self.chain, "artifacts", None)
        if artifacts is not None:
            missing = artifacts.missing(required_artifacts(self.config.flags))
            if missing:
                raise ConfigError(
                    f"Missing contract artifacts: {', '.join(missing)}",
                    label="Pre-flight",
                )

        PoolProvisioner(self.chain, ZERO_ADDRESS, self.config.flags).check(self.config.markets)

    # ========== PHASE 1: DEPLOY AND REGISTER ==========

    async def deploy(self) -> DeployedContracts:
        self._expect(DeploymentStage.PENDING, "Deploy")

        deployer = ContractDeployer(self.chain, self.config.flags)
        self.deployed = await deployer.deploy_all(self.settings.registry)
        self.registrar = DeploymentRegistrar(self.chain, self.deployed.registry)

        self._advance()
        return self.deployed

    async def register(self) -> None:
        """Bind every deployed component in the registry."""
        self._expect(DeploymentStage.DEPLOYED, "Register")

        for name in PROXY_REGISTRATION_ORDER:
            await self.registrar.register_proxy(name, self.deployed.address_of(CONTRACT_BY_NAME[name]))

        library = CONTRACT_BY_NAME[INTEREST_RATE_LIBRARY_NAME]
        if library in self.deployed.reused:
            await self.registrar.adopt_immutable(INTEREST_RATE_LIBRARY_NAME)
        else:
            await self.registrar.register_immutable(INTEREST_RATE_LIBRARY_NAME, self.deployed.address_of(library))

        if self.config.governance_token:
            if self.deployed.reused_registry and await self.registrar.has(GOVERNANCE_TOKEN_NAME):
                await self.registrar.adopt_immutable(GOVERNANCE_TOKEN_NAME)
            else:
                await self.registrar.register_immutable(GOVERNANCE_TOKEN_NAME, self.config.governance_token)

        self._advance()

    # ========== PHASE 2: INITIALIZE AND INJECT ==========

    async def initialize(self) -> None:
        """Run one-time initializers, then let every component resolve its peers."""
        self._expect(DeploymentStage.REGISTERED, "Initialize")

        defi_core = await self.registrar.resolve(DEFI_CORE_NAME)
        pools_registry = await self.registrar.resolve(SYSTEM_POOLS_REGISTRY_NAME)
        system_parameters = await self.registrar.resolve(SYSTEM_PARAMETERS_NAME)

        await self.chain.transact(
            CONTRACT_BY_NAME[DEFI_CORE_NAME], defi_core, "defiCoreInitialize", label="Init DefiCore"
        )

        prt = self.config.reputation_token
        if prt is not None:
            await self.chain.transact(
                CONTRACT_BY_NAME[PRT_NAME],
                await self.registrar.resolve(PRT_NAME),
                "prtInitialize",
                prt.name,
                prt.symbol,
                prt.init_params,
                label="Init PRT",
            )
        else:
            logger.warning("No PRT parameters configured, skipping PRT initialization")

        await self.chain.transact(
            POOLS_REGISTRY_CONTRACT,
            pools_registry,
            "systemPoolsRegistryInitialize",
            self.deployed.address_of(LIQUIDITY_POOL_CONTRACT),
            asset_key(self.config.native_asset_symbol),
            asset_key(self.config.rewards_asset_symbol),
            label="Init SystemPoolsRegistry",
        )

        for name in INJECTION_ORDER:
            await self.registrar.inject_dependencies(name)

        if self.config.flags.stable_pools_enabled:
            await self.chain.transact(
                CONTRACT_BY_NAME[SYSTEM_PARAMETERS_NAME],
                system_parameters,
                "setupStablePoolsAvailability",
                True,
                label="Allow add stable pools",
            )
            await self.chain.transact(
                POOLS_REGISTRY_CONTRACT,
                pools_registry,
                "addPoolsBeacon",
                PoolType.STABLE.value,
                self.deployed.address_of(STABLE_POOL_CONTRACT),
                label="Add beacon proxy for StablePool type",
            )

        if self.config.rewards_enabled:
            token = Web3.to_checksum_address(self.config.rewards_asset_token)
            await self.chain.transact(
                CONTRACT_BY_NAME[SYSTEM_PARAMETERS_NAME],
                system_parameters,
                "setRewardsTokenAddress",
                token,
                label="Set rewards token address",
            )
            self.rewards_token = token
        else:
            logger.info("No rewards asset configured, rewards token stays unset")

        self._advance()

    # ========== PHASE 3: PROVISION ==========

    async def provision(self) -> List[ProvisionedPool]:
        """Create the pools, then push their parameters when enabled."""
        self._expect(DeploymentStage.INITIALIZED, "Provision")

        pools_registry = await self.registrar.resolve(SYSTEM_POOLS_REGISTRY_NAME)
        self.provisioner = PoolProvisioner(self.chain, pools_registry, self.config.flags)
        pools = await self.provisioner.provision(self.config.markets)

        if self.settings.configure_parameters:
            configurer = ParametersConfigurer(
                self.chain,
                asset_parameters=await self.registrar.resolve(ASSET_PARAMETERS_NAME),
                rewards_distribution=await self.registrar.resolve(REWARDS_DISTRIBUTION_NAME),
                system_parameters=await self.registrar.resolve(SYSTEM_PARAMETERS_NAME),
            )
            await configurer.configure(
                self.config.markets,
                self.config.system_parameters,
                self.config.rewards_enabled,
            )
        else:
            logger.warning("CONFIGURE_PARAMETERS is off, asset and system parameters left unset")

        self._advance()
        return pools

    # ========== RUN ==========

    async def run(self) -> DeploymentReport:
        """Pre-flight, every phase in order, then the report.

        Any error stops the run at the current stage and is re-raised after
        the partial report has been saved.
        """
        self.preflight()
        self.chain_id = await self.chain.chain_id()

        try:
            await self.deploy()
            await self.register()
            await self.initialize()
            await self.provision()
        except DeploymentError as e:
            logger.error(f"Deployment halted at stage {self._stage.value}: {e}")
            self._save(self.report())
            raise

        report = self.report()
        self._save(report)
        logger.info(f"Deployment complete: {len(report.pools)} pools provisioned")
        return report

    def _save(self, report: DeploymentReport) -> None:
        if self.storage is not None and report.registry:
            self.storage.save_report(report)

    def report(self) -> DeploymentReport:
        """Snapshot of what the run has produced so far."""
        components: Dict[str, str] = {}
        if self.registrar is not None:
            for name, registration in self.registrar.registrations.items():
                components[display_name(name)] = registration.address

        return DeploymentReport(
            stage=self._stage,
            registry=self.deployed.registry if self.deployed else None,
            components=components,
            rewards_token=self.rewards_token,
            pools={pool.symbol: pool.address for pool in self.pools},
            transactions=list(self.chain.tx_log.records),
            chain_id=self.chain_id,
        )
