"""Unit tests for DeploymentRegistrar."""

import pytest

from deployer.core.errors import DuplicateRegistration, UnknownName
from deployer.core.models import RegistrationKind
from deployer.deploy.registrar import DeploymentRegistrar

from tests.conftest import fake_address

REGISTRY = fake_address(0xABCDEF)


class TestDeploymentRegistrar:
    """Tests for proxy and immutable registrations."""

    @pytest.fixture
    def registrar(self, chain):
        return DeploymentRegistrar(chain, REGISTRY)

    @pytest.mark.asyncio
    async def test_register_proxy(self, registrar, chain):
        implementation = fake_address(100)
        registration = await registrar.register_proxy("DEFI_CORE", implementation)

        assert registration.kind == RegistrationKind.PROXY
        assert registration.implementation == implementation
        assert registration.address == chain.registry["DEFI_CORE"]
        assert registration.address != implementation
        assert chain.fn_calls("addProxyContract") == [("DEFI_CORE", implementation)]
        assert chain.tx_log.labels() == ["Add DefiCore contract proxy to the registry"]

    @pytest.mark.asyncio
    async def test_register_proxy_again_upgrades(self, registrar, chain):
        first = await registrar.register_proxy("DEFI_CORE", fake_address(100))
        second = await registrar.register_proxy("DEFI_CORE", fake_address(101))

        assert second.address == first.address
        assert second.implementation == fake_address(101)
        assert chain.fn_calls("upgradeContract") == [("DEFI_CORE", fake_address(101))]
        assert len(chain.fn_calls("addProxyContract")) == 1

    @pytest.mark.asyncio
    async def test_register_proxy_bound_on_chain_upgrades(self, registrar, chain):
        chain.registry["PRICE_MANAGER"] = fake_address(500)

        registration = await registrar.register_proxy("PRICE_MANAGER", fake_address(102))

        assert registration.address == fake_address(500)
        assert chain.fn_calls("upgradeContract") == [("PRICE_MANAGER", fake_address(102))]
        assert chain.fn_calls("addProxyContract") == []

    @pytest.mark.asyncio
    async def test_register_immutable(self, registrar, chain):
        registration = await registrar.register_immutable("INTEREST_RATE_LIBRARY", fake_address(200))

        assert registration.kind == RegistrationKind.IMMUTABLE
        assert await registrar.resolve("INTEREST_RATE_LIBRARY") == fake_address(200)
        assert chain.tx_log.labels() == ["Add InterestRateLibrary contract to the registry"]

    @pytest.mark.asyncio
    async def test_duplicate_immutable_keeps_first_binding(self, registrar, chain):
        await registrar.register_immutable("INTEREST_RATE_LIBRARY", fake_address(200))

        with pytest.raises(DuplicateRegistration) as exc_info:
            await registrar.register_immutable("INTEREST_RATE_LIBRARY", fake_address(201))

        assert exc_info.value.address == fake_address(200)
        assert await registrar.resolve("INTEREST_RATE_LIBRARY") == fake_address(200)
        assert chain.registry["INTEREST_RATE_LIBRARY"] == fake_address(200)
        assert len(chain.fn_calls("addContract")) == 1

    @pytest.mark.asyncio
    async def test_duplicate_immutable_bound_on_chain(self, registrar, chain):
        chain.registry["GOVERNANCE_TOKEN"] = fake_address(300)

        with pytest.raises(DuplicateRegistration):
            await registrar.register_immutable("GOVERNANCE_TOKEN", fake_address(301))

        assert chain.fn_calls("addContract") == []

    @pytest.mark.asyncio
    async def test_proxy_over_immutable_rejected(self, registrar, chain):
        await registrar.register_immutable("INTEREST_RATE_LIBRARY", fake_address(200))

        with pytest.raises(DuplicateRegistration):
            await registrar.register_proxy("INTEREST_RATE_LIBRARY", fake_address(201))

        assert chain.fn_calls("upgradeContract") == []

    @pytest.mark.asyncio
    async def test_resolve_unknown(self, registrar):
        with pytest.raises(UnknownName) as exc_info:
            await registrar.resolve("NOT_A_COMPONENT")
        assert exc_info.value.name == "NOT_A_COMPONENT"

    @pytest.mark.asyncio
    async def test_resolve_from_chain(self, registrar, chain):
        chain.registry["ROLE_MANAGER"] = fake_address(400)
        assert await registrar.resolve("ROLE_MANAGER") == fake_address(400)
        assert "ROLE_MANAGER" not in registrar.registrations

    @pytest.mark.asyncio
    async def test_adopt_immutable(self, registrar, chain):
        chain.registry["INTEREST_RATE_LIBRARY"] = fake_address(210)

        registration = await registrar.adopt_immutable("INTEREST_RATE_LIBRARY")

        assert registration.kind == RegistrationKind.IMMUTABLE
        assert registration.address == fake_address(210)
        assert registrar.registrations["INTEREST_RATE_LIBRARY"] == registration
        assert chain.fn_calls("addContract") == []

    @pytest.mark.asyncio
    async def test_adopt_unbound_name(self, registrar):
        with pytest.raises(UnknownName):
            await registrar.adopt_immutable("GOVERNANCE_TOKEN")
        assert "GOVERNANCE_TOKEN" not in registrar.registrations

    @pytest.mark.asyncio
    async def test_inject_unknown_name(self, registrar, chain):
        with pytest.raises(UnknownName):
            await registrar.inject_dependencies("DEFI_CORE")
        assert chain.fn_calls("injectDependencies") == []

    @pytest.mark.asyncio
    async def test_inject_dependencies(self, registrar, chain):
        await registrar.register_proxy("DEFI_CORE", fake_address(100))
        await registrar.inject_dependencies("DEFI_CORE")

        assert chain.fn_calls("injectDependencies") == [("DEFI_CORE",)]
        assert chain.tx_log.labels()[-1] == "Inject DefiCore"

    @pytest.mark.asyncio
    async def test_registrations_snapshot(self, registrar):
        await registrar.register_proxy("DEFI_CORE", fake_address(100))
        snapshot = registrar.registrations
        snapshot.clear()
        assert await registrar.has("DEFI_CORE")
        assert "DEFI_CORE" in registrar.registrations
