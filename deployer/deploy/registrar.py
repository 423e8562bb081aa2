"""Name -> address registry wiring.

The on-chain Registry resolves component names for every protocol contract.
``DeploymentRegistrar`` submits the registry transactions and keeps a local
mirror of what this run bound, so proxy/immutable rules are checked before a
transaction is sent.
"""

import logging
from typing import Dict

from web3 import Web3

from deployer.core.constants import ZERO_ADDRESS, display_name
from deployer.core.errors import DuplicateRegistration, UnknownName
from deployer.core.models import Registration, RegistrationKind

logger = logging.getLogger(__name__)

REGISTRY_CONTRACT = "Registry"


class DeploymentRegistrar:
    """Registers components under symbolic names and injects their dependencies."""

    def __init__(self, chain, registry_address: str):
        """
        Args:
            chain: ChainClient (or anything with the same deploy/transact/call surface)
            registry_address: Address of the Registry contract
        """
        self.chain = chain
        self.address = registry_address
        self._registrations: Dict[str, Registration] = {}

    @property
    def registrations(self) -> Dict[str, Registration]:
        """Snapshot of the bindings made or observed in this run."""
        return dict(self._registrations)

    async def _bound_on_chain(self, name: str) -> bool:
        return bool(await self.chain.call(REGISTRY_CONTRACT, self.address, "hasContract", name))

    async def has(self, name: str) -> bool:
        """True if the name is bound locally or on the registry contract."""
        return name in self._registrations or await self._bound_on_chain(name)

    async def resolve(self, name: str) -> str:
        """Current address bound to ``name``."""
        if name in self._registrations:
            return self._registrations[name].address

        if not await self._bound_on_chain(name):
            raise UnknownName(name, label=f"Resolve {name}")

        address = await self.chain.call(REGISTRY_CONTRACT, self.address, "getContract", name)
        if not address or address == ZERO_ADDRESS:
            raise UnknownName(name, label=f"Resolve {name}")
        return Web3.to_checksum_address(address)

    async def adopt_immutable(self, name: str) -> Registration:
        """Record an immutable binding that already exists on the registry contract."""
        registration = Registration(name, await self.resolve(name), RegistrationKind.IMMUTABLE)
        self._registrations[name] = registration
        logger.info(f"{display_name(name)} already registered at {registration.address}, reusing it")
        return registration

    async def register_proxy(self, name: str, implementation: str) -> Registration:
        """Bind ``name`` to a proxy over ``implementation``, upgrading an existing proxy."""
        existing = self._registrations.get(name)
        if existing is not None and not existing.is_proxy:
            raise DuplicateRegistration(name, existing.address, label=f"Register {display_name(name)}")

        if existing is not None or await self._bound_on_chain(name):
            await self.chain.transact(
                REGISTRY_CONTRACT,
                self.address,
                "upgradeContract",
                name,
                implementation,
                label=f"Upgrade {display_name(name)} contract proxy in the registry",
            )
            if existing is None:
                proxy = await self.resolve(name)
                existing = Registration(name, proxy, RegistrationKind.PROXY, implementation)
            registration = existing.upgraded(implementation)
        else:
            await self.chain.transact(
                REGISTRY_CONTRACT,
                self.address,
                "addProxyContract",
                name,
                implementation,
                label=f"Add {display_name(name)} contract proxy to the registry",
            )
            proxy = await self.chain.call(REGISTRY_CONTRACT, self.address, "getContract", name)
            registration = Registration(name, Web3.to_checksum_address(proxy), RegistrationKind.PROXY, implementation)

        self._registrations[name] = registration
        logger.debug(f"{name} -> proxy {registration.address} (implementation {implementation})")
        return registration

    async def register_immutable(self, name: str, address: str) -> Registration:
        """Bind ``name`` to ``address`` permanently; a second binding is refused."""
        label = f"Add {display_name(name)} contract to the registry"
        existing = self._registrations.get(name)
        if existing is not None:
            raise DuplicateRegistration(name, existing.address, label=label)
        if await self._bound_on_chain(name):
            raise DuplicateRegistration(name, await self.resolve(name), label=label)

        await self.chain.transact(REGISTRY_CONTRACT, self.address, "addContract", name, address, label=label)

        registration = Registration(name, Web3.to_checksum_address(address), RegistrationKind.IMMUTABLE)
        self._registrations[name] = registration
        logger.debug(f"{name} -> {registration.address}")
        return registration

    async def inject_dependencies(self, name: str) -> None:
        """Ask the component bound to ``name`` to pull its peers from the registry."""
        await self.resolve(name)
        await self.chain.transact(
            REGISTRY_CONTRACT,
            self.address,
            "injectDependencies",
            name,
            label=f"Inject {display_name(name)}",
        )
