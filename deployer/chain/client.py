"""Web3 client that submits deployment transactions one at a time."""

import logging
from typing import Any, Dict, Optional

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from config.settings import Settings, get_settings
from deployer.chain.artifacts import ArtifactStore
from deployer.chain.tx_log import TransactionLog
from deployer.core.constants import ALREADY_INITIALIZED_REVERTS
from deployer.core.errors import AlreadyInitialized, ConfigError, RemoteCallFailure
from deployer.core.models import TransactionRecord

logger = logging.getLogger(__name__)


class ChainClient:
    """Sequential transaction submitter over AsyncWeb3.

    Every ``deploy``/``transact`` waits for its receipt before returning, so
    callers that await each step get a strictly ordered run.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        artifacts: Optional[ArtifactStore] = None,
        tx_log: Optional[TransactionLog] = None,
        web3: Optional[AsyncWeb3] = None,
    ):
        self.settings = settings or get_settings()
        self.artifacts = artifacts or ArtifactStore(self.settings.artifacts_dir)
        self.tx_log = tx_log or TransactionLog()
        self._web3 = web3
        self._account = None
        self._sender: Optional[str] = None

    async def _get_web3(self) -> AsyncWeb3:
        """Get or create Web3 instance."""
        if self._web3 is None:
            if not self.settings.rpc_url:
                raise ConfigError("RPC URL not configured. Set RPC_URL in .env")
            self._web3 = AsyncWeb3(AsyncHTTPProvider(self.settings.rpc_url))
        return self._web3

    async def sender(self) -> str:
        """Address that signs and pays for every transaction."""
        if self._sender is None:
            web3 = await self._get_web3()
            if self.settings.private_key:
                self._account = web3.eth.account.from_key(self.settings.private_key)
                self._sender = self._account.address
            else:
                accounts = await web3.eth.accounts
                if not accounts:
                    raise ConfigError("No PRIVATE_KEY set and the node exposes no unlocked accounts")
                self._sender = accounts[0]
            logger.info(f"Using deployer account: {self._sender}")
        return self._sender

    async def chain_id(self) -> int:
        web3 = await self._get_web3()
        try:
            return await web3.eth.chain_id
        except (Web3Exception, ValueError, OSError) as e:
            raise RemoteCallFailure("Read chain id", str(e)) from e

    async def contract(self, contract_name: str, address: str):
        """Bind an artifact ABI to a deployed address."""
        web3 = await self._get_web3()
        artifact = self.artifacts.get(contract_name)
        return web3.eth.contract(address=Web3.to_checksum_address(address), abi=artifact.abi)

    def _failure(self, label: str, reason: str, tx_hash: Optional[str] = None) -> RemoteCallFailure:
        if any(fragment in reason for fragment in ALREADY_INITIALIZED_REVERTS):
            return AlreadyInitialized(label, reason, tx_hash)
        return RemoteCallFailure(label, reason, tx_hash)

    async def _submit(self, builder, label: str) -> Dict[str, Any]:
        """Send a transaction and wait until it is confirmed."""
        web3 = await self._get_web3()
        sender = await self.sender()
        tx_hash = None

        try:
            if self._account is not None:
                nonce = await web3.eth.get_transaction_count(sender, "pending")
                tx = await builder.build_transaction({"from": sender, "nonce": nonce})
                signed = self._account.sign_transaction(tx)
                tx_hash = await web3.eth.send_raw_transaction(signed.raw_transaction)
            else:
                tx_hash = await builder.transact({"from": sender})

            receipt = await web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.settings.confirmation_timeout
            )
        except ContractLogicError as e:
            raise self._failure(label, str(e)) from e
        except TimeExhausted as e:
            raise RemoteCallFailure(
                label,
                f"Not confirmed within {self.settings.confirmation_timeout}s",
                Web3.to_hex(tx_hash) if tx_hash else None,
            ) from e
        except (Web3Exception, ValueError, OSError) as e:
            raise self._failure(label, str(e)) from e

        tx_hex = Web3.to_hex(receipt["transactionHash"])
        if receipt.get("status", 1) == 0:
            raise RemoteCallFailure(label, "Transaction reverted", tx_hex)
        return receipt

    async def deploy(self, contract_name: str, *args, label: Optional[str] = None) -> str:
        """Deploy a contract from its artifact and return its address."""
        label = label or f"Deploy {contract_name}"
        web3 = await self._get_web3()
        artifact = self.artifacts.get(contract_name)
        factory = web3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

        receipt = await self._submit(factory.constructor(*args), label)
        address = receipt.get("contractAddress")
        if not address:
            raise RemoteCallFailure(label, "Receipt has no contract address", Web3.to_hex(receipt["transactionHash"]))

        address = Web3.to_checksum_address(address)
        self.tx_log.record(
            label,
            Web3.to_hex(receipt["transactionHash"]),
            receipt.get("blockNumber"),
            receipt.get("gasUsed"),
            contract_address=address,
        )
        logger.debug(f"{contract_name} deployed at {address}")
        return address

    async def transact(self, contract_name: str, address: str, fn_name: str, *args, label: str) -> TransactionRecord:
        """Call a state-changing function and wait for confirmation."""
        contract = await self.contract(contract_name, address)
        builder = getattr(contract.functions, fn_name)(*args)
        receipt = await self._submit(builder, label)
        return self.tx_log.record(
            label,
            Web3.to_hex(receipt["transactionHash"]),
            receipt.get("blockNumber"),
            receipt.get("gasUsed"),
        )

    async def call(self, contract_name: str, address: str, fn_name: str, *args) -> Any:
        """Read-only call."""
        contract = await self.contract(contract_name, address)
        try:
            return await getattr(contract.functions, fn_name)(*args).call()
        except (Web3Exception, ValueError, OSError) as e:
            raise RemoteCallFailure(f"Call {contract_name}.{fn_name}", str(e)) from e

    async def close(self):
        """Close the client."""
        self._web3 = None
