"""Chain access - artifacts, transaction submission and the transaction log."""

from deployer.chain.artifacts import ArtifactStore, ContractArtifact
from deployer.chain.client import ChainClient
from deployer.chain.tx_log import TransactionLog

__all__ = [
    "ArtifactStore",
    "ContractArtifact",
    "ChainClient",
    "TransactionLog",
]
