"""Ordered log of confirmed on-chain operations."""

import logging
from typing import Iterator, List, Optional

from deployer.core.models import TransactionRecord

logger = logging.getLogger(__name__)


class TransactionLog:
    """Audit trail of a run: one record per confirmed operation, in order."""

    def __init__(self):
        self._records: List[TransactionRecord] = []

    def record(
        self,
        label: str,
        tx_hash: str,
        block_number: Optional[int] = None,
        gas_used: Optional[int] = None,
        contract_address: Optional[str] = None,
    ) -> TransactionRecord:
        entry = TransactionRecord(
            label=label,
            tx_hash=tx_hash,
            block_number=block_number,
            gas_used=gas_used,
            contract_address=contract_address,
        )
        self._records.append(entry)
        logger.info(f"Transaction: {label} | hash {tx_hash} | block {block_number} | gas used {gas_used}")
        return entry

    @property
    def records(self) -> List[TransactionRecord]:
        return list(self._records)

    def labels(self) -> List[str]:
        return [r.label for r in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TransactionRecord]:
        return iter(list(self._records))
