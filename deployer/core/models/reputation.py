"""Reputation token (PRT) initialization parameters."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ReputationTokenParams:
    """Arguments of a single ``prtInitialize`` call.

    ``init_params`` is passed to the contract as-is (a PRTParams struct given
    either as a list or as a dict keyed by struct member names).
    """

    name: str
    symbol: str
    init_params: Any
