from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal


CtfFunction = Literal["mergePositions", "redeemPositions"]

# Binary partition of a condition: index set 0b01 is outcome 0, 0b10 is outcome 1.
BINARY_PARTITION = (1, 2)


def index_set(index: int) -> int:
    return 1 << index


@dataclass(frozen=True)
class CallDescriptor:
    function: CtfFunction
    condition_id: str
    index_sets: tuple[int, ...]
    amount: int | None = None  # smallest unit; merges only


@dataclass(frozen=True)
class TxReceipt:
    tx_hash: str
    gas_used: int
    confirmed: bool
    collateral_transferred: int = 0  # smallest unit credited to the wallet
    revert_reason: str | None = None


class ChainReader(ABC):
    @property
    @abstractmethod
    def address(self) -> str:
        raise NotImplementedError

    @abstractmethod
    async def pin_block(self) -> int | None:
        """Block number to use for a consistent multi-read, or None if unsupported."""
        raise NotImplementedError

    @abstractmethod
    async def read_balance(self, owner: str, token_id: int, block: int | None = None) -> int:
        raise NotImplementedError

    @abstractmethod
    async def read_payout_numerators(self, condition_id: str) -> tuple[int, int]:
        raise NotImplementedError


class ChainWriter(ABC):
    @abstractmethod
    async def submit_transaction(self, call: CallDescriptor) -> TxReceipt:
        """Submit and wait until mined or rejected.

        Raises ChainWriteError if nothing could be submitted. A mined but
        failed transaction is returned with confirmed=False.
        """
        raise NotImplementedError
