from __future__ import annotations

from dataclasses import dataclass


OUTCOME_INDICES = (0, 1)


@dataclass(frozen=True)
class BinaryOutcomeConfig:
    """Display names for the two outcomes of a binary condition.

    Names are cosmetic: they are attached to chain-derived indices for
    reporting and never used to pick an index.
    """

    outcome0: str
    outcome1: str

    def __post_init__(self):
        for field, value in (("outcome0", self.outcome0), ("outcome1", self.outcome1)):
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{field} must be a non-empty string")

    def name_for(self, index: int) -> str:
        return self.outcome0 if index == 0 else self.outcome1


@dataclass(frozen=True)
class ResolvedOutcome:
    index: int
    name: str | None = None


@dataclass(frozen=True)
class BalanceSnapshot:
    condition_id: str
    balance0: str  # decimal, token units
    balance1: str
    raw0: int  # smallest unit
    raw1: int
    block: int | None = None
    pinned: bool = False  # both reads at the same block

    def raw_balance(self, index: int) -> int:
        return self.raw0 if index == 0 else self.raw1

    def balance(self, index: int) -> str:
        return self.balance0 if index == 0 else self.balance1


@dataclass(frozen=True)
class ResolutionState:
    condition_id: str
    is_resolved: bool
    winning_outcome_index: int | None = None
    winning_outcome_name: str | None = None
    payout_numerators: tuple[int, int] = (0, 0)

    @property
    def is_split(self) -> bool:
        return self.is_resolved and self.winning_outcome_index is None


@dataclass(frozen=True)
class MergeResult:
    condition_id: str
    amount: str
    usdc_received: str
    tx_hash: str
    gas_used: int = 0


@dataclass(frozen=True)
class RedeemResult:
    condition_id: str
    outcome_index: int
    tokens_redeemed: str
    usdc_received: str
    tx_hash: str
    gas_used: int
    outcome_name: str | None = None


@dataclass(frozen=True)
class RedeemAllResult:
    condition_id: str
    outcomes: tuple[RedeemResult, ...]
    total_usdc_received: str
    total_gas_used: int
    tx_hashes: tuple[str, ...]
    failed_indices: tuple[int, ...] = ()
