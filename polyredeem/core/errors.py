from __future__ import annotations


class SettlementError(Exception):
    """Base class for everything the settlement core raises."""


class InvalidOutcomeIndex(SettlementError, ValueError):
    def __init__(self, index: object):
        super().__init__(f"outcome index must be 0 or 1, got {index!r}")
        self.index = index


class InvalidAmount(SettlementError, ValueError):
    def __init__(self, amount: object, reason: str):
        super().__init__(f"invalid amount {amount!r}: {reason}")
        self.amount = amount


class ChainReadError(SettlementError):
    pass


class ChainWriteError(SettlementError):
    """A write failed. tx_hash is None when nothing reached the chain."""

    def __init__(self, message: str, *, tx_hash: str | None = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class TransactionReverted(ChainWriteError):
    def __init__(self, tx_hash: str | None, reason: str | None = None, *, gas_used: int = 0):
        msg = f"transaction {tx_hash or '<unknown>'} reverted"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, tx_hash=tx_hash)
        self.reason = reason
        self.gas_used = gas_used


class InsufficientBalance(SettlementError):
    def __init__(self, label: str, have: str, need: str, *, short_sides: tuple[int, ...] = ()):
        super().__init__(f"insufficient {label} balance: have {have}, need {need}")
        self.label = label
        self.have = have
        self.need = need
        self.short_sides = short_sides


class MarketNotResolved(SettlementError):
    def __init__(self, condition_id: str):
        super().__init__(f"market {condition_id} is not resolved yet")
        self.condition_id = condition_id


class AmbiguousResolution(SettlementError):
    def __init__(self, condition_id: str, numerators: tuple[int, int]):
        super().__init__(
            f"market {condition_id} resolved as a split {numerators}; "
            "pass an explicit outcome index or redeem all positions"
        )
        self.condition_id = condition_id
        self.numerators = numerators


class NothingToRedeem(SettlementError):
    def __init__(self, condition_id: str, label: str | None = None):
        what = f"{label} tokens" if label else "tokens"
        super().__init__(f"no {what} to redeem for market {condition_id}")
        self.condition_id = condition_id
        self.label = label


class BulkRedeemFailed(SettlementError):
    def __init__(self, condition_id: str, errors: dict[int, SettlementError]):
        detail = "; ".join(f"outcome {i}: {e}" for i, e in sorted(errors.items()))
        super().__init__(f"every redemption for market {condition_id} failed ({detail})")
        self.condition_id = condition_id
        self.errors = errors


class MarketLookupError(SettlementError):
    pass
