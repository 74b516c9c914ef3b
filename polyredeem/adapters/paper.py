from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from polyredeem.adapters.chain import CallDescriptor, ChainReader, ChainWriter, TxReceipt


PAPER_ADDRESS = "0x000000000000000000000000000000000000dEaD"

MERGE_GAS = 140_000
REDEEM_GAS = 110_000


@dataclass
class PaperCondition:
    token0: int
    token1: int
    payouts: tuple[int, int] = (0, 0)


@dataclass
class PaperChain(ChainReader, ChainWriter):
    """An in-memory Conditional Token Framework used for dry runs and tests.

    Conditions must be registered with both token ids so merges and
    redemptions know which balances to move. Payouts follow the CTF rule:
    redeeming index i pays balance * n_i / (n0 + n1).
    """

    owner: str = PAPER_ADDRESS
    conditions: dict[str, PaperCondition] = field(default_factory=dict)
    balances: dict[int, int] = field(default_factory=dict)
    collateral: int = 0
    block: int = 1
    # (condition_id, function, index_set) -> revert reason
    reverts: dict[tuple[str, str, int], str] = field(default_factory=dict)
    read_error: Exception | None = None
    submitted: list[CallDescriptor] = field(default_factory=list)

    @property
    def address(self) -> str:
        return self.owner

    def add_condition(self, condition_id: str, token0: int, token1: int, *, balance0: int = 0, balance1: int = 0) -> None:
        self.conditions[condition_id] = PaperCondition(token0=token0, token1=token1)
        self.balances[token0] = balance0
        self.balances[token1] = balance1

    def resolve(self, condition_id: str, n0: int, n1: int) -> None:
        self.conditions[condition_id].payouts = (n0, n1)

    def revert_on(self, condition_id: str, function: str, index_set: int, reason: str = "paper revert") -> None:
        self.reverts[(condition_id, function, index_set)] = reason

    async def pin_block(self) -> int | None:
        self._check_reads()
        return self.block

    async def read_balance(self, owner: str, token_id: int, block: int | None = None) -> int:
        self._check_reads()
        if owner != self.owner:
            return 0
        return self.balances.get(token_id, 0)

    async def read_payout_numerators(self, condition_id: str) -> tuple[int, int]:
        self._check_reads()
        c = self.conditions.get(condition_id)
        return c.payouts if c else (0, 0)

    async def submit_transaction(self, call: CallDescriptor) -> TxReceipt:
        self.submitted.append(call)
        self.block += 1
        tx_hash = f"0x{len(self.submitted):064x}"
        gas = MERGE_GAS if call.function == "mergePositions" else REDEEM_GAS

        for s in call.index_sets:
            reason = self.reverts.get((call.condition_id, call.function, s))
            if reason:
                return TxReceipt(tx_hash=tx_hash, gas_used=gas // 2, confirmed=False, revert_reason=reason)

        c = self.conditions.get(call.condition_id)
        if c is None:
            return TxReceipt(tx_hash=tx_hash, gas_used=gas // 2, confirmed=False, revert_reason="unknown condition")

        if call.function == "mergePositions":
            amount = call.amount or 0
            if self.balances[c.token0] < amount or self.balances[c.token1] < amount:
                return TxReceipt(tx_hash=tx_hash, gas_used=gas // 2, confirmed=False, revert_reason="insufficient balance")
            self.balances[c.token0] -= amount
            self.balances[c.token1] -= amount
            self.collateral += amount
            return TxReceipt(tx_hash=tx_hash, gas_used=gas, confirmed=True, collateral_transferred=amount)

        den = sum(c.payouts)
        if den == 0:
            return TxReceipt(tx_hash=tx_hash, gas_used=gas // 2, confirmed=False, revert_reason="result for condition not received yet")
        paid = 0
        for s in call.index_sets:
            index = s.bit_length() - 1
            token = c.token0 if index == 0 else c.token1
            bal = self.balances.get(token, 0)
            paid += bal * c.payouts[index] // den
            self.balances[token] = 0
        self.collateral += paid
        return TxReceipt(tx_hash=tx_hash, gas_used=gas, confirmed=True, collateral_transferred=paid)

    def _check_reads(self) -> None:
        if self.read_error is not None:
            raise self.read_error


def load_paper_chain(path: str | None) -> PaperChain:
    """Build a PaperChain from a JSON file of the form
    {"<condition_id>": {"token0": "..", "token1": "..", "balance0": 0, "balance1": 0, "payouts": [0, 0]}}.

    Balances are in smallest units. A missing path gives an empty chain.
    """
    chain = PaperChain()
    if not path:
        return chain
    p = Path(path)
    if not p.exists():
        return chain
    data = json.loads(p.read_text())
    for cid, row in data.items():
        chain.add_condition(
            cid,
            int(row["token0"]),
            int(row["token1"]),
            balance0=int(row.get("balance0", 0)),
            balance1=int(row.get("balance1", 0)),
        )
        payouts = row.get("payouts") or [0, 0]
        chain.resolve(cid, int(payouts[0]), int(payouts[1]))
    return chain
