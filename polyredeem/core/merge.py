from __future__ import annotations

from polyredeem.adapters.chain import BINARY_PARTITION, CallDescriptor, ChainWriter
from polyredeem.core.amounts import DEFAULT_DECIMALS, from_units, to_units
from polyredeem.core.balances import BalanceReader
from polyredeem.core.errors import InsufficientBalance
from polyredeem.core.outcomes import outcome_label
from polyredeem.core.tx import submit
from polyredeem.core.types import OUTCOME_INDICES, BinaryOutcomeConfig, MergeResult
from polyredeem.log import console


class PositionMerger:
    def __init__(self, balances: BalanceReader, writer: ChainWriter, *, decimals: int = DEFAULT_DECIMALS):
        self._balances = balances
        self._writer = writer
        self._decimals = decimals

    async def merge_generic_position(
        self,
        condition_id: str,
        token0: str,
        token1: str,
        amount: str,
        config: BinaryOutcomeConfig | None = None,
    ) -> MergeResult:
        """Burn `amount` of both outcome tokens and get collateral back.

        The collateral figure is what the chain reports as transferred.
        """
        units = to_units(amount, self._decimals)
        snap = await self._balances.get_generic_position_balance(condition_id, token0, token1, config)

        short = tuple(i for i in OUTCOME_INDICES if snap.raw_balance(i) < units)
        if short:
            first = short[0]
            raise InsufficientBalance(
                outcome_label(first, config),
                have=snap.balance(first),
                need=from_units(units, self._decimals),
                short_sides=short,
            )

        console.log(f"merge {condition_id} amount={amount}")
        receipt = await submit(
            self._writer,
            CallDescriptor(
                function="mergePositions",
                condition_id=condition_id,
                index_sets=BINARY_PARTITION,
                amount=units,
            ),
        )
        console.log(f"merged {condition_id} tx={receipt.tx_hash}")
        return MergeResult(
            condition_id=condition_id,
            amount=from_units(units, self._decimals),
            usdc_received=from_units(receipt.collateral_transferred, self._decimals),
            tx_hash=receipt.tx_hash,
            gas_used=receipt.gas_used,
        )
