from __future__ import annotations

from polyredeem.adapters.chain import CallDescriptor, ChainWriter, index_set
from polyredeem.core.amounts import DEFAULT_DECIMALS, add_amounts, from_units
from polyredeem.core.balances import BalanceReader
from polyredeem.core.errors import (
    AmbiguousResolution,
    BulkRedeemFailed,
    MarketNotResolved,
    NothingToRedeem,
    SettlementError,
)
from polyredeem.core.outcomes import outcome_label, outcome_name, resolve_outcome
from polyredeem.core.resolution import ResolutionOracle
from polyredeem.core.tx import submit
from polyredeem.core.types import (
    OUTCOME_INDICES,
    BinaryOutcomeConfig,
    RedeemAllResult,
    RedeemResult,
    ResolutionState,
)
from polyredeem.log import console


class PositionRedeemer:
    def __init__(
        self,
        balances: BalanceReader,
        oracle: ResolutionOracle,
        writer: ChainWriter,
        *,
        decimals: int = DEFAULT_DECIMALS,
    ):
        self._balances = balances
        self._oracle = oracle
        self._writer = writer
        self._decimals = decimals

    async def redeem_generic_position(
        self,
        condition_id: str,
        token0: str,
        token1: str,
        config: BinaryOutcomeConfig | None = None,
        explicit_index: int | None = None,
    ) -> RedeemResult:
        """Redeem the full balance of one outcome.

        Without `explicit_index` the winner is read from the chain; a split
        resolution has no single winner and raises AmbiguousResolution.
        """
        chosen = resolve_outcome(config, explicit_index)
        state = await self._oracle.get_generic_market_resolution(condition_id, config)
        if not state.is_resolved:
            raise MarketNotResolved(condition_id)

        if chosen is not None:
            index = chosen.index
        elif state.winning_outcome_index is None:
            raise AmbiguousResolution(condition_id, state.payout_numerators)
        else:
            index = state.winning_outcome_index

        return await self.redeem_index(condition_id, token0, token1, index, config)

    async def redeem_index(
        self,
        condition_id: str,
        token0: str,
        token1: str,
        index: int,
        config: BinaryOutcomeConfig | None = None,
    ) -> RedeemResult:
        """Redeem one index of a condition already known to be resolved."""
        snap = await self._balances.get_generic_position_balance(condition_id, token0, token1, config)
        raw = snap.raw_balance(index)
        if raw == 0:
            raise NothingToRedeem(condition_id, outcome_name(index, config))

        label = outcome_label(index, config)
        console.log(f"redeem {condition_id} {label} tokens={snap.balance(index)}")
        receipt = await submit(
            self._writer,
            CallDescriptor(
                function="redeemPositions",
                condition_id=condition_id,
                index_sets=(index_set(index),),
            ),
        )
        console.log(f"redeemed {condition_id} {label} tx={receipt.tx_hash} gas={receipt.gas_used}")
        return RedeemResult(
            condition_id=condition_id,
            outcome_index=index,
            outcome_name=outcome_name(index, config),
            tokens_redeemed=from_units(raw, self._decimals),
            usdc_received=from_units(receipt.collateral_transferred, self._decimals),
            tx_hash=receipt.tx_hash,
            gas_used=receipt.gas_used,
        )


class BulkRedeemer:
    """Redeems every held outcome of a condition, one transaction per index.

    Zero-balance sides are skipped. Attempts are independent; the call only
    fails when every attempted side failed.
    """

    def __init__(
        self,
        redeemer: PositionRedeemer,
        balances: BalanceReader,
        oracle: ResolutionOracle,
        *,
        decimals: int = DEFAULT_DECIMALS,
    ):
        self._redeemer = redeemer
        self._balances = balances
        self._oracle = oracle
        self._decimals = decimals

    async def redeem_all_generic_positions(
        self,
        condition_id: str,
        token0: str,
        token1: str,
        config: BinaryOutcomeConfig | None = None,
    ) -> RedeemAllResult:
        state: ResolutionState = await self._oracle.get_generic_market_resolution(condition_id, config)
        if not state.is_resolved:
            raise MarketNotResolved(condition_id)

        snap = await self._balances.get_generic_position_balance(condition_id, token0, token1, config)
        held = [i for i in OUTCOME_INDICES if snap.raw_balance(i) > 0]
        if not held:
            console.log(f"redeem-all {condition_id}: nothing held")
            return RedeemAllResult(
                condition_id=condition_id,
                outcomes=(),
                total_usdc_received="0",
                total_gas_used=0,
                tx_hashes=(),
            )

        results: list[RedeemResult] = []
        errors: dict[int, SettlementError] = {}
        for i in held:
            try:
                results.append(await self._redeemer.redeem_index(condition_id, token0, token1, i, config))
            except SettlementError as e:
                console.log(f"[yellow]redeem {condition_id} {outcome_label(i, config)} failed: {e}[/yellow]")
                errors[i] = e

        if not results:
            raise BulkRedeemFailed(condition_id, errors)

        return RedeemAllResult(
            condition_id=condition_id,
            outcomes=tuple(results),
            total_usdc_received=add_amounts([r.usdc_received for r in results], self._decimals),
            total_gas_used=sum(r.gas_used for r in results),
            tx_hashes=tuple(r.tx_hash for r in results),
            failed_indices=tuple(sorted(errors)),
        )
