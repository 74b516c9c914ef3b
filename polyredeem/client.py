from __future__ import annotations

from polyredeem.adapters.chain import ChainReader, ChainWriter
from polyredeem.core.amounts import DEFAULT_DECIMALS
from polyredeem.core.balances import BalanceReader
from polyredeem.core.merge import PositionMerger
from polyredeem.core.redeem import BulkRedeemer, PositionRedeemer
from polyredeem.core.resolution import ResolutionOracle
from polyredeem.core.types import (
    BalanceSnapshot,
    BinaryOutcomeConfig,
    MergeResult,
    RedeemAllResult,
    RedeemResult,
    ResolutionState,
)


class CTFClient:
    """Settlement operations for any binary CTF market.

    Outcomes are addressed by index (0/1); a BinaryOutcomeConfig only adds
    display names to results and error messages.
    """

    def __init__(self, reader: ChainReader, writer: ChainWriter, *, decimals: int = DEFAULT_DECIMALS):
        self._reader = reader
        self.balances = BalanceReader(reader, decimals=decimals)
        self.oracle = ResolutionOracle(reader)
        self.merger = PositionMerger(self.balances, writer, decimals=decimals)
        self.redeemer = PositionRedeemer(self.balances, self.oracle, writer, decimals=decimals)
        self.bulk = BulkRedeemer(self.redeemer, self.balances, self.oracle, decimals=decimals)

    def get_address(self) -> str:
        return self._reader.address

    async def get_generic_position_balance(
        self, condition_id: str, token0: str, token1: str, config: BinaryOutcomeConfig | None = None
    ) -> BalanceSnapshot:
        return await self.balances.get_generic_position_balance(condition_id, token0, token1, config)

    async def get_generic_market_resolution(
        self, condition_id: str, config: BinaryOutcomeConfig | None = None
    ) -> ResolutionState:
        return await self.oracle.get_generic_market_resolution(condition_id, config)

    async def merge_generic_position(
        self, condition_id: str, token0: str, token1: str, amount: str, config: BinaryOutcomeConfig | None = None
    ) -> MergeResult:
        return await self.merger.merge_generic_position(condition_id, token0, token1, amount, config)

    async def redeem_generic_position(
        self,
        condition_id: str,
        token0: str,
        token1: str,
        config: BinaryOutcomeConfig | None = None,
        explicit_index: int | None = None,
    ) -> RedeemResult:
        return await self.redeemer.redeem_generic_position(condition_id, token0, token1, config, explicit_index)

    async def redeem_all_generic_positions(
        self, condition_id: str, token0: str, token1: str, config: BinaryOutcomeConfig | None = None
    ) -> RedeemAllResult:
        return await self.bulk.redeem_all_generic_positions(condition_id, token0, token1, config)
