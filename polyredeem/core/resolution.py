from __future__ import annotations

from polyredeem.adapters.chain import ChainReader
from polyredeem.core.errors import ChainReadError, SettlementError
from polyredeem.core.outcomes import outcome_name
from polyredeem.core.types import BinaryOutcomeConfig, ResolutionState


def winning_index(n0: int, n1: int) -> int | None:
    if n0 > n1:
        return 0
    if n1 > n0:
        return 1
    return None


class ResolutionOracle:
    """Reads the payout vector of a condition and names the winner.

    Resolved means the protocol has recorded a non-zero payout vector; an
    elapsed end date alone does not count. Nothing is cached.
    """

    def __init__(self, reader: ChainReader):
        self._reader = reader

    async def get_generic_market_resolution(
        self, condition_id: str, config: BinaryOutcomeConfig | None = None
    ) -> ResolutionState:
        try:
            n0, n1 = await self._reader.read_payout_numerators(condition_id)
        except SettlementError:
            raise
        except Exception as e:
            raise ChainReadError(f"payout read failed for market {condition_id}: {e}") from e

        if n0 == 0 and n1 == 0:
            return ResolutionState(condition_id=condition_id, is_resolved=False)

        # Equal non-zero numerators: resolved as a split, no single winner.
        index = winning_index(n0, n1)
        return ResolutionState(
            condition_id=condition_id,
            is_resolved=True,
            winning_outcome_index=index,
            winning_outcome_name=outcome_name(index, config),
            payout_numerators=(n0, n1),
        )
