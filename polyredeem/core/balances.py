from __future__ import annotations

from polyredeem.adapters.chain import ChainReader
from polyredeem.core.amounts import DEFAULT_DECIMALS, from_units
from polyredeem.core.errors import ChainReadError, SettlementError
from polyredeem.core.types import BalanceSnapshot, BinaryOutcomeConfig


def parse_token_id(token_id: str | int) -> int:
    """Outcome token ids travel as decimal strings (they overflow 64 bits)."""
    if isinstance(token_id, int) and not isinstance(token_id, bool):
        value = token_id
    elif isinstance(token_id, str) and token_id.strip().isdigit():
        value = int(token_id.strip())
    else:
        raise ValueError(f"token id must be a non-negative decimal string, got {token_id!r}")
    if value < 0:
        raise ValueError(f"token id must be non-negative, got {token_id!r}")
    return value


class BalanceReader:
    def __init__(self, reader: ChainReader, *, decimals: int = DEFAULT_DECIMALS):
        self._reader = reader
        self._decimals = decimals

    async def get_generic_position_balance(
        self,
        condition_id: str,
        token0: str,
        token1: str,
        config: BinaryOutcomeConfig | None = None,
    ) -> BalanceSnapshot:
        """Read both outcome balances for the wallet.

        Both reads are pinned to one block when the reader supports it.
        Otherwise they hit "latest" separately and the snapshot is marked
        pinned=False. A failed read fails the whole snapshot.
        """
        ids = (parse_token_id(token0), parse_token_id(token1))
        owner = self._reader.address
        try:
            block = await self._reader.pin_block()
            raw0 = await self._reader.read_balance(owner, ids[0], block)
            raw1 = await self._reader.read_balance(owner, ids[1], block)
        except SettlementError:
            raise
        except Exception as e:
            raise ChainReadError(f"balance read failed for market {condition_id}: {e}") from e

        return BalanceSnapshot(
            condition_id=condition_id,
            balance0=from_units(raw0, self._decimals),
            balance1=from_units(raw1, self._decimals),
            raw0=raw0,
            raw1=raw1,
            block=block,
            pinned=block is not None,
        )
