from __future__ import annotations

from polyredeem.adapters.chain import CallDescriptor, ChainWriter, TxReceipt
from polyredeem.core.errors import ChainWriteError, SettlementError, TransactionReverted


async def submit(writer: ChainWriter, call: CallDescriptor) -> TxReceipt:
    """Submit once, no retry. A mined failure becomes TransactionReverted."""
    try:
        receipt = await writer.submit_transaction(call)
    except SettlementError:
        raise
    except Exception as e:
        raise ChainWriteError(f"{call.function} for market {call.condition_id} was not submitted: {e}") from e
    if not receipt.confirmed:
        raise TransactionReverted(receipt.tx_hash, receipt.revert_reason, gas_used=receipt.gas_used)
    return receipt
