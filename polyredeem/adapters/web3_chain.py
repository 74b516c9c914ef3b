from __future__ import annotations

from typing import Any

from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from polyredeem.adapters.chain import CallDescriptor, ChainReader, ChainWriter, TxReceipt
from polyredeem.core.errors import ChainWriteError


PARENT_COLLECTION_ID = b"\x00" * 32
TRANSFER_TOPIC = Web3.keccak(text="Transfer(address,address,uint256)")

# ConditionalTokens (Gnosis CTF), only what settlement needs.
CTF_ABI = [
    {
        "inputs": [
            {"name": "account", "type": "address"},
            {"name": "id", "type": "uint256"},
        ],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function",
        "stateMutability": "view",
    },
    {
        "inputs": [
            {"name": "conditionId", "type": "bytes32"},
            {"name": "index", "type": "uint256"},
        ],
        "name": "payoutNumerators",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function",
        "stateMutability": "view",
    },
    {
        "inputs": [{"name": "conditionId", "type": "bytes32"}],
        "name": "payoutDenominator",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function",
        "stateMutability": "view",
    },
    {
        "inputs": [
            {"name": "collateralToken", "type": "address"},
            {"name": "parentCollectionId", "type": "bytes32"},
            {"name": "conditionId", "type": "bytes32"},
            {"name": "partition", "type": "uint256[]"},
            {"name": "amount", "type": "uint256"},
        ],
        "name": "mergePositions",
        "outputs": [],
        "type": "function",
        "stateMutability": "nonpayable",
    },
    {
        "inputs": [
            {"name": "collateralToken", "type": "address"},
            {"name": "parentCollectionId", "type": "bytes32"},
            {"name": "conditionId", "type": "bytes32"},
            {"name": "indexSets", "type": "uint256[]"},
        ],
        "name": "redeemPositions",
        "outputs": [],
        "type": "function",
        "stateMutability": "nonpayable",
    },
]


def condition_bytes(condition_id: str) -> bytes:
    raw = bytes.fromhex(condition_id.removeprefix("0x"))
    if len(raw) != 32:
        raise ValueError(f"condition id must be 32 bytes, got {len(raw)}")
    return raw


def collateral_received(receipt: Any, token: str, owner: str) -> int:
    """Sum ERC20 Transfer amounts of `token` into `owner` found in a receipt."""
    token = Web3.to_checksum_address(token)
    owner_word = bytes.fromhex(owner.removeprefix("0x").lower()).rjust(32, b"\x00")
    total = 0
    for log in receipt["logs"]:
        topics = log["topics"]
        if Web3.to_checksum_address(log["address"]) != token or len(topics) < 3:
            continue
        if bytes(topics[0]) != bytes(TRANSFER_TOPIC) or bytes(topics[2]) != owner_word:
            continue
        total += int.from_bytes(bytes(log["data"]), "big")
    return total


class Web3Chain(ChainReader, ChainWriter):
    """Polygon CTF reads and writes via web3.py.

    Transactions are signed locally by an EOA that holds the positions
    (no proxy wallet). Nothing is retried: a write either mines or fails.
    """

    def __init__(
        self,
        *,
        rpc_url: str,
        private_key: str,
        ctf_address: str,
        collateral_address: str,
        chain_id: int = 137,
        gas_limit: int = 300_000,
        receipt_timeout: float = 120.0,
    ):
        self._w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self._account = Account.from_key(private_key)
        self._ctf = self._w3.eth.contract(address=Web3.to_checksum_address(ctf_address), abi=CTF_ABI)
        self._collateral = Web3.to_checksum_address(collateral_address)
        self._chain_id = chain_id
        self._gas_limit = gas_limit
        self._receipt_timeout = receipt_timeout

    @property
    def address(self) -> str:
        return self._account.address

    async def pin_block(self) -> int | None:
        return await self._w3.eth.block_number

    async def read_balance(self, owner: str, token_id: int, block: int | None = None) -> int:
        fn = self._ctf.functions.balanceOf(Web3.to_checksum_address(owner), token_id)
        return await fn.call(block_identifier=block if block is not None else "latest")

    async def read_payout_numerators(self, condition_id: str) -> tuple[int, int]:
        cid = condition_bytes(condition_id)
        block = await self._w3.eth.block_number
        # Denominator is zero until reportPayouts has run.
        den = await self._ctf.functions.payoutDenominator(cid).call(block_identifier=block)
        if den == 0:
            return (0, 0)
        n0 = await self._ctf.functions.payoutNumerators(cid, 0).call(block_identifier=block)
        n1 = await self._ctf.functions.payoutNumerators(cid, 1).call(block_identifier=block)
        return (n0, n1)

    def _contract_call(self, call: CallDescriptor):
        cid = condition_bytes(call.condition_id)
        if call.function == "mergePositions":
            return self._ctf.functions.mergePositions(
                self._collateral, PARENT_COLLECTION_ID, cid, list(call.index_sets), call.amount
            )
        return self._ctf.functions.redeemPositions(self._collateral, PARENT_COLLECTION_ID, cid, list(call.index_sets))

    async def submit_transaction(self, call: CallDescriptor) -> TxReceipt:
        fn = self._contract_call(call)
        try:
            gas_price = await self._w3.eth.gas_price
            tx = await fn.build_transaction(
                {
                    "from": self._account.address,
                    "nonce": await self._w3.eth.get_transaction_count(self._account.address),
                    "gas": self._gas_limit,
                    "maxFeePerGas": gas_price * 2,
                    "maxPriorityFeePerGas": self._w3.to_wei(30, "gwei"),
                    "chainId": self._chain_id,
                }
            )
            signed = self._account.sign_transaction(tx)
            sent = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        except ContractLogicError as e:
            raise ChainWriteError(f"{call.function} rejected before submission: {getattr(e, 'message', None) or e}") from e

        tx_hash = Web3.to_hex(sent)
        # From here on the transaction is out: every failure keeps tx_hash so
        # the caller checks its status instead of sending again.
        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(sent, timeout=self._receipt_timeout)
            if receipt["status"] != 1:
                return TxReceipt(
                    tx_hash=tx_hash,
                    gas_used=receipt["gasUsed"],
                    confirmed=False,
                    revert_reason=await self._revert_reason(fn, receipt["blockNumber"]),
                )
        except TimeExhausted as e:
            raise ChainWriteError(f"{call.function} not mined within {self._receipt_timeout}s", tx_hash=tx_hash) from e
        except Exception as e:
            raise ChainWriteError(f"{call.function} sent as {tx_hash} but its outcome is unknown: {e}", tx_hash=tx_hash) from e

        return TxReceipt(
            tx_hash=tx_hash,
            gas_used=receipt["gasUsed"],
            confirmed=True,
            collateral_transferred=collateral_received(receipt, self._collateral, self._account.address),
        )

    async def _revert_reason(self, fn, block: int) -> str | None:
        # Replay against the state the transaction executed on.
        try:
            await fn.call({"from": self._account.address}, block_identifier=max(block - 1, 0))
        except ContractLogicError as e:
            return getattr(e, "message", None) or str(e)
        except Web3Exception:
            return None
        return None
