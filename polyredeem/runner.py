from __future__ import annotations

import sqlite3

from rich.console import Console
from rich.table import Table

from polyredeem.adapters.gamma import BinaryMarketRef, GammaMarketLookup
from polyredeem.adapters.paper import load_paper_chain
from polyredeem.client import CTFClient
from polyredeem.core.types import BinaryOutcomeConfig, RedeemResult
from polyredeem.settings import settings
from polyredeem.storage.sqlite import Journal


console = Console()


def build_client() -> CTFClient:
    # Swap chain adapter based on settings.mode
    if settings.mode == "live":
        if not settings.private_key:
            raise ValueError("POLYREDEEM_PRIVATE_KEY is required in live mode")
        from polyredeem.adapters.web3_chain import Web3Chain

        chain = Web3Chain(
            rpc_url=settings.rpc_url,
            private_key=settings.private_key,
            ctf_address=settings.ctf_address,
            collateral_address=settings.collateral_address,
            chain_id=settings.chain_id,
            gas_limit=settings.gas_limit,
            receipt_timeout=settings.receipt_timeout_seconds,
        )
    else:
        chain = load_paper_chain(settings.paper_state_file)
    return CTFClient(chain, chain, decimals=settings.token_decimals)


async def resolve_market(
    *,
    slug: str | None = None,
    condition_id: str | None = None,
    token0: str | None = None,
    token1: str | None = None,
    outcome0: str | None = None,
    outcome1: str | None = None,
) -> BinaryMarketRef:
    """Explicit ids win; otherwise look the market up on Gamma."""
    if bool(outcome0) != bool(outcome1):
        raise ValueError("pass both --outcome0 and --outcome1")
    config = None
    if outcome0 and outcome1:
        config = BinaryOutcomeConfig(outcome0=outcome0, outcome1=outcome1)

    if condition_id and token0 and token1:
        return BinaryMarketRef(condition_id=condition_id, token0=token0, token1=token1, config=config)

    if not (slug or condition_id):
        raise ValueError("pass --slug, or --condition-id with --token0/--token1")

    gamma = GammaMarketLookup(base_url=settings.gamma_base_url, user_agent=settings.user_agent)
    try:
        ref = await gamma.by_slug(slug) if slug else await gamma.by_condition_id(condition_id)
    finally:
        await gamma.aclose()

    if config is not None:
        ref = BinaryMarketRef(
            condition_id=ref.condition_id,
            token0=ref.token0,
            token1=ref.token1,
            config=config,
            question=ref.question,
            slug=ref.slug,
        )
    return ref


def _label(ref: BinaryMarketRef, index: int) -> str:
    return ref.config.name_for(index) if ref.config else f"Outcome {index}"


def _redeem_table(title: str, results: list[RedeemResult]) -> Table:
    t = Table(title=title)
    for col in ("outcome", "tokens redeemed", "usdc received", "gas", "tx"):
        t.add_column(col)
    for r in results:
        t.add_row(r.outcome_name or f"Outcome {r.outcome_index}", r.tokens_redeemed, r.usdc_received, str(r.gas_used), r.tx_hash)
    return t


async def show_balance(ref: BinaryMarketRef) -> None:
    client = build_client()
    snap = await client.get_generic_position_balance(ref.condition_id, ref.token0, ref.token1, ref.config)
    t = Table(title=ref.question or ref.condition_id)
    t.add_column("outcome")
    t.add_column("balance", justify="right")
    t.add_row(_label(ref, 0), snap.balance0)
    t.add_row(_label(ref, 1), snap.balance1)
    console.print(t)
    if not snap.pinned:
        console.log("balances read at latest block separately (not pinned)")


async def show_resolution(ref: BinaryMarketRef) -> None:
    client = build_client()
    state = await client.get_generic_market_resolution(ref.condition_id, ref.config)
    if not state.is_resolved:
        console.log("Market not resolved yet")
    elif state.is_split:
        console.log(f"Resolved as a split: payouts={state.payout_numerators}")
    else:
        name = state.winning_outcome_name or f"Outcome {state.winning_outcome_index}"
        console.log(f"Resolved: winner={name} (index {state.winning_outcome_index})")


def _journal(record) -> None:
    # The chain write already happened; a journal failure must not hide it.
    try:
        record(Journal(settings.journal_path))
    except sqlite3.Error as e:
        console.log(f"[yellow]journal write to {settings.journal_path} failed: {e}[/yellow]")


async def merge(ref: BinaryMarketRef, amount: str) -> None:
    client = build_client()
    res = await client.merge_generic_position(ref.condition_id, ref.token0, ref.token1, amount, ref.config)
    console.log(f"MERGED {res.amount} pairs -> {res.usdc_received} USDC tx={res.tx_hash}")
    _journal(lambda j: j.log_merge(res))


async def redeem(ref: BinaryMarketRef, index: int | None = None) -> None:
    client = build_client()
    res = await client.redeem_generic_position(ref.condition_id, ref.token0, ref.token1, ref.config, index)
    console.print(_redeem_table(ref.question or ref.condition_id, [res]))
    _journal(lambda j: j.log_redemption(res))


async def redeem_all(ref: BinaryMarketRef) -> None:
    client = build_client()
    res = await client.redeem_all_generic_positions(ref.condition_id, ref.token0, ref.token1, ref.config)
    if not res.outcomes:
        console.log("Nothing to redeem")
        return
    console.print(_redeem_table(ref.question or ref.condition_id, list(res.outcomes)))
    console.log(f"Total: {res.total_usdc_received} USDC, gas={res.total_gas_used}, txs={len(res.tx_hashes)}")
    for i in res.failed_indices:
        console.log(f"[yellow]{_label(ref, i)} was not redeemed[/yellow]")

    def record(j: Journal) -> None:
        for r in res.outcomes:
            j.log_redemption(r)

    _journal(record)
