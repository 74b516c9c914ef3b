import asyncio
from typing import Optional

import typer

from polyredeem import runner
from polyredeem.core.errors import SettlementError

app = typer.Typer(no_args_is_help=True)

SlugOpt = typer.Option(None, "--slug", help="Gamma market slug")
ConditionOpt = typer.Option(None, "--condition-id", help="0x-prefixed condition id")
Token0Opt = typer.Option(None, "--token0", help="outcome 0 token id (decimal)")
Token1Opt = typer.Option(None, "--token1", help="outcome 1 token id (decimal)")
Outcome0Opt = typer.Option(None, "--outcome0", help="display name for outcome 0")
Outcome1Opt = typer.Option(None, "--outcome1", help="display name for outcome 1")


def _run(coro) -> None:
    try:
        asyncio.run(coro)
    except (SettlementError, ValueError) as e:
        runner.console.log(f"ERROR: {e}")
        raise typer.Exit(code=1)


def _ref(slug, condition_id, token0, token1, outcome0, outcome1):
    return runner.resolve_market(
        slug=slug,
        condition_id=condition_id,
        token0=token0,
        token1=token1,
        outcome0=outcome0,
        outcome1=outcome1,
    )


@app.command()
def balance(
    slug: Optional[str] = SlugOpt,
    condition_id: Optional[str] = ConditionOpt,
    token0: Optional[str] = Token0Opt,
    token1: Optional[str] = Token1Opt,
    outcome0: Optional[str] = Outcome0Opt,
    outcome1: Optional[str] = Outcome1Opt,
):
    """Show both outcome token balances."""

    async def go():
        await runner.show_balance(await _ref(slug, condition_id, token0, token1, outcome0, outcome1))

    _run(go())


@app.command()
def resolution(
    slug: Optional[str] = SlugOpt,
    condition_id: Optional[str] = ConditionOpt,
    token0: Optional[str] = Token0Opt,
    token1: Optional[str] = Token1Opt,
    outcome0: Optional[str] = Outcome0Opt,
    outcome1: Optional[str] = Outcome1Opt,
):
    """Show on-chain resolution state."""

    async def go():
        await runner.show_resolution(await _ref(slug, condition_id, token0, token1, outcome0, outcome1))

    _run(go())


@app.command()
def merge(
    amount: str = typer.Argument(..., help="pairs to merge, e.g. 10 or 2.5"),
    slug: Optional[str] = SlugOpt,
    condition_id: Optional[str] = ConditionOpt,
    token0: Optional[str] = Token0Opt,
    token1: Optional[str] = Token1Opt,
    outcome0: Optional[str] = Outcome0Opt,
    outcome1: Optional[str] = Outcome1Opt,
):
    """Merge matched outcome pairs back into USDC."""

    async def go():
        await runner.merge(await _ref(slug, condition_id, token0, token1, outcome0, outcome1), amount)

    _run(go())


@app.command()
def redeem(
    index: Optional[int] = typer.Option(None, "--index", help="redeem this outcome index instead of the winner"),
    slug: Optional[str] = SlugOpt,
    condition_id: Optional[str] = ConditionOpt,
    token0: Optional[str] = Token0Opt,
    token1: Optional[str] = Token1Opt,
    outcome0: Optional[str] = Outcome0Opt,
    outcome1: Optional[str] = Outcome1Opt,
):
    """Redeem the winning outcome (or --index) for USDC."""

    async def go():
        await runner.redeem(await _ref(slug, condition_id, token0, token1, outcome0, outcome1), index)

    _run(go())


@app.command("redeem-all")
def redeem_all(
    slug: Optional[str] = SlugOpt,
    condition_id: Optional[str] = ConditionOpt,
    token0: Optional[str] = Token0Opt,
    token1: Optional[str] = Token1Opt,
    outcome0: Optional[str] = Outcome0Opt,
    outcome1: Optional[str] = Outcome1Opt,
):
    """Redeem every held outcome (handles split resolutions)."""

    async def go():
        await runner.redeem_all(await _ref(slug, condition_id, token0, token1, outcome0, outcome1))

    _run(go())
