from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx

from polyredeem.core.errors import MarketLookupError
from polyredeem.core.types import BinaryOutcomeConfig


GAMMA = "https://gamma-api.polymarket.com"


@dataclass(frozen=True)
class BinaryMarketRef:
    condition_id: str
    token0: str
    token1: str
    config: BinaryOutcomeConfig | None = None
    question: str | None = None
    slug: str | None = None


def _parse_json_array(v: Any) -> list[Any]:
    # Gamma serializes list fields as JSON strings.
    if isinstance(v, list):
        return v
    if not isinstance(v, str):
        return []
    try:
        out = json.loads(v)
    except json.JSONDecodeError:
        return []
    return out if isinstance(out, list) else []


def parse_market_row(m: dict[str, Any]) -> BinaryMarketRef:
    cid = m.get("conditionId")
    if not (isinstance(cid, str) and cid.startswith("0x")):
        raise MarketLookupError(f"market {m.get('slug') or m.get('id')} has no condition id")

    tokens = [str(t) for t in _parse_json_array(m.get("clobTokenIds"))]
    if len(tokens) != 2:
        raise MarketLookupError(f"market {cid} is not binary ({len(tokens)} outcome tokens)")

    outcomes = [str(o) for o in _parse_json_array(m.get("outcomes"))]
    config = None
    if len(outcomes) == 2 and all(o.strip() for o in outcomes):
        config = BinaryOutcomeConfig(outcome0=outcomes[0], outcome1=outcomes[1])

    question = m.get("question")
    slug = m.get("slug")
    return BinaryMarketRef(
        condition_id=cid,
        token0=tokens[0],
        token1=tokens[1],
        config=config,
        question=question if isinstance(question, str) else None,
        slug=slug if isinstance(slug, str) else None,
    )


class GammaMarketLookup:
    """Read-only Gamma client that turns a slug or condition id into the
    identifiers settlement needs (condition id, both token ids, outcome names).
    """

    def __init__(self, *, base_url: str = GAMMA, user_agent: str = "polyredeem/0.1", transport: httpx.AsyncBaseTransport | None = None):
        self._gamma = httpx.AsyncClient(
            base_url=base_url, timeout=25.0, headers={"User-Agent": user_agent}, transport=transport
        )

    async def aclose(self) -> None:
        await self._gamma.aclose()

    async def _first_market(self, params: dict[str, str], what: str) -> BinaryMarketRef:
        try:
            r = await self._gamma.get("/markets", params={**params, "limit": "1"})
            r.raise_for_status()
        except httpx.HTTPError as e:
            raise MarketLookupError(f"gamma lookup for {what} failed: {e}") from e
        rows = r.json()
        if not isinstance(rows, list) or not rows or not isinstance(rows[0], dict):
            raise MarketLookupError(f"no market found for {what}")
        return parse_market_row(rows[0])

    async def by_slug(self, slug: str) -> BinaryMarketRef:
        return await self._first_market({"slug": slug}, f"slug {slug!r}")

    async def by_condition_id(self, condition_id: str) -> BinaryMarketRef:
        return await self._first_market({"condition_ids": condition_id}, f"condition {condition_id}")
