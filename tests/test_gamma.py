from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from polyredeem.adapters.gamma import GammaMarketLookup, parse_market_row
from polyredeem.core.errors import MarketLookupError


ROW = {
    "id": "512345",
    "slug": "nba-lal-bos-2026-01-10",
    "question": "Lakers vs. Celtics",
    "conditionId": "0x" + "cd" * 32,
    "outcomes": json.dumps(["Lakers", "Celtics"]),
    "clobTokenIds": json.dumps(["111", "222"]),
}


def lookup(handler) -> GammaMarketLookup:
    return GammaMarketLookup(transport=httpx.MockTransport(handler))


def test_parse_row_builds_outcome_config():
    ref = parse_market_row(ROW)
    assert ref.condition_id == ROW["conditionId"]
    assert (ref.token0, ref.token1) == ("111", "222")
    assert ref.config.outcome0 == "Lakers"
    assert ref.config.outcome1 == "Celtics"


def test_parse_row_rejects_non_binary():
    row = dict(ROW, clobTokenIds=json.dumps(["1", "2", "3"]))
    with pytest.raises(MarketLookupError):
        parse_market_row(row)


def test_parse_row_without_outcome_names():
    row = dict(ROW, outcomes="not json")
    assert parse_market_row(row).config is None


def test_by_slug_queries_markets():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["slug"] = request.url.params.get("slug")
        return httpx.Response(200, json=[ROW])

    async def go():
        g = lookup(handler)
        try:
            return await g.by_slug(ROW["slug"])
        finally:
            await g.aclose()

    ref = asyncio.run(go())
    assert seen == {"path": "/markets", "slug": ROW["slug"]}
    assert ref.question == "Lakers vs. Celtics"


def test_missing_market():
    async def go():
        g = lookup(lambda request: httpx.Response(200, json=[]))
        try:
            return await g.by_condition_id("0x" + "00" * 32)
        finally:
            await g.aclose()

    with pytest.raises(MarketLookupError):
        asyncio.run(go())


def test_http_error_is_lookup_error():
    async def go():
        g = lookup(lambda request: httpx.Response(503))
        try:
            return await g.by_slug("x")
        finally:
            await g.aclose()

    with pytest.raises(MarketLookupError):
        asyncio.run(go())
