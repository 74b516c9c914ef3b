from __future__ import annotations

import asyncio

import pytest

from conftest import CID, TOKEN0, TOKEN1, UNIT, fund
from polyredeem.core.errors import BulkRedeemFailed, MarketNotResolved, TransactionReverted


def redeem_all(client, config=None):
    return asyncio.run(client.redeem_all_generic_positions(CID, TOKEN0, TOKEN1, config))


def test_split_redeems_both_sides(client, chain, teams):
    fund(chain, 10 * UNIT, 6 * UNIT)
    chain.resolve(CID, 1, 1)
    res = redeem_all(client, teams)
    assert [r.outcome_index for r in res.outcomes] == [0, 1]
    assert [r.outcome_name for r in res.outcomes] == ["TEAM_A", "TEAM_B"]
    assert res.total_usdc_received == "8"
    assert res.total_gas_used == sum(r.gas_used for r in res.outcomes)
    assert res.tx_hashes == tuple(r.tx_hash for r in res.outcomes)
    assert res.failed_indices == ()


def test_zero_side_is_skipped(client, chain):
    fund(chain, 0, 5 * UNIT)
    chain.resolve(CID, 0, 1)
    res = redeem_all(client)
    assert len(res.outcomes) == 1
    assert res.outcomes[0].outcome_index == 1
    assert res.outcomes[0].outcome_name is None
    assert [c.index_sets for c in chain.submitted] == [(2,)]


def test_losing_side_with_balance_is_still_cleared(client, chain):
    fund(chain, 5 * UNIT, 5 * UNIT)
    chain.resolve(CID, 1, 0)
    res = redeem_all(client)
    assert [r.usdc_received for r in res.outcomes] == ["5", "0"]
    assert chain.balances[int(TOKEN1)] == 0


def test_only_attempt_fails(client, chain):
    fund(chain, 100 * UNIT, 0)
    chain.resolve(CID, 1, 0)
    chain.revert_on(CID, "redeemPositions", 1)
    with pytest.raises(BulkRedeemFailed) as exc:
        redeem_all(client)
    assert list(exc.value.errors) == [0]
    assert isinstance(exc.value.errors[0], TransactionReverted)
    assert len(chain.submitted) == 1


def test_both_attempts_fail(client, chain):
    fund(chain, UNIT, UNIT)
    chain.resolve(CID, 1, 1)
    chain.revert_on(CID, "redeemPositions", 1)
    chain.revert_on(CID, "redeemPositions", 2)
    with pytest.raises(BulkRedeemFailed) as exc:
        redeem_all(client)
    assert sorted(exc.value.errors) == [0, 1]


def test_partial_success_is_success(client, chain):
    fund(chain, 100 * UNIT, 50 * UNIT)
    chain.resolve(CID, 1, 0)
    chain.revert_on(CID, "redeemPositions", 2)
    res = redeem_all(client)
    assert len(res.outcomes) == 1
    assert res.outcomes[0].outcome_index == 0
    assert res.total_usdc_received == res.outcomes[0].usdc_received == "100"
    assert res.tx_hashes == (res.outcomes[0].tx_hash,)
    assert res.failed_indices == (1,)
    # the failed side is still attempted after the first succeeded
    assert [c.index_sets for c in chain.submitted] == [(1,), (2,)]


def test_first_failure_does_not_stop_second(client, chain):
    fund(chain, 10 * UNIT, 10 * UNIT)
    chain.resolve(CID, 0, 1)
    chain.revert_on(CID, "redeemPositions", 1)
    res = redeem_all(client)
    assert [r.outcome_index for r in res.outcomes] == [1]
    assert res.total_usdc_received == "10"


def test_unresolved_market(client, chain):
    fund(chain, UNIT, UNIT)
    with pytest.raises(MarketNotResolved):
        redeem_all(client)
    assert chain.submitted == []


def test_nothing_held_is_empty_success(client, chain):
    chain.resolve(CID, 1, 0)
    res = redeem_all(client)
    assert res.outcomes == ()
    assert res.total_usdc_received == "0"
    assert res.total_gas_used == 0
    assert res.tx_hashes == ()
    assert res.failed_indices == ()
    assert chain.submitted == []
