from __future__ import annotations

import sqlite3

from polyredeem.core.types import MergeResult, RedeemResult
from polyredeem.storage.sqlite import Journal


def test_journal_records_redemptions(tmp_path):
    j = Journal(str(tmp_path / "j.db"))
    j.log_redemption(
        RedeemResult(
            condition_id="0xabc",
            outcome_index=1,
            outcome_name="TEAM_B",
            tokens_redeemed="40",
            usdc_received="40",
            tx_hash="0x01",
            gas_used=110_000,
        )
    )
    assert j.redemptions("0xabc") == [(1, "40", "0x01")]
    assert j.redemptions("0xother") == []


def test_journal_records_merges(tmp_path):
    path = tmp_path / "j.db"
    j = Journal(str(path))
    j.log_merge(MergeResult(condition_id="0xabc", amount="10", usdc_received="10", tx_hash="0x02", gas_used=1))
    with sqlite3.connect(path) as conn:
        rows = conn.execute("select condition_id, amount, tx_hash from merges").fetchall()
    assert rows == [("0xabc", "10", "0x02")]
