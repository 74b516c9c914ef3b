from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from polyredeem.core.types import MergeResult, RedeemResult


class Journal:
    """Append-only record of settlement transactions sent from this machine."""

    def __init__(self, path: str = "polyredeem.db"):
        self.path = Path(path)
        self._init()

    def _init(self) -> None:
        with sqlite3.connect(self.path) as conn:
            conn.execute(
                """
                create table if not exists merges (
                  ts text,
                  condition_id text,
                  amount text,
                  usdc_received text,
                  tx_hash text primary key,
                  gas_used integer
                );
                """
            )
            conn.execute(
                """
                create table if not exists redemptions (
                  ts text,
                  condition_id text,
                  outcome_index integer,
                  outcome_name text,
                  tokens_redeemed text,
                  usdc_received text,
                  tx_hash text primary key,
                  gas_used integer
                );
                """
            )

    def log_merge(self, res: MergeResult) -> None:
        ts = datetime.now(timezone.utc).isoformat()
        with sqlite3.connect(self.path) as conn:
            conn.execute(
                "insert or replace into merges values (?,?,?,?,?,?)",
                (ts, res.condition_id, res.amount, res.usdc_received, res.tx_hash, res.gas_used),
            )

    def log_redemption(self, res: RedeemResult) -> None:
        ts = datetime.now(timezone.utc).isoformat()
        with sqlite3.connect(self.path) as conn:
            conn.execute(
                "insert or replace into redemptions values (?,?,?,?,?,?,?,?)",
                (
                    ts,
                    res.condition_id,
                    res.outcome_index,
                    res.outcome_name,
                    res.tokens_redeemed,
                    res.usdc_received,
                    res.tx_hash,
                    res.gas_used,
                ),
            )

    def redemptions(self, condition_id: str) -> list[tuple[int, str, str]]:
        with sqlite3.connect(self.path) as conn:
            cur = conn.execute(
                "select outcome_index, tokens_redeemed, tx_hash from redemptions where condition_id=? order by ts",
                (condition_id,),
            )
            return [(int(r[0]), str(r[1]), str(r[2])) for r in cur.fetchall()]
