from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from conftest import CID, TOKEN0, TOKEN1, UNIT
from polyredeem.cli import app
from polyredeem.settings import settings
from polyredeem.storage.sqlite import Journal


runner = CliRunner()

IDS = ["--condition-id", CID, "--token0", TOKEN0, "--token1", TOKEN1]


@pytest.fixture
def paper_state(tmp_path, monkeypatch):
    def write(balance0: int, balance1: int, payouts=(0, 0)) -> None:
        path = tmp_path / "paper.json"
        path.write_text(
            json.dumps(
                {CID: {"token0": TOKEN0, "token1": TOKEN1, "balance0": balance0, "balance1": balance1, "payouts": list(payouts)}}
            )
        )
        monkeypatch.setattr(settings, "paper_state_file", str(path))

    monkeypatch.setattr(settings, "mode", "paper")
    monkeypatch.setattr(settings, "journal_path", str(tmp_path / "journal.db"))
    return write


def test_balance(paper_state):
    paper_state(3 * UNIT, 0)
    result = runner.invoke(app, ["balance", *IDS, "--outcome0", "Yes", "--outcome1", "No"])
    assert result.exit_code == 0, result.output
    assert "Yes" in result.output


def test_redeem_writes_journal(paper_state):
    paper_state(0, 8 * UNIT, payouts=(0, 1))
    result = runner.invoke(app, ["redeem", *IDS])
    assert result.exit_code == 0, result.output
    rows = Journal(settings.journal_path).redemptions(CID)
    assert [(r[0], r[1]) for r in rows] == [(1, "8")]


def test_redeem_unresolved_exits_nonzero(paper_state):
    paper_state(UNIT, UNIT)
    result = runner.invoke(app, ["redeem", *IDS])
    assert result.exit_code == 1


def test_redeem_all_split(paper_state):
    paper_state(4 * UNIT, 4 * UNIT, payouts=(1, 1))
    result = runner.invoke(app, ["redeem-all", *IDS])
    assert result.exit_code == 0, result.output
    assert len(Journal(settings.journal_path).redemptions(CID)) == 2


def test_merge_insufficient(paper_state):
    paper_state(UNIT, 0)
    result = runner.invoke(app, ["merge", "1", *IDS])
    assert result.exit_code == 1


def test_missing_market_address(paper_state):
    paper_state(0, 0)
    result = runner.invoke(app, ["balance"])
    assert result.exit_code == 1


def test_single_outcome_name_rejected(paper_state):
    paper_state(UNIT, UNIT)
    result = runner.invoke(app, ["balance", *IDS, "--outcome0", "Yes"])
    assert result.exit_code == 1
    assert "--outcome1" in result.output


def test_redeem_all_with_nothing_held(paper_state):
    paper_state(0, 0, payouts=(1, 0))
    result = runner.invoke(app, ["redeem-all", *IDS])
    assert result.exit_code == 0, result.output
    assert "Nothing to redeem" in result.output
    assert Journal(settings.journal_path).redemptions(CID) == []


def test_journal_failure_does_not_hide_the_merge(paper_state, tmp_path, monkeypatch):
    paper_state(2 * UNIT, 2 * UNIT)
    # a directory cannot be opened as a sqlite database
    monkeypatch.setattr(settings, "journal_path", str(tmp_path))
    result = runner.invoke(app, ["merge", "1", *IDS])
    assert result.exit_code == 0, result.output
    assert "MERGED" in result.output
