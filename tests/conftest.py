from __future__ import annotations

import pytest

from polyredeem.adapters.paper import PaperChain
from polyredeem.client import CTFClient
from polyredeem.core.types import BinaryOutcomeConfig


CID = "0x" + "ab" * 32
TOKEN0 = "71321045679252212594626385532706912750332728571942532289631379312455583992563"
TOKEN1 = "52114319501245915516055106046884209969926127482827954674443846427813813222426"

UNIT = 1_000_000  # 6 decimals


@pytest.fixture
def chain() -> PaperChain:
    c = PaperChain()
    c.add_condition(CID, int(TOKEN0), int(TOKEN1))
    return c


@pytest.fixture
def client(chain) -> CTFClient:
    return CTFClient(chain, chain)


@pytest.fixture
def teams() -> BinaryOutcomeConfig:
    return BinaryOutcomeConfig(outcome0="TEAM_A", outcome1="TEAM_B")


def fund(chain: PaperChain, balance0: int, balance1: int) -> None:
    chain.balances[int(TOKEN0)] = balance0
    chain.balances[int(TOKEN1)] = balance1
