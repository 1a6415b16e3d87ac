from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


def pytest_configure() -> None:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def hello_world() -> str:
    return HELLO_WORLD


@pytest.fixture
def examples_dir() -> Path:
    return PROJECT_ROOT / "examples"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("BF_TAPE_SIZE", raising=False)
    monkeypatch.delenv("BF_TRACE", raising=False)
