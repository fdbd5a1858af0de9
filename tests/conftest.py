from __future__ import annotations

from pathlib import Path

import pytest

from beacon_map.core.engine import AlignmentSession
from beacon_map.core.parser import load_scanners
from beacon_map.core.scanner import Scanner

DATA = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def example_path() -> Path:
    return DATA / "example.txt"


@pytest.fixture(scope="session")
def example_scanners(example_path: Path) -> list[Scanner]:
    return load_scanners(example_path)


@pytest.fixture
def example_session(example_scanners: list[Scanner]) -> AlignmentSession:
    return AlignmentSession(example_scanners)
