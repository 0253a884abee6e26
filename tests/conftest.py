"""
Shared fixtures for the OpenALaw test suite.

Provides initialized components, keyword rule files and a deterministic
fake bridge so orchestrator tests never depend on the stub bridge.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio

from openalaw.bridge import AndroidCoreBridge, ScreenCapture, TouchResult
from openalaw.core import OpenALawCore
from openalaw.lifecycle import Lifecycle
from openalaw.orchestrator import OpenALaw
from openalaw.routing import KeywordRules


# ---------------------------------------------------------------------------
# Fake bridge
# ---------------------------------------------------------------------------

class FakeBridge(Lifecycle):
    """Records every call; returns fixed results."""

    component_name = "FakeBridge"

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[Tuple[str, tuple]] = []

    async def initialize(self) -> bool:
        self._begin_initialization()
        self._finish_initialization()
        self.calls.append(("initialize", ()))
        return True

    async def capture_screen(self, options: Optional[Dict[str, Any]] = None) -> ScreenCapture:
        self._require_initialized("capture_screen")
        self.calls.append(("capture_screen", (options,)))
        return ScreenCapture(success=True, timestamp_ms=0)

    async def tap(self, x: int, y: int) -> TouchResult:
        self._require_initialized("tap")
        self.calls.append(("tap", (x, y)))
        return TouchResult(success=True, action="tap", coordinates={"x": x, "y": y})

    def get_status(self) -> Dict[str, Any]:
        return {"initialized": self.initialized, "fake": True}


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def default_rules():
    return KeywordRules()


@pytest.fixture
def bridge():
    """Uninitialized AndroidCoreBridge."""
    return AndroidCoreBridge()


@pytest_asyncio.fixture
async def ready_bridge():
    """AndroidCoreBridge after initialize()."""
    b = AndroidCoreBridge()
    await b.initialize()
    return b


@pytest.fixture
def core(default_rules):
    """Uninitialized Core Agent using the built-in keyword lists."""
    return OpenALawCore(keyword_rules=default_rules)


@pytest_asyncio.fixture
async def ready_core(default_rules):
    c = OpenALawCore(keyword_rules=default_rules)
    await c.initialize()
    return c


@pytest.fixture
def fake_bridge():
    return FakeBridge()


@pytest_asyncio.fixture
async def orchestrator(default_rules, fake_bridge):
    """Initialized orchestrator wired to a FakeBridge."""
    agent = OpenALaw(OpenALawCore(keyword_rules=default_rules), fake_bridge)
    await agent.initialize()
    return agent


@pytest.fixture
def keywords_file(tmp_path):
    """Write a keyword rules file overriding the analysis group."""
    path = tmp_path / "keywords.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"analysis": ["ponder", "Reflect"]}, f)
    return path
