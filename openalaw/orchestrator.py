"""
OpenALaw Orchestrator — Core Agent + Android Core Bridge

Top-level entry point. Every task goes through the Core Agent for routing;
tasks that also mention the device (screen, tap, swipe, app, ...) are
dispatched to the bridge as well and both results are returned together.

The two keyword checks are independent. "debug the swipe gesture" is
routed locally by the Core Agent AND treated as a system task, and the
caller gets both results.

Device dispatch:
    "screen" in task             -> bridge.capture_screen()
    "touch" / "click" in task    -> bridge.tap(x, y) using the first number pair
    anything else                -> SystemTaskResult(success=False)

Usage:
    from openalaw.orchestrator import OpenALaw

    agent = OpenALaw.create()
    await agent.initialize()
    result = await agent.process_task("Click the button at 100, 200")
    # CombinedResult(core="[LOCAL] Processed: ...", system=TouchResult(...), combined=True)

CLI:
    python -m openalaw
    python -m openalaw "Click at 100, 200"
    python -m openalaw "Summarize this article" --status-json -v
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from openalaw import __version__
from openalaw.bridge import AndroidCoreBridge, DeviceBridge, SystemTaskResult
from openalaw.core import AGENT_ID, ARCHITECTURE, PLATFORM, OpenALawCore
from openalaw.lifecycle import LifecycleState, UninitializedError
from openalaw.routing import Coordinates, KeywordRules, extract_coordinates, requires_system_interaction

logger = logging.getLogger("openalaw.orchestrator")

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(name)s.%(levelname)s: %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(_handler)


def _now_iso() -> str:
    """Return current UTC time in ISO 8601 format."""
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

@dataclass
class CombinedResult:
    """Core Agent output plus the bridge result for a device-facing task."""
    core: str
    system: Any
    combined: bool = True

    def to_dict(self) -> Dict[str, Any]:
        system = self.system.to_dict() if hasattr(self.system, "to_dict") else self.system
        return {"core": self.core, "system": system, "combined": self.combined}


TaskResult = Union[str, CombinedResult]


# ===================================================================
# OpenALaw
# ===================================================================

class OpenALaw:
    """
    Orchestrates a Core Agent and a device bridge.

    Both collaborators are passed in, so tests can hand over fakes. Use
    ``OpenALaw.create()`` for the default pair. The orchestrator counts as
    initialized once both collaborators are.
    """

    def __init__(
        self,
        core: OpenALawCore,
        bridge: DeviceBridge,
        config: Optional[Dict[str, Any]] = None,
        keyword_rules: Optional[KeywordRules] = None,
    ) -> None:
        self.config: Dict[str, Any] = dict(config or {})
        self.version = __version__
        self.architecture = ARCHITECTURE
        self.platform = PLATFORM
        self.agent_id = AGENT_ID
        self.core = core
        self.bridge = bridge
        self.keyword_rules = keyword_rules or core.keyword_rules

        logger.info("OpenALaw v%s created for %s architecture", self.version, self.architecture)

    @classmethod
    def create(cls, config: Optional[Dict[str, Any]] = None) -> OpenALaw:
        """Build an orchestrator with a fresh Core Agent and AndroidCoreBridge."""
        return cls(OpenALawCore(config), AndroidCoreBridge(), config=config)

    # ----- Lifecycle -----

    @property
    def state(self) -> LifecycleState:
        states = (self.core.state, self.bridge.state)
        if all(s is LifecycleState.INITIALIZED for s in states):
            return LifecycleState.INITIALIZED
        if any(s is LifecycleState.INITIALIZING for s in states):
            return LifecycleState.INITIALIZING
        return LifecycleState.UNINITIALIZED

    @property
    def initialized(self) -> bool:
        return self.state is LifecycleState.INITIALIZED

    async def initialize(self) -> bool:
        """Initialize whichever collaborators are not initialized yet."""
        logger.info("Initializing OpenALaw system...")

        if not self.core.initialized:
            await self.core.initialize()
        if not self.bridge.initialized:
            await self.bridge.initialize()

        logger.info("OpenALaw system fully initialized!")
        self.report_status()
        return True

    # ----- Task processing -----

    async def process_task(self, task: str) -> TaskResult:
        """
        Run *task* through the Core Agent and, when it needs the device,
        through the bridge as well.

        Returns the Core Agent's string, or a ``CombinedResult`` when the
        bridge was involved.
        """
        if not self.initialized:
            raise UninitializedError("OpenALaw", "process_task")
        logger.info("Processing task: %s", task)

        core_result = await self.core.process_task(task)

        if self.requires_system_interaction(task):
            logger.info("Task requires Android system interaction")
            system_result = await self.handle_system_task(task)
            return CombinedResult(core=core_result, system=system_result)

        return core_result

    def requires_system_interaction(self, task: str) -> bool:
        return requires_system_interaction(task, self.keyword_rules)

    async def handle_system_task(self, task: str) -> Any:
        if not self.initialized:
            raise UninitializedError("OpenALaw", "handle_system_task")
        logger.info("Handling system task: %s", task)
        task_lower = task.lower()

        if "screen" in task_lower:
            return await self.bridge.capture_screen()
        if "touch" in task_lower or "click" in task_lower:
            coords = self.extract_coordinates(task)
            if coords is not None:
                return await self.bridge.tap(coords.x, coords.y)

        return SystemTaskResult()

    def extract_coordinates(self, task: str) -> Optional[Coordinates]:
        return extract_coordinates(task)

    # ----- Status -----

    def report_status(self) -> None:
        """Log a human-readable status banner."""
        logger.info("=== OpenALaw System Status ===")
        logger.info("Version: %s", self.version)
        logger.info("Architecture: %s", self.architecture)
        logger.info("Platform: %s", self.platform)
        logger.info("Agent ID: %s", self.agent_id)
        logger.info("Core Initialized: %s", self.core.initialized)
        logger.info("Bridge Initialized: %s", self.bridge.initialized)
        logger.info("Timestamp: %s", _now_iso())
        logger.info("==============================")

    def get_status(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "architecture": self.architecture,
            "platform": self.platform,
            "agent_id": self.agent_id,
            "state": self.state.value,
            "core": self.core.get_status(),
            "bridge": self.bridge.get_status(),
            "timestamp": _now_iso(),
        }


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_openalaw_instance: Optional[OpenALaw] = None


def get_openalaw() -> OpenALaw:
    """
    Return the process-wide OpenALaw instance, creating it on first call.

    The instance is not initialized automatically; await ``initialize()``.
    """
    global _openalaw_instance
    if _openalaw_instance is None:
        _openalaw_instance = OpenALaw.create()
    return _openalaw_instance
