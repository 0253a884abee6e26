"""
OpenALaw Core — task routing agent

Classifies incoming tasks and hands them to the right executor:

    code-related tasks       -> local model  (Ollama or similar on-device engine)
    analysis/creative tasks  -> remote API
    everything else          -> local model

Both executors are placeholders that return a formatted string, so routing
is the only real behaviour. The agent also owns three helper components,
created during ``initialize()``:

    TaskScheduler  — FIFO queue of pending task strings
    APIBridge      — remote API client (stub)
    OllamaBridge   — local generation client (stub)

Usage:
    from openalaw.core import OpenALawCore

    core = OpenALawCore()
    await core.initialize()
    result = await core.process_task("Debug this python function")
    # "[LOCAL] Processed: Debug this python function..."
"""

from __future__ import annotations

import logging
import os
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Dict, Optional

from openalaw import __version__
from openalaw.lifecycle import Lifecycle
from openalaw.routing import ExecutionTarget, KeywordRules, classify_task, load_keyword_rules

logger = logging.getLogger("openalaw.core")

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(name)s.%(levelname)s: %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(_handler)

# ---------------------------------------------------------------------------
# Constants & Configuration
# ---------------------------------------------------------------------------

AGENT_ID = os.getenv("OPENALAW_AGENT_ID", "AgentBot11")
ARCHITECTURE = os.getenv("OPENALAW_ARCHITECTURE", "ARM")
PLATFORM = os.getenv("OPENALAW_PLATFORM", "Android")

LOCAL_PREFIX = "[LOCAL] Processed: "
REMOTE_PREFIX = "[REMOTE] Processed: "
PREVIEW_LENGTH = 50
QUEUE_LOG_PREVIEW = 30


def _now_iso() -> str:
    """Return current UTC time in ISO 8601 format."""
    return datetime.now(timezone.utc).isoformat()


# ===================================================================
# Helper components
# ===================================================================

class TaskScheduler:
    """
    FIFO queue of task strings.

    Tasks are appended by ``add_task`` and discarded one by one by
    ``process_queue``. There is no size bound and no lock: the drain loop
    never yields to the event loop, so a single drain always empties the
    queue before anything else runs.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self.config = config
        self.queue: Deque[str] = deque()
        logger.debug("TaskScheduler created")

    def __len__(self) -> int:
        return len(self.queue)

    @property
    def pending(self) -> int:
        return len(self.queue)

    async def add_task(self, task: str) -> None:
        self.queue.append(task)
        logger.info("Task added to queue: %s...", task[:QUEUE_LOG_PREVIEW])

    async def process_queue(self) -> int:
        """Drain the queue front to back. Returns how many tasks were removed."""
        drained = 0
        while self.queue:
            task = self.queue.popleft()
            logger.info("Processing from queue: %s", task)
            drained += 1
        return drained


class APIBridge:
    """Remote API client. Every call returns a canned response."""

    def __init__(self, config: Dict[str, Any]) -> None:
        self.config = config
        logger.debug("APIBridge created")

    async def call_api(self, endpoint: str, method: str = "GET", data: Optional[Any] = None) -> Dict[str, Any]:
        logger.info("Calling API: %s %s", method, endpoint)
        return {"success": True, "data": "API response"}


class OllamaBridge:
    """Local model client. Every generation returns a canned response."""

    def __init__(self, config: Dict[str, Any]) -> None:
        self.config = config
        logger.debug("OllamaBridge created")

    async def generate(self, prompt: str, model: str = "default") -> Dict[str, Any]:
        logger.info("Generating with Ollama (%s): %s...", model, prompt[:QUEUE_LOG_PREVIEW])
        return {"response": "Generated response"}


# ===================================================================
# OpenALawCore
# ===================================================================

class OpenALawCore(Lifecycle):
    """
    The Core Agent: owns the helper components and routes tasks.

    *config* is passed through untouched; ``load_config()`` only adds the
    platform identity keys. *keyword_rules* defaults to the rules file (or
    the built-in keyword lists when there is none).
    """

    component_name = "OpenALawCore"

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        keyword_rules: Optional[KeywordRules] = None,
    ) -> None:
        super().__init__()
        self.config: Dict[str, Any] = dict(config or {})
        self.version = __version__
        self.architecture = ARCHITECTURE
        self.platform = PLATFORM
        self.agent_id = AGENT_ID
        self.keyword_rules = keyword_rules if keyword_rules is not None else load_keyword_rules()

        self.task_scheduler: Optional[TaskScheduler] = None
        self.api_bridge: Optional[APIBridge] = None
        self.ollama_bridge: Optional[OllamaBridge] = None

        logger.info("OpenALaw Core created - v%s (%s)", self.version, self.architecture)

    # ----- Initialization -----

    async def initialize(self) -> bool:
        if self.initialized:
            return True

        logger.info("Initializing OpenALaw agent...")
        self._begin_initialization()

        await self.load_config()
        self.task_scheduler = TaskScheduler(self.config)
        self.api_bridge = APIBridge(self.config)
        self.ollama_bridge = OllamaBridge(self.config)

        self._finish_initialization()
        logger.info("OpenALaw agent initialized successfully")
        return True

    async def load_config(self) -> Dict[str, Any]:
        """Merge the platform identity into the pass-through config."""
        self.config = {
            **self.config,
            "platform": self.platform,
            "architecture": self.architecture,
            "agent_id": self.agent_id,
        }
        logger.info("Configuration loaded")
        return self.config

    # ----- Routing -----

    def determine_execution_target(self, task: str) -> ExecutionTarget:
        return classify_task(task, self.keyword_rules)

    async def process_task(self, task: str) -> str:
        """Classify *task* and return the matching executor's placeholder output."""
        self._require_initialized("process_task")
        logger.info("Processing task: %s", task)

        target = self.determine_execution_target(task)
        logger.info("Routing task to: %s", target.value)

        if target is ExecutionTarget.LOCAL:
            return await self.execute_locally(task)
        return await self.execute_remotely(task)

    async def execute_locally(self, task: str) -> str:
        logger.info("Executing task locally: %s", task)
        return f"{LOCAL_PREFIX}{task[:PREVIEW_LENGTH]}..."

    async def execute_remotely(self, task: str) -> str:
        logger.info("Executing task remotely: %s", task)
        return f"{REMOTE_PREFIX}{task[:PREVIEW_LENGTH]}..."

    # ----- Queue -----

    async def enqueue(self, task: str) -> None:
        self._require_initialized("enqueue")
        await self.task_scheduler.add_task(task)

    async def drain_queue(self) -> int:
        self._require_initialized("drain_queue")
        return await self.task_scheduler.process_queue()

    # ----- Status -----

    def get_status(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "architecture": self.architecture,
            "platform": self.platform,
            "agent_id": self.agent_id,
            "initialized": self.initialized,
            "state": self.state.value,
            "queued_tasks": self.task_scheduler.pending if self.task_scheduler else 0,
            "timestamp": _now_iso(),
        }
