"""
Routing — keyword-driven task classification for OpenALaw.

Three keyword groups drive every routing decision:

    code      -> task runs on the local model
    analysis  -> task runs on a remote API (unless a code keyword matched)
    system    -> task additionally needs Android device interaction

Matching is a case-insensitive substring test, checked in the order the
keywords are listed. There is no tokenization or stemming, so "app" matches
"happy" and "ui" matches "build".

The groups are plain data held by ``KeywordRules``. Defaults mirror the
lists the agent has always shipped with; ``openalaw/configs/keywords.json`` (or the
file named by ``OPENALAW_KEYWORDS_PATH``) can override any group.

Usage:
    from openalaw.routing import classify_task, requires_system_interaction

    classify_task("debug this python function")      # ExecutionTarget.LOCAL
    classify_task("summarize the meeting notes")     # ExecutionTarget.REMOTE
    requires_system_interaction("tap the button")    # True
    extract_coordinates("tap 10 and 20")             # Coordinates(x=10, y=20)
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

logger = logging.getLogger("openalaw.routing")

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(name)s.%(levelname)s: %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(_handler)

# ---------------------------------------------------------------------------
# Constants & Configuration
# ---------------------------------------------------------------------------

BASE_DIR = Path(__file__).resolve().parent
KEYWORDS_PATH = Path(os.getenv("OPENALAW_KEYWORDS_PATH", str(BASE_DIR / "configs" / "keywords.json")))

DEFAULT_CODE_KEYWORDS: Tuple[str, ...] = (
    "code", "programming", "python", "javascript", "function", "algorithm", "debug",
)
DEFAULT_ANALYSIS_KEYWORDS: Tuple[str, ...] = (
    "analyze", "think", "summarize", "creative", "complex",
)
DEFAULT_SYSTEM_KEYWORDS: Tuple[str, ...] = (
    "screen", "touch", "click", "swipe", "tap", "gesture",
    "app", "application", "interface", "ui", "view", "input",
    "keyboard", "navigation", "activity", "window", "notification",
)

KEYWORD_GROUPS = ("code", "analysis", "system")

# digits, one or more non-digits, digits -- first match wins
COORDINATE_PATTERN = re.compile(r"(\d+)\D+(\d+)")


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

class ExecutionTarget(str, Enum):
    """Where the Core Agent sends a task."""
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class Coordinates:
    """A screen point pulled out of free task text."""
    x: int
    y: int

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}


def _as_keyword_tuple(values: Iterable[str]) -> Tuple[str, ...]:
    return tuple(str(v).lower() for v in values)


@dataclass(frozen=True)
class KeywordRules:
    """The three keyword groups used for routing, in priority order."""
    code: Tuple[str, ...] = DEFAULT_CODE_KEYWORDS
    analysis: Tuple[str, ...] = DEFAULT_ANALYSIS_KEYWORDS
    system: Tuple[str, ...] = DEFAULT_SYSTEM_KEYWORDS

    def __post_init__(self):
        # keywords are stored lower-case so matching only folds the task
        for group in KEYWORD_GROUPS:
            object.__setattr__(self, group, _as_keyword_tuple(getattr(self, group)))

    def to_dict(self) -> Dict[str, list]:
        return {
            "code": list(self.code),
            "analysis": list(self.analysis),
            "system": list(self.system),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> KeywordRules:
        """
        Build rules from a mapping of group name -> list of keywords.

        Groups missing from *data* keep their defaults. Unknown group names
        or non-list values raise ``ValueError``.
        """
        unknown = set(data) - set(KEYWORD_GROUPS)
        if unknown:
            raise ValueError(f"Unknown keyword group(s): {', '.join(sorted(unknown))}")

        kwargs: Dict[str, Tuple[str, ...]] = {}
        for group, values in data.items():
            if not isinstance(values, (list, tuple)):
                raise ValueError(f"Keyword group '{group}' must be a list, got {type(values).__name__}")
            kwargs[group] = tuple(values)
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: Path) -> KeywordRules:
        with open(path, "r", encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))


def load_keyword_rules(path: Optional[Path] = None) -> KeywordRules:
    """
    Load keyword rules from *path* (default ``KEYWORDS_PATH``).

    A missing file yields the built-in defaults. A present but malformed
    file raises.
    """
    path = Path(path) if path is not None else KEYWORDS_PATH
    if not path.exists():
        logger.debug("No keyword rules at %s, using defaults", path)
        return KeywordRules()
    rules = KeywordRules.from_file(path)
    logger.debug("Loaded keyword rules from %s", path)
    return rules


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------

def first_match(task: str, keywords: Iterable[str]) -> Optional[str]:
    """Return the first keyword that occurs in *task* (case-insensitive), or None."""
    task_lower = task.lower()
    for keyword in keywords:
        if keyword in task_lower:
            return keyword
    return None


def classify_task(task: str, rules: Optional[KeywordRules] = None) -> ExecutionTarget:
    """
    Decide whether *task* runs locally or remotely.

    Code keywords take priority over analysis keywords wherever they appear
    in the text. Anything matching neither group runs locally.
    """
    rules = rules or KeywordRules()

    keyword = first_match(task, rules.code)
    if keyword is not None:
        logger.debug("Code keyword %r matched -> local", keyword)
        return ExecutionTarget.LOCAL

    keyword = first_match(task, rules.analysis)
    if keyword is not None:
        logger.debug("Analysis keyword %r matched -> remote", keyword)
        return ExecutionTarget.REMOTE

    return ExecutionTarget.LOCAL


def requires_system_interaction(task: str, rules: Optional[KeywordRules] = None) -> bool:
    """True when *task* mentions anything that needs the Android device."""
    rules = rules or KeywordRules()
    keyword = first_match(task, rules.system)
    if keyword is not None:
        logger.debug("System keyword %r matched", keyword)
        return True
    return False


def extract_coordinates(task: str) -> Optional[Coordinates]:
    """
    Pull the first "<number> ... <number>" pair out of *task*.

    No semantic check is made: "from 2024 to 10" yields (2024, 10).
    """
    match = COORDINATE_PATTERN.search(task)
    if match is None:
        return None
    return Coordinates(x=int(match.group(1)), y=int(match.group(2)))
