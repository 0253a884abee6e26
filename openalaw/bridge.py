"""
Android Core Bridge — OpenALaw device interface

Stub layer between the agent and Android system services. Exposes the
operations an accessibility-service backed agent needs (screen capture,
touch and gesture simulation, key and text input, UI hierarchy queries)
grouped into three interfaces:

    display        capture_screen, get_screen_info, simulate_touch, simulate_gesture
    input          send_key_event, send_text, swipe, tap, press_and_hold
    accessibility  get_current_focus, traverse_ui, find_element, perform_action

Nothing here touches a device. Each operation logs the request and returns
a fixed-shape record echoing its arguments, with payload fields (image
data, UI tree, element list) left empty. Every operation except
``get_status`` raises ``UninitializedError`` until ``initialize()`` ran.

Usage:
    from openalaw.bridge import AndroidCoreBridge

    bridge = AndroidCoreBridge()
    await bridge.initialize()
    await bridge.tap(540, 960)
    capture = await bridge.capture_screen()
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from openalaw.lifecycle import Lifecycle, LifecycleState

logger = logging.getLogger("openalaw.bridge")

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(name)s.%(levelname)s: %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(_handler)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ARCHITECTURE = "ARM"
PLATFORM = "Android"

PERMISSION_NAMES = ("accessibility", "overlay", "usage_stats", "input_method")

DEFAULT_GESTURE_DURATION_MS = 100
SWIPE_DURATION_MS = 200
DEFAULT_HOLD_DURATION_MS = 1000


def _now_iso() -> str:
    """Return current UTC time in ISO 8601 format."""
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Result records
# ---------------------------------------------------------------------------

class _Record:
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ScreenCapture(_Record):
    """Result of a screen capture. ``image_data`` stays empty in the stub."""
    success: bool = True
    image_data: Optional[bytes] = None
    timestamp_ms: int = field(default_factory=lambda: int(time.time() * 1000))
    dimensions: Dict[str, int] = field(default_factory=lambda: {"width": 0, "height": 0})


@dataclass
class ScreenInfo(_Record):
    width: int = 0
    height: int = 0
    density: int = 0
    orientation: str = "portrait"


@dataclass
class TouchResult(_Record):
    """A touch at a single point: tap, press-and-hold, etc."""
    success: bool
    action: str
    coordinates: Dict[str, int]
    duration: Optional[int] = None


@dataclass
class GestureResult(_Record):
    success: bool
    start: Dict[str, int]
    end: Dict[str, int]
    duration: int
    gesture: str = "swipe"


@dataclass
class KeyEventResult(_Record):
    success: bool
    key_code: Union[int, str]
    action: str


@dataclass
class TextInputResult(_Record):
    success: bool
    text: str
    length: int


@dataclass
class FocusResult(_Record):
    success: bool = True
    element: Optional[Dict[str, Any]] = None
    package_name: Optional[str] = None


@dataclass
class UITraversal(_Record):
    success: bool = True
    hierarchy: Optional[Dict[str, Any]] = None


@dataclass
class ElementSearch(_Record):
    success: bool = True
    elements: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class ElementActionResult(_Record):
    success: bool
    element_id: Union[int, str]
    action: str


@dataclass
class SystemTaskResult(_Record):
    """Returned when a system task matches no supported device operation."""
    success: bool = False
    reason: str = "System task not implemented yet"


class AccessibilityEventType(str, Enum):
    """Accessibility events the bridge distinguishes."""
    VIEW_CLICKED = "view_clicked"
    VIEW_FOCUSED = "view_focused"
    WINDOW_CONTENT_CHANGED = "window_content_changed"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Capability interface
# ---------------------------------------------------------------------------

class DeviceBridge(Protocol):
    """Operation surface the orchestrator needs from a device bridge."""

    @property
    def initialized(self) -> bool: ...

    @property
    def state(self) -> LifecycleState: ...

    async def initialize(self) -> bool: ...

    async def capture_screen(self, options: Optional[Dict[str, Any]] = None) -> ScreenCapture: ...

    async def tap(self, x: int, y: int) -> TouchResult: ...

    def get_status(self) -> Dict[str, Any]: ...


# ===================================================================
# AndroidCoreBridge
# ===================================================================

class AndroidCoreBridge(Lifecycle):
    """
    Stub bridge to Android display, input and accessibility services.

    ``initialize()`` checks permissions (all reported as not granted) and
    builds the interface registry. The registry maps interface name to a
    mapping of operation name -> bound method and is not modified later.
    """

    component_name = "AndroidCoreBridge"

    def __init__(self) -> None:
        super().__init__()
        self.permissions: Dict[str, bool] = {}
        self.system_interfaces: Dict[str, Dict[str, Callable[..., Any]]] = {}
        logger.info("AndroidCoreBridge created for %s architecture", ARCHITECTURE)

    # ----- Initialization -----

    async def initialize(self) -> bool:
        """Check permissions and set up the display, input and accessibility interfaces."""
        if self.initialized:
            return True

        logger.info("Initializing AndroidCoreBridge...")
        self._begin_initialization()

        await self.check_permissions()
        self._init_display_interface()
        self._init_input_interface()
        self._init_accessibility_interface()

        self._finish_initialization()
        logger.info("AndroidCoreBridge initialized successfully")
        return True

    async def check_permissions(self) -> Dict[str, bool]:
        """
        Record which Android permissions the agent holds.

        A device-backed bridge would query the accessibility service, overlay,
        usage stats and input method settings. The stub reports none granted.
        """
        logger.info("Checking Android permissions...")
        self.permissions = {name: False for name in PERMISSION_NAMES}
        logger.info("Permission check completed")
        return self.permissions

    def _init_display_interface(self) -> None:
        self.system_interfaces["display"] = {
            "capture_screen": self.capture_screen,
            "get_screen_info": self.get_screen_info,
            "simulate_touch": self.simulate_touch,
            "simulate_gesture": self.simulate_gesture,
        }
        logger.debug("Display interface initialized")

    def _init_input_interface(self) -> None:
        self.system_interfaces["input"] = {
            "send_key_event": self.send_key_event,
            "send_text": self.send_text,
            "swipe": self.swipe,
            "tap": self.tap,
            "press_and_hold": self.press_and_hold,
        }
        logger.debug("Input interface initialized")

    def _init_accessibility_interface(self) -> None:
        self.system_interfaces["accessibility"] = {
            "get_current_focus": self.get_current_focus,
            "traverse_ui": self.traverse_ui,
            "find_element": self.find_element,
            "perform_action": self.perform_action,
        }
        logger.debug("Accessibility interface initialized")

    # ----- Display -----

    async def capture_screen(self, options: Optional[Dict[str, Any]] = None) -> ScreenCapture:
        """Capture the screen. Returns an empty capture."""
        self._require_initialized("capture_screen")
        logger.info("Capturing screen... %s", options or {})
        return ScreenCapture(success=True)

    def get_screen_info(self) -> ScreenInfo:
        self._require_initialized("get_screen_info")
        logger.info("Getting screen info...")
        return ScreenInfo()

    async def simulate_touch(self, x: int, y: int, action: str = "tap") -> TouchResult:
        self._require_initialized("simulate_touch")
        logger.info("Simulating touch: %s at (%s, %s)", action, x, y)
        return TouchResult(success=True, action=action, coordinates={"x": x, "y": y})

    async def simulate_gesture(
        self,
        start_x: int,
        start_y: int,
        end_x: int,
        end_y: int,
        duration: int = DEFAULT_GESTURE_DURATION_MS,
    ) -> GestureResult:
        """Simulate a swipe-style gesture from start to end over *duration* ms."""
        self._require_initialized("simulate_gesture")
        logger.info(
            "Simulating gesture from (%s,%s) to (%s,%s) over %sms",
            start_x, start_y, end_x, end_y, duration,
        )
        return GestureResult(
            success=True,
            start={"x": start_x, "y": start_y},
            end={"x": end_x, "y": end_y},
            duration=duration,
        )

    # ----- Input -----

    async def send_key_event(self, key_code: Union[int, str], action: str = "press") -> KeyEventResult:
        self._require_initialized("send_key_event")
        logger.info("Sending key event: %s, action: %s", key_code, action)
        return KeyEventResult(success=True, key_code=key_code, action=action)

    async def send_text(self, text: str) -> TextInputResult:
        self._require_initialized("send_text")
        logger.info("Sending text: %s", text)
        return TextInputResult(success=True, text=text, length=len(text))

    async def swipe(self, start_x: int, start_y: int, end_x: int, end_y: int, steps: int = 10) -> GestureResult:
        """Swipe between two points. *steps* is accepted but unused; duration is fixed."""
        return await self.simulate_gesture(start_x, start_y, end_x, end_y, SWIPE_DURATION_MS)

    async def tap(self, x: int, y: int) -> TouchResult:
        return await self.simulate_touch(x, y, "tap")

    async def press_and_hold(self, x: int, y: int, duration: int = DEFAULT_HOLD_DURATION_MS) -> TouchResult:
        self._require_initialized("press_and_hold")
        logger.info("Pressing and holding at (%s, %s) for %sms", x, y, duration)
        return TouchResult(
            success=True,
            action="pressAndHold",
            coordinates={"x": x, "y": y},
            duration=duration,
        )

    # ----- Accessibility -----

    async def get_current_focus(self) -> FocusResult:
        self._require_initialized("get_current_focus")
        logger.info("Getting current focus...")
        return FocusResult()

    async def traverse_ui(self) -> UITraversal:
        self._require_initialized("traverse_ui")
        logger.info("Traversing UI hierarchy...")
        return UITraversal()

    async def find_element(self, criteria: Dict[str, Any]) -> ElementSearch:
        """
        Find elements matching *criteria* (e.g. ``{"text": "OK"}`` or
        ``{"resource_id": "com.app:id/send"}``). Always returns no elements.
        """
        self._require_initialized("find_element")
        logger.info("Finding element: %s", criteria)
        return ElementSearch()

    async def perform_action(self, element_id: Union[int, str], action: str) -> ElementActionResult:
        self._require_initialized("perform_action")
        logger.info("Performing action '%s' on element %s", action, element_id)
        return ElementActionResult(success=True, element_id=element_id, action=action)

    def handle_accessibility_event(
        self,
        event_type: Union[AccessibilityEventType, str],
        text: Optional[str] = None,
    ) -> AccessibilityEventType:
        """Log an incoming accessibility event and return its classified type."""
        self._require_initialized("handle_accessibility_event")
        try:
            kind = AccessibilityEventType(event_type)
        except ValueError:
            kind = AccessibilityEventType.OTHER

        if kind is AccessibilityEventType.VIEW_CLICKED:
            logger.debug("View clicked: %s", text)
        elif kind is AccessibilityEventType.VIEW_FOCUSED:
            logger.debug("View focused: %s", text)
        elif kind is AccessibilityEventType.WINDOW_CONTENT_CHANGED:
            logger.debug("Window content changed")
        else:
            logger.debug("Other event: %s", event_type)
        return kind

    # ----- Status -----

    def get_status(self) -> Dict[str, Any]:
        return {
            "initialized": self.initialized,
            "permissions": dict(self.permissions),
            "interfaces": list(self.system_interfaces.keys()),
            "architecture": ARCHITECTURE,
            "platform": PLATFORM,
            "timestamp": _now_iso(),
        }
