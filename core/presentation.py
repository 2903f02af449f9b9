"""
Presentation Layer Base Classes.

The presentation layer handles widget composition and the mutable view
regions those widgets are rendered into. It transforms domain objects
into ChatKit widgets for display.

Key principles:
- Widgets are stateless representations
- No business logic in widgets
- Regions are the only mutable part of the view
- User-facing notices go through a Notifier, never through print/logging
"""

from abc import ABC, abstractmethod
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union
from enum import Enum
import logging

from chatkit.widgets import Text, Button
from chatkit.actions import ActionConfig

logger = logging.getLogger(__name__)


class ButtonColor(Enum):
    """Standard button colors."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"
    INFO = "info"


@dataclass
class WidgetTheme:
    """
    Theme configuration for widgets.

    Provides consistent styling across all widgets in a use case.
    """
    # Colors for action buttons, keyed by action kind
    action_colors: Dict[str, str] = field(default_factory=lambda: {
        "delete": "danger",
        "book": "primary",
        "prescription": "secondary",
    })

    def get_action_color(self, kind: str) -> str:
        """Get the button color for an action kind."""
        return self.action_colors.get(kind, "primary")


# Default theme instance
DEFAULT_THEME = WidgetTheme()


@dataclass
class WidgetAction:
    """
    Represents an action that can be triggered from a widget.

    Encapsulates the action configuration for buttons and interactive elements.
    """
    action_type: str
    handler: str = "server"
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_action_config(self) -> ActionConfig:
        """Convert to ChatKit ActionConfig."""
        return ActionConfig(
            type=self.action_type,
            handler=self.handler,
            payload=self.payload,
        )


class WidgetComposer(ABC):
    """
    Abstract base class for widget composers.

    A WidgetComposer transforms domain data into ChatKit widgets.
    Each use case should have its own composer that knows how to
    present its specific data types.

    Example:
        class DoctorCardComposer(WidgetComposer):
            def compose_doctor_card(self, doctor, session):
                ...
    """

    def __init__(self, theme: Optional[WidgetTheme] = None):
        """
        Initialize the composer with a theme.

        Args:
            theme: Optional custom theme (uses DEFAULT_THEME if not provided)
        """
        self.theme = theme or DEFAULT_THEME

    def compose(self, name: str, *args, **kwargs) -> Any:
        """Build a widget by its registered builder name."""
        builders = self.get_widget_builders()
        if name not in builders:
            raise KeyError(f"Unknown widget builder: {name}")
        return builders[name](*args, **kwargs)

    def _create_button(
        self,
        label: str,
        action: WidgetAction,
        color: Union[str, ButtonColor] = ButtonColor.PRIMARY,
        button_id: str = "btn",
    ) -> Button:
        """
        Create a button with an action.

        Args:
            label: Button label text
            action: The WidgetAction to trigger
            color: Button color
            button_id: Widget ID of the button

        Returns:
            A Button widget
        """
        color_str = color.value if isinstance(color, ButtonColor) else color
        return Button(
            id=button_id,
            label=label,
            color=color_str,
            onClickAction=action.to_action_config(),
        )

    @abstractmethod
    def get_widget_builders(self) -> Dict[str, Callable]:
        """
        Return a dictionary of widget builder methods.

        Returns:
            Dict mapping widget names to builder methods
        """
        pass


# =============================================================================
# VIEW REGIONS
# =============================================================================

class ViewRegion:
    """
    An ordered, mutable container of rendered widget nodes.

    Stands in for a DOM container (the directory content area, a table
    body). Controllers replace its contents wholesale on reload and remove
    single nodes for optimistic updates.
    """

    def __init__(self, name: str):
        self.name = name
        self._nodes: List[Any] = []

    @property
    def nodes(self) -> List[Any]:
        """Snapshot of the rendered nodes, in display order."""
        return list(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def replace(self, nodes: List[Any]):
        """Discard the current nodes and render the given ones."""
        self._nodes = list(nodes)

    def clear(self):
        self._nodes = []

    def find(self, node_id: str) -> Optional[Any]:
        for node in self._nodes:
            if getattr(node, "id", None) == node_id:
                return node
        return None

    def remove(self, node_id: str) -> bool:
        """Remove the node with the given widget ID. Returns False if absent."""
        for index, node in enumerate(self._nodes):
            if getattr(node, "id", None) == node_id:
                del self._nodes[index]
                return True
        return False

    def to_json(self) -> List[Dict[str, Any]]:
        """Serialize the nodes for a front end."""
        return [node.model_dump(mode="json", exclude_none=True) for node in self._nodes]


# =============================================================================
# USER NOTICES
# =============================================================================

class NoticeLevel(Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notice:
    """A blocking message shown to the user."""
    message: str
    level: NoticeLevel = NoticeLevel.INFO

    def to_dict(self) -> Dict[str, str]:
        return {"message": self.message, "level": self.level.value}


class Notifier(ABC):
    """
    Surface for blocking user notifications and confirmations.

    Implementations decide how a notice reaches the user (a dialog, a
    JSON response field, a test buffer).
    """

    @abstractmethod
    def alert(self, message: str, level: NoticeLevel = NoticeLevel.INFO):
        """Show a blocking notice."""
        pass

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """Ask the user a yes/no question."""
        pass


class NoticeBuffer(Notifier):
    """
    Notifier that collects notices for later delivery.

    Confirmation answers are supplied up front, which suits request/response
    hosts where the front end has already asked the user.
    """

    def __init__(self, confirm_answer: bool = True):
        self.notices: List[Notice] = []
        self.confirmations: List[str] = []
        self.confirm_answer = confirm_answer

    def alert(self, message: str, level: NoticeLevel = NoticeLevel.INFO):
        logger.debug(f"Notice [{level.value}]: {message}")
        self.notices.append(Notice(message=message, level=level))

    def confirm(self, message: str) -> bool:
        self.confirmations.append(message)
        return self.confirm_answer

    @property
    def messages(self) -> List[str]:
        return [notice.message for notice in self.notices]

    def drain(self) -> List[Notice]:
        """Return and forget the collected notices."""
        notices, self.notices = self.notices, []
        self.confirmations = []
        return notices


class RequestNotices(Notifier):
    """
    Notifier that routes to a NoticeBuffer scoped to the current request.

    The buffer lives in a context variable, so each asyncio task serving a
    host request collects its own notices and confirmation answer even when
    requests interleave on one shared portal.

    Example:
        notices = RequestNotices()
        notices.begin(confirm_answer=False)
        ... controllers alert through ``notices`` ...
        response["notices"] = [n.to_dict() for n in notices.drain()]
    """

    def __init__(self, name: str = "request_notices"):
        self._buffer: ContextVar[Optional[NoticeBuffer]] = ContextVar(name, default=None)

    def begin(self, confirm_answer: bool = True) -> NoticeBuffer:
        """Start a fresh buffer for the current request."""
        buffer = NoticeBuffer(confirm_answer=confirm_answer)
        self._buffer.set(buffer)
        return buffer

    @property
    def current(self) -> NoticeBuffer:
        buffer = self._buffer.get()
        if buffer is None:
            buffer = self.begin()
        return buffer

    def alert(self, message: str, level: NoticeLevel = NoticeLevel.INFO):
        self.current.alert(message, level)

    def confirm(self, message: str) -> bool:
        return self.current.confirm(message)

    @property
    def messages(self) -> List[str]:
        return self.current.messages

    def drain(self) -> List[Notice]:
        return self.current.drain()


class TextFormatter:
    """
    Utility class for formatting text in widgets.

    Provides consistent formatting for common data types.
    """

    @staticmethod
    def join(values: List[str], separator: str = ", ") -> str:
        """Join a list of values for display."""
        return separator.join(str(v) for v in values)

    @staticmethod
    def or_default(value: Optional[Any], default: str = "") -> str:
        """Render None as a default string."""
        return default if value is None else str(value)


def message_text(node_id: str, message: str) -> Text:
    """A plain text node used for placeholders and inline messages."""
    return Text(id=node_id, value=message)
