"""
Orchestration Layer Base Classes.

The orchestration layer wires together all components:
- API clients for data access
- Widget composers for presentation
- Session reading for auth state

This module provides the primitives controllers use to keep async
reloads ordered and to route widget actions back to Python code.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class RequestSequencer:
    """
    Hands out monotonically increasing tickets for async requests.

    Every reload takes a ticket before awaiting the network. When the
    response arrives, the reload only renders if its ticket is still the
    latest one issued; a slower, earlier request can therefore never
    overwrite the result of a newer one.

    Example:
        ticket = self._sequencer.next()
        doctors = await self.api_client.get_doctors()
        if not self._sequencer.is_current(ticket):
            return
        self._render(doctors)
    """

    def __init__(self, name: str = "requests"):
        self.name = name
        self._latest = 0

    def next(self) -> int:
        """Issue a new ticket, superseding every earlier one."""
        self._latest += 1
        return self._latest

    def is_current(self, ticket: int) -> bool:
        """True if no newer ticket has been issued since this one."""
        return ticket == self._latest

    @property
    def latest(self) -> int:
        return self._latest


class Debouncer:
    """
    Optional trailing-edge debounce for rapid input events.

    With a delay of 0 every call passes straight through.
    """

    def __init__(self, delay_seconds: float = 0.0):
        self.delay_seconds = delay_seconds
        self._sequencer = RequestSequencer("debounce")

    async def settle(self) -> bool:
        """
        Wait out the debounce window.

        Returns:
            True if this call is still the most recent one and should proceed
        """
        if self.delay_seconds <= 0:
            return True
        ticket = self._sequencer.next()
        await asyncio.sleep(self.delay_seconds)
        return self._sequencer.is_current(ticket)


@dataclass
class ActionDefinition:
    """
    A widget action bound to a coroutine.

    Wraps the handler with the metadata needed to route it.
    """
    action_type: str
    target_id: str
    handler: Callable[[], Awaitable[Any]]


class ActionRegistry:
    """
    Registry routing widget actions back to their bound handlers.

    Widgets only carry an action type and a payload; the registry maps the
    (type, target) pair back to the coroutine bound at render time.
    """

    def __init__(self, target_key: str):
        """
        Args:
            target_key: Payload key that identifies the action's target
        """
        self.target_key = target_key
        self._actions: Dict[tuple, ActionDefinition] = {}

    def register(self, action_type: str, target_id: str, handler: Callable[[], Awaitable[Any]]):
        """Register a handler for an action on a target."""
        self._actions[(action_type, str(target_id))] = ActionDefinition(
            action_type=action_type,
            target_id=str(target_id),
            handler=handler,
        )

    def unregister_target(self, target_id: str):
        """Drop every action bound to a target."""
        target_id = str(target_id)
        for key in [k for k in self._actions if k[1] == target_id]:
            del self._actions[key]

    def clear(self):
        self._actions.clear()

    def get(self, action_type: str, payload: Dict[str, Any]) -> Optional[ActionDefinition]:
        target_id = payload.get(self.target_key)
        if target_id is None:
            return None
        return self._actions.get((action_type, str(target_id)))

    async def dispatch(self, action_type: str, payload: Dict[str, Any]) -> bool:
        """
        Run the handler bound to an action.

        Returns:
            False if no handler is bound (e.g. the target was removed)
        """
        action = self.get(action_type, payload)
        if action is None:
            logger.info(f"No handler for action {action_type} with payload {payload}")
            return False
        await action.handler()
        return True

    def get_action_types(self) -> List[str]:
        """Get all registered action types."""
        return sorted({k[0] for k in self._actions})
