"""Command router — dispatches operator commands to handlers.

Handlers are async callables that receive the parsed command and the
sender UID. They return a response dict for the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Awaitable, Optional

from matchrecorder.network.commands import OperatorCommand, parse_command

log = logging.getLogger(__name__)

# Handler signature: async (command, sender_uid) -> optional response dict
Handler = Callable[[OperatorCommand, int], Awaitable[Optional[dict[str, Any]]]]


class Router:
    """Command dispatcher.

    Register handlers for command types, then call route() with raw dicts.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, cmd_type: str, handler: Handler) -> None:
        """Register a handler for a command type.

        Args:
            cmd_type: The command type string (e.g. ``"start_recording"``).
            handler: Async callable ``(command, sender_uid) -> dict | None``.
        """
        self._handlers[cmd_type] = handler
        log.debug("Handler registered: %s", cmd_type)

    @property
    def registered_types(self) -> list[str]:
        """List of all command types that have a handler."""
        return list(self._handlers.keys())

    async def route(self, raw: dict[str, Any], sender_uid: int) -> Optional[dict[str, Any]]:
        """Parse and dispatch a raw command dict.

        Returns:
            Response dict from the handler, or None if there is no
            handler for the command type.

        Raises:
            pydantic.ValidationError: If the command fields are invalid.
        """
        command = parse_command(raw)
        handler = self._handlers.get(command.type)
        if handler is None:
            log.debug("No handler for command type: %s", command.type)
            return None
        log.info("Command %s from uid %d", command.type, sender_uid)
        return await handler(command, sender_uid)
