"""
UI hooks: the few things the messaging views ask of whatever front end drives them.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class ViewHooks:
    """Default hooks: log alerts, refuse confirmations, remember the last navigation.

    Front ends subclass this (see `gigline.cli.hooks.ConsoleHooks`).
    """

    def __init__(self) -> None:
        self.location: Optional[str] = None

    def navigate(self, conversation_id: str) -> None:
        self.location = conversation_id
        logger.debug("navigate -> %s", conversation_id)

    def alert(self, message: str) -> None:
        logger.warning("alert: %s", message)

    def confirm(self, message: str) -> bool:
        return False
