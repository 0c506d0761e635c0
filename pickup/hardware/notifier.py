"""
Notification hardware abstraction for the Phone Pickup Counter.

This module wraps the host's notification facilities: delivering a
title/body notification, and the permission gate consulted before
monitoring starts.
"""

import asyncio
import shlex
import shutil
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional
import structlog
from .base import BaseHardware
from pickup.core.config import NotificationConfig

class NotificationError(RuntimeError):
    """Raised when a notification could not be delivered."""

class NotificationBackend(BaseHardware):
    """
    Base class for notification delivery implementations.
    """

    @abstractmethod
    async def deliver(self, title: str, body: str) -> None:
        """
        Deliver a notification immediately.

        Args:
            title: Notification title
            body: Notification body

        Raises:
            NotificationError: If the notification could not be delivered
        """
        pass

class LogNotificationBackend(NotificationBackend):
    """Delivers notifications as structured log lines."""

    def __init__(self, name: Optional[str] = None):
        super().__init__(None, name or "LogNotificationBackend")
        self.delivered: List[tuple] = []

    async def _initialize_impl(self) -> None:
        self.delivered.clear()

    async def _shutdown_impl(self) -> None:
        self.logger.debug("Notifications delivered", count=len(self.delivered))

    async def deliver(self, title: str, body: str) -> None:
        self.delivered.append((title, body))
        self.logger.info(title, body=body)

class CommandNotificationBackend(NotificationBackend):
    """
    Delivers notifications by running a desktop command such as notify-send.

    The title and body are appended as the last two arguments of the command.
    """

    def __init__(self, config: NotificationConfig, name: Optional[str] = None):
        super().__init__(config, name or "CommandNotificationBackend")
        self.command = shlex.split(config.command)
        if not self.command:
            raise ValueError("Notification command must not be empty")

    async def _initialize_impl(self) -> None:
        if shutil.which(self.command[0]) is None:
            raise NotificationError(f"Notification command not found: {self.command[0]}")

    async def _shutdown_impl(self) -> None:
        # Each delivery runs and reaps its own process
        pass

    async def deliver(self, title: str, body: str) -> None:
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command, title, body,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise NotificationError(f"Could not run {self.command[0]}: {e}") from e

        _, stderr = await process.communicate()
        if process.returncode != 0:
            message = stderr.decode(errors="replace").strip()
            raise NotificationError(
                f"{self.command[0]} exited with {process.returncode}: {message}"
            )

def create_notification_backend(config: NotificationConfig) -> NotificationBackend:
    """
    Build the notification backend selected by configuration.

    Args:
        config: Notification configuration

    Returns:
        The configured NotificationBackend
    """
    if config.backend == "command":
        return CommandNotificationBackend(config)
    return LogNotificationBackend()

class PermissionStatus(str, Enum):
    """Notification permission states."""
    GRANTED = "granted"
    DENIED = "denied"
    UNDETERMINED = "undetermined"

class PermissionGate(ABC):
    """
    Gate consulted once before monitoring starts.

    Subclasses report the current status and may prompt the user for it.
    """

    def __init__(self):
        self.logger = structlog.get_logger(hardware=self.__class__.__name__)

    @abstractmethod
    async def get_status(self) -> PermissionStatus:
        pass

    @abstractmethod
    async def request(self) -> PermissionStatus:
        pass

    async def ensure_granted(self) -> bool:
        """
        Check the permission and request it if it is not already granted.

        Returns:
            True if notifications are permitted
        """
        status = await self.get_status()
        if status != PermissionStatus.GRANTED:
            status = await self.request()

        if status != PermissionStatus.GRANTED:
            self.logger.warning("Notification permission not granted", status=status.value)
            return False
        return True

class StaticPermissionGate(PermissionGate):
    """Permission gate whose answer is fixed by configuration."""

    def __init__(self, granted: bool = True):
        super().__init__()
        self._status = PermissionStatus.UNDETERMINED
        self._granted = granted

    async def get_status(self) -> PermissionStatus:
        return self._status

    async def request(self) -> PermissionStatus:
        self._status = PermissionStatus.GRANTED if self._granted else PermissionStatus.DENIED
        return self._status
