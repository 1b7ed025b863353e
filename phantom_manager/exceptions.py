# phantom_manager/exceptions.py
# -*- coding: utf-8 -*-
"""
Exceptions raised by the Phantom Tunnel manager operations.

Each operation catches these at its top level, logs them and returns to the
menu, so none of them ends the process.
"""

from typing import Optional


class PhantomManagerError(Exception):
    """Base exception for manager errors."""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        super().__init__(message)


class UnsupportedArchitectureError(PhantomManagerError):
    """The host CPU architecture has no matching release asset."""

    def __init__(self, architecture: str):
        self.architecture = architecture
        super().__init__(f"Unsupported architecture: {architecture}.")


class DependencyError(PhantomManagerError):
    """Required command-line tools could not be installed or found."""


class ReleaseLookupError(PhantomManagerError):
    """The latest release tag could not be determined."""


class DownloadError(PhantomManagerError):
    """The release asset could not be downloaded."""


class InvalidPortError(PhantomManagerError):
    """The first-run panel port is not a number."""

    def __init__(self, value: str):
        self.value = value
        super().__init__("Invalid port number. Installation aborted.")


class ServiceCommandError(PhantomManagerError):
    """A systemctl command that changes service state failed."""


class NotInstalledError(PhantomManagerError):
    """The operation needs an installed executable and there is none."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "Phantom Tunnel is not installed. Please install it first."
        )


class FirstRunSetupError(PhantomManagerError):
    """The managed binary's one-time setup command failed."""
