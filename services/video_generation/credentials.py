"""
Credential Gate - tracks whether a usable API key is selected.

The host environment (a hosted studio, a terminal, a test double) is
injected as a CredentialHost rather than looked up globally.
"""

import asyncio
import getpass
import logging
from abc import ABC, abstractmethod
from typing import Optional

from core.config import Config, get_config

from .errors import CredentialUnavailable
from .models import CredentialState

logger = logging.getLogger(__name__)


class CredentialHost(ABC):
    """Host capability for choosing an API key."""

    @abstractmethod
    async def has_credential(self) -> bool:
        """Return True if the user has a key selected."""

    @abstractmethod
    async def open_credential_picker(self) -> None:
        """Run the host's key-selection flow."""


class EnvCredentialHost(CredentialHost):
    """
    Credential host backed by the process configuration.

    The picker prompts for a key on the terminal and stores it in the
    config, which is what the backend and download code read from.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()

    async def has_credential(self) -> bool:
        return bool(self.config.api.google_api_key)

    async def open_credential_picker(self) -> None:
        key = await asyncio.to_thread(getpass.getpass, "API key: ")
        key = key.strip()
        if key:
            self.config.api.google_api_key = key
            logger.info("API key updated from picker")
        else:
            logger.warning("Credential picker closed without a key")


class CredentialGate:
    """
    Tri-state view of the selected credential.

    State starts UNKNOWN, becomes ABSENT/PRESENT on the first probe, is
    forced ABSENT when the backend rejects the key, and is set PRESENT
    optimistically after the picker returns.
    """

    def __init__(self, host: Optional[CredentialHost] = None):
        self.host = host
        self.state = CredentialState.UNKNOWN
        self.notice: Optional[str] = None

    @property
    def is_present(self) -> bool:
        return self.state == CredentialState.PRESENT

    async def probe(self) -> CredentialState:
        """Ask the host whether a key is selected. Fails closed to ABSENT."""
        if self.host is None:
            self.notice = CredentialUnavailable().message
            self.state = CredentialState.ABSENT
            logger.warning(self.notice)
            return self.state

        try:
            has_key = await self.host.has_credential()
        except Exception as e:
            self.notice = f"Could not check for a selected API key: {type(e).__name__}: {e}"
            logger.error(self.notice)
            has_key = False
        else:
            if has_key:
                self.notice = None

        self.state = CredentialState.PRESENT if has_key else CredentialState.ABSENT
        logger.info(f"Credential probe: {self.state.value}")
        return self.state

    async def request_selection(self):
        """
        Open the host picker, then assume a key was chosen.

        Not re-verified: checking again right after the dialog closes can
        race the host's own state update. A rejected key surfaces later as
        InvalidCredential and flips the gate back to ABSENT.
        """
        if self.host is None:
            self.notice = CredentialUnavailable().message
            logger.warning(self.notice)
            return

        try:
            await self.host.open_credential_picker()
        except Exception as e:
            self.notice = f"Credential picker failed: {type(e).__name__}: {e}"
            logger.error(self.notice)
            return

        self.notice = None
        self.state = CredentialState.PRESENT

    def invalidate(self):
        """Force ABSENT after the backend rejected the key."""
        self.state = CredentialState.ABSENT
        logger.warning("Credential invalidated by backend response")
