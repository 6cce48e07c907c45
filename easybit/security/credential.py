"""
Credential holder owning the base URL and the API secret.

Lifecycle:
    LIVE      secret resident, borrows allowed
    DRAINING  release requested while borrows are in flight; running
              borrows keep reading intact bytes, new borrows are refused
    ZEROIZED  terminal, buffer overwritten with zeros exactly once

The wipe never runs while a borrow is active, so no reader can observe a
partially zeroed secret.
"""
import asyncio
import enum
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

import httpx

from easybit.core.exceptions import (
    AlreadyZeroizedError,
    ConfigurationError,
    CredentialReleasedError,
)
from easybit.security.secret_buffer import REDACTED, SecretBuffer, SecretInput
from easybit.utils.logger import log_debug, log_warning


class CredentialState(str, enum.Enum):
    LIVE = "live"
    DRAINING = "draining"
    ZEROIZED = "zeroized"


def _validate_base_url(base_url: str) -> str:
    if not isinstance(base_url, str) or not base_url.strip():
        raise ConfigurationError("base URL must be a non-empty string")
    try:
        url = httpx.URL(base_url.strip())
    except httpx.InvalidURL as exc:
        raise ConfigurationError(f"malformed base URL: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError("base URL must be an absolute http(s) URL")
    return str(url).rstrip("/")


class SecureCredential:
    def __init__(
        self,
        base_url: str,
        secret: SecretInput,
        *,
        on_wipe: Optional[Callable[[bytearray], None]] = None,
    ):
        self._base_url = _validate_base_url(base_url)
        if secret is None:
            raise ConfigurationError("API secret must not be empty")

        self._secret = SecretBuffer(secret, on_wipe=on_wipe)
        if not len(self._secret):
            self._secret.wipe()
            raise ConfigurationError("API secret must not be empty")
        self._state = CredentialState.LIVE
        self._borrows = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def state(self) -> CredentialState:
        return self._state

    @property
    def active_borrows(self) -> int:
        return self._borrows

    def _ensure_borrowable(self):
        if self._state is CredentialState.ZEROIZED:
            raise AlreadyZeroizedError("credential already zeroized")
        if self._state is CredentialState.DRAINING:
            raise CredentialReleasedError("credential released")

    @contextmanager
    def borrow(self) -> Iterator[memoryview]:
        """
        Lend the secret for the lifetime of one authenticated request.

        Yields a read-only memoryview that is released when the block
        exits. Exiting the last borrow of a released credential runs the
        deferred wipe, whatever the exit path (return, error, cancellation).
        """
        self._ensure_borrowable()
        self._borrows += 1
        self._idle.clear()
        try:
            with self._secret.view() as secret:
                yield secret
        finally:
            self._borrows -= 1
            if self._borrows == 0:
                self._idle.set()
                if self._state is CredentialState.DRAINING:
                    self._zeroize()

    def expose_secret(self) -> bytes:
        """
        Escape hatch returning an owned copy of the secret.
        The copy is immutable and can not be wiped; prefer borrow().
        """
        self._ensure_borrowable()
        log_warning("owned copy of the API secret handed out", "expose_secret", service="credential")
        return self._secret.expose_secret()

    def _zeroize(self):
        # The buffer is zero before on_wipe runs, so the state follows even if the hook fails
        try:
            if self._secret.wipe():
                log_debug("secret buffer zeroized", "release", service="credential")
        finally:
            self._state = CredentialState.ZEROIZED

    def release(self):
        """
        End of ownership. Wipes now when idle, otherwise marks the credential
        DRAINING and lets the last in-flight borrow run the wipe.
        """
        if self._state is CredentialState.ZEROIZED:
            return
        if self._borrows:
            log_debug(f"release deferred until {self._borrows} borrow(s) finish", "release", service="credential")
            self._state = CredentialState.DRAINING
            return
        self._zeroize()

    async def aclose(self):
        """Release and wait until in-flight borrows drain and the wipe has run."""
        self.release()
        await self._idle.wait()

    def __repr__(self) -> str:
        return f"SecureCredential(base_url={self._base_url!r}, secret={REDACTED}, state={self._state.value})"

    __str__ = __repr__

    def __copy__(self):
        raise TypeError("SecureCredential cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("SecureCredential cannot be copied")

    def __reduce_ex__(self, protocol):
        raise TypeError("SecureCredential cannot be pickled")


@contextmanager
def credential_scope(
    base_url: str,
    secret: SecretInput,
    *,
    on_wipe: Optional[Callable[[bytearray], None]] = None,
) -> Iterator[SecureCredential]:
    """Scoped credential; released on every exit path of the block."""
    credential = SecureCredential(base_url, secret, on_wipe=on_wipe)
    try:
        yield credential
    finally:
        credential.release()
