from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Union

from pydantic import SecretStr

from easybit.core.exceptions import AlreadyZeroizedError, ConfigurationError

REDACTED = "**********"

SecretInput = Union[str, bytes, bytearray, SecretStr]


class SecretBuffer:
    """
    Best-effort in-memory secret container.
    Uses mutable bytearray to allow explicit zeroization.

    The buffer is wiped exactly once; later wipes are no-ops and later
    reads raise AlreadyZeroizedError. `on_wipe` is called with the zeroed
    bytearray right after the wipe, before the reference is dropped.
    """

    def __init__(self, secret: SecretInput, on_wipe: Optional[Callable[[bytearray], None]] = None):
        self._on_wipe = on_wipe
        if isinstance(secret, SecretStr):
            secret = secret.get_secret_value()
        # Encode immediately; avoid keeping str around
        if isinstance(secret, str):
            try:
                self._buf = bytearray(secret.encode("utf-8"))
            except UnicodeEncodeError as exc:
                raise ConfigurationError("secret is not encodable as UTF-8") from exc
        elif isinstance(secret, (bytes, bytearray)):
            self._buf = bytearray(secret)
        else:
            raise ConfigurationError(f"secret must be str, bytes or SecretStr, not {type(secret).__name__}")

    def __len__(self) -> int:
        return 0 if self._buf is None else len(self._buf)

    @property
    def wiped(self) -> bool:
        return self._buf is None

    @contextmanager
    def view(self) -> Iterator[memoryview]:
        """Read-only view over the live bytes, released on exit."""
        if self._buf is None:
            raise AlreadyZeroizedError("secret buffer has been wiped")
        raw = memoryview(self._buf)
        readonly = raw.toreadonly()
        try:
            yield readonly
        finally:
            readonly.release()
            raw.release()

    def expose_secret(self) -> bytes:
        if self._buf is None:
            raise AlreadyZeroizedError("secret buffer has been wiped")
        return bytes(self._buf)

    def wipe(self) -> bool:
        """Zero the buffer. Returns False when it was already wiped."""
        if self._buf is None:
            return False
        buf = self._buf
        for i in range(len(buf)):
            buf[i] = 0
        self._buf = None
        if self._on_wipe is not None:
            self._on_wipe(buf)
        return True

    def __repr__(self) -> str:
        state = "wiped" if self._buf is None else REDACTED
        return f"SecretBuffer({state})"

    __str__ = __repr__

    def __copy__(self):
        raise TypeError("SecretBuffer cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("SecretBuffer cannot be copied")

    def __reduce_ex__(self, protocol):
        raise TypeError("SecretBuffer cannot be pickled")

    def __del__(self):
        # Garbage collection is the last exit path
        if getattr(self, "_buf", None) is not None:
            self.wipe()
