from __future__ import annotations

import asyncio
import copy

import pytest
from pydantic import SecretStr

from easybit.core.exceptions import (
    AlreadyZeroizedError,
    ConfigurationError,
    CredentialReleasedError,
)
from easybit.security.credential import CredentialState, SecureCredential, credential_scope

URL = "https://api.easybit.test"


@pytest.fixture
def wipes() -> list[bytes]:
    return []


@pytest.fixture
def credential(wipes) -> SecureCredential:
    return SecureCredential(URL, "sk_live_abcdef", on_wipe=lambda buf: wipes.append(bytes(buf)))


@pytest.mark.parametrize("secret", ["", b"", bytearray(), SecretStr(""), None])
def test_empty_secret_is_rejected(secret) -> None:
    with pytest.raises(ConfigurationError):
        SecureCredential(URL, secret)


@pytest.mark.parametrize("url", ["", "   ", "not a url", "ftp://api.easybit.com", "https://", "/account"])
def test_malformed_url_is_rejected(url: str) -> None:
    with pytest.raises(ConfigurationError):
        SecureCredential(url, "sk_live_abcdef")


def test_base_url_trailing_slash_is_dropped() -> None:
    assert SecureCredential("https://api.easybit.com/", "k").base_url == "https://api.easybit.com"


def test_borrow_yields_secret_while_live(credential) -> None:
    with credential.borrow() as secret:
        assert bytes(secret) == b"sk_live_abcdef"
        assert credential.active_borrows == 1
    assert credential.active_borrows == 0
    assert credential.state is CredentialState.LIVE


def test_release_zeroizes_once(credential, wipes) -> None:
    credential.release()
    credential.release()

    assert credential.state is CredentialState.ZEROIZED
    assert wipes == [b"\x00" * 14]


def test_use_after_release_fails_loudly(credential) -> None:
    credential.release()

    with pytest.raises(AlreadyZeroizedError):
        with credential.borrow():
            pass
    with pytest.raises(AlreadyZeroizedError):
        credential.expose_secret()


def test_release_during_borrow_is_deferred(credential, wipes) -> None:
    with credential.borrow() as secret:
        credential.release()

        assert credential.state is CredentialState.DRAINING
        assert bytes(secret) == b"sk_live_abcdef"
        assert wipes == []

        with pytest.raises(CredentialReleasedError) as excinfo:
            with credential.borrow():
                pass
        assert type(excinfo.value) is CredentialReleasedError

    assert credential.state is CredentialState.ZEROIZED
    assert wipes == [b"\x00" * 14]


def test_error_inside_scope_still_wipes(wipes) -> None:
    with pytest.raises(RuntimeError):
        with credential_scope(URL, "sk_live_abcdef", on_wipe=lambda buf: wipes.append(bytes(buf))) as cred:
            with cred.borrow():
                raise RuntimeError("collaborator failed")

    assert cred.state is CredentialState.ZEROIZED
    assert wipes == [b"\x00" * 14]


def test_repr_never_contains_secret(credential) -> None:
    for text in (repr(credential), str(credential)):
        assert "sk_live_abcdef" not in text
        assert URL in text


def test_credential_cannot_be_copied(credential) -> None:
    with pytest.raises(TypeError):
        copy.copy(credential)
    with pytest.raises(TypeError):
        copy.deepcopy(credential)


def test_expose_secret_logs_warning(credential, caplog) -> None:
    with caplog.at_level("WARNING", logger="easybit"):
        assert credential.expose_secret() == b"sk_live_abcdef"

    assert "owned copy" in caplog.text
    assert "sk_live_abcdef" not in caplog.text


@pytest.mark.asyncio
async def test_aclose_drains_in_flight_borrows(credential, wipes) -> None:
    entered = asyncio.Event()
    proceed = asyncio.Event()
    observed: list[bytes] = []

    async def in_flight() -> None:
        with credential.borrow() as secret:
            entered.set()
            await proceed.wait()
            observed.append(bytes(secret))

    task = asyncio.create_task(in_flight())
    await entered.wait()

    closing = asyncio.create_task(credential.aclose())
    await asyncio.sleep(0)
    assert not closing.done()
    assert wipes == []

    proceed.set()
    await task
    await closing

    assert observed == [b"sk_live_abcdef"]
    assert credential.state is CredentialState.ZEROIZED
    assert wipes == [b"\x00" * 14]


@pytest.mark.asyncio
async def test_cancelled_borrow_does_not_wipe(credential, wipes) -> None:
    entered = asyncio.Event()

    async def in_flight() -> None:
        with credential.borrow():
            entered.set()
            await asyncio.Event().wait()

    task = asyncio.create_task(in_flight())
    await entered.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert credential.state is CredentialState.LIVE
    assert credential.active_borrows == 0
    assert wipes == []

    await credential.aclose()
    assert wipes == [b"\x00" * 14]


@pytest.mark.parametrize("secret", [12345, "\ud800"])
def test_unusable_secret_is_configuration_error(secret) -> None:
    with pytest.raises(ConfigurationError):
        SecureCredential(URL, secret)


def test_failing_wipe_hook_still_ends_zeroized() -> None:
    def hook(buf: bytearray) -> None:
        raise RuntimeError("hook failed")

    credential = SecureCredential(URL, "sk_live_abcdef", on_wipe=hook)
    with pytest.raises(RuntimeError):
        credential.release()

    assert credential.state is CredentialState.ZEROIZED
    with pytest.raises(AlreadyZeroizedError):
        with credential.borrow():
            pass
    credential.release()
