from __future__ import annotations

from typing import Callable

import httpx
import pytest

from easybit.client import Client

BASE_URL = "https://api.easybit.test"
SECRET = "sk_live_abcdef"

ACCOUNT = {"level": 2, "volume": 15230.5, "fee": 0.004, "extraFee": 0.002, "totalFee": 0.006}

NETWORK = {
    "network": "BTC",
    "name": "Bitcoin",
    "isDefault": True,
    "sendStatus": True,
    "receiveStatus": True,
    "receiveDecimals": 8,
    "confirmationsMinimum": 1,
    "confirmationsMaximum": 2,
    "explorer": "https://blockchair.com/bitcoin",
    "explorerHash": "https://blockchair.com/bitcoin/transaction/{{txid}}",
    "explorerAddress": "https://blockchair.com/bitcoin/address/{{address}}",
    "hasTag": False,
    "tagName": None,
    "contractAddress": None,
    "explorerContract": None,
}

CURRENCY = {
    "currency": "BTC",
    "name": "Bitcoin",
    "sendStatusAll": True,
    "receiveStatusAll": True,
    "networkList": [NETWORK],
}

ORDER = {
    "id": "ord_7f3a",
    "send": "BTC",
    "receive": "ETH",
    "sendNetwork": "BTC",
    "receiveNetwork": "ETH",
    "sendAmount": "0.1",
    "receiveAmount": "1.52",
    "sendAddress": "bc1qxy2kgdygjrsqtzq2n0yrf2493p83kkfjhx0wlh",
    "sendTag": None,
    "receiveAddress": "0xeB2629a2734e272Bcc07BDA959863f316F4bD4Cf",
    "receiveTag": None,
    "refundAddress": None,
    "refundTag": None,
    "vpm": "off",
    "createdAt": 1700000000000,
}


@pytest.fixture
def wipes() -> list[bytes]:
    """Snapshot of the secret buffer taken by the wipe hook."""
    return []


@pytest.fixture
def make_client(wipes) -> Callable[..., Client]:
    def factory(handler, *, secret: str = SECRET) -> Client:
        return Client(
            BASE_URL,
            secret,
            transport=httpx.MockTransport(handler),
            on_wipe=lambda buf: wipes.append(bytes(buf)),
        )

    return factory


@pytest.fixture
def recorder():
    """Handler that records requests and replies with a canned JSON body."""

    class Recorder:
        def __init__(self) -> None:
            self.requests: list[httpx.Request] = []
            self.status = 200
            self.body: object = {"data": ACCOUNT}

        def __call__(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(self.status, json=self.body)

        @property
        def last(self) -> httpx.Request:
            return self.requests[-1]

    return Recorder()
