"""
easybit.io API client.

Fully asynchronous; every request goes through httpx and carries the API key
in the `API-KEY` header. The key lives in a SecureCredential owned by the
client and is zeroized when the client is closed:

    async with Client(url, api_key) as client:
        account = await client.get_account()
"""
import time
from typing import Any, List, Mapping, Optional

import httpx

from easybit.core.config import Settings, settings
from easybit.core.exceptions import ConfigurationError
from easybit.exception_handlers import network_error
from easybit.schemas.account import Account
from easybit.schemas.currency import Currency, ExchangeRate, Pair
from easybit.schemas.orders import Order, OrderNetwork, OrderStatus, OrderSummary, Transaction, User
from easybit.security.credential import CredentialState, SecureCredential
from easybit.security.secret_buffer import REDACTED, SecretInput
from easybit.services import account, currency, orders
from easybit.utils.logger import log_request, log_service

API_KEY_HEADER = "API-KEY"


def _easybit_http_client(
    base_url: str,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout,
        headers={"Content-Type": "application/json"},
        transport=transport,
    )


class Client:
    def __init__(
        self,
        url: str,
        api_key: SecretInput,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_wipe=None,
    ):
        self._credential = SecureCredential(url, api_key, on_wipe=on_wipe)
        self._timeout = settings.TIMEOUT if timeout is None else timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None, **kwargs) -> "Client":
        config = config or settings
        if config.API_KEY is None:
            raise ConfigurationError("EASYBIT_API_KEY is not set")
        kwargs.setdefault("timeout", config.TIMEOUT)
        return cls(config.URL, config.API_KEY, **kwargs)

    @property
    def url(self) -> str:
        return self._credential.base_url

    @property
    def credential(self) -> SecureCredential:
        return self._credential

    @property
    def closed(self) -> bool:
        return self._credential.state is not CredentialState.LIVE

    # -------------------------------------------------------------------
    #   LIFECYCLE
    # -------------------------------------------------------------------

    def close(self):
        """Release the credential; in-flight requests finish before the wipe."""
        self._credential.release()

    async def aclose(self):
        """Release the credential and wait for in-flight requests to drain."""
        await self._credential.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    def __repr__(self) -> str:
        return f"Client(url={self.url!r}, api_key={REDACTED}, state={self._credential.state.value})"

    __str__ = __repr__

    def __copy__(self):
        raise TypeError("Client owns its credential and cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("Client owns its credential and cannot be copied")

    def __reduce_ex__(self, protocol):
        raise TypeError("Client cannot be pickled")

    # -------------------------------------------------------------------
    #   TRANSPORT
    # -------------------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> httpx.Response:
        """Send one authenticated request; the key is borrowed for its duration."""
        with self._credential.borrow() as secret:
            start = time.perf_counter()
            async with _easybit_http_client(self.url, self._timeout, self._transport) as http:
                try:
                    response = await http.request(
                        method,
                        path,
                        params=params,
                        json=json,
                        headers={API_KEY_HEADER: bytes(secret)},
                    )
                except httpx.HTTPError as exc:
                    raise network_error(exc, "request") from exc

        log_request(
            method,
            path,
            func_name="request",
            status=response.status_code,
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        return response

    # -------------------------------------------------------------------
    #   ACCOUNT
    # -------------------------------------------------------------------

    @log_service
    async def get_account(self) -> Account:
        """
        Account information: level, monthly USDT volume, easybit fee,
        your extra fee and the total fee your users pay.
        """
        return await account.get_account(self)

    @log_service
    async def set_fee(self, fee: float) -> None:
        """
        Set the account's extra API fee. Allowed range is 0-0.1 with a
        maximum step of 0.0001; an extra fee of 0.4% is passed as 0.004.
        """
        await account.set_fee(self, fee)

    # -------------------------------------------------------------------
    #   CURRENCIES
    # -------------------------------------------------------------------

    @log_service
    async def get_currency_list(self) -> List[Currency]:
        return await currency.get_currency_list(self)

    @log_service
    async def get_single_currency(self, currency_code: str) -> Currency:
        return await currency.get_single_currency(self, currency_code)

    @log_service
    async def get_pair_list(self) -> List[str]:
        return await currency.get_pair_list(self)

    @log_service
    async def get_pair_info(
        self,
        send: str,
        receive: str,
        send_network: Optional[str] = None,
        receive_network: Optional[str] = None,
        amount_type: Optional[str] = None,
    ) -> Pair:
        """
        Limits and fees for a pair. Set `amount_type="receive"` when amounts
        refer to the currency being received.
        """
        return await currency.get_pair_info(self, send, receive, send_network, receive_network, amount_type)

    @log_service
    async def get_exchange_rate(
        self,
        send: str,
        receive: str,
        amount: float,
        send_network: Optional[str] = None,
        receive_network: Optional[str] = None,
        amount_type: Optional[str] = None,
        extra_fee_override: Optional[float] = None,
    ) -> ExchangeRate:
        """
        Quote for exchanging `amount`. `extra_fee_override` replaces the
        account extra fee for this quote only (discounts, promotions).
        """
        return await currency.get_exchange_rate(
            self,
            send,
            receive,
            amount,
            send_network,
            receive_network,
            amount_type,
            extra_fee_override,
        )

    @log_service
    async def validate_address(
        self,
        currency_code: str,
        address: str,
        network: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> None:
        """Raises ApiError when the address is not valid for the currency."""
        await currency.validate_address(self, currency_code, address, network, tag)

    # -------------------------------------------------------------------
    #   ORDERS
    # -------------------------------------------------------------------

    @log_service(service="orders")
    async def create_order(
        self,
        transaction: Transaction,
        user: User,
        network: Optional[OrderNetwork] = None,
    ) -> Order:
        return await orders.create_order(self, transaction, user, network)

    @log_service(service="orders")
    async def get_order_status(self, order_id: str) -> OrderStatus:
        return await orders.order_status(self, order_id)

    @log_service(service="orders")
    async def get_all_orders(
        self,
        id: Optional[str] = None,
        limit: Optional[int] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        sort_direction: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[OrderSummary]:
        return await orders.all_orders(self, id, limit, date_from, date_to, sort_direction, status)
