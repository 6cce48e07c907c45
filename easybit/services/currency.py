from typing import TYPE_CHECKING, List, Optional

from easybit.core.exceptions import ApiError
from easybit.exception_handlers import expect_ok, unwrap_data
from easybit.schemas.currency import Currency, ExchangeRate, Pair
from easybit.utils.logger import log_service_error

if TYPE_CHECKING:
    from easybit.client import Client


async def get_currency_list(client: "Client") -> List[Currency]:
    response = await client.request("GET", "/currencyList")
    return unwrap_data(response, List[Currency], "get_currency_list")


async def get_single_currency(client: "Client", currency: str) -> Currency:
    response = await client.request("GET", "/currencyList", params={"currency": currency})
    currencies = unwrap_data(response, List[Currency], "get_single_currency")

    if not currencies:
        log_service_error(f"currency {currency} not found", "get_single_currency")
        raise ApiError(404, "Currency not found", status_code=response.status_code)
    return currencies[0]


async def get_pair_list(client: "Client") -> List[str]:
    """
    Pairs come back as raw `SEND_SENDNETWORK_RECEIVE_RECEIVENETWORK` strings,
    e.g. "BTC_BTC_ETH_ETH". They are left unparsed on purpose.
    """
    response = await client.request("GET", "/pairList")
    return unwrap_data(response, List[str], "get_pair_list")


async def get_pair_info(
    client: "Client",
    send: str,
    receive: str,
    send_network: Optional[str] = None,
    receive_network: Optional[str] = None,
    amount_type: Optional[str] = None,
) -> Pair:
    params = {
        "send": send,
        "receive": receive,
        "sendNetwork": send_network or "",
        "receiveNetwork": receive_network or "",
        "amountType": amount_type or "",
    }
    response = await client.request("GET", "/pairInfo", params=params)
    return unwrap_data(response, Pair, "get_pair_info")


async def get_exchange_rate(
    client: "Client",
    send: str,
    receive: str,
    amount: float,
    send_network: Optional[str] = None,
    receive_network: Optional[str] = None,
    amount_type: Optional[str] = None,
    extra_fee_override: Optional[float] = None,
) -> ExchangeRate:
    params = {
        "send": send,
        "receive": receive,
        "amount": str(amount),
        "sendNetwork": send_network or "",
        "receiveNetwork": receive_network or "",
        "amountType": amount_type or "",
    }
    # An explicit 0 would override the account fee
    if extra_fee_override is not None:
        params["extraFeeOverride"] = str(extra_fee_override)

    response = await client.request("GET", "/rate", params=params)
    return unwrap_data(response, ExchangeRate, "get_exchange_rate")


async def validate_address(
    client: "Client",
    currency: str,
    address: str,
    network: Optional[str] = None,
    tag: Optional[str] = None,
) -> None:
    # The API rejects empty network/tag values, so only send them when set
    params = {"currency": currency, "address": address}
    if network is not None:
        params["network"] = network
    if tag is not None:
        params["tag"] = tag

    response = await client.request("GET", "/validateAddress", params=params)
    expect_ok(response, "validate_address")
