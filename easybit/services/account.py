from typing import TYPE_CHECKING

from easybit.exception_handlers import expect_ok, unwrap_data
from easybit.schemas.account import Account

if TYPE_CHECKING:
    from easybit.client import Client

MAX_EXTRA_FEE = 0.1


async def get_account(client: "Client") -> Account:
    response = await client.request("GET", "/account")
    # /account is documented both with and without the data envelope
    return unwrap_data(response, Account, "get_account", envelope_optional=True)


async def set_fee(client: "Client", fee: float) -> None:
    # 0.4% is sent as 0.004
    if not 0 <= fee <= MAX_EXTRA_FEE:
        raise ValueError(f"extra fee must be within 0-{MAX_EXTRA_FEE}, got {fee}")

    response = await client.request("POST", "/setExtraFee", json={"extraFee": fee})
    expect_ok(response, "set_fee")
