from typing import TYPE_CHECKING, List, Optional

from easybit.exception_handlers import unwrap_data
from easybit.schemas.orders import (
    Order,
    OrderNetwork,
    OrderStatus,
    OrderSummary,
    Transaction,
    User,
    build_order_body,
)

if TYPE_CHECKING:
    from easybit.client import Client


async def create_order(
    client: "Client",
    transaction: Transaction,
    user: User,
    network: Optional[OrderNetwork] = None,
) -> Order:
    body = build_order_body(transaction, user, network or OrderNetwork())
    response = await client.request("POST", "/order", json=body)
    return unwrap_data(response, Order, "create_order")


async def order_status(client: "Client", order_id: str) -> OrderStatus:
    response = await client.request("GET", "/orderStatus", params={"id": order_id})
    return unwrap_data(response, OrderStatus, "order_status")


async def all_orders(
    client: "Client",
    id: Optional[str] = None,
    limit: Optional[int] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    sort_direction: Optional[str] = None,
    status: Optional[str] = None,
) -> List[OrderSummary]:
    filters = {
        "id": id,
        "limit": limit,
        "dateFrom": date_from,
        "dateTo": date_to,
        "sortDirection": sort_direction,
        "status": status,
    }
    params = {key: value for key, value in filters.items() if value is not None}

    response = await client.request("GET", "/orders", params=params)
    return unwrap_data(response, List[OrderSummary], "all_orders")
