# easybit/schemas/orders.py
from typing import Any, Dict, Optional

from easybit.schemas.responses import CamelModel

# Order status values reported by the API:
#   Awaiting Deposit, Confirming Deposit, Exchanging, Sending, Complete,
#   Refund, Failed, Volatility Protection, Action Request, Request Overdue
#
# Validation status values:
#   awaiting, pending, failed_allow_retry, failed_deny_retry, complete, failed
#   (None when no validation was requested)


# -------------------------------------------------------------------
#   REQUEST PAYLOADS
# -------------------------------------------------------------------

class Transaction(CamelModel):
    send: str
    receive: str
    amount: float
    receive_address: str
    extra_fee_override: Optional[float] = None
    # Volatility Protection Mode, "off" when not set
    vpm: Optional[str] = None
    refund_address: Optional[str] = None
    refund_tag: Optional[str] = None


class User(CamelModel):
    """
    user_device_id is required when payload is not set.
    user_id is your own user ID; leave it out for guests.
    payload is the hash produced by the easybit identification script.
    """
    user_device_id: Optional[str] = None
    user_id: Optional[str] = None
    payload: Optional[str] = None


class OrderNetwork(CamelModel):
    send_network: Optional[str] = None
    receive_network: Optional[str] = None
    receive_tag: Optional[str] = None


def build_order_body(transaction: Transaction, user: User, network: OrderNetwork) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    for part in (transaction, user, network):
        body.update(part.model_dump(by_alias=True, exclude_none=True))
    return body


# -------------------------------------------------------------------
#   RESPONSES
# -------------------------------------------------------------------

class Order(CamelModel):
    id: str
    send: str
    receive: str
    send_network: str
    receive_network: str
    send_amount: str
    receive_amount: str
    send_address: str
    send_tag: Optional[str] = None
    receive_address: str
    receive_tag: Optional[str] = None
    refund_address: Optional[str] = None
    refund_tag: Optional[str] = None
    vpm: str
    # milliseconds
    created_at: int


class OrderStatus(CamelModel):
    id: str
    status: str
    receive_amount: str
    hash_in: Optional[str] = None
    hash_out: Optional[str] = None
    validation_status: Optional[str] = None
    created_at: int
    updated_at: int


class OrderSummary(CamelModel):
    id: str
    send: str
    receive: str
    send_network: str
    receive_network: str
    send_amount: str
    receive_amount: str
    estimated_send_amount: str
    estimated_receive_amount: str
    send_address: str
    send_tag: Optional[str] = None
    receive_address: str
    receive_tag: Optional[str] = None
    refund_address: Optional[str] = None
    refund_tag: Optional[str] = None
    vpm: str
    status: str
    hash_in: Optional[str] = None
    hash_out: Optional[str] = None
    network_fee: str
    earned: str
    validation_status: Optional[str] = None
    created_at: int
    updated_at: int
