# easybit/schemas/currency.py
from typing import List, Optional

from easybit.schemas.responses import CamelModel


class Network(CamelModel):
    network: str
    name: str
    is_default: bool
    send_status: bool
    receive_status: bool
    receive_decimals: int
    confirmations_minimum: int
    confirmations_maximum: int
    explorer: str
    explorer_hash: str
    explorer_address: str
    has_tag: bool
    tag_name: Optional[str] = None
    contract_address: Optional[str] = None
    explorer_contract: Optional[str] = None


class Currency(CamelModel):
    """
    send_status_all / receive_status_all tell whether the system can move
    the currency through at least one of its networks.
    """
    currency: str
    name: str
    send_status_all: bool
    receive_status_all: bool
    network_list: List[Network]


class Pair(CamelModel):
    minimum_amount: str
    maximum_amount: str
    network_fee: str
    confirmations: int
    processing_time: str


class ExchangeRate(CamelModel):
    rate: str
    send_amount: str
    receive_amount: str
    network_fee: str
    confirmations: int
    processing_time: str
