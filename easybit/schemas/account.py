from easybit.schemas.responses import CamelModel


class Account(CamelModel):
    """
    - level: account level
    - volume: total volume traded in USDT during the last month
    - fee: easybit.io fee
    - extra_fee: extra fee you set
    - total_fee: total fee charged to your users
    """
    level: int
    volume: float
    fee: float
    extra_fee: float
    total_fee: float
