from epos.exceptions import PosError


class InsufficientStock(PosError):
    code = 'insufficient_stock'
