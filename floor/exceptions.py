from rest_framework import status

from epos.exceptions import PosError


class InvalidTransition(PosError):
    code = 'invalid_transition'
    status_code = status.HTTP_409_CONFLICT


class ConcurrentUpdate(InvalidTransition):
    """The stored status changed between read and write."""
    code = 'concurrent_update'


class TableHasOpenOrders(PosError):
    code = 'table_has_open_orders'
    status_code = status.HTTP_409_CONFLICT


class TotalMismatch(PosError):
    code = 'total_mismatch'
    status_code = status.HTTP_409_CONFLICT


class AmountMismatch(PosError):
    code = 'amount_mismatch'
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidOrder(PosError):
    code = 'invalid_order'
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidPayment(PosError):
    code = 'invalid_payment'
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(PosError):
    code = 'not_found'
    status_code = status.HTTP_404_NOT_FOUND
