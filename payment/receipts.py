from floor.models import CafeSettings, OrderLineItem


def build_receipt(transaction):
    """Printable receipt data for a recorded payment (table or individual order)"""
    cafe = CafeSettings.load()
    lines = OrderLineItem.objects.filter(order__settled_by=transaction).order_by('order_id', 'id')

    return {
        'cafe_name': cafe.cafe_name,
        'address': cafe.address,
        'phone': cafe.phone,
        'currency': cafe.currency,
        'transaction_id': transaction.id,
        'table_id': transaction.table_id,
        'order_id': transaction.order_id,
        'scope': transaction.scope,
        'method': transaction.method,
        'created_at': transaction.created_at,
        'items': [
            {
                'order_id': line.order_id,
                'name': line.name,
                'quantity': line.quantity,
                'price': line.price,
                'line_total': line.line_total,
            }
            for line in lines
        ],
        'subtotal': transaction.subtotal,
        'tax': transaction.tax,
        'service_charge': transaction.service_charge,
        'total': transaction.amount,
        'receipt_note': cafe.receipt_note,
    }
