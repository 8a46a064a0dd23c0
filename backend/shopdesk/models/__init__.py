from .storage import StoredCollection, SessionToken
from .entities import (
    Product, CartItem, Sale, Expense, Customer, Payment,
    PAYMENT_CASH, PAYMENT_CARD, PAYMENT_DUE, PAYMENT_METHODS, WALK_IN_CUSTOMER,
    money,
)

__all__ = [
    'StoredCollection', 'SessionToken',
    'Product', 'CartItem', 'Sale', 'Expense', 'Customer', 'Payment',
    'PAYMENT_CASH', 'PAYMENT_CARD', 'PAYMENT_DUE', 'PAYMENT_METHODS', 'WALK_IN_CUSTOMER',
    'money',
]
