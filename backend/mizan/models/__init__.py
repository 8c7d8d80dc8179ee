from .tenancy import Tenant
from .auth import User, SessionToken
from .inventory import Product
from .finance import Revenue, Expense, CURRENCIES, PAYMENT_METHODS, TRANSACTION_TYPES, EXPENSE_TYPES
from .communications import Notification, NOTIFICATION_TYPES
from .security import SecurityEvent

__all__ = [
    'Tenant',
    'User', 'SessionToken',
    'Product',
    'Revenue', 'Expense',
    'Notification',
    'SecurityEvent',
    'CURRENCIES', 'PAYMENT_METHODS', 'TRANSACTION_TYPES', 'EXPENSE_TYPES', 'NOTIFICATION_TYPES',
]
