from .user import User
from .customer import Customer
from .inventory import Product
from .invoice import Invoice, InvoiceItem, InvoiceStatus, PaymentStatus
from .exchange_rate import ExchangeRate
from .business import BusinessInfo, UserSettings
