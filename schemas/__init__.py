from .inventory import Product, ProductCreate, ProductUpdate, WithdrawRequest, WithdrawalResult
from .invoice import Invoice, InvoiceCreate, InvoiceUpdate, InvoiceItem, InvoiceItemCreate
from .customer import Customer, CustomerCreate, CustomerUpdate
from .exchange_rate import ExchangeRate, ExchangeRateCreate, ExchangeRateUpdate
from .business import BusinessInfo, BusinessInfoUpdate, Settings, SettingsUpdate
from .reports import InventoryValuation, ProductValuation
