from .inventory import create_product, get_product, get_products, update_product, delete_product, reserve_product, release_product, withdraw_product
from .invoice import create_invoice, get_invoice, get_invoices, update_invoice, delete_invoice
from .customer import create_customer, get_customer, get_customers, update_customer, delete_customer
