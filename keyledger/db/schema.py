# keyledger/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String, Boolean,
    Numeric, Date, DateTime, ForeignKey, CheckConstraint, Text
)

metadata = MetaData()

customer = Table(
    "customer",
    metadata,
    Column("customer_id", Integer, primary_key=True, autoincrement=True),
    Column("customer_name", String, nullable=False, unique=True),
    Column("customer_address", Text, nullable=True),
)

services = Table(
    "services",
    metadata,
    Column("service_id", Integer, primary_key=True, autoincrement=True),
    Column("servicename", String, nullable=False),
    Column("description", Text),
    Column("unitprice", Numeric(10, 2), nullable=False, default=0),
    Column("istaxed", Boolean, nullable=False, default=False),
    Column("isparts", Boolean, nullable=False, default=False),
)

invoices = Table(
    "invoices",
    metadata,
    Column("invoice_id", Integer, primary_key=True),
    Column("customer_id", Integer, ForeignKey("customer.customer_id"), nullable=False),
    Column("date", Date, nullable=False),
    Column("duedate", Date, nullable=True),
    Column("status", String, nullable=False, default="pending"),
    Column("po_number", Text),
    Column("vin", Text),
    Column("description", Text),
    Column("private_comments", Text),
    Column("subtotal", Numeric(10, 2), nullable=False),
    Column("tax_total", Numeric(10, 2), nullable=False),
    Column("totalamount", Numeric(10, 2), nullable=False),
    CheckConstraint(
        "status IN ('pending', 'paid', 'overdue')", name="ck_invoices_status"
    ),
)

invoicedetail = Table(
    "invoicedetail",
    metadata,
    Column("invoicedetail_id", Integer, primary_key=True),
    Column(
        "invoice_id",
        Integer,
        ForeignKey("invoices.invoice_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("service_id", Integer, ForeignKey("services.service_id"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unitprice", Numeric(10, 2), nullable=False),
    Column("totalprice", Numeric(10, 2), nullable=False),
    Column("istaxed", Boolean, nullable=False, default=False),
    CheckConstraint("quantity >= 1", name="ck_invoicedetail_quantity_pos"),
)

quotes = Table(
    "quotes",
    metadata,
    Column("quote_id", Integer, primary_key=True),
    Column("customer_id", Integer, ForeignKey("customer.customer_id"), nullable=False),
    Column("date", Date, nullable=False),
    Column("status", String, nullable=False, default="pending"),
    Column("po_number", Text),
    Column("vin", Text),
    Column("description", Text),
    Column("private_comments", Text),
    Column("subtotal", Numeric(10, 2), nullable=False),
    Column("tax_total", Numeric(10, 2), nullable=False),
    Column("totalamount", Numeric(10, 2), nullable=False),
    CheckConstraint(
        "status IN ('pending', 'accepted', 'rejected')", name="ck_quotes_status"
    ),
)

quotedetail = Table(
    "quotedetail",
    metadata,
    Column("quotedetail_id", Integer, primary_key=True),
    Column(
        "quote_id",
        Integer,
        ForeignKey("quotes.quote_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("service_id", Integer, ForeignKey("services.service_id"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unitprice", Numeric(10, 2), nullable=False),
    Column("totalprice", Numeric(10, 2), nullable=False),
    Column("istaxed", Boolean, nullable=False, default=False),
    CheckConstraint("quantity >= 1", name="ck_quotedetail_quantity_pos"),
)

payment = Table(
    "payment",
    metadata,
    Column("payment_id", Integer, primary_key=True),
    Column("invoice_id", Integer, ForeignKey("invoices.invoice_id"), nullable=False),
    Column("paymentdate", DateTime, nullable=False),
    Column("paymentmethod", String, nullable=False),
)
