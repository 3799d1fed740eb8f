"""Sales and customers.

A sale snapshots the product's price and cost at the time it is recorded,
decrements pantry stock, and upserts the customer by name.  Deleting a sale
puts the sold quantity back in stock; the customer stays.
"""

import logging
from dataclasses import replace

from kitchen_ledger.core import stock
from kitchen_ledger.core.errors import (
    InsufficientStockError, NotFoundError, OrphanedCompensationError, ValidationError,
)
from kitchen_ledger.db.models import DELIVERY_METHODS, Customer, Sale, UserData, find_by_id, new_id, utc_now

logger = logging.getLogger(__name__)


def get_or_create_customer(customers: list, name: str) -> tuple[Customer, list]:
    """Return (customer, customers) matching name case-insensitively, appending a new one if needed."""
    trimmed = name.strip()
    existing = next((c for c in customers if c.name.lower() == trimmed.lower()), None)
    if existing:
        return existing, customers
    customer = Customer(id=new_id(), name=trimmed)
    return customer, [*customers, customer]


def add_sale(
    data: UserData,
    product_id: str,
    quantity: float,
    customer_name: str,
    delivery_method: str = "in_person",
    shipping_cost: float = 0.0,
    discount_percentage: float = 0.0,
) -> dict:
    """Record a sale of quantity units of a pantry product."""
    if quantity <= 0:
        raise ValidationError("Sale quantity must be greater than zero.")
    if not customer_name or not customer_name.strip():
        raise ValidationError("Customer name is required.")
    if delivery_method not in DELIVERY_METHODS:
        raise ValidationError(f"Unknown delivery method '{delivery_method}'.")
    if shipping_cost < 0:
        raise ValidationError("Shipping cost cannot be negative.")
    if not 0 <= discount_percentage <= 100:
        raise ValidationError("Discount must be between 0 and 100 percent.")

    product = find_by_id(data.sellable_products, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    if not stock.has_enough(product.quantity_in_stock, quantity):
        raise InsufficientStockError(
            "Not enough stock for this sale.", [(product.name, quantity, product.quantity_in_stock)],
        )

    customer, customers = get_or_create_customer(data.customers, customer_name)

    gross = product.pvp * quantity
    total_sale = gross - gross * discount_percentage / 100
    total_cost = product.cost * quantity
    sale = Sale(
        id=new_id(),
        product_id=product_id,
        customer_id=customer.id,
        quantity=quantity,
        sale_price_per_unit=total_sale / quantity,
        total_sale=total_sale,
        total_cost=total_cost,
        profit=total_sale - total_cost,
        delivery_method=delivery_method,
        shipping_cost=shipping_cost,
        total_charged=total_sale + shipping_cost,
        date=utc_now(),
    )
    logger.info("Sold %s of product %s to customer %s", quantity, product_id, customer.id)
    return {
        "customers": customers,
        "sellable_products": [
            replace(p, quantity_in_stock=stock.deduct(p.quantity_in_stock, quantity)) if p.id == product_id else p
            for p in data.sellable_products
        ],
        "sales": [sale, *data.sales],
    }


def delete_sale(data: UserData, sale_id: str, force: bool = False) -> dict:
    """Remove a sale and return its quantity to the product's stock."""
    sale = find_by_id(data.sales, sale_id)
    if sale is None:
        raise NotFoundError("Sale", sale_id)

    changes = {"sales": [s for s in data.sales if s.id != sale_id]}
    if find_by_id(data.sellable_products, sale.product_id) is None:
        if not force:
            raise OrphanedCompensationError("sale", sale_id, sale.product_id)
        logger.warning("Dropping sale %s without restoring stock; product %s is gone", sale_id, sale.product_id)
    else:
        changes["sellable_products"] = [
            replace(p, quantity_in_stock=p.quantity_in_stock + sale.quantity) if p.id == sale.product_id else p
            for p in data.sellable_products
        ]
    logger.info("Deleted sale %s", sale_id)
    return changes
