# app/modules/sales/formatter.py
from decimal import Decimal
from typing import Optional

from app.shared.database.models import Sale, SaleItem, User
from .money import normalize_money, quantize_quantity
from .schemas import AttendantSummary, ProductSummary, SaleItemResponse, SaleResponse

WALK_IN_CUSTOMER = "Walk-in customer"


def attendant_display_name(attendant: Optional[User]) -> str:
    """Full name, then username, then the walk-in fallback"""
    if attendant is not None:
        if attendant.full_name:
            return attendant.full_name
        if attendant.username:
            return attendant.username
    return WALK_IN_CUSTOMER


def format_sale_item(item: SaleItem) -> SaleItemResponse:
    product = item.product
    return SaleItemResponse(
        id=item.id,
        product_id=item.product_id,
        quantity=quantize_quantity(item.quantity),
        price=normalize_money(item.price),
        total=normalize_money(item.total),
        product=ProductSummary(
            id=product.id,
            name=product.name,
            sku=product.sku
        ) if product is not None else None
    )


def format_sale(sale: Sale) -> SaleResponse:
    """
    Map a persisted sale (items, products and attendant loaded) to its
    external representation
    """
    attendant = sale.attendant
    return SaleResponse(
        id=sale.id,
        receipt_number=sale.receipt_number,
        user_id=sale.user_id,
        payment_method=sale.payment_method,
        subtotal=normalize_money(sale.subtotal),
        discount=normalize_money(sale.discount if sale.discount is not None else Decimal("0")),
        total_amount=normalize_money(sale.total_amount),
        created_at=sale.created_at,
        attendant=AttendantSummary(
            id=attendant.id,
            full_name=attendant.full_name,
            username=attendant.username
        ) if attendant is not None else None,
        attendant_name=attendant_display_name(attendant),
        items=[format_sale_item(item) for item in sale.items]
    )
