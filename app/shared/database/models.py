import enum
import uuid

from sqlalchemy import (
    CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.config.database import Base


def generate_id() -> str:
    return uuid.uuid4().hex


class PaymentMethod(str, enum.Enum):
    """Closed set of payment methods accepted at the till"""
    CASH = "CASH"
    CARD = "CARD"
    MOBILE_MONEY = "MOBILE_MONEY"
    BANK_TRANSFER = "BANK_TRANSFER"


class TimestampMixin:
    """Automatic created/updated timestamps"""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

# ===== USERS =====

class User(Base):
    """Attendant that records sales"""
    __tablename__ = "users"
    
    id = Column(String(36), primary_key=True, default=generate_id)
    username = Column(String(255), unique=True, nullable=False)
    full_name = Column(String(255))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    # Relationships
    sales = relationship("Sale", back_populates="attendant")

# ===== PRODUCTS =====

class Product(Base, TimestampMixin):
    """Catalog product; referenced immutably by sale items"""
    __tablename__ = "products"
    
    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    sku = Column(String(255), unique=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    cost = Column(Numeric(10, 2), nullable=False, default=0)
    
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )
    
    # Relationships
    stock = relationship("Stock", back_populates="product", uselist=False)
    sale_items = relationship("SaleItem", back_populates="product", passive_deletes=True)

class Stock(Base):
    """Quantity on hand for one product (fractional units allowed)"""
    __tablename__ = "stock"
    
    id = Column(String(36), primary_key=True, default=generate_id)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="CASCADE"), unique=True, nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_stock_quantity_non_negative"),
    )
    
    # Relationships
    product = relationship("Product", back_populates="stock")

# ===== SALES =====

class Sale(Base):
    """A committed sale; created once together with its items"""
    __tablename__ = "sales"
    
    id = Column(String(36), primary_key=True, default=generate_id)
    receipt_number = Column(String(64), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    payment_method = Column(Enum(PaymentMethod, name="payment_method"), nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    
    __table_args__ = (
        UniqueConstraint("receipt_number", name="uq_sales_receipt_number"),
        CheckConstraint("discount >= 0", name="ck_sales_discount_non_negative"),
        CheckConstraint("discount <= subtotal", name="ck_sales_discount_within_subtotal"),
    )
    
    # Relationships
    attendant = relationship("User", back_populates="sales")
    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.position"
    )

class SaleItem(Base):
    """One product/quantity/price line of a sale"""
    __tablename__ = "sale_items"
    
    id = Column(String(36), primary_key=True, default=generate_id)
    sale_id = Column(String(36), ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    position = Column(Integer, nullable=False, default=0)
    quantity = Column(Numeric(10, 2), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
    
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_sale_items_quantity_positive"),
    )
    
    # Relationships
    sale = relationship("Sale", back_populates="items")
    product = relationship("Product", back_populates="sale_items")
