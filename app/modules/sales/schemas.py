from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from app.shared.database.models import PaymentMethod

# ==================== BASE CLASS (Pydantic v2) ====================

class SalesBaseModel(BaseModel):
    """
    Base for every sales schema: camelCase on the wire, snake_case in code,
    money and quantities rendered as JSON numbers.
    """
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class SaleItemRequest(SalesBaseModel):
    product_id: str = Field(..., description="Product identifier")
    quantity: Decimal = Field(..., gt=0, description="Quantity sold, two decimal places")
    price_override: Optional[Decimal] = Field(None, ge=0, description="Unit price charged instead of the catalog price")

class SaleCreateRequest(SalesBaseModel):
    """Sanitized sale creation request produced by the validator"""
    user_id: str = Field(..., description="Attendant recording the sale")
    payment_method: PaymentMethod
    items: List[SaleItemRequest] = Field(..., min_length=1)
    discount: Decimal = Field(Decimal("0"), ge=0)
    receipt_number: Optional[str] = None

# ==================== RESPONSE SCHEMAS ====================

class ProductSummary(SalesBaseModel):
    id: str
    name: str
    sku: Optional[str]

class AttendantSummary(SalesBaseModel):
    id: str
    full_name: Optional[str]
    username: Optional[str]

class SaleItemResponse(SalesBaseModel):
    id: str
    product_id: Optional[str]
    quantity: Decimal
    price: Decimal
    total: Decimal
    product: Optional[ProductSummary]

class SaleResponse(SalesBaseModel):
    id: str
    receipt_number: str
    user_id: str
    payment_method: PaymentMethod
    subtotal: Decimal
    discount: Decimal
    total_amount: Decimal
    created_at: datetime
    attendant: Optional[AttendantSummary]
    attendant_name: str
    items: List[SaleItemResponse]

class SaleCreatedResponse(SalesBaseModel):
    sale: SaleResponse

class MetricChange(SalesBaseModel):
    delta: Decimal
    percentage: Optional[Decimal]

class RevenuePoint(SalesBaseModel):
    day: str
    date: str
    revenue: Decimal

class SummaryChanges(SalesBaseModel):
    total_revenue: MetricChange
    total_sales: MetricChange
    average_order_value: MetricChange

class SalesSummary(SalesBaseModel):
    total_revenue: Decimal
    total_sales: int
    average_order_value: Decimal
    revenue_overview: List[RevenuePoint]
    changes: SummaryChanges

class SalesListResponse(SalesBaseModel):
    sales: List[SaleResponse]
    summary: SalesSummary
