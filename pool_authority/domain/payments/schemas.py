"""Payments domain schemas - Pydantic models for validation"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class CheckoutRequest(BaseModel):
    """Schema for creating a checkout session"""

    model_config = ConfigDict(populate_by_name=True)

    amount: Optional[float] = None  # currency units, e.g. 49.99
    customer_email: Optional[str] = Field(default=None, alias="customerEmail")
    description: Optional[str] = None
    customer_name: Optional[str] = Field(default=None, alias="customerName")
    metadata: Optional[dict[str, Any]] = None


class CheckoutSessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(serialization_alias="sessionId")
    url: Optional[str] = None


class PaymentStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Optional[str] = None
    customer_email: Optional[str] = Field(default=None, serialization_alias="customerEmail")
    amount_total: Optional[float] = Field(default=None, serialization_alias="amountTotal")
