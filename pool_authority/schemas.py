"""Email request/response schemas - Pydantic models for validation"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    """Accepts both the camelCase keys the front-end sends and snake_case"""

    model_config = ConfigDict(populate_by_name=True)


class CompanySettings(CamelModel):
    company_name: Optional[str] = Field(default=None, alias="companyName")
    owner_name: Optional[str] = Field(default=None, alias="ownerName")
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, alias="logoUrl")
    primary_color: Optional[str] = Field(default=None, alias="primaryColor")
    accent_color: Optional[str] = Field(default=None, alias="accentColor")


class EmailTemplate(BaseModel):
    subject: str = ""
    body: str = ""


class TemplatedEmailRequest(CamelModel):
    """Body for weekly update, quote and invoice emails"""

    to: Optional[str] = None
    template: EmailTemplate = Field(default_factory=EmailTemplate)
    data: Optional[dict[str, Any]] = None
    company_settings: Optional[CompanySettings] = Field(default=None, alias="companySettings")


class InvoiceEmailRequest(TemplatedEmailRequest):
    payment_link: Optional[str] = Field(default=None, alias="paymentLink")


class SendEmailRequest(CamelModel):
    to: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    company_settings: Optional[CompanySettings] = Field(default=None, alias="companySettings")


class TestEmailRequest(BaseModel):
    to: Optional[str] = None


class EmailSentResponse(BaseModel):
    success: bool = True
    message: str
