from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class ReportEmailRequest(BaseModel):
    to: Optional[EmailStr] = Field(
        None, description="Recipient; defaults to the owner's email address"
    )


class ReportEmailResult(BaseModel):
    sent: bool
    recipient: str
    subject: str
    filename: str


class EmailStatus(BaseModel):
    configured: bool
    sender: Optional[str] = None
