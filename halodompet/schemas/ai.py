"""Schemas for speech-to-text, text extraction, receipt scanning and the advisor."""

from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from halodompet.schemas.common import Money


class TranscriptionResponse(BaseModel):
    success: bool = True
    text: str


class ProcessRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    webhook_url: str | None = Field(default=None, alias="webhookUrl")


class ExtractedTransaction(BaseModel):
    """Transaction draft produced by the model. Not persisted."""

    item: str | None = None
    amount: Money = Decimal("0")
    category: str | None = None
    type: Literal["income", "expense"] = "expense"
    date: str
    location: str | None = None
    payment_method: str | None = None
    wallet_name: str | None = None
    roast_message: str | None = None
    sentiment: str | None = None


class ProcessResponse(BaseModel):
    success: bool = True
    message: str
    data: ExtractedTransaction
    webhook_response: Any = Field(default=None, serialization_alias="webhookResponse")


class ScanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_base64: str | None = Field(default=None, alias="imageBase64")


class ScanResponse(BaseModel):
    success: bool = True
    data: ExtractedTransaction


class AdvisorMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class AdvisorRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    conversation_history: list[AdvisorMessage] = Field(
        default_factory=list, alias="conversationHistory"
    )


class AdvisorResponse(BaseModel):
    success: bool = True
    response: str
    context: dict[str, Any]
