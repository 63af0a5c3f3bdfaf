"""HaloDompet - AI endpoints.

Speech-to-text, text-to-transaction extraction, receipt scanning and the
financial advisor chat. Extraction results are drafts; the client saves
them through the transaction endpoints.
"""

import logging
from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, File, Request, UploadFile

from halodompet.api.deps import (
    ActiveUser,
    Categories,
    Gemini,
    Limiter,
    Transactions,
    client_ip,
)
from halodompet.core.config import get_settings
from halodompet.core.exceptions import RateLimitError, ValidationError
from halodompet.models.category import CategoryType
from halodompet.models.user import UserMode
from halodompet.schemas.ai import (
    AdvisorRequest,
    AdvisorResponse,
    ExtractedTransaction,
    ProcessRequest,
    ProcessResponse,
    ScanRequest,
    ScanResponse,
    TranscriptionResponse,
)
from halodompet.services.gemini_service import GeminiService, forward_to_webhook
from halodompet.services.prompts import (
    DEMO_EXPENSE_CATEGORIES,
    DEMO_INCOME_CATEGORIES,
    build_advisor_prompt,
)
from halodompet.services.transaction_service import TransactionFilters
from halodompet.utils.helpers import format_rupiah

logger = logging.getLogger(__name__)

router = APIRouter(tags=["AI"])

ADVISOR_RATE_LIMIT = 20
ADVISOR_RATE_WINDOW_SECONDS = 60
ADVISOR_MAX_MESSAGE_LENGTH = 2000
ADVISOR_HISTORY_TURNS = 10

AudioFile = Annotated[UploadFile | None, File()]


async def _read_audio(audio: UploadFile | None) -> bytes:
    """Validate an uploaded audio file and return its bytes."""
    if audio is None:
        raise ValidationError("File audio harus diupload")

    content = await audio.read()
    if len(content) > get_settings().stt_max_upload_bytes:
        raise ValidationError("File terlalu besar. Maksimal 10MB")
    if not content:
        raise ValidationError("File audio kosong")
    return content


def _to_draft(data: dict[str, Any]) -> ExtractedTransaction:
    """Coerce loosely-typed model output into a transaction draft."""
    tx_type = str(data.get("type") or "expense").lower()
    try:
        amount = float(data.get("amount") or 0)
    except (TypeError, ValueError):
        amount = 0.0
    return ExtractedTransaction.model_validate(
        {
            **data,
            "amount": amount,
            "type": tx_type if tx_type in ("income", "expense") else "expense",
        }
    )


async def _process_text(
    gemini: GeminiService,
    text: str | None,
    income_categories: list[str],
    expense_categories: list[str],
    webhook_url: str | None = None,
) -> ProcessResponse:
    if not text or not text.strip():
        raise ValidationError("Text harus diisi")
    gemini.ensure_configured()

    draft = _to_draft(
        await gemini.extract_transaction(text.strip(), income_categories, expense_categories)
    )

    webhook_response = None
    if webhook_url:
        payload = draft.model_dump(mode="json")
        payload["timestamp"] = datetime.utcnow().isoformat() + "Z"
        payload["originalText"] = text
        webhook_response = await forward_to_webhook(webhook_url, payload)

    return ProcessResponse(
        message=(
            "Data berhasil diproses dan dikirim ke webhook!"
            if webhook_url
            else "Data berhasil diproses!"
        ),
        data=draft,
        webhook_response=webhook_response,
    )


# ============ Speech-to-text ============


@router.post("/stt", response_model=TranscriptionResponse)
async def transcribe(
    user: ActiveUser,
    gemini: Gemini,
    audio: AudioFile = None,
) -> TranscriptionResponse:
    """Transcribe a voice note (Indonesian) to text."""
    gemini.ensure_configured("STT service not configured")
    content = await _read_audio(audio)
    text = await gemini.transcribe(content, audio.content_type if audio else None)
    return TranscriptionResponse(text=text)


@router.post("/demo/stt", response_model=TranscriptionResponse)
async def transcribe_demo(
    request: Request,
    gemini: Gemini,
    limiter: Limiter,
    audio: AudioFile = None,
) -> TranscriptionResponse:
    """Public speech-to-text for the landing page, rate limited per client IP."""
    settings = get_settings()
    ip = client_ip(request)
    result = await limiter.hit(
        f"demo-stt:{ip}",
        settings.demo_stt_rate_limit,
        settings.demo_stt_rate_window_seconds,
    )
    if not result.allowed:
        raise RateLimitError(
            "Rate limit exceeded. Coba lagi dalam 1 jam.",
            {"retry_after": result.reset_seconds},
        )

    gemini.ensure_configured("STT service not configured")
    content = await _read_audio(audio)
    text = await gemini.transcribe(content, audio.content_type if audio else None)
    return TranscriptionResponse(text=text)


# ============ Extraction ============


@router.post("/process", response_model=ProcessResponse)
async def process_text(
    data: ProcessRequest,
    user: ActiveUser,
    gemini: Gemini,
    categories: Categories,
) -> ProcessResponse:
    """Turn a sentence into a transaction draft using the user's categories.

    The draft is forwarded to ``webhookUrl`` when given, or to the user's
    webhook when the account is in webhook mode.
    """
    income = await categories.list_categories(user.id, CategoryType.INCOME)
    expense = await categories.list_categories(user.id, CategoryType.EXPENSE)

    webhook_url = data.webhook_url
    if not webhook_url and user.mode == UserMode.WEBHOOK:
        webhook_url = user.webhook_url

    return await _process_text(
        gemini,
        data.text,
        [c.name for c in income],
        [c.name for c in expense],
        webhook_url,
    )


@router.post("/demo/process", response_model=ProcessResponse)
async def process_text_demo(data: ProcessRequest, gemini: Gemini) -> ProcessResponse:
    """Public extraction demo with a fixed category list. Never forwards to a webhook."""
    return await _process_text(
        gemini,
        data.text,
        DEMO_INCOME_CATEGORIES,
        DEMO_EXPENSE_CATEGORIES,
    )


@router.post("/scan", response_model=ScanResponse)
async def scan_receipt(
    data: ScanRequest,
    user: ActiveUser,
    gemini: Gemini,
    categories: Categories,
) -> ScanResponse:
    """Read a receipt photo into an expense draft."""
    if not data.image_base64:
        raise ValidationError("Gambar struk harus diupload")
    gemini.ensure_configured()

    expense = await categories.list_categories(user.id, CategoryType.EXPENSE)
    result = await gemini.scan_receipt(data.image_base64, [c.name for c in expense])
    return ScanResponse(data=_to_draft(result))


# ============ Advisor ============


@router.post("/advisor", response_model=AdvisorResponse)
async def advise(
    data: AdvisorRequest,
    user: ActiveUser,
    gemini: Gemini,
    limiter: Limiter,
    transactions: Transactions,
) -> AdvisorResponse:
    """One chat turn with the advisor, grounded in the user's spending."""
    result = await limiter.hit(
        f"advisor:{user.id}", ADVISOR_RATE_LIMIT, ADVISOR_RATE_WINDOW_SECONDS
    )
    if not result.allowed:
        raise RateLimitError(
            "Terlalu banyak pertanyaan. Tunggu sebentar ya.",
            {"retry_after": result.reset_seconds},
        )

    message = (data.message or "").strip()[:ADVISOR_MAX_MESSAGE_LENGTH]
    message = message.replace("<", "").replace(">", "")
    if not message:
        raise ValidationError("Pesan harus diisi")
    gemini.ensure_configured()

    stats = await transactions.get_stats(user.id)
    recent = await transactions.list_transactions(user.id, TransactionFilters(limit=10))
    prompt = build_advisor_prompt(
        total_transactions=stats.total_transactions,
        total_spent=format_rupiah(stats.total_spent),
        average=format_rupiah(stats.average_transaction),
        top_categories=[
            (s.category, format_rupiah(s.total), s.percentage)
            for s in stats.category_summary[:5]
        ],
        recent=[(t.item, format_rupiah(t.amount), t.category) for t in recent[:5]],
    )
    history = [(m.role, m.content) for m in data.conversation_history[-ADVISOR_HISTORY_TURNS:]]

    reply = await gemini.advise(prompt, history, message)
    logger.info("Advisor answered user %s (%s history turns)", user.id, len(history))
    return AdvisorResponse(
        response=reply,
        context={
            "total_transactions": stats.total_transactions,
            "total_spent": float(stats.total_spent),
        },
    )


@router.get("/advisor")
async def advisor_health(gemini: Gemini) -> dict[str, str]:
    """Advisor availability probe."""
    return {
        "status": "healthy" if gemini.is_configured else "degraded",
        "service": "ai-advisor",
    }
