"""Gemini Service - speech-to-text, transaction extraction, receipt OCR and advice.

Talks to the Gemini ``generateContent`` REST endpoint with httpx.
"""

import base64
import json
import logging
import re
from datetime import date
from typing import Any

import httpx

from halodompet.core.config import get_settings
from halodompet.core.exceptions import ServiceUnavailableError, UpstreamError, ValidationError
from halodompet.services.prompts import (
    ADVISOR_GREETING,
    TRANSCRIPTION_PROMPT,
    build_extraction_prompt,
    build_receipt_prompt,
)

logger = logging.getLogger(__name__)

NOT_CONFIGURED_DETAILS = (
    "GEMINI_API_KEY belum di-set. Silakan tambahkan API key di environment variables."
)

# (marker in upstream message, user-facing error, details)
STT_ERROR_MAP: list[tuple[str, str, str]] = [
    (
        "API_KEY_INVALID",
        "API key tidak valid",
        "Gemini API key yang Anda gunakan tidak valid. Silakan periksa kembali.",
    ),
    (
        "QUOTA_EXCEEDED",
        "Quota API telah habis",
        "Quota Gemini API untuk hari ini sudah habis. Silakan coba lagi besok.",
    ),
    (
        "RATE_LIMIT",
        "Terlalu banyak request",
        "Anda mengirim terlalu banyak request. Silakan tunggu beberapa saat.",
    ),
    (
        "UNSUPPORTED_MEDIA",
        "Format audio tidak didukung",
        "Format audio yang Anda upload tidak didukung. Gunakan format webm, mp3, atau wav.",
    ),
]

_FENCE_RE = re.compile(r"```(?:json)?\s*")
_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,")


class GeminiError(UpstreamError):
    """Gemini returned an error or an unusable response."""

    def __init__(self, message: str, details: Any = None, status: int | None = None) -> None:
        super().__init__(message, details)
        self.upstream_status = status


def describe_stt_error(raw: str) -> tuple[str, str]:
    """Translate an upstream failure into an Indonesian (error, details) pair."""
    for marker, error, details in STT_ERROR_MAP:
        if marker in raw:
            return error, details
    return "Terjadi kesalahan saat memproses audio", raw


def parse_json_response(text: str) -> dict[str, Any]:
    """Parse model output that should be a JSON object, tolerating ```json fences.

    Raises:
        ValueError: Output is not a JSON object
    """
    cleaned = _FENCE_RE.sub("", text).replace("```", "").strip()
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    return data


def split_data_url(image: str) -> tuple[str, str]:
    """Strip a ``data:<mime>;base64,`` prefix. Returns (base64 payload, mime type)."""
    match = _DATA_URL_RE.match(image)
    if match:
        return image[match.end() :], match.group("mime")
    return image, "image/jpeg"


class GeminiService:
    """Client for the Gemini generateContent API."""

    def __init__(self, api_key: str | None = None, client: httpx.AsyncClient | None = None):
        """Initialize Gemini service.

        Args:
            api_key: Gemini API key. If not provided, uses config.
            client: Shared HTTP client; a short-lived one is used per call otherwise
        """
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.base_url = settings.gemini_api_base.rstrip("/")
        self.stt_model = settings.gemini_stt_model
        self.extract_model = settings.gemini_extract_model
        self.advisor_model = settings.gemini_advisor_model
        self.timeout = settings.gemini_timeout_seconds
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def ensure_configured(self, error: str = "Layanan AI belum dikonfigurasi") -> None:
        if not self.is_configured:
            raise ServiceUnavailableError(error, NOT_CONFIGURED_DETAILS)

    # ============ Transport ============

    async def _post(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        params = {"key": self.api_key}
        if self._client is not None:
            return await self._client.post(url, params=params, json=payload, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, params=params, json=payload)

    async def generate(
        self,
        model: str,
        contents: list[dict[str, Any]],
        generation_config: dict[str, Any] | None = None,
    ) -> str:
        """Call generateContent and return the concatenated text of the first candidate.

        Raises:
            ServiceUnavailableError: No API key configured
            GeminiError: HTTP failure, blocked or empty response
        """
        self.ensure_configured()

        url = f"{self.base_url}/models/{model}:generateContent"
        payload: dict[str, Any] = {"contents": contents}
        if generation_config:
            payload["generationConfig"] = generation_config

        try:
            response = await self._post(url, payload)
        except httpx.RequestError as e:
            logger.error("Gemini request failed: %s", e)
            raise GeminiError("Gagal menghubungi layanan AI", str(e)) from e

        if response.status_code >= 400:
            raw = self._error_text(response)
            logger.error("Gemini API error %s: %s", response.status_code, raw)
            raise GeminiError(raw, raw, status=response.status_code)

        body = response.json()
        candidates = body.get("candidates") or []
        if not candidates:
            logger.error("Gemini response blocked or empty: %s", body)
            raise GeminiError(
                "AI tidak dapat memproses input. Coba dengan kalimat yang lebih sederhana.",
                "Response was blocked or empty",
            )

        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        """Flatten a Gemini error body (message, status and detail reasons) into one string."""
        try:
            error = response.json().get("error", {})
        except ValueError:
            return f"{response.status_code} {response.text}"

        pieces = [str(response.status_code), error.get("status", ""), error.get("message", "")]
        for detail in error.get("details") or []:
            if isinstance(detail, dict) and detail.get("reason"):
                pieces.append(detail["reason"])
        return " ".join(p for p in pieces if p)

    # ============ Features ============

    async def transcribe(self, audio: bytes, mime_type: str | None = None) -> str:
        """Transcribe Indonesian speech.

        Raises:
            ValidationError: Nothing intelligible in the audio
            GeminiError: Upstream failure, with Indonesian error/details
        """
        contents = [
            {
                "role": "user",
                "parts": [
                    {"text": TRANSCRIPTION_PROMPT},
                    {
                        "inline_data": {
                            "mime_type": mime_type or "audio/webm",
                            "data": base64.b64encode(audio).decode("ascii"),
                        }
                    },
                ],
            }
        ]
        try:
            text = (await self.generate(self.stt_model, contents)).strip()
        except GeminiError as e:
            error, details = describe_stt_error(f"{e.message} {e.details or ''}")
            raise GeminiError(error, details, status=e.upstream_status) from e

        if not text:
            raise ValidationError("Suara tidak terdeteksi atau tidak jelas")
        return text

    async def extract_transaction(
        self,
        text: str,
        income_categories: list[str],
        expense_categories: list[str],
        today: date | None = None,
    ) -> dict[str, Any]:
        """Extract a transaction draft from free text. The date is forced to today."""
        today_str = (today or date.today()).isoformat()
        prompt = build_extraction_prompt(text, today_str, income_categories, expense_categories)
        raw = await self.generate(
            self.extract_model, [{"role": "user", "parts": [{"text": prompt}]}]
        )
        try:
            data = parse_json_response(raw)
        except ValueError as e:
            logger.error("Could not parse Gemini extraction output: %s", raw)
            raise GeminiError("Gagal mengekstrak JSON dari response AI", raw) from e

        data["date"] = today_str
        return data

    async def scan_receipt(
        self,
        image: str,
        expense_categories: list[str],
        today: date | None = None,
    ) -> dict[str, Any]:
        """Read a receipt image (base64, optionally a data URL) into an expense draft.

        Raises:
            ValidationError: Unreadable image or no total found
            ServiceUnavailableError: Model overloaded
            GeminiError: Other upstream failures
        """
        today_str = (today or date.today()).isoformat()
        payload, mime_type = split_data_url(image)
        contents = [
            {
                "role": "user",
                "parts": [
                    {"text": build_receipt_prompt(today_str, expense_categories)},
                    {"inline_data": {"mime_type": mime_type, "data": payload}},
                ],
            }
        ]
        try:
            raw = await self.generate(self.extract_model, contents)
        except GeminiError as e:
            if e.upstream_status == 503 or "overloaded" in e.message.lower():
                raise ServiceUnavailableError(
                    "Server AI sedang sibuk. Tunggu sebentar dan coba lagi ya.", e.message
                ) from e
            raise

        try:
            data = parse_json_response(raw)
        except ValueError as e:
            logger.error("Could not parse Gemini receipt output: %s", raw)
            raise ValidationError(
                "Gagal membaca struk. Coba foto dengan pencahayaan yang lebih baik."
            ) from e

        if data.get("error"):
            raise ValidationError(str(data["error"]))
        try:
            amount = float(data.get("amount") or 0)
        except (TypeError, ValueError):
            amount = 0.0
        if amount <= 0:
            raise ValidationError(
                "Tidak dapat membaca total harga dari struk. "
                "Coba foto lebih jelas atau gunakan Input Manual."
            )

        data["type"] = "expense"
        data["date"] = today_str
        return data

    async def advise(
        self,
        system_prompt: str,
        history: list[tuple[str, str]],
        message: str,
    ) -> str:
        """One advisor chat turn.

        Args:
            system_prompt: Context with the user's financial data
            history: Previous (role, content) turns, role "user" or "assistant"
            message: The new user message
        """
        contents = [
            {"role": "user", "parts": [{"text": system_prompt}]},
            {"role": "model", "parts": [{"text": ADVISOR_GREETING}]},
        ]
        for role, content in history:
            contents.append(
                {"role": "user" if role == "user" else "model", "parts": [{"text": content}]}
            )
        contents.append({"role": "user", "parts": [{"text": message}]})

        return await self.generate(
            self.advisor_model,
            contents,
            generation_config={"temperature": 0.7, "topP": 0.9, "maxOutputTokens": 1024},
        )


async def forward_to_webhook(url: str, payload: dict[str, Any]) -> Any:
    """POST an extracted draft to the user's webhook.

    Failures are logged and reported as None; the extraction itself still
    succeeded.
    """
    try:
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.post(url, json=payload)
    except httpx.RequestError as e:
        logger.error("Webhook request to %s failed: %s", url, e)
        return None

    if response.status_code >= 400:
        logger.warning("Webhook %s answered %s: %s", url, response.status_code, response.text)
        return None
    try:
        return response.json()
    except ValueError:
        return {}
