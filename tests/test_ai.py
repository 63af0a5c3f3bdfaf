"""
Tests for the AI endpoints with Gemini behind a mock transport.
"""

import json
from datetime import date, datetime, timedelta

import pytest

from halodompet.services.gemini_service import describe_stt_error, parse_json_response
from tests.factories import make_user, make_wallet

AUDIO = {"audio": ("note.webm", b"\x1a\x45\xdf\xa3fake-webm", "audio/webm")}
DEMO_IP = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}


class TestParsing:
    def test_json_fences_are_stripped(self):
        raw = '```json\n{"item": "Kopi", "amount": 20000}\n```'
        assert parse_json_response(raw) == {"item": "Kopi", "amount": 20000}

    def test_non_object_is_rejected(self):
        with pytest.raises(ValueError):
            parse_json_response("[1, 2]")

    def test_stt_error_mapping(self):
        assert describe_stt_error("400 INVALID_ARGUMENT API_KEY_INVALID")[0] == (
            "API key tidak valid"
        )
        error, details = describe_stt_error("500 boom")
        assert error == "Terjadi kesalahan saat memproses audio"
        assert details == "500 boom"


class TestSpeechToText:
    """POST /api/stt and /api/demo/stt"""

    @pytest.mark.asyncio
    async def test_transcribes(self, client, alice, gemini_stub, as_user):
        gemini_stub.reply_text("  beli kopi dua puluh ribu \n")

        response = await client.post("/api/stt", files=AUDIO, headers=as_user(alice))
        assert response.status_code == 200
        assert response.json() == {"success": True, "text": "beli kopi dua puluh ribu"}

        request = gemini_stub.requests[0]
        assert request.url.path.endswith(":generateContent")
        assert request.url.params["key"] == "test-gemini-key"
        part = json.loads(request.content)["contents"][0]["parts"][1]
        assert part["inline_data"]["mime_type"] == "audio/webm"

    @pytest.mark.asyncio
    async def test_missing_audio(self, client, alice, as_user):
        response = await client.post(
            "/api/stt", files={"other": ("x.txt", b"x", "text/plain")}, headers=as_user(alice)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "File audio harus diupload"

    @pytest.mark.asyncio
    async def test_empty_audio(self, client, alice, as_user):
        response = await client.post(
            "/api/stt", files={"audio": ("a.webm", b"", "audio/webm")}, headers=as_user(alice)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "File audio kosong"

    @pytest.mark.asyncio
    async def test_upstream_error_is_translated(self, client, alice, gemini_stub, as_user):
        gemini_stub.reply_error(400, "API key not valid.", reason="API_KEY_INVALID")

        response = await client.post("/api/stt", files=AUDIO, headers=as_user(alice))
        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "API key tidak valid",
            "details": "Gemini API key yang Anda gunakan tidak valid. Silakan periksa kembali.",
        }

    @pytest.mark.asyncio
    async def test_silence(self, client, alice, gemini_stub, as_user):
        gemini_stub.reply_text("   ")
        response = await client.post("/api/stt", files=AUDIO, headers=as_user(alice))
        assert response.status_code == 400
        assert response.json()["error"] == "Suara tidak terdeteksi atau tidak jelas"

    @pytest.mark.asyncio
    async def test_demo_is_public(self, client, gemini_stub, fake_redis):
        gemini_stub.reply_text("makan siang lima puluh ribu")

        response = await client.post("/api/demo/stt", files=AUDIO, headers=DEMO_IP)
        assert response.status_code == 200
        assert fake_redis.counters == {"halodompet:ratelimit:demo-stt:203.0.113.7": 1}

    @pytest.mark.asyncio
    async def test_demo_rate_limit(self, client, gemini_stub, fake_redis):
        fake_redis.counters["halodompet:ratelimit:demo-stt:203.0.113.7"] = 20
        fake_redis.ttls["halodompet:ratelimit:demo-stt:203.0.113.7"] = 1800

        response = await client.post("/api/demo/stt", files=AUDIO, headers=DEMO_IP)
        assert response.status_code == 429
        assert response.json() == {
            "success": False,
            "error": "Rate limit exceeded. Coba lagi dalam 1 jam.",
            "details": {"retry_after": 1800},
        }
        assert gemini_stub.requests == []


class TestUnconfigured:
    @pytest.fixture
    def gemini_key(self):
        return ""

    @pytest.mark.asyncio
    async def test_stt_unavailable(self, client, alice, as_user):
        response = await client.post("/api/stt", files=AUDIO, headers=as_user(alice))
        assert response.status_code == 503
        assert response.json()["error"] == "STT service not configured"
        assert response.json()["details"].startswith("GEMINI_API_KEY belum di-set")

    @pytest.mark.asyncio
    async def test_advisor_health_degraded(self, client):
        response = await client.get("/api/advisor")
        assert response.json() == {"status": "degraded", "service": "ai-advisor"}


class TestProcess:
    """POST /api/process and /api/demo/process"""

    @pytest.mark.asyncio
    async def test_extracts_draft_with_user_categories(
        self, client, alice, default_categories, gemini_stub, as_user
    ):
        await client.post(
            "/api/categories", json={"name": "Kopi", "type": "expense"}, headers=as_user(alice)
        )
        gemini_stub.reply_text(
            '```json\n{"item": "Kopi susu", "amount": "20000", "category": "Kopi", '
            '"type": "EXPENSE", "date": "2020-01-01", "roast_message": "Ngopi lagi?"}\n```'
        )

        response = await client.post(
            "/api/process", json={"text": "beli kopi susu 20rb"}, headers=as_user(alice)
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Data berhasil diproses!"
        assert body["webhookResponse"] is None
        draft = body["data"]
        assert draft["item"] == "Kopi susu"
        assert draft["amount"] == 20000
        assert draft["type"] == "expense"
        assert draft["date"] != "2020-01-01"

        prompt = json.loads(gemini_stub.requests[0].content)["contents"][0]["parts"][0]["text"]
        assert "Kopi" in prompt
        assert "beli kopi susu 20rb" in prompt

    @pytest.mark.asyncio
    async def test_empty_text(self, client, alice, as_user):
        response = await client.post("/api/process", json={"text": "  "}, headers=as_user(alice))
        assert response.status_code == 400
        assert response.json()["error"] == "Text harus diisi"

    @pytest.mark.asyncio
    async def test_unparseable_output(self, client, alice, gemini_stub, as_user):
        gemini_stub.reply_text("Maaf, saya tidak mengerti")
        response = await client.post(
            "/api/process", json={"text": "halo"}, headers=as_user(alice)
        )
        assert response.status_code == 500
        assert response.json()["error"] == "Gagal mengekstrak JSON dari response AI"

    @pytest.mark.asyncio
    async def test_demo_uses_fixed_categories(self, client, gemini_stub):
        gemini_stub.reply_text('{"item": "Gaji", "amount": 5000000, "type": "income"}')

        response = await client.post("/api/demo/process", json={"text": "gajian 5 juta"})
        assert response.status_code == 200
        assert response.json()["data"]["type"] == "income"
        prompt = json.loads(gemini_stub.requests[0].content)["contents"][0]["parts"][0]["text"]
        assert "Hadiah" in prompt

    @pytest.mark.asyncio
    async def test_expired_user_is_gated(self, client, db, as_user):
        user = await make_user(
            db, "user_expired", trial_ends_at=datetime.utcnow() - timedelta(days=1)
        )
        response = await client.post("/api/process", json={"text": "kopi"}, headers=as_user(user))
        assert response.status_code == 403


class TestScan:
    """POST /api/scan"""

    @pytest.mark.asyncio
    async def test_reads_receipt(self, client, alice, gemini_stub, as_user):
        gemini_stub.reply_text(
            '{"item": "Belanja Indomaret", "amount": 87500, "category": "Belanja", '
            '"location": "Indomaret", "type": "income"}'
        )
        response = await client.post(
            "/api/scan",
            json={"imageBase64": "data:image/png;base64,iVBORw0KGgo="},
            headers=as_user(alice),
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["amount"] == 87500
        assert data["type"] == "expense"
        assert data["location"] == "Indomaret"

        image = json.loads(gemini_stub.requests[0].content)["contents"][0]["parts"][1]
        assert image["inline_data"] == {"mime_type": "image/png", "data": "iVBORw0KGgo="}

    @pytest.mark.asyncio
    async def test_missing_image(self, client, alice, as_user):
        response = await client.post("/api/scan", json={}, headers=as_user(alice))
        assert response.status_code == 400
        assert response.json()["error"] == "Gambar struk harus diupload"

    @pytest.mark.asyncio
    async def test_no_total_found(self, client, alice, gemini_stub, as_user):
        gemini_stub.reply_text('{"item": "Struk", "amount": 0}')
        response = await client.post(
            "/api/scan", json={"imageBase64": "aGVsbG8="}, headers=as_user(alice)
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("Tidak dapat membaca total harga")

    @pytest.mark.asyncio
    async def test_overloaded_model(self, client, alice, gemini_stub, as_user):
        gemini_stub.reply_error(503, "The model is overloaded.")
        response = await client.post(
            "/api/scan", json={"imageBase64": "aGVsbG8="}, headers=as_user(alice)
        )
        assert response.status_code == 503
        assert response.json()["error"].startswith("Server AI sedang sibuk")


class TestAdvisor:
    """POST /api/advisor"""

    @pytest.mark.asyncio
    async def test_answers_with_spending_context(self, client, db, alice, gemini_stub, as_user):
        await make_wallet(db, alice, "Cash", 100000, is_default=True)
        await client.post(
            "/api/transaction",
            json={
                "item": "Nasi Padang",
                "amount": 35000,
                "category": "Makanan",
                "date": date.today().isoformat(),
            },
            headers=as_user(alice),
        )
        gemini_stub.reply_text("Pengeluaran makanmu masih aman kok!")

        response = await client.post(
            "/api/advisor",
            json={
                "message": "Boros nggak <b>aku</b>?",
                "conversationHistory": [
                    {"role": "user", "content": "Halo"},
                    {"role": "assistant", "content": "Hai!"},
                ],
            },
            headers=as_user(alice),
        )
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "response": "Pengeluaran makanmu masih aman kok!",
            "context": {"total_transactions": 1, "total_spent": 35000.0},
        }

        contents = json.loads(gemini_stub.requests[0].content)["contents"]
        assert "Nasi Padang" in contents[0]["parts"][0]["text"]
        assert [c["role"] for c in contents] == ["user", "model", "user", "model", "user"]
        assert contents[-1]["parts"][0]["text"] == "Boros nggak baku/b?"

    @pytest.mark.asyncio
    async def test_empty_message(self, client, alice, as_user):
        response = await client.post("/api/advisor", json={"message": "<>"}, headers=as_user(alice))
        assert response.status_code == 400
        assert response.json()["error"] == "Pesan harus diisi"

    @pytest.mark.asyncio
    async def test_rate_limited_per_user(self, client, alice, fake_redis, as_user):
        fake_redis.counters[f"halodompet:ratelimit:advisor:{alice.id}"] = 20

        response = await client.post(
            "/api/advisor", json={"message": "Halo"}, headers=as_user(alice)
        )
        assert response.status_code == 429
        assert response.json()["error"] == "Terlalu banyak pertanyaan. Tunggu sebentar ya."
        assert response.json()["details"] == {"retry_after": 60}

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/api/advisor")
        assert response.json() == {"status": "healthy", "service": "ai-advisor"}
