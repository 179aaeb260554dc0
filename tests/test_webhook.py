"""Tests for the Telegram webhook adapter."""

import json

import pytest
from fastapi.testclient import TestClient

from beanbot.orchestrator import TransactionFlow
from beanbot.webhook import ResponseBody, Update, handle_update
from beanbot.webhook.app import create_app, get_flow


UPDATE = {
    "update_id": 459592837,
    "message": {
        "message_id": 7,
        "from": {
            "id": 247673932,
            "is_bot": False,
            "first_name": "Liang",
            "username": "liul85",
            "language_code": "en",
        },
        "chat": {
            "id": 247673932,
            "first_name": "Liang",
            "username": "liul85",
            "type": "private",
        },
        "date": 1631506802,
        "text": "2021-09-08 @KFC chicken 12.9 AUD cba > food",
    },
}


@pytest.fixture
def flow(parser, ledger_store) -> TransactionFlow:
    return TransactionFlow(parser=parser, ledger_store=ledger_store)


class TestUpdateModel:
    def test_deserialize_update(self):
        update = Update.model_validate_json(json.dumps(UPDATE))
        assert update.update_id == 459592837
        assert update.message.text == "2021-09-08 @KFC chicken 12.9 AUD cba > food"
        assert update.message.chat.chat_type == "private"
        assert update.message.from_user.username == "liul85"

    def test_edited_message_is_used_as_fallback(self):
        payload = {"update_id": 1, "edited_message": UPDATE["message"]}
        update = Update.model_validate(payload)
        assert update.effective_message.message_id == 7


class TestHandleUpdate:
    """Tests for handle_update."""

    def test_reply_to_transaction(self, flow, content_store):
        response = handle_update(json.dumps(UPDATE), flow)

        assert isinstance(response, ResponseBody)
        assert response.method == "sendMessage"
        assert response.chat_id == 247673932
        assert response.reply_to_message_id == 7
        assert response.text.startswith("✅\n")
        assert "  Expense:Food        12.90 AUD\n" in response.text
        assert "2021.bean" in content_store

    def test_reply_to_bad_message(self, flow, content_store):
        payload = json.loads(json.dumps(UPDATE))
        payload["message"]["text"] = "I am testing here"

        response = handle_update(json.dumps(payload).encode(), flow)

        assert response.text.startswith("⚠️\n==============================\nFailed to parse input:")
        assert "2021.bean" not in content_store

    def test_edited_message(self, flow):
        payload = {"update_id": 2, "edited_message": UPDATE["message"]}
        response = handle_update(json.dumps(payload), flow)
        assert response.reply_to_message_id == 7

    @pytest.mark.parametrize(
        "body",
        [
            "not json",
            json.dumps({"update_id": 3}),
            json.dumps({"update_id": 4, "message": {**UPDATE["message"], "text": None}}),
        ],
    )
    def test_nothing_to_answer(self, flow, body):
        assert handle_update(body, flow) is None

    def test_response_serializes_for_bot_api(self, flow):
        response = handle_update(json.dumps(UPDATE), flow)
        payload = json.loads(response.model_dump_json())
        assert set(payload) == {"method", "chat_id", "text", "reply_to_message_id"}


class TestWebhookApp:
    """Tests for the HTTP entry point."""

    @pytest.fixture
    def client(self, flow):
        app = create_app()
        app.dependency_overrides[get_flow] = lambda: flow
        return TestClient(app)

    def test_reply_is_returned_in_response_body(self, client, content_store):
        response = client.post("/webhook", content=json.dumps(UPDATE))

        assert response.status_code == 200
        payload = response.json()
        assert payload["method"] == "sendMessage"
        assert payload["chat_id"] == 247673932
        assert payload["reply_to_message_id"] == 7
        assert payload["text"].startswith("✅\n")
        assert "2021.bean" in content_store

    def test_nothing_to_answer_is_empty_ok(self, client):
        """Test Telegram gets a 200 even for updates we ignore."""
        response = client.post("/webhook", content="not json")

        assert response.status_code == 200
        assert response.content == b""

    def test_only_post_is_routed(self, client):
        assert client.get("/webhook").status_code == 405
