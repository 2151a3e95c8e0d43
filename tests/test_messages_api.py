import httpx
import pytest

from gigline.errors import ApiError, TransportError
from gigline.messages import Endpoints
from tests.conftest import OTHER, message


class TestMessagesAPI:

    @pytest.mark.asyncio
    async def test_data_envelope_is_unwrapped(self, client, backend):
        backend.on("GET", "/api/messages/conversations", json={"status": "success", "data": [{"id": 3}]})
        conversations = await client.messages.list_conversations()
        assert [c.id for c in conversations] == ["3"]

    @pytest.mark.asyncio
    async def test_malformed_messages_are_skipped(self, client, backend):
        backend.on("GET", "/api/messages/conversations/1/messages",
                   json=[message("ok", OTHER), {"id": "broken"}])
        messages = await client.messages.list_messages("1")
        assert [m.id for m in messages] == ["ok"]

    @pytest.mark.asyncio
    async def test_history_raises_last_error_when_all_paths_fail(self, client, backend):
        with pytest.raises(ApiError) as exc:
            await client.messages.list_messages("1")
        assert exc.value.status_code == 404
        assert len(backend.calls) == 3

    @pytest.mark.asyncio
    async def test_single_history_endpoint(self, client, backend):
        client.messages.endpoints = Endpoints(message_history=["/v2/threads/{id}"])
        backend.on("GET", "/v2/threads/1", json={"messages": [message("a", OTHER)]})
        assert [m.id for m in await client.messages.list_messages("1")] == ["a"]
        assert backend.paths() == ["/v2/threads/1"]

    @pytest.mark.asyncio
    async def test_send_result_reads_nested_conversation_id(self, client, backend):
        backend.on("POST", "/messages/send-file",
                   json={"message": {**message("m", OTHER), "conversationId": 12}})
        result = await client.messages.send({"conversationId": "1", "content": "x"})
        assert result.conversation_id == "12"
        assert result.message.id == "m"

    @pytest.mark.asyncio
    async def test_null_conversations_body_is_empty(self, client, backend):
        backend.on("GET", "/api/messages/conversations", json=None)
        assert await client.messages.list_conversations() == []

    @pytest.mark.asyncio
    async def test_unexpected_conversations_shape_raises(self, client, backend):
        backend.on("GET", "/api/messages/conversations", json={"unexpected": True})
        with pytest.raises(ApiError):
            await client.messages.list_conversations()

    @pytest.mark.asyncio
    async def test_partial_message_keeps_nested_conversation_id(self, client, backend):
        backend.on("POST", "/messages/send-file", json={"message": {"id": "m5", "conversationId": 12}})
        result = await client.messages.send({"conversationId": "1", "content": "x"})
        assert result.conversation_id == "12"
        assert result.message is None

    @pytest.mark.asyncio
    async def test_bare_id_is_not_a_conversation_id(self, client, backend):
        backend.on("POST", "/messages/send-file", json={"id": "m5"})
        result = await client.messages.send({"conversationId": "1", "content": "x"})
        assert result.conversation_id is None

    @pytest.mark.asyncio
    async def test_transport_errors_are_wrapped(self, client, backend):
        def explode(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        backend.on("POST", "/api/messages/conversations/1/seen", handler=explode)
        with pytest.raises(TransportError):
            await client.messages.mark_seen("1")
