"""Tests for the Tinkerer agent directory and command channel."""

import json

import httpx
import pytest
from configset.domain.exceptions import AgentDiscoveryError, ChannelError
from configset.infrastructure.config import TinkererConfig
from configset.infrastructure.tinkerer import (
    AsyncCommandResponse,
    TinkererAgentDirectory,
    TinkererCommandChannel,
    create_http_client,
)

CONFIG = TinkererConfig(
    base_url="https://tinkerer.example.com/deployment-tinkerer/v0.9/api/",
    username="admin",
    password="secret",
)


def _client(handler):
    return create_http_client(CONFIG, transport=httpx.MockTransport(handler))


class _AgentRuntime:
    """In-memory stand-in for the Tinkerer operation endpoints."""

    def __init__(self, output=b"", exit_value=0, stream_status=200, agent_id="tp-1:i-1"):
        self.agent_id = agent_id
        self.output = output
        self.exit_value = exit_value
        self.stream_status = stream_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith(f"/agent/{self.agent_id}/operation") and request.method == "POST":
            return httpx.Response(200, json={"operationId": "op-42"})
        if path.endswith("/operation/op-42/stream"):
            return httpx.Response(self.stream_status, content=self.output)
        if path.endswith("/operation/op-42/exit-value"):
            return httpx.Response(200, json={"exitValue": self.exit_value})
        return httpx.Response(404)


class TestCreateHttpClient:
    def test_requires_base_url(self):
        with pytest.raises(ValueError):
            create_http_client(TinkererConfig())

    @pytest.mark.asyncio
    async def test_basic_auth_header(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json=[])

        async with _client(handler) as client:
            await TinkererAgentDirectory(client).list_agents("tp-1")

        assert seen["auth"] == "Basic YWRtaW46c2VjcmV0"


class TestTinkererAgentDirectory:
    @pytest.mark.asyncio
    async def test_lists_agents(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            return httpx.Response(200, json=[
                {"agentId": "tp-1:i-1", "instanceName": "node-1"},
                {"agentId": "tp-1:i-2"},
            ])

        async with _client(handler) as client:
            agents = await TinkererAgentDirectory(client).list_agents("tp-1")

        assert seen["url"] == (
            "https://tinkerer.example.com/deployment-tinkerer/v0.9/api/test-plan/tp-1/agents"
        )
        assert [a.agent_id for a in agents] == ["tp-1:i-1", "tp-1:i-2"]
        assert agents[0].instance_name == "node-1"

    @pytest.mark.asyncio
    async def test_empty_list_is_not_an_error(self):
        async with _client(lambda request: httpx.Response(200, json=[])) as client:
            assert await TinkererAgentDirectory(client).list_agents("tp-1") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(401),
        httpx.Response(500, text="boom"),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"agents": []}),
        httpx.Response(200, json=[{"instanceName": "no id"}]),
    ])
    async def test_bad_responses_raise(self, response):
        async with _client(lambda request: response) as client:
            with pytest.raises(AgentDiscoveryError):
                await TinkererAgentDirectory(client).list_agents("tp-1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        httpx.ConnectError("connection refused"),
        httpx.InvalidURL("Invalid non-printable ASCII character in URL"),
        httpx.StreamClosed(),
    ])
    async def test_transport_error_raises(self, error):
        def handler(request):
            raise error

        async with _client(handler) as client:
            with pytest.raises(AgentDiscoveryError):
                await TinkererAgentDirectory(client).list_agents("tp-1")

    @pytest.mark.asyncio
    async def test_test_plan_id_is_one_path_segment(self):
        seen = {}

        def handler(request):
            seen["raw_path"] = request.url.raw_path
            return httpx.Response(200, json=[])

        async with _client(handler) as client:
            await TinkererAgentDirectory(client).list_agents("tp/1?x#y")

        assert seen["raw_path"] == (
            b"/deployment-tinkerer/v0.9/api/test-plan/tp%2F1%3Fx%23y/agents"
        )


class TestTinkererCommandChannel:
    @pytest.mark.asyncio
    async def test_streams_lines_and_returns_exit_value(self):
        runtime = _AgentRuntime(output=b"extracting\nchmod done\n", exit_value=0)
        lines = []

        async with _client(runtime) as client:
            exit_code = await TinkererCommandChannel(client).execute(
                "tp-1:i-1", "mkdir repos", lines.append
            )

        assert exit_code == 0
        assert lines == ["extracting", "chmod done"]
        body = json.loads(runtime.requests[0].content)
        assert body == {"code": "SHELL", "request": "mkdir repos"}

    @pytest.mark.asyncio
    async def test_timeout_sentinel_returned_as_exit_code(self):
        runtime = _AgentRuntime(exit_value=408)

        async with _client(runtime) as client:
            assert await TinkererCommandChannel(client).execute("tp-1:i-1", "sleep 999") == 408

    @pytest.mark.asyncio
    @pytest.mark.parametrize("agent_id, raw_segment", [
        ("tp-1#i-1", b"tp-1%23i-1"),
        ("tp-1?i-1", b"tp-1%3Fi-1"),
        ("bad\x01id", b"bad%01id"),
    ])
    async def test_agent_id_is_one_path_segment(self, agent_id, raw_segment):
        runtime = _AgentRuntime(exit_value=0, agent_id=agent_id)

        async with _client(runtime) as client:
            assert await TinkererCommandChannel(client).execute(agent_id, "ls") == 0

        post = runtime.requests[0]
        assert post.method == "POST"
        assert post.url.raw_path == (
            b"/deployment-tinkerer/v0.9/api/agent/" + raw_segment + b"/operation"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        httpx.InvalidURL("Invalid non-printable ASCII character in URL"),
        httpx.StreamClosed(),
    ])
    async def test_non_http_errors_become_channel_errors(self, error):
        def handler(request):
            if request.url.path.endswith("/exit-value"):
                raise error
            return _AgentRuntime()(request)

        async with _client(handler) as client:
            with pytest.raises(ChannelError) as excinfo:
                await TinkererCommandChannel(client).execute("tp-1:i-1", "ls")
        assert excinfo.value.operation_id == "op-42"

    @pytest.mark.asyncio
    async def test_operation_start_failure(self):
        async with _client(lambda request: httpx.Response(503)) as client:
            with pytest.raises(ChannelError) as excinfo:
                await TinkererCommandChannel(client).execute("tp-1:i-1", "ls")
        assert excinfo.value.agent_id == "tp-1:i-1"

    @pytest.mark.asyncio
    async def test_stream_open_failure(self):
        runtime = _AgentRuntime(stream_status=404)

        async with _client(runtime) as client:
            with pytest.raises(ChannelError) as excinfo:
                await TinkererCommandChannel(client).execute("tp-1:i-1", "ls")
        assert excinfo.value.operation_id == "op-42"

    @pytest.mark.asyncio
    async def test_exit_value_failure(self):
        def handler(request):
            if request.url.path.endswith("/exit-value"):
                return httpx.Response(200, json={"status": "unknown"})
            return _AgentRuntime()(request)

        async with _client(handler) as client:
            with pytest.raises(ChannelError):
                await TinkererCommandChannel(client).execute("tp-1:i-1", "ls")


class TestAsyncCommandResponse:
    @pytest.mark.asyncio
    async def test_pull_contract(self):
        runtime = _AgentRuntime(output=b"a\nb", exit_value=2)

        async with _client(runtime) as client:
            response = await AsyncCommandResponse.open(client, "tp-1:i-1", "ls")
            assert response.operation_id == "op-42"
            assert await response.has_more_content() is True
            # asking twice does not consume the line
            assert await response.has_more_content() is True
            assert await response.read_line() == "a"
            assert await response.read_line() == "b"
            assert await response.has_more_content() is False
            with pytest.raises(ChannelError):
                await response.read_line()
            await response.end_stream()
            await response.end_stream()
            assert await response.exit_value() == 2
