"""Tests for the ZeroMQ RPC client against an in-process REP service"""

import threading

import pytest
import zmq

from rfplane.rpc import MockRPCClient, RPCClient
from rfplane.types import (
    AckResponse,
    CommsError,
    ErrorResponse,
    RemoteError,
    RPCClientProtocol,
    RPCRequest,
    RPCResponse,
    ValueResponse,
)

TOKEN = "3f2a9c"


class FakeService(threading.Thread):
    """Answers RPC requests on a random local port until stopped."""

    def __init__(self):
        super().__init__(daemon=True)
        self.context = zmq.Context()
        self.socket = self.context.socket(zmq.REP)
        self.port = self.socket.bind_to_random_port("tcp://127.0.0.1")
        self.requests: list[RPCRequest] = []
        self._stop_event = threading.Event()

    def handle(self, req: RPCRequest) -> RPCResponse:
        if req.method == "ping":
            return ValueResponse(value=req.params[0])
        if req.token != TOKEN:
            return ErrorResponse(value="invalid session token")
        if req.notify:
            return AckResponse(value="ok")
        if req.method == "db_0_set_freq":
            which, freq, skip_sync = req.params
            return ValueResponse(value=freq + 1.0)
        return ErrorResponse(value=f"no such method {req.method}")

    def run(self):
        while not self._stop_event.is_set():
            if self.socket.poll(50):
                req = RPCRequest.from_msgpack(self.socket.recv())
                self.requests.append(req)
                self.socket.send(self.handle(req).to_msgpack())
        self.socket.close(linger=0)
        self.context.term()

    def stop(self):
        self._stop_event.set()
        self.join(timeout=5)


@pytest.fixture
def service():
    service = FakeService()
    service.start()
    yield service
    service.stop()


@pytest.fixture
def client(service: FakeService):
    client = RPCClient("127.0.0.1", service.port, token=TOKEN, timeout=2)
    yield client
    client.close()


class TestRPCClient:
    def test_ping(self, client: RPCClient):
        assert client.ping()
        assert client.ping("hello")

    def test_request_with_token(self, client: RPCClient, service: FakeService):
        assert client.request_with_token("db_0_set_freq", "RX1", 1e9, False) == 1e9 + 1
        req = service.requests[-1]
        assert req.method == "db_0_set_freq"
        assert req.params == ["RX1", 1e9, False]
        assert req.token == TOKEN
        assert not req.notify

    def test_notify_with_token(self, client: RPCClient, service: FakeService):
        assert client.notify_with_token("set_db_eeprom", 0, {"serial": "X"}) is None
        assert service.requests[-1].notify

    def test_remote_error(self, client: RPCClient):
        with pytest.raises(RemoteError) as exc_info:
            client.request_with_token("db_0_frobnicate")
        assert exc_info.value.method == "db_0_frobnicate"
        assert "no such method" in str(exc_info.value)

    def test_bad_token(self, client: RPCClient):
        client.set_token("stale")
        assert client.get_token() == "stale"
        with pytest.raises(RemoteError):
            client.request_with_token("db_0_set_freq", "RX1", 1e9, False)

    def test_missing_token(self, service: FakeService):
        with RPCClient("127.0.0.1", service.port, timeout=2) as client:
            with pytest.raises(CommsError):
                client.request_with_token("db_0_get_freq", "RX1")
        assert service.requests == []

    def test_closed_client(self, service: FakeService):
        client = RPCClient("127.0.0.1", service.port, token=TOKEN)
        client.close()
        assert not client.is_connected()
        with pytest.raises(CommsError):
            client.request_with_token("db_0_get_freq", "RX1")

    def test_satisfies_protocol(self, client: RPCClient):
        assert isinstance(client, RPCClientProtocol)
        assert isinstance(MockRPCClient(), RPCClientProtocol)


class TestUnresponsiveService:
    @pytest.fixture
    def silent_port(self):
        """A bound REP socket that never reads its requests."""
        context = zmq.Context()
        socket = context.socket(zmq.REP)
        port = socket.bind_to_random_port("tcp://127.0.0.1")
        yield port
        socket.close(linger=0)
        context.term()

    def test_gives_up_after_retries(self):
        # bound, but not answering until started
        service = FakeService()
        client = RPCClient(
            "127.0.0.1", service.port, token=TOKEN, timeout=0.1, request_retries=2
        )
        try:
            with pytest.raises(CommsError):
                client.request_with_token("db_0_set_freq", "RX1", 1e9, False)
            assert not client.is_connected()

            service.start()
            client.timeout = 2
            assert client.request_with_token("db_0_set_freq", "RX1", 2e9, False) == 2e9 + 1
            assert client.is_connected()
        finally:
            client.close()
            if service.is_alive():
                service.stop()

    def test_ping_fails_quietly(self, silent_port):
        client = RPCClient("127.0.0.1", silent_port, timeout=0.1, request_retries=1)
        assert not client.ping()
        client.close()


class TestMessages:
    def test_response_discriminator(self):
        raw = ErrorResponse(value="nope").to_msgpack()
        resp = RPCResponse.from_msgpack(raw)
        assert isinstance(resp, ErrorResponse)
        assert resp.value == "nope"


class TestMockRPCClient:
    def test_shared_lo_by_default(self):
        rpcc = MockRPCClient()
        assert rpcc.request_with_token("db_0_set_freq", "RX1", 1e9, False) == 1e9
        assert rpcc.request_with_token("db_0_get_freq", "RX2") == 1e9
        assert rpcc.request_with_token("db_0_get_freq", "TX1") is None

    def test_separate_lo_groups(self):
        rpcc = MockRPCClient(lo_groups=((0,), (1,)))
        rpcc.request_with_token("db_0_set_freq", "RX1", 1e9, False)
        rpcc.request_with_token("db_0_set_freq", "RX2", 2e9, False)
        assert rpcc.request_with_token("db_0_get_freq", "RX1") == 1e9
        assert rpcc.request_with_token("db_0_get_freq", "RX2") == 2e9

    def test_gain_is_per_channel(self):
        rpcc = MockRPCClient()
        rpcc.request_with_token("db_0_set_gain", "TX1", 10.0)
        assert rpcc.request_with_token("db_0_get_gain", "TX2") is None
