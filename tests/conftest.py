# tests/conftest.py
import asyncio
from typing import Any

import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select

from quote_relay.api.main import app
from quote_relay.config import settings
from quote_relay.db.models import Currency
from quote_relay.db.session import create_sink_engine, init_db, make_sessionmaker


class StubUpstream:
    """Stand-in for a remote quote API; tests tweak status, payload and delay."""

    def __init__(self, payload: Any):
        self.payload = payload
        self.status = 200
        self.delay = 0.0
        self.hits = 0
        self.url = ""
        self.release = asyncio.Event()

    async def handle(self, request: web.Request) -> web.StreamResponse:
        self.hits += 1
        if self.delay:
            try:
                await asyncio.wait_for(self.release.wait(), self.delay)
            except asyncio.TimeoutError:
                pass
        if isinstance(self.payload, str):
            return web.Response(text=self.payload, status=self.status)
        return web.json_response(self.payload, status=self.status)


async def start_upstream(path: str, payload: Any):
    stub = StubUpstream(payload)
    upstream_app = web.Application()
    upstream_app.router.add_get(path, stub.handle)
    server = TestServer(upstream_app)
    await server.start_server()
    stub.url = str(server.make_url(path))
    return stub, server


async def stop_upstream(stub: StubUpstream, server: TestServer):
    # wake any handler still sleeping so shutdown does not wait on it
    stub.release.set()
    await server.close()


# 1) Simulated external quote source (the server's upstream)
@pytest_asyncio.fixture
async def upstream():
    stub, server = await start_upstream("/json/last/USD-BRL", {"USDBRL": {"code": "USD", "bid": "5.43"}})
    yield stub
    await stop_upstream(stub, server)


# 2) Simulated relay server (the client's upstream)
@pytest_asyncio.fixture
async def relay_upstream():
    stub, server = await start_upstream("/cotacao", {"bid": "5.43"})
    yield stub
    await stop_upstream(stub, server)


# 3) Function-scoped sink: a fresh SQLite file per test
@pytest_asyncio.fixture
async def sink_engine(tmp_path):
    engine = create_sink_engine(f"sqlite+aiosqlite:///{(tmp_path / 'currencies.db').as_posix()}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def sessionmaker(sink_engine):
    return make_sessionmaker(sink_engine)


# 4) Client for the relay app, wired to the stub source and the test sink
@pytest_asyncio.fixture
async def api_client(sessionmaker, upstream, monkeypatch):
    monkeypatch.setattr(settings, "SOURCE_URL", upstream.url)
    app.state.sessionmaker = sessionmaker
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def stored_rows(sessionmaker):
    async def fetch():
        async with sessionmaker() as s:
            return (await s.execute(select(Currency).order_by(Currency.id))).scalars().all()
    return fetch
