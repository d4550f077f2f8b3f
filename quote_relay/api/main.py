import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from starlette.types import ASGIApp, Message, Receive, Scope, Send
from time import perf_counter
from quote_relay.api.routes import router
from quote_relay.config import settings
from quote_relay.db.session import create_sink_engine, init_db, make_sessionmaker

logger = logging.getLogger("api")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # One engine for the whole process: ready before the first request, disposed after the last.
    engine = create_sink_engine(settings.DATABASE_URL)
    await init_db(engine)
    app.state.sessionmaker = make_sessionmaker(engine)
    logger.info(f"sink ready at {settings.DATABASE_URL}")
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("sink closed")

class RequestLogMiddleware:
    """Logs method, path, status and duration; passes `receive` through untouched."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        start = perf_counter()
        status = 500

        async def send_with_status(message: Message) -> None:
            nonlocal status
            if message.get("type") == "http.response.start":
                status = int(message.get("status") or 0)
            await send(message)

        try:
            await self.app(scope, receive, send_with_status)
        finally:
            duration_ms = int((perf_counter() - start) * 1000)
            logger.info(f"{scope.get('method')} {scope.get('path')} -> {status} ({duration_ms}ms)")

app = FastAPI(title="Quote Relay", lifespan=lifespan)
app.add_middleware(RequestLogMiddleware)
app.include_router(router)
