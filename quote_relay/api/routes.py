import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import async_sessionmaker
from quote_relay.config import settings
from quote_relay.db import crud
from quote_relay.deadline import Deadline
from quote_relay.errors import (
    DeadlineExceeded,
    DecodeError,
    PersistError,
    QuoteRelayError,
    ScopeCancelled,
    TransportError,
    UnexpectedStatus,
)
from quote_relay.requester import fetch_quote
from quote_relay.schemas import Quote

logger = logging.getLogger("api")

router = APIRouter()

def get_sessionmaker(request: Request) -> async_sessionmaker:
    return request.app.state.sessionmaker

@asynccontextmanager
async def watch_disconnect(request: Request, interval: float) -> AsyncIterator[asyncio.Event]:
    """
    Yield an event that is set once the caller goes away.

    The poller is stopped through `stop`, never cancelled: `is_disconnected()`
    runs inside its own cancel scope and can swallow a task cancellation.
    """
    disconnected = asyncio.Event()
    stop = asyncio.Event()

    async def poll():
        while not stop.is_set():
            if await request.is_disconnected():
                disconnected.set()
                return
            try:
                await asyncio.wait_for(stop.wait(), interval)
            except asyncio.TimeoutError:
                pass

    watcher = asyncio.create_task(poll())
    try:
        yield disconnected
    finally:
        stop.set()
        await watcher

def log_fetch_failure(e: QuoteRelayError) -> None:
    if isinstance(e, DeadlineExceeded):
        logger.warning(f"timeout when making request dollar quote api: {e}")
    elif isinstance(e, ScopeCancelled):
        logger.info("caller disconnected before the quote arrived")
    elif isinstance(e, TransportError):
        logger.error(f"quote source unreachable: {e}")
    elif isinstance(e, (UnexpectedStatus, DecodeError)):
        logger.error(f"quote source returned bad data: {e}")
    else:
        logger.error(f"quote fetch failed: {e}")

async def persist_best_effort(sessionmaker: async_sessionmaker, quote: Quote) -> None:
    # Fresh clock, no link to the caller: a disconnect must not stop the write.
    deadline = Deadline(settings.PERSIST_TIMEOUT, stage="persist")
    try:
        await crud.save_quote(sessionmaker, deadline, quote)
    except PersistError as e:
        if e.timed_out:
            logger.warning(f"timeout when saving data to database: {e.cause}")
        else:
            logger.error(f"local storage write failed: {e}")

@router.get("/cotacao")
async def get_cotacao(
    request: Request,
    sessionmaker: async_sessionmaker = Depends(get_sessionmaker),
):
    async with watch_disconnect(request, settings.DISCONNECT_POLL_INTERVAL) as disconnected:
        deadline = Deadline(settings.FETCH_TIMEOUT, stage="fetch", cancelled=disconnected)
        try:
            quote = await fetch_quote(deadline, settings.SOURCE_URL, settings.source_bid_path)
        except QuoteRelayError as e:
            log_fetch_failure(e)
            return PlainTextResponse(f"error when searching for quote: {e}", status_code=500)

    await persist_best_effort(sessionmaker, quote)
    return {"bid": quote.bid}
