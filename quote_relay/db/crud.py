import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from quote_relay.db.models import Currency
from quote_relay.deadline import Deadline
from quote_relay.errors import DeadlineExceeded, PersistError
from quote_relay.schemas import Quote

log = logging.getLogger("persister")

async def save_quote(sessionmaker: async_sessionmaker, deadline: Deadline, quote: Quote) -> None:
    """
    Insert one row for `quote`.

    The deadline is checked once the session is open and before the insert; an
    insert that has started is allowed to finish.
    """
    try:
        async with sessionmaker() as session:
            try:
                deadline.check()
            except DeadlineExceeded as e:
                raise PersistError(e) from e
            session.add(Currency(bid=quote.as_decimal()))
            await session.commit()
    except SQLAlchemyError as e:
        raise PersistError(e) from e
    log.debug(f"saved bid {quote.bid}")
