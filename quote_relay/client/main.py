import logging
from quote_relay.config import settings
from quote_relay.deadline import Deadline
from quote_relay.errors import SinkWriteError
from quote_relay.requester import fetch_quote
from quote_relay.schemas import Quote

log = logging.getLogger("client")

def write_sink(path: str, label: str, quote: Quote) -> None:
    """Replace the contents of `path` with a single `label: bid` line."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(f"{label}: {quote.bid}\n")
    except OSError as e:
        raise SinkWriteError(path, e) from e

async def run_client() -> Quote:
    """
    One end-to-end run against the relay server.

    Any failure propagates; the file is only touched once a quote is in hand.
    """
    deadline = Deadline(settings.CLIENT_TIMEOUT, stage="client fetch")
    quote = await fetch_quote(deadline, settings.SERVER_URL, ("bid",))
    write_sink(settings.SINK_FILE, settings.SINK_LABEL, quote)
    log.debug(f"wrote bid {quote.bid} to {settings.SINK_FILE}")
    return quote
