import sys
import uvicorn
from quote_relay.utils.logging import setup_logging
from quote_relay.config import settings

def main():
    if len(sys.argv) < 2:
        print("Usage: python run.py [server|client]")
        sys.exit(1)

    cmd = sys.argv[1]

    if cmd == "server":
        setup_logging(component="server")
        uvicorn.run(
            "quote_relay.api.main:app",
            host=settings.HOST,
            port=settings.PORT,
            log_level=settings.LOG_LEVEL.lower(),
            access_log=True,
        )
    elif cmd == "client":
        setup_logging(component="client")
        import asyncio
        import logging
        from quote_relay.client.main import run_client
        from quote_relay.errors import QuoteRelayError
        try:
            asyncio.run(run_client())
        except QuoteRelayError as e:
            logging.getLogger("client").error(f"error getting quote: {e}")
            sys.exit(1)
        print(f"quote saved in {settings.SINK_FILE} successfully!")
    else:
        print(f"Unknown command: {cmd}")
        sys.exit(1)

if __name__ == "__main__":
    main()
