from typing import Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./currencies.db"
    TABLE_NAME: str = "currency"

    SOURCE_URL: str = "https://economia.awesomeapi.com.br/json/last/USD-BRL"
    SOURCE_PAIR: str = "USDBRL"

    # Stage budgets, in seconds. Each one starts its own clock.
    FETCH_TIMEOUT: float = 0.2
    PERSIST_TIMEOUT: float = 0.01
    CLIENT_TIMEOUT: float = 0.01
    DISCONNECT_POLL_INTERVAL: float = 0.005

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    SERVER_URL: str = "http://localhost:8080/cotacao"
    SINK_FILE: str = "cotacao.txt"
    SINK_LABEL: str = "Dólar"

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    SERVICE_NAME: str = "quote-relay"

    model_config = SettingsConfigDict(env_file=".env")

    @property
    def source_bid_path(self) -> Tuple[str, ...]:
        return (self.SOURCE_PAIR, "bid")

settings = Settings()
