from sqlalchemy.orm import declarative_base, Mapped, mapped_column
from sqlalchemy import Numeric, DateTime, Integer, func
from datetime import datetime
from decimal import Decimal
from quote_relay.config import settings

Base = declarative_base()

class Currency(Base):
    __tablename__ = settings.TABLE_NAME
    __table_args__ = {"sqlite_autoincrement": True}
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bid: Mapped[Decimal] = mapped_column(Numeric)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
