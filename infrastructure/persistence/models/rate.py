from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.persistence.models.base import Base


class AggregatedRateDB(Base):
	__tablename__ = 'aggregated_rates'

	id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
	base_currency: Mapped[str] = mapped_column(String(5), nullable=False, index=True)
	quote_currency: Mapped[str] = mapped_column(String(5), nullable=False)
	# Decimal text; SQLite has no native DECIMAL and would round through float
	rate: Mapped[str] = mapped_column(String(64), nullable=False)
	source_count: Mapped[int] = mapped_column(Integer, nullable=False)
	sources: Mapped[str] = mapped_column(Text, nullable=False)  # comma-separated provider names
	timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)

	__table_args__ = (
		UniqueConstraint('base_currency', 'quote_currency', name='uq_base_quote_currency'),
	)
