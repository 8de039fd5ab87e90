from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.persistence.models.base import Base


class ProviderCredentialDB(Base):
	__tablename__ = 'exchange_providers'

	id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
	name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
	base_url: Mapped[str] = mapped_column(String(500), nullable=False)
	encrypted_api_key: Mapped[str] = mapped_column(Text, nullable=False)
	is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
	created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
	updated_at: Mapped[datetime] = mapped_column(
		DateTime, server_default=func.now(), onupdate=func.now()
	)
