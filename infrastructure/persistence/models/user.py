from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.persistence.models.base import Base


class UserDB(Base):
	__tablename__ = 'users'

	id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
	username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
	email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
	first_name: Mapped[str] = mapped_column(String(100), nullable=False, default='')
	last_name: Mapped[str] = mapped_column(String(100), nullable=False, default='')
	hash_password: Mapped[str] = mapped_column(String(255), nullable=False)
	is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
	role: Mapped[str] = mapped_column(String(32), nullable=False)
	created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
	updated_at: Mapped[datetime] = mapped_column(
		DateTime, server_default=func.now(), onupdate=func.now()
	)
