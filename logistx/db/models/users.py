"""ORM model for user profiles (identity-provider subject + role)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from logistx.db.base import Base, IdMixin, TimestampMixin


class Profile(Base, IdMixin, TimestampMixin):
    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="staff")
