"""Registration model — lead form submissions."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, CreatedAtMixin, UUIDMixin


class Registration(Base, UUIDMixin, CreatedAtMixin):
    __tablename__ = "registrations"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    inquiry_type: Mapped[str] = mapped_column(String(20), default="register")

    # Admin processing
    status: Mapped[str] = mapped_column(
        String(20), default="new", index=True
    )  # new|contacted|enrolled|closed
    notes: Mapped[str] = mapped_column(Text, default="")
