from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from booking.db.session import Base
from booking.models.common import IntIdMixin, CreatedAtMixin

class Flight(Base, IntIdMixin, CreatedAtMixin):
    __tablename__ = "flights"
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
