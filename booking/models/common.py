import time
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import BigInteger, Integer

def unix_now() -> int:
    return int(time.time())

class IntIdMixin:
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

class CreatedAtMixin:
    created_at: Mapped[int] = mapped_column(BigInteger, default=unix_now, nullable=False)

class TimestampMixin(CreatedAtMixin):
    updated_at: Mapped[int] = mapped_column(BigInteger, default=unix_now, nullable=False)
