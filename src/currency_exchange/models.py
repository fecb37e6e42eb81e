"""SQLAlchemy table mappings.

Only the repository layer touches these classes; everything above it works
with CurrencyExchangeEntity.
"""

from decimal import Decimal

from sqlalchemy import Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all tables."""


class CurrencyExchangeRecord(Base):
    """Row of the ``currency_exchange`` table.

    ``version`` is SQLAlchemy's version counter: every UPDATE is issued
    with ``WHERE version = <loaded version>`` and bumps it, so a concurrent
    writer that read the same version gets a StaleDataError on flush.
    """

    __tablename__ = "currency_exchange"
    __table_args__ = (UniqueConstraint("currency_from", "currency_to", name="uq_currency_pair"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    currency_from: Mapped[str] = mapped_column(String(10), nullable=False)
    currency_to: Mapped[str] = mapped_column(String(10), nullable=False)
    conversion_multiple: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return (
            f"CurrencyExchangeRecord(id={self.id!r}, from={self.currency_from!r}, "
            f"to={self.currency_to!r}, version={self.version!r})"
        )
