"""SQLAlchemy implementation of ExchangeStore.

Each call runs in its own short transaction and returns detached
CurrencyExchangeEntity values, never ORM objects.
"""

import logging

from sqlalchemy import Engine, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from currency_exchange.database import create_db_engine, create_session_factory
from currency_exchange.entities import CurrencyExchangeEntity
from currency_exchange.exceptions import DuplicateExchangeError, OptimisticLockError
from currency_exchange.models import CurrencyExchangeRecord

logger = logging.getLogger(__name__)


class SqlAlchemyExchangeRepository:
    """Relational store for exchange rates.

    This class satisfies the ExchangeStore protocol through structural
    typing - no explicit inheritance needed.

    Concurrent updates are detected with the ``version`` column: an entity
    carrying a stale version, or a flush racing another writer, raises
    OptimisticLockError.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        """Initialize the repository.

        Args:
            session_factory: Factory producing sessions bound to the database (required).
        """
        self._session_factory = session_factory

    @classmethod
    def create(cls, engine: Engine | None = None) -> "SqlAlchemyExchangeRepository":
        """Factory method to create the repository with defaults.

        Args:
            engine: SQLAlchemy engine. If None, creates one from settings.

        Returns:
            Configured SqlAlchemyExchangeRepository
        """
        return cls(create_session_factory(engine or create_db_engine()))

    @staticmethod
    def _to_entity(record: CurrencyExchangeRecord) -> CurrencyExchangeEntity:
        return CurrencyExchangeEntity(
            id=record.id,
            from_currency=record.currency_from,
            to_currency=record.currency_to,
            conversion_multiple=record.conversion_multiple,
            version=record.version,
        )

    def find_by_from_and_to(self, from_currency: str, to_currency: str) -> CurrencyExchangeEntity | None:
        stmt = select(CurrencyExchangeRecord).where(
            CurrencyExchangeRecord.currency_from == from_currency,
            CurrencyExchangeRecord.currency_to == to_currency,
        )
        with self._session_factory() as session:
            record = session.execute(stmt).scalar_one_or_none()
            return self._to_entity(record) if record else None

    def find_by_id(self, entity_id: int) -> CurrencyExchangeEntity | None:
        with self._session_factory() as session:
            record = session.get(CurrencyExchangeRecord, entity_id)
            return self._to_entity(record) if record else None

    def save(self, entity: CurrencyExchangeEntity) -> CurrencyExchangeEntity:
        """Insert a new row or update the existing row with the same id.

        Args:
            entity: The entity to persist

        Returns:
            The persisted entity with id and version populated

        Raises:
            OptimisticLockError: If ``entity.version`` is set and stale, or
                another writer updated the row first
            DuplicateExchangeError: If the currency pair is already stored
        """
        try:
            with self._session_factory.begin() as session:
                record = None
                if entity.id is not None:
                    record = session.get(CurrencyExchangeRecord, entity.id)

                if record is None:
                    record = CurrencyExchangeRecord(
                        id=entity.id,
                        currency_from=entity.from_currency,
                        currency_to=entity.to_currency,
                        conversion_multiple=entity.conversion_multiple,
                    )
                    session.add(record)
                else:
                    if entity.version is not None and entity.version != record.version:
                        raise OptimisticLockError(
                            entity.id,
                            f"CurrencyExchange {entity.id} is at version {record.version}, "
                            f"update was based on version {entity.version}",
                        )
                    record.currency_from = entity.from_currency
                    record.currency_to = entity.to_currency
                    record.conversion_multiple = entity.conversion_multiple

                session.flush()
                saved = self._to_entity(record)
        except StaleDataError as e:
            logger.info("Concurrent update detected for CurrencyExchange %s", entity.id)
            raise OptimisticLockError(entity.id) from e
        except IntegrityError as e:
            raise DuplicateExchangeError(entity.from_currency, entity.to_currency) from e

        logger.debug("Saved %s", saved)
        return saved

    def delete_by_id(self, entity_id: int) -> bool:
        with self._session_factory.begin() as session:
            record = session.get(CurrencyExchangeRecord, entity_id)
            if record is None:
                return False
            session.delete(record)
        return True

    def health_check(self) -> bool:
        """Check if the database is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            with self._session_factory() as session:
                session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False
