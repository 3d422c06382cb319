"""Row mapping and SQL access for meme coins."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Integer, String, delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from memecoin import errors
from memecoin.database import TransactionManager
from memecoin.model import MemeCoin, PopularityScore

DUPLICATE_ENTRY = 1062


def _now() -> datetime:
    return datetime.now()


class _Base(DeclarativeBase):
    pass


class MemeCoinRecord(_Base):
    """A row of ``meme_coin.meme_coin``."""

    __tablename__ = "meme_coin"
    __table_args__ = {"schema": "meme_coin"}

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(String(255))
    popularity_score: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=_now)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=_now, onupdate=_now
    )

    def to_aggregate(self) -> MemeCoin:
        """Rebuild the aggregate this row stores."""
        try:
            score = PopularityScore.parse(self.popularity_score)
        except ValueError as exc:
            raise ValueError("parse popularity score") from exc
        return MemeCoin.rebuild(
            self.id, self.name, self.description, score, self.created_at, self.updated_at
        )


def _mysql_errno(exc: IntegrityError) -> int | None:
    args = getattr(exc.orig, "args", ())
    return args[0] if args and isinstance(args[0], int) else None


class MemeCoinDao:
    """Reads and writes meme coin rows in the current transaction."""

    def __init__(self, txm: TransactionManager) -> None:
        self._txm = txm

    def create(self, meme_coin: MemeCoin) -> None:
        record = MemeCoinRecord(
            id=meme_coin.id,
            name=meme_coin.name,
            description=meme_coin.description,
            popularity_score=meme_coin.popularity_score.value,
        )
        try:
            with self._txm.get_transaction() as session:
                session.add(record)
                session.flush()
        except IntegrityError as exc:
            if _mysql_errno(exc) == DUPLICATE_ENTRY:
                raise errors.NAME_ALREADY_EXISTS.wrap(exc, "name already exists") from exc
            raise errors.wrap(exc, "tx create") from exc
        except SQLAlchemyError as exc:
            raise errors.wrap(exc, "tx create") from exc

    def update(self, meme_coin: MemeCoin) -> None:
        """Write the fields changed on the aggregate and refresh ``updated_at``."""
        changed = meme_coin.updated_fields
        values: dict[str, object] = {}
        if changed.description is not None:
            values["description"] = changed.description
        if changed.popularity_score is not None:
            values["popularity_score"] = changed.popularity_score.value
        values["updated_at"] = _now()
        statement = (
            update(MemeCoinRecord)
            .where(MemeCoinRecord.id == meme_coin.id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            with self._txm.get_transaction() as session:
                session.execute(statement)
        except SQLAlchemyError as exc:
            raise errors.wrap(exc, "tx update") from exc

    def delete(self, meme_coin: MemeCoin) -> None:
        statement = (
            delete(MemeCoinRecord)
            .where(MemeCoinRecord.id == meme_coin.id)
            .execution_options(synchronize_session=False)
        )
        try:
            with self._txm.get_transaction() as session:
                session.execute(statement)
        except SQLAlchemyError as exc:
            raise errors.wrap(exc, "tx delete") from exc

    def get_by_id(self, id: int) -> MemeCoin:
        """Load a coin; a missing row raises with a LookupError as its cause."""
        statement = (
            select(MemeCoinRecord)
            .where(MemeCoinRecord.id == id)
            .limit(1)
            .execution_options(populate_existing=True)
        )
        try:
            with self._txm.get_transaction() as session:
                record = session.execute(statement).scalar_one_or_none()
                if record is None:
                    raise LookupError("record not found")
                try:
                    return record.to_aggregate()
                except ValueError as exc:
                    raise errors.wrap(exc, "to aggregate") from exc
        except (LookupError, SQLAlchemyError) as exc:
            raise errors.wrap(exc, "tx get by id") from exc