"""
Data access for users, stores and ratings.

``DataAccess`` wraps one SQLAlchemy session and is handed to every service
constructor. Writes commit immediately; a failed commit is rolled back and the
``IntegrityError`` is re-raised so services can translate it.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, joinedload

from store_rating.models import Rating, Role, Store, User

logger = logging.getLogger(__name__)


def _contains(column, value: str):
    # % and _ in user input match literally
    return column.icontains(value, autoescape=True)


class _Repository:
    model = None

    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Integrity error while writing {self.model.__tablename__}")
            raise

    def _ordered(self, query: Query, sort_by: str, sort_order: str) -> Query:
        column = getattr(self.model, sort_by)
        if sort_order == "asc":
            return query.order_by(column.asc(), self.model.id.asc())
        return query.order_by(column.desc(), self.model.id.desc())

    def get(self, entity_id: int):
        return self.db.get(self.model, entity_id)

    def create(self, **fields):
        entity = self.model(**fields)
        self.db.add(entity)
        self._commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity, **fields):
        for field, value in fields.items():
            setattr(entity, field, value)
        self._commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity) -> None:
        self.db.delete(entity)
        self._commit()

    def count(self) -> int:
        return self.db.query(func.count(self.model.id)).scalar()


class UserRepository(_Repository):
    model = User

    def get_with_store(self, user_id: int) -> Optional[User]:
        return (
            self.db.query(User)
            .options(joinedload(User.store))
            .filter(User.id == user_id)
            .first()
        )

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_store(self, store_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.store_id == store_id).first()

    def find(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
        role: Optional[Role] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> List[User]:
        query = self.db.query(User)
        if name:
            query = query.filter(_contains(User.name, name))
        if email:
            query = query.filter(_contains(User.email, email))
        if address:
            query = query.filter(_contains(User.address, address))
        if role:
            query = query.filter(User.role == role)
        return self._ordered(query, sort_by, sort_order).all()


class StoreRepository(_Repository):
    model = Store

    def get_by_email(self, email: str) -> Optional[Store]:
        return self.db.query(Store).filter(Store.email == email).first()

    def find(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> List[Store]:
        query = self.db.query(Store)
        if search:
            # search replaces the individual filters
            query = query.filter(or_(_contains(Store.name, search), _contains(Store.address, search)))
        else:
            if name:
                query = query.filter(_contains(Store.name, name))
            if email:
                query = query.filter(_contains(Store.email, email))
            if address:
                query = query.filter(_contains(Store.address, address))
        return self._ordered(query, sort_by, sort_order).all()


class RatingRepository(_Repository):
    model = Rating

    def get_by_user_and_store(self, user_id: int, store_id: int) -> Optional[Rating]:
        return (
            self.db.query(Rating)
            .filter(Rating.user_id == user_id, Rating.store_id == store_id)
            .first()
        )

    def aggregate_for_store(self, store_id: int) -> Tuple[Optional[float], int]:
        """Average and count of the store's rating values, computed by the database."""
        average, total = (
            self.db.query(func.avg(Rating.value), func.count(Rating.id))
            .filter(Rating.store_id == store_id)
            .one()
        )
        if not total:
            return None, 0
        # PostgreSQL returns avg() as Decimal
        return float(average), total

    def aggregate_for_stores(self, store_ids: Iterable[int]) -> Dict[int, Tuple[float, int]]:
        """Average and count per store in one grouped query. Stores without ratings are absent."""
        store_ids = list(store_ids)
        if not store_ids:
            return {}
        rows = (
            self.db.query(Rating.store_id, func.avg(Rating.value), func.count(Rating.id))
            .filter(Rating.store_id.in_(store_ids))
            .group_by(Rating.store_id)
            .all()
        )
        return {store_id: (float(average), total) for store_id, average, total in rows}

    def list_for_store(self, store_id: int) -> List[Rating]:
        return (
            self.db.query(Rating)
            .options(joinedload(Rating.user))
            .filter(Rating.store_id == store_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc())
            .all()
        )

    def list_for_user_and_stores(self, user_id: int, store_ids: Iterable[int]) -> List[Rating]:
        store_ids = list(store_ids)
        if not store_ids:
            return []
        return (
            self.db.query(Rating)
            .filter(Rating.user_id == user_id, Rating.store_id.in_(store_ids))
            .all()
        )


class DataAccess:
    """Per-request handle over the relational store."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.stores = StoreRepository(db)
        self.ratings = RatingRepository(db)
