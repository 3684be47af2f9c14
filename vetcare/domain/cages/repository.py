"""Cage repository - Database operations for cages"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...database import commit
from ...models import Appointment, Cage, CageSize


class CageRepository:
    """Repository for cage database operations"""

    @staticmethod
    def get_cages(
        db: Session,
        cage_type: Optional[str] = None,
        size_category: Optional[CageSize] = None,
        include_inactive: bool = False,
    ) -> list[Cage]:
        """Get cages ordered by cage number"""
        query = db.query(Cage)

        if not include_inactive:
            query = query.filter(Cage.is_active.is_(True))

        if cage_type and cage_type != "all":
            query = query.filter(Cage.cage_type == cage_type)

        if size_category:
            query = query.filter(Cage.size_category == size_category)

        return query.order_by(Cage.cage_number).all()

    @staticmethod
    def get_cage_by_id(db: Session, cage_id: int) -> Optional[Cage]:
        return db.query(Cage).filter(Cage.id == cage_id).first()

    @staticmethod
    def get_active_cage_by_number(
        db: Session, cage_number: str, exclude_id: Optional[int] = None
    ) -> Optional[Cage]:
        """Find an active cage using this number, optionally ignoring one cage"""
        query = db.query(Cage).filter(
            func.lower(Cage.cage_number) == cage_number.lower(),
            Cage.is_active.is_(True),
        )
        if exclude_id is not None:
            query = query.filter(Cage.id != exclude_id)
        return query.first()

    @staticmethod
    def create_cage(db: Session, **cage_data) -> Cage:
        cage = Cage(**cage_data)
        db.add(cage)
        commit(db)
        db.refresh(cage)
        return cage

    @staticmethod
    def update_cage(db: Session, cage: Cage, **updates) -> Cage:
        """Update a cage with provided fields"""
        for key, value in updates.items():
            if hasattr(cage, key):
                setattr(cage, key, value)

        commit(db)
        db.refresh(cage)
        return cage

    @staticmethod
    def count_reservations(db: Session, cage_id: int) -> int:
        """Count appointment rows referencing the cage, whatever their status"""
        return (
            db.query(func.count(Appointment.id)).filter(Appointment.cage_id == cage_id).scalar()
        )

    @staticmethod
    def delete_cage(db: Session, cage: Cage) -> None:
        db.delete(cage)
        commit(db)
