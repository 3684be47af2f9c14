"""Boarding router - occupancy board for staff, stay search for clients"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_staff_user
from ...database import get_db
from ...models import User
from ...shared.schemas import Envelope, ok
from .availability import AvailabilityStatus
from .schemas import AvailableCage, CageView
from .service import BoardingService

router = APIRouter(tags=["Boarding"])


def get_boarding_service(db: Session = Depends(get_db)) -> BoardingService:
    """Dependency injection for BoardingService"""
    return BoardingService(db)


@router.get("/api/admin/boarding", response_model=Envelope[list[CageView]])
async def get_boarding_board(
    as_of: Optional[date] = Query(None, description="Day to resolve occupancy for (default today)"),
    availability_status: Optional[AvailabilityStatus] = Query(None),
    _staff: User = Depends(get_staff_user),
    service: BoardingService = Depends(get_boarding_service),
):
    """All active cages with current and next occupant"""
    return ok(service.list_cage_views(as_of, availability_status))


@router.get("/api/client/cages/availability", response_model=Envelope[list[AvailableCage]])
async def search_available_cages(
    check_in_date: date = Query(...),
    check_out_date: date = Query(...),
    cage_type: Optional[str] = Query(None, alias="type"),
    _user: User = Depends(get_current_user),
    service: BoardingService = Depends(get_boarding_service),
):
    """Cages a client can book for the requested stay, with the stay price"""
    return ok(service.search_available_cages(check_in_date, check_out_date, cage_type))
