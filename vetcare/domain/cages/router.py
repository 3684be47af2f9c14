"""Cage router - FastAPI endpoints for admin/employee cage management"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_admin_user, get_staff_user
from ...database import get_db
from ...models import CageSize, User
from ...shared.schemas import Envelope, ok
from .schemas import CageCreate, CageResponse, CageUpdate
from .service import CageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/cages", tags=["Cages"])


def get_cage_service(db: Session = Depends(get_db)) -> CageService:
    """Dependency injection for CageService"""
    return CageService(db)


@router.get("", response_model=Envelope[list[CageResponse]])
async def list_cages(
    cage_type: Optional[str] = Query(None, alias="type"),
    size_category: Optional[CageSize] = Query(None),
    include_inactive: bool = Query(False),
    _staff: User = Depends(get_staff_user),
    service: CageService = Depends(get_cage_service),
):
    """List cages, active only unless include_inactive is set"""
    cages = service.get_cages(cage_type, size_category, include_inactive)
    return ok([CageResponse.model_validate(c) for c in cages])


@router.post("", response_model=Envelope[CageResponse], status_code=201)
async def create_cage(
    data: CageCreate,
    _staff: User = Depends(get_staff_user),
    service: CageService = Depends(get_cage_service),
):
    cage = service.create_cage(data)
    return ok(CageResponse.model_validate(cage), "Cage created successfully")


@router.get("/{cage_id}", response_model=Envelope[CageResponse])
async def get_cage(
    cage_id: int,
    _staff: User = Depends(get_staff_user),
    service: CageService = Depends(get_cage_service),
):
    return ok(CageResponse.model_validate(service.get_cage(cage_id)))


@router.put("/{cage_id}", response_model=Envelope[CageResponse])
async def update_cage(
    cage_id: int,
    data: CageUpdate,
    _staff: User = Depends(get_staff_user),
    service: CageService = Depends(get_cage_service),
):
    cage = service.update_cage(cage_id, data)
    return ok(CageResponse.model_validate(cage), "Cage updated successfully")


@router.delete("/{cage_id}", response_model=Envelope[CageResponse])
async def delete_cage(
    cage_id: int,
    _staff: User = Depends(get_staff_user),
    service: CageService = Depends(get_cage_service),
):
    """Deactivate a cage (soft delete)"""
    cage = service.delete_cage(cage_id)
    return ok(CageResponse.model_validate(cage), "Cage deactivated")


@router.delete("/{cage_id}/permanent", response_model=Envelope[dict])
async def permanent_delete_cage(
    cage_id: int,
    admin: User = Depends(get_admin_user),
    service: CageService = Depends(get_cage_service),
):
    """Remove a cage irrecoverably (admin only)"""
    logger.info(f"🗑️ Admin {admin.id} requested permanent delete of cage {cage_id}")
    return ok(service.permanent_delete_cage(cage_id), "Cage deleted permanently")
