"""Massage router - FastAPI endpoints for the catalogue"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import Massage, User
from ...shared.validators import format_api_datetime
from .schemas import MassageCreate, MassageResponse, MassageUpdate
from .service import MassageService

router = APIRouter(prefix="/massages", tags=["Massages"])


def get_massage_service(db: Session = Depends(get_db)) -> MassageService:
    """Dependency injection for MassageService"""
    return MassageService(db)


def massage_to_response(massage: Massage) -> MassageResponse:
    return MassageResponse(
        id=massage.id,
        name=massage.name,
        description=massage.description,
        duration=massage.duration,
        price=massage.price,
        position=massage.position,
        image=massage.image,
        createdAt=format_api_datetime(massage.created_at),
    )


@router.get("", response_model=list[MassageResponse])
async def get_massages(service: MassageService = Depends(get_massage_service)):
    """The catalogue, in display order"""
    return [massage_to_response(m) for m in service.get_massages()]


@router.get("/{massage_id}", response_model=MassageResponse)
async def get_massage(massage_id: str, service: MassageService = Depends(get_massage_service)):
    return massage_to_response(service.get_massage(massage_id))


@router.post("", response_model=MassageResponse, status_code=201)
async def create_massage(
    data: MassageCreate,
    _admin: User = Depends(require_admin),
    service: MassageService = Depends(get_massage_service),
):
    """Add a massage to the catalogue (admin)"""
    return massage_to_response(service.create_massage(data))


@router.put("/{massage_id}", response_model=MassageResponse)
async def update_massage(
    massage_id: str,
    data: MassageUpdate,
    _admin: User = Depends(require_admin),
    service: MassageService = Depends(get_massage_service),
):
    return massage_to_response(service.update_massage(massage_id, data))


@router.delete("/{massage_id}")
async def delete_massage(
    massage_id: str,
    _admin: User = Depends(require_admin),
    service: MassageService = Depends(get_massage_service),
):
    """Remove a massage from the catalogue (admin)"""
    return service.delete_massage(massage_id)
