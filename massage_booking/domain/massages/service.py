"""Massage service - Business logic for the catalogue"""

import logging

from sqlalchemy.orm import Session

from ...exceptions import NotFoundError
from ...models import Massage
from .repository import MassageRepository
from .schemas import MassageCreate, MassageUpdate

logger = logging.getLogger(__name__)


class MassageService:
    """Service layer for massage offerings"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MassageRepository()

    def get_massages(self) -> list[Massage]:
        return self.repo.get_massages(self.db)

    def get_massage(self, massage_id: str) -> Massage:
        massage = self.repo.get_massage_by_id(self.db, massage_id)
        if not massage:
            raise NotFoundError(f"Massage avec l'ID {massage_id} non trouvé")
        return massage

    def create_massage(self, data: MassageCreate) -> Massage:
        massage = self.repo.create_massage(
            self.db,
            name=data.name,
            description=data.description,
            duration=data.duration,
            price=data.price,
            position=data.position or 0,
            image=data.image,
        )
        logger.info(f"💆 Massage {massage.id} created: {massage.name} ({massage.duration} min)")
        return massage

    def update_massage(self, massage_id: str, data: MassageUpdate) -> Massage:
        massage = self.get_massage(massage_id)
        updates = data.model_dump(exclude_unset=True)
        return self.repo.update_massage(self.db, massage, **updates)

    def delete_massage(self, massage_id: str) -> dict:
        """Delete a massage together with its bookings"""
        massage = self.get_massage(massage_id)
        self.repo.delete_massage(self.db, massage)
        logger.info(f"🗑️ Massage {massage_id} deleted")
        return {"message": "Massage supprimé", "id": massage_id}
