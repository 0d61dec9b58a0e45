"""Massage repository - Database operations for the catalogue"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Massage


class MassageRepository:
    """Repository for massage database operations"""

    @staticmethod
    def get_massages(db: Session) -> list[Massage]:
        """Catalogue order: position first, newest first within a position"""
        return (
            db.query(Massage)
            .order_by(Massage.position.asc(), Massage.created_at.desc())
            .all()
        )

    @staticmethod
    def get_massage_by_id(db: Session, massage_id: str) -> Optional[Massage]:
        return db.query(Massage).filter(Massage.id == massage_id).first()

    @staticmethod
    def create_massage(db: Session, **massage_data) -> Massage:
        massage = Massage(**massage_data)
        db.add(massage)
        db.commit()
        db.refresh(massage)
        return massage

    @staticmethod
    def update_massage(db: Session, massage: Massage, **updates) -> Massage:
        for key, value in updates.items():
            if value is not None and hasattr(massage, key):
                setattr(massage, key, value)

        db.commit()
        db.refresh(massage)
        return massage

    @staticmethod
    def delete_massage(db: Session, massage: Massage) -> None:
        db.delete(massage)
        db.commit()
