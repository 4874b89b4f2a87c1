from typing import Generic, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from saknak.services.exceptions import NotFoundError

ModelType = TypeVar("ModelType")


class BaseService(Generic[ModelType]):
    """Plain CRUD over one model. Subclasses add ownership and business rules."""

    label = "Record"

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def create(self, db: Session, db_obj: ModelType) -> ModelType:
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()

    def get_or_404(self, db: Session, id: int) -> ModelType:
        db_obj = self.get(db, id)
        if db_obj is None:
            raise NotFoundError(f"{self.label} with ID {id} not found.")
        return db_obj

    def update(self, db: Session, db_obj: ModelType, obj_in: BaseModel) -> ModelType:
        """Apply only the fields the client actually sent."""
        for key, value in obj_in.model_dump(exclude_unset=True, mode="json").items():
            setattr(db_obj, key, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, db_obj: ModelType) -> None:
        db.delete(db_obj)
        db.commit()
