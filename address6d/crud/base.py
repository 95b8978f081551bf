from typing import Generic, TypeVar, Type, Optional, Any
from sqlalchemy.orm import Session
from sqlalchemy import select
from address6d.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """
    Generic CRUD class for single-key lookups and inserts.

    Type Parameters:
        ModelType: SQLAlchemy model class
    """

    def __init__(self, model: Type[ModelType]):
        """
        Initialize CRUD object with model class.

        Args:
            model: SQLAlchemy model class
        """
        self.model = model

    def get_by(self, db: Session, field: str, value: Any) -> Optional[ModelType]:
        """
        Retrieve a single record by a unique column.

        Args:
            db: Database session
            field: Name of a unique column on the model
            value: Value to match

        Returns:
            Model instance or None if not found
        """
        stmt = select(self.model).where(getattr(self.model, field) == value)
        result = db.execute(stmt)
        return result.scalar_one_or_none()

