from typing import Generic, TypeVar, Type, Optional, List, Any, Dict
from sqlalchemy.orm import Session
from sqlalchemy import select
from app.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """
    Generic document-store style access for a model.

    Queries take an explicit filter mapping (column name -> value) so that
    the tenant scope computed by the service layer is applied at the
    query boundary. Nothing here makes access decisions.

    Type Parameters:
        ModelType: SQLAlchemy model class
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def _conditions(self, filters: Optional[Dict[str, Any]]):
        conditions = []
        for field, value in (filters or {}).items():
            column = getattr(self.model, field)
            if value is None:
                conditions.append(column.is_(None))
            else:
                conditions.append(column == value)
        return conditions

    def get(self, db: Session, id: str) -> Optional[ModelType]:
        """
        Retrieve a single record by ID.

        Args:
            db: Database session
            id: Record ID

        Returns:
            Model instance or None if not found
        """
        return db.get(self.model, id)

    def find_one(self, db: Session, filters: Dict[str, Any]) -> Optional[ModelType]:
        """
        Retrieve the first record matching all filters.

        Args:
            db: Database session
            filters: Column name to value mapping

        Returns:
            Model instance or None
        """
        stmt = select(self.model).where(*self._conditions(filters)).limit(1)
        result = db.execute(stmt)
        return result.unique().scalars().first()

    def find(
        self,
        db: Session,
        filters: Optional[Dict[str, Any]] = None,
        *,
        skip: int = 0,
        limit: Optional[int] = 100
    ) -> List[ModelType]:
        """
        Retrieve records matching all filters, newest first.

        Args:
            db: Database session
            filters: Column name to value mapping (empty means all records)
            skip: Number of records to skip
            limit: Maximum number of records to return (None for no limit)

        Returns:
            List of model instances
        """
        stmt = (
            select(self.model)
            .where(*self._conditions(filters))
            .order_by(self.model.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = db.execute(stmt)
        return list(result.unique().scalars().all())

    def create(self, db: Session, *, obj_in: Dict[str, Any], commit: bool = True) -> ModelType:
        """
        Create a new record from a dict of column values.

        Args:
            db: Database session
            obj_in: Column values
            commit: Whether to commit immediately

        Returns:
            Created model instance
        """
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Dict[str, Any]
    ) -> ModelType:
        """
        Apply column values to an existing record and save it.

        Note: This method assumes the caller already checked access to db_obj.
        """
        for field, value in obj_in.items():
            setattr(db_obj, field, value)
        return self.save(db, db_obj)

    def save(self, db: Session, db_obj: ModelType) -> ModelType:
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: ModelType) -> ModelType:
        """
        Delete a record that was already retrieved and access-checked.

        Returns:
            The deleted model instance
        """
        db.delete(db_obj)
        db.commit()
        return db_obj
