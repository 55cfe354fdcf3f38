from app.crud.base import CRUDBase
from app.crud.user import user
from .company import company
from .employee import employee

__all__ = ["CRUDBase", "user", "company", "employee"]
