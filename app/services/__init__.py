from app.services.auth import auth_service
from app.services.company import company_service
from .employee import employee_service
from .user import user_service

__all__ = ["auth_service", "company_service", "employee_service", "user_service"]
