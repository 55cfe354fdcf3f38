from app.crud.base import CRUDBase
from app.models.employee import Employee


class CRUDEmployee(CRUDBase[Employee]):
    """
    CRUD operations for Employee directory records.

    All standard operations come from CRUDBase; callers pass the tenant
    scope as a filter.
    """

    # Columns a caller may set through create/update payloads
    EDITABLE_FIELDS = (
        "name", "surname", "patronymic", "role", "agency", "email", "phone",
        "home_phone", "work_phone", "insurance_agent", "personal_site",
        "birth_date", "corporate_email", "home_address", "facebook", "x",
        "linkedin", "instagram", "github", "icq", "title",
    )


# Create a singleton instance
employee = CRUDEmployee(Employee)
