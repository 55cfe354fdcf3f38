from typing import Any, Dict, Optional
from app.core.exceptions import ValidationFailed
from app.core.logging_config import logger
from app.models.user import User, UserRole


def normalize_tenant_id(value: Any) -> Optional[str]:
    """
    Resolve a tenant reference to its canonical id string.

    Request payloads and loaded records refer to a company either by id
    or by an embedded object ({"id": ...} / {"_id": ...} or a Company
    instance). Every guard check compares the strings returned here.

    Args:
        value: Tenant reference in any of the accepted shapes

    Returns:
        Tenant id string, or None when value is empty

    Raises:
        ValidationFailed: If the value cannot be resolved to an id
    """
    if value is None:
        return None
    if isinstance(value, dict):
        value = value.get("id") or value.get("_id")
    elif not isinstance(value, (str, int)):
        value = getattr(value, "id", None)

    if value is None:
        raise ValidationFailed("Invalid company id")

    tenant_id = str(value).strip()
    if not tenant_id:
        return None
    return tenant_id


def principal_tenant_id(principal: User) -> Optional[str]:
    return normalize_tenant_id(principal.company_id)


def can_access_tenant(principal: User, target_tenant_id: Any) -> bool:
    """
    Decide whether a principal may act on a tenant.

    - superadmin: always
    - company_admin: only its own company
    - employee: only its own company (read-only callers use this for
      company details; employee records go through can_access_employee)

    An unbound principal never matches a tenant.
    """
    if principal.role == UserRole.superadmin:
        return True

    own_tenant = principal_tenant_id(principal)
    target = normalize_tenant_id(target_tenant_id)
    allowed = own_tenant is not None and own_tenant == target
    if not allowed:
        logger.warning(
            f"Tenant access denied: user_id={principal.id}, role={principal.role.value}, "
            f"target_tenant={target}"
        )
    return allowed


def can_access_employee(principal: User, record: Any) -> bool:
    """
    Per-record check for employee directory entries.

    company_admin is matched on the record's tenant, employee on the
    record's owning user.
    """
    if principal.role == UserRole.superadmin:
        return True
    if principal.role == UserRole.company_admin:
        return can_access_tenant(principal, record.company_id)
    if principal.role == UserRole.employee:
        return record.user_id is not None and str(record.user_id) == str(principal.id)
    return False


def scope_query(
    principal: User,
    tenant_field: str = "company_id",
    owner_field: Optional[str] = "user_id",
) -> Dict[str, Any]:
    """
    Build the filter that restricts a list query to what the principal may see.

    Args:
        principal: Authenticated user
        tenant_field: Column holding the tenant id on the queried model
        owner_field: Column holding the owning user id, or None when the
            model has no owner (employees then fall back to their tenant)

    Returns:
        Mapping of column name to required value; empty for superadmin
    """
    if principal.role == UserRole.superadmin:
        return {}
    if principal.role == UserRole.employee and owner_field:
        return {owner_field: str(principal.id)}
    # Unbound principals get {tenant_field: None}, which matches nothing
    return {tenant_field: principal_tenant_id(principal)}
