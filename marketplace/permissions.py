"""
Role based permission classes.

Each marketplace role has a permission class; ``role_permission`` builds
one for any combination of roles.
"""
from rest_framework.permissions import SAFE_METHODS, BasePermission


def _role(request):
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


class IsAdminRole(BasePermission):
    """Allow access only to administrators."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == "admin"


class IsPatientRole(BasePermission):
    """Allow access only to users with the patient role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == "patient"


class IsDoctorRole(BasePermission):
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == "doctor"


class IsHospitalRole(BasePermission):
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == "hospital"


class IsImplantRole(BasePermission):
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) == "implant"


def role_permission(*roles: str) -> type[BasePermission]:
    """Build a permission class admitting any of ``roles``."""
    allowed = frozenset(roles)

    class _RolePermission(BasePermission):
        message = "This action requires one of the roles: " + ", ".join(sorted(allowed))

        def has_permission(self, request, view) -> bool:  # type: ignore[override]
            return _role(request) in allowed

    _RolePermission.__name__ = "Role_" + "_".join(sorted(allowed))
    return _RolePermission


IsAdminOrPatient = role_permission("admin", "patient")
IsAdminOrDoctor = role_permission("admin", "doctor")


class ReadOnly(BasePermission):
    """Admit safe methods for anyone; combine with ``|`` to gate writes by role."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return request.method in SAFE_METHODS
