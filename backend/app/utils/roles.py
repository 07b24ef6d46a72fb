from fastapi import Depends

from ..models.enums import Role
from .dependencies import CurrentUser, get_current_user, require_verified_email
from .error_handlers import ForbiddenError

_ROLE_LABELS = {
    Role.BUSINESS_OWNER: "Business owner",
    Role.FREELANCER: "Freelancer",
    Role.ADMIN: "Admin",
}


def require_roles(*roles: Role):
    allowed = frozenset(roles)
    label = " or ".join(_ROLE_LABELS[r] for r in roles)

    def check_role(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            raise ForbiddenError(f"{label} access only")
        return user
    return check_role


business_owner_only = require_roles(Role.BUSINESS_OWNER)
freelancer_only = require_roles(Role.FREELANCER)
admin_only = require_roles(Role.ADMIN)


def verified_business_owner(
    user: CurrentUser = Depends(business_owner_only),
    _verified: CurrentUser = Depends(require_verified_email),
) -> CurrentUser:
    return user
