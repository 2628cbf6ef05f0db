from fastapi import Depends, HTTPException

from casebuddy.auth import current_active_user
from casebuddy.dependencies import get_privilege_policy
from casebuddy.schemas.users import User
from casebuddy.services.usage import PrivilegePolicy


async def verify_security_admin(
    user: User = Depends(current_active_user),
    policy: PrivilegePolicy = Depends(get_privilege_policy),
):
    """Verifies that the request comes from an admin.

    Admins are the users the privilege policy exempts from the feedback quota.
    """
    if not policy.is_privileged(user.email):
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return user
