# app/utils/check_roles.py
import logging
from fastapi import HTTPException
from typing import Callable, Sequence
from functools import wraps

logger = logging.getLogger(__name__)

# Managers edit pricing; waiters and cashiers run orders
ADMIN = ("admin",)
STAFF = ("admin", "staff")


def require_role(roles: Sequence[str]):
    """Route decorator; the route must declare ``_user=Depends(get_current_user)``."""
    allowed = {r.lower() for r in roles}

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, _user, **kwargs):
            if _user is None:
                raise HTTPException(status_code=401, detail="User not authenticated")
            if (_user.role or "").lower() not in allowed:
                logger.warning("%s (%s) denied access to %s", _user.username, _user.role, func.__name__)
                raise HTTPException(status_code=403, detail="Permission denied")
            return await func(*args, _user=_user, **kwargs)
        return wrapper
    return decorator
