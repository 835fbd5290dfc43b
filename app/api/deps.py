from typing import Optional

from fastapi import Depends, Header

from app.core.exceptions import ValidationError


async def get_acting_user(x_user_id: Optional[int] = Header(None)) -> Optional[int]:
    """Id of the user issuing the request, recorded as signer on approvals."""
    return x_user_id


async def require_acting_user(user_id: Optional[int] = Depends(get_acting_user)) -> int:
    if user_id is None:
        raise ValidationError("The X-User-Id header is required to sign cheques", field="user_id")
    return user_id
