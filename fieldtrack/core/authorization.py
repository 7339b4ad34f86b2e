from enum import Enum

from fastapi import Depends, HTTPException, Request

from fieldtrack.deps.auth import require_auth


class Role(Enum):
    CREW = "crew"
    FOREMAN = "foreman"
    OFFICE = "office"


_RANK = {
    Role.CREW: 1,
    Role.FOREMAN: 2,
    Role.OFFICE: 3,
}


def require_role(role: Role):
    def dependency(request: Request, _user_id: str = Depends(require_auth)):
        try:
            user_role = Role(request.state.role)
        except ValueError as exc:
            raise HTTPException(status_code=403, detail="Invalid role claim") from exc

        if _RANK[user_role] < _RANK[role]:
            raise HTTPException(status_code=403, detail="Insufficient role")

        return user_role

    return dependency
