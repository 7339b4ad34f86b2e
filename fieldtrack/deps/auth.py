from fastapi import HTTPException, Request

from fieldtrack.services.auth_service import verify_token


def _parse_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    parts = auth_header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(status_code=401, detail="Invalid Authorization header")

    return parts[1].strip()


def require_auth(request: Request) -> str:
    token = _parse_bearer_token(request)

    try:
        claims = verify_token(token)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    user_id = str(claims.get("sub"))
    request.state.user_id = user_id
    request.state.role = str(claims.get("role") or "crew").lower()
    return user_id
