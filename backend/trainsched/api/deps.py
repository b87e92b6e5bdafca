from collections.abc import Callable, Generator, Iterable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from trainsched.core.security import Principal, UserRole, decode_token
from trainsched.db.session import SessionLocal

security = HTTPBearer()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Principal:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(credentials.credentials)
    except JWTError as exc:
        raise credentials_exception from exc

    subject = payload.get("sub")
    try:
        role = UserRole(payload.get("role"))
    except ValueError as exc:
        raise credentials_exception from exc
    if not subject:
        raise credentials_exception
    return Principal(id=subject, role=role)


def require_roles(*roles: UserRole) -> Callable[[Principal], Principal]:
    allowed_roles: Iterable[UserRole] = set(roles)

    def role_checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return principal

    return role_checker


require_planner = require_roles(UserRole.admin, UserRole.scheduler)
