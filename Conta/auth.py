from typing import Annotated, Callable, Optional

from fastapi import Cookie, Depends

from Conta.database import Store, get_store
from Conta.models import User
from Conta.security import COOKIE_NAME, InvalidSession, decode_session_token
from Conta.users import get_user_by_open_id
from errors import Forbidden, Unauthenticated


# ---------------------------------------------------------------------------
# 1. Usuário atual a partir do cookie de sessão
# ---------------------------------------------------------------------------
def get_optional_user(
    store: Annotated[Store, Depends(get_store)],
    session_token: Annotated[Optional[str], Cookie(alias=COOKIE_NAME)] = None,
) -> Optional[User]:
    """
    Decodes the session cookie and looks the user up by ``open_id``.
    Returns ``None`` for a missing/invalid cookie or an unknown user.
    """
    if not session_token:
        return None
    try:
        payload = decode_session_token(session_token)
    except InvalidSession:
        return None
    return get_user_by_open_id(store, payload["sub"])


def get_current_user(
    user: Annotated[Optional[User], Depends(get_optional_user)],
) -> User:
    if user is None:
        raise Unauthenticated()
    return user


# ---------------------------------------------------------------------------
# 2. Role-based dependency-factory
# ---------------------------------------------------------------------------
def role_required(*allowed_roles: str) -> Callable:  # e.g. ("admin",)
    """
    Use as Depends(role_required("admin")).
    Returns the current User when the role is allowed, otherwise 403.
    """

    def _wrapper(
        user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if user.role not in allowed_roles:
            raise Forbidden("Apenas administradores podem acessar")
        return user

    return _wrapper
