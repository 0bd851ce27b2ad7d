# Conta/routes.py ────────────────────────────────────────────
import base64
import binascii
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse

from Conta import oauth
from Conta.auth import get_optional_user
from Conta.database import Store, get_store
from Conta.models import User
from Conta.provisioning import provision_bootstrap_admin
from Conta.schemas import Success, UserOut
from Conta.security import COOKIE_NAME, SESSION_MAX_AGE, create_session_token
from Conta.users import upsert_user
from errors import InvalidArgument

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])
oauth_router = APIRouter(prefix="/oauth", tags=["auth"])


def _cookie_options(request: Request) -> dict:
    return {
        "httponly": True,
        "samesite": "lax",
        "secure": request.url.scheme == "https",
        "path": "/",
    }


def _redirect_target(state: Optional[str]) -> str:
    """``state`` carries the base64 encoded URL to return to."""
    if not state:
        return "/"
    try:
        target = base64.urlsafe_b64decode(state + "=" * (-len(state) % 4)).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return "/"
    # only same-site paths, never an open redirect
    if not target.startswith("/") or target.startswith("//"):
        return "/"
    return target


@router.get("/me", response_model=Optional[UserOut])
def me(user: Annotated[Optional[User], Depends(get_optional_user)]):
    return UserOut.from_row(user) if user else None


@router.post("/logout", response_model=Success)
def logout(request: Request, response: Response):
    response.delete_cookie(COOKIE_NAME, **_cookie_options(request))
    return Success()


@oauth_router.get("/callback")
def oauth_callback(
    request: Request,
    store: Annotated[Store, Depends(get_store)],
    code: Optional[str] = None,
    state: Optional[str] = None,
):
    """Finish the provider sign-in: upsert the user and issue our own cookie."""
    if not code:
        raise InvalidArgument("Código de autorização ausente")

    assertion = oauth.identify(code)
    user = upsert_user(store, assertion)
    if user is None:
        logger.warning("Sign-in of %s continues without a stored user", assertion.open_id)
    else:
        provision_bootstrap_admin(store, assertion.open_id)

    token = create_session_token(assertion.open_id, assertion.name)
    response = RedirectResponse(_redirect_target(state), status_code=302)
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=int(SESSION_MAX_AGE.total_seconds()),
        **_cookie_options(request),
    )
    return response
