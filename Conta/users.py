# Conta/users.py ─────────────────────────────────────────────
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from Conta.database import Store, StoreUnavailable
from Conta.models import User, utcnow
from errors import InvalidArgument

logger = logging.getLogger(__name__)

ROLES = ("user", "admin")


@dataclass(frozen=True)
class IdentityAssertion:
    """What the identity provider told us about the person signing in."""

    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    login_method: Optional[str] = None
    role: Optional[str] = None


def _apply(user: User, assertion: IdentityAssertion, signed_in_at: datetime) -> None:
    for field in ("name", "email", "login_method", "role"):
        value = getattr(assertion, field)
        if value is not None:
            setattr(user, field, value)
    user.last_signed_in = signed_in_at
    user.updated_at = utcnow()


def _by_open_id(session: Session, open_id: str) -> Optional[User]:
    return session.exec(select(User).where(User.open_id == open_id)).first()


def upsert_user(store: Store, assertion: IdentityAssertion,
                signed_in_at: Optional[datetime] = None) -> Optional[User]:
    """
    Insert-or-update keyed on ``open_id``.

    Only fields present in the assertion are written; ``last_signed_in`` is
    always refreshed. Returns ``None`` when the store is unavailable so the
    sign-in can continue on the session cookie alone.
    """
    if not assertion.open_id:
        raise InvalidArgument("openId é obrigatório")
    if assertion.role is not None and assertion.role not in ROLES:
        raise InvalidArgument(f"Papel desconhecido: {assertion.role}")

    signed_in_at = signed_in_at or utcnow()
    try:
        with store.session("upsert user") as s:
            user = _by_open_id(s, assertion.open_id)
            if user is None:
                user = User(open_id=assertion.open_id, role=assertion.role or "user")
                _apply(user, assertion, signed_in_at)
                s.add(user)
                try:
                    s.commit()
                except IntegrityError:
                    # another request inserted the same open_id first
                    s.rollback()
                    user = _by_open_id(s, assertion.open_id)
                    _apply(user, assertion, signed_in_at)
                    s.add(user)
                    s.commit()
            else:
                _apply(user, assertion, signed_in_at)
                s.add(user)
                s.commit()
            s.refresh(user)
            return user
    except StoreUnavailable:
        logger.warning("Cannot upsert user %s: database not available",
                       assertion.open_id, exc_info=True)
        return None


def get_user_by_open_id(store: Store, open_id: str) -> Optional[User]:
    try:
        with store.session("get user") as s:
            return _by_open_id(s, open_id)
    except StoreUnavailable:
        logger.warning("Cannot get user %s: database not available", open_id)
        return None


def get_user(store: Store, user_id: int) -> Optional[User]:
    with store.session("get user") as s:
        return s.get(User, user_id)


def list_users(store: Store) -> List[User]:
    with store.session("list users") as s:
        return list(s.exec(select(User).order_by(User.email, User.id)).all())


def set_role(store: Store, open_id: str, role: str) -> Optional[User]:
    if role not in ROLES:
        raise InvalidArgument(f"Papel desconhecido: {role}")
    with store.session("change role") as s:
        user = _by_open_id(s, open_id)
        if user is None:
            return None
        user.role = role
        user.updated_at = utcnow()
        s.add(user)
        s.commit()
        s.refresh(user)
        return user
