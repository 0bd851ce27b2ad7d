# Conta/provisioning.py
import logging
import os
from typing import Optional

from dotenv import load_dotenv

from Conta.database import Store
from Conta.models import User
from Conta.users import get_user_by_open_id, set_role

load_dotenv()
logger = logging.getLogger(__name__)


def owner_open_id() -> Optional[str]:
    return os.getenv("OWNER_OPEN_ID") or None


def provision_bootstrap_admin(store: Store, open_id: Optional[str] = None) -> Optional[User]:
    """
    Promote the configured owner account to ``admin``.

    Runs only when ``open_id`` (default: the owner itself) is the configured
    owner and the account already exists. Every promotion is logged.
    """
    owner = owner_open_id()
    candidate = open_id or owner
    if not owner or candidate != owner:
        return None

    user = get_user_by_open_id(store, owner)
    if user is None or user.role == "admin":
        return user

    promoted = set_role(store, owner, "admin")
    logger.warning("AUDIT bootstrap admin: promoted user id=%s openId=%s to admin",
                   promoted.id if promoted else "?", owner)
    return promoted
