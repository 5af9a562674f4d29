"""Membership authority.

Every permission check in the service layer routes through :func:`has_role`.
A membership only grants authority while its status is ACTIVE, and nothing is
cached, so role changes apply on the very next check.
"""
import logging

from sqlalchemy.orm import Session

from . import crud
from .exceptions import PermissionDenied
from .models import Role

logger = logging.getLogger(__name__)

OWNER_ONLY = frozenset({Role.OWNER})
OWNER_OR_ADMIN = frozenset({Role.OWNER, Role.ADMIN})
ANY_ROLE = frozenset(Role)


def has_role(db: Session, project_id: int, user_id: int, allowed_roles) -> bool:
    return crud.find_active_membership(db, project_id, user_id, allowed_roles) is not None


def is_owner(db: Session, project_id: int, user_id: int) -> bool:
    return has_role(db, project_id, user_id, OWNER_ONLY)


def is_owner_or_admin(db: Session, project_id: int, user_id: int) -> bool:
    return has_role(db, project_id, user_id, OWNER_OR_ADMIN)


def is_active_member(db: Session, project_id: int, user_id: int) -> bool:
    return has_role(db, project_id, user_id, ANY_ROLE)


def require(check, db: Session, project_id: int, user_id: int):
    """Raise PermissionDenied unless ``check`` passes for the caller."""
    if not check(db, project_id, user_id):
        logger.warning(
            "Permission denied: user=%s project=%s check=%s", user_id, project_id, check.__name__
        )
        raise PermissionDenied()
