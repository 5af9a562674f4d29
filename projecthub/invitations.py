"""Invitations and membership management.

Invited users get a PENDING membership that grants nothing until they accept
it. A batch invite is all-or-nothing: one unknown email, one existing member
or one repeated email rejects the whole list before anything is written.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import crud, models, permissions, schemas
from .exceptions import (
    InvitationAlreadyAccepted,
    MemberAlreadyInvited,
    MemberNotFound,
    OwnerMembershipLocked,
    OwnerRoleNotAssignable,
    UserNotFound,
)
from .projects import get_project_or_404

logger = logging.getLogger(__name__)


def invite_users(db: Session, project_id: int, invite: schemas.InviteUsers, user_id: int):
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_owner_or_admin, db, project.id, user_id)

    pairs = []
    for invited in invite.users_list:
        if invited.role == models.Role.OWNER:
            raise OwnerRoleNotAssignable()
        found = crud.get_user_by_email(db, invited.email)
        if not found:
            raise UserNotFound()
        pairs.append((found.id, invited.role))

    user_ids = [invited_id for invited_id, _ in pairs]
    if len(set(user_ids)) != len(user_ids):
        raise MemberAlreadyInvited()
    if crud.get_members_by_user_ids(db, project.id, user_ids):
        raise MemberAlreadyInvited()

    try:
        members = crud.create_pending_members(db, project.id, pairs)
    except IntegrityError:
        raise MemberAlreadyInvited()
    logger.info("Invited %d user(s) to project %s", len(members), project.id)
    return members


def accept_project_invitation(db: Session, user_id: int, project_id: int) -> models.ProjectMember:
    project = get_project_or_404(db, project_id)
    member = crud.get_membership(db, project.id, user_id)
    if not member:
        raise MemberNotFound()

    if member.status != models.MemberStatus.PENDING:
        raise InvitationAlreadyAccepted()

    if not crud.activate_membership(db, member.id):
        raise InvitationAlreadyAccepted()

    db.refresh(member)
    logger.info("User %s joined project %s", user_id, project.id)
    return member


def _get_member_or_404(db: Session, project_id: int, member_id: int) -> models.ProjectMember:
    member = crud.get_member(db, project_id, member_id)
    if not member:
        raise MemberNotFound()
    return member


def update_member_role(db: Session, project_id: int, update: schemas.MemberRoleUpdate, user_id: int):
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_owner_or_admin, db, project.id, user_id)
    member = _get_member_or_404(db, project.id, update.member_id)

    if update.new_role == models.Role.OWNER:
        raise OwnerRoleNotAssignable()
    if member.role == models.Role.OWNER:
        raise OwnerMembershipLocked()

    member = crud.update_member_role(db, member, update.new_role)
    logger.info("Member %s of project %s is now %s", member.id, project.id, member.role.value)
    return member


def remove_member(db: Session, project_id: int, member_id: int, user_id: int):
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_owner_or_admin, db, project.id, user_id)
    member = _get_member_or_404(db, project.id, member_id)

    if member.role == models.Role.OWNER:
        raise OwnerMembershipLocked()

    crud.delete_member(db, member)
    logger.info("Member %s removed from project %s", member_id, project.id)
