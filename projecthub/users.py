from sqlalchemy.orm import Session

from . import crud, models, schemas
from .exceptions import UserNotFound


def get_profile(db: Session, user_id: int) -> models.User:
    user = crud.get_user(db, user_id)
    if not user:
        raise UserNotFound()
    return user


def get_user_projects(db: Session, user_id: int) -> schemas.UserProjects:
    """Projects the user owns, has joined, and has been invited to."""
    get_profile(db, user_id)

    joined = crud.get_memberships_for_user(
        db, user_id, status=models.MemberStatus.ACTIVE, exclude_role=models.Role.OWNER
    )
    pending = crud.get_memberships_for_user(db, user_id, status=models.MemberStatus.PENDING)

    return schemas.UserProjects(
        owned_projects=crud.get_owned_projects(db, user_id),
        joined_projects=[member.project for member in joined],
        pending_invitations=[
            schemas.Invitation(member_id=member.id, role=member.role, project=member.project)
            for member in pending
        ],
    )
