from datetime import datetime, timezone

from sqlalchemy.orm import Session

from . import models


def utcnow():
    return datetime.now(timezone.utc)


# USERS
def get_user(db: Session, user_id: int):
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(models.User.email == email).first()


def create_user(db: Session, email: str, hashed_password: str, first_name: str, last_name: str):
    db_user = models.User(
        email=email,
        hashed_password=hashed_password,
        first_name=first_name,
        last_name=last_name,
    )
    db.add(db_user)
    _commit(db)
    db.refresh(db_user)
    return db_user


def update_user_password(db: Session, user: models.User, hashed_password: str):
    user.hashed_password = hashed_password
    _commit(db)
    db.refresh(user)
    return user


# PROJECTS
def get_project(db: Session, project_id: int):
    return db.query(models.Project).filter(models.Project.id == project_id).first()


def get_owned_projects(db: Session, user_id: int):
    return db.query(models.Project).filter(models.Project.owner_id == user_id).all()


def get_memberships_for_user(db: Session, user_id: int, status=None, exclude_role=None):
    q = db.query(models.ProjectMember).filter(models.ProjectMember.user_id == user_id)
    if status is not None:
        q = q.filter(models.ProjectMember.status == status)
    if exclude_role is not None:
        q = q.filter(models.ProjectMember.role != exclude_role)
    return q.all()


def create_project_with_owner(db: Session, owner_id: int, fields: dict):
    """Insert the project and its OWNER membership in one transaction."""
    db_project = models.Project(owner_id=owner_id, status=models.ProjectStatus.INACTIVE, **fields)
    db.add(db_project)
    try:
        db.flush()
        db.add(models.ProjectMember(
            project_id=db_project.id,
            user_id=owner_id,
            role=models.Role.OWNER,
            status=models.MemberStatus.ACTIVE,
            joined_at=utcnow(),
        ))
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_project)
    return db_project


def update_project(db: Session, project: models.Project, fields: dict):
    for field, value in fields.items():
        setattr(project, field, value)
    _commit(db)
    db.refresh(project)
    return project


def transition_project_status(db: Session, project_id: int, expected, new_status, **values) -> int:
    """Set ``new_status`` only if the row still holds ``expected``.

    Returns the number of rows matched; 0 means another writer got there first.
    """
    values["status"] = new_status
    count = (
        db.query(models.Project)
        .filter(models.Project.id == project_id, models.Project.status == expected)
        .update(values, synchronize_session=False)
    )
    _commit(db)
    return count


def delete_project(db: Session, project: models.Project):
    db.delete(project)
    _commit(db)


# MEMBERS
def get_member(db: Session, project_id: int, member_id: int):
    return db.query(models.ProjectMember).filter(
        models.ProjectMember.id == member_id,
        models.ProjectMember.project_id == project_id,
    ).first()


def get_membership(db: Session, project_id: int, user_id: int):
    return db.query(models.ProjectMember).filter(
        models.ProjectMember.project_id == project_id,
        models.ProjectMember.user_id == user_id,
    ).first()


def find_active_membership(db: Session, project_id: int, user_id: int, roles):
    return db.query(models.ProjectMember).filter(
        models.ProjectMember.project_id == project_id,
        models.ProjectMember.user_id == user_id,
        models.ProjectMember.status == models.MemberStatus.ACTIVE,
        models.ProjectMember.role.in_(list(roles)),
    ).first()


def get_members_by_user_ids(db: Session, project_id: int, user_ids):
    return db.query(models.ProjectMember).filter(
        models.ProjectMember.project_id == project_id,
        models.ProjectMember.user_id.in_(list(user_ids)),
    ).all()


def create_pending_members(db: Session, project_id: int, invites):
    """Bulk-insert PENDING memberships for ``(user_id, role)`` pairs in one commit."""
    rows = [
        models.ProjectMember(
            project_id=project_id,
            user_id=user_id,
            role=role,
            status=models.MemberStatus.PENDING,
            joined_at=None,
        )
        for user_id, role in invites
    ]
    db.add_all(rows)
    _commit(db)
    for row in rows:
        db.refresh(row)
    return rows


def activate_membership(db: Session, member_id: int) -> int:
    count = (
        db.query(models.ProjectMember)
        .filter(
            models.ProjectMember.id == member_id,
            models.ProjectMember.status == models.MemberStatus.PENDING,
        )
        .update(
            {"status": models.MemberStatus.ACTIVE, "joined_at": utcnow()},
            synchronize_session=False,
        )
    )
    _commit(db)
    return count


def update_member_role(db: Session, member: models.ProjectMember, role):
    member.role = role
    _commit(db)
    db.refresh(member)
    return member


def delete_member(db: Session, member: models.ProjectMember):
    db.delete(member)
    _commit(db)


# TASKS
def get_task(db: Session, project_id: int, task_id: int):
    return db.query(models.Task).filter(
        models.Task.id == task_id,
        models.Task.project_id == project_id,
    ).first()


def create_task(db: Session, project_id: int, fields: dict):
    db_task = models.Task(project_id=project_id, status=models.TaskStatus.PENDING, **fields)
    db.add(db_task)
    _commit(db)
    db.refresh(db_task)
    return db_task


def update_task(db: Session, task: models.Task, fields: dict):
    for field, value in fields.items():
        setattr(task, field, value)
    _commit(db)
    db.refresh(task)
    return task


def transition_task_status(db: Session, task_id: int, allowed_from, new_status, **values) -> int:
    values["status"] = new_status
    count = (
        db.query(models.Task)
        .filter(models.Task.id == task_id, models.Task.status.in_(list(allowed_from)))
        .update(values, synchronize_session=False)
    )
    _commit(db)
    return count


def delete_task(db: Session, task: models.Task):
    db.delete(task)
    _commit(db)


def _commit(db: Session):
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
