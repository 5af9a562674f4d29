"""Project lifecycle: create, start, update, delete.

A project is created INACTIVE together with its OWNER membership and moves
to ACTIVE exactly once.
"""
import logging

from sqlalchemy.orm import Session

from . import crud, models, permissions, schemas
from .exceptions import ProjectAlreadyStarted, ProjectNotFound, UserNotFound

logger = logging.getLogger(__name__)


def get_project_or_404(db: Session, project_id: int) -> models.Project:
    project = crud.get_project(db, project_id)
    if not project:
        raise ProjectNotFound()
    return project


def create_project(db: Session, owner_id: int, project: schemas.ProjectCreate) -> models.Project:
    if not crud.get_user(db, owner_id):
        raise UserNotFound()
    db_project = crud.create_project_with_owner(db, owner_id, project.model_dump())
    logger.info("Project %s created by user %s", db_project.id, owner_id)
    return db_project


def get_project_details(db: Session, project_id: int, user_id: int) -> models.Project:
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_active_member, db, project.id, user_id)
    return project


def start_project(db: Session, project_id: int, user_id: int) -> models.Project:
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_owner, db, project.id, user_id)

    if project.status != models.ProjectStatus.INACTIVE:
        raise ProjectAlreadyStarted()

    updated = crud.transition_project_status(
        db,
        project.id,
        expected=models.ProjectStatus.INACTIVE,
        new_status=models.ProjectStatus.ACTIVE,
        started_at=crud.utcnow(),
    )
    if not updated:
        raise ProjectAlreadyStarted()

    db.refresh(project)
    logger.info("Project %s started by user %s", project.id, user_id)
    return project


def update_project(db: Session, project_id: int, fields: schemas.ProjectUpdate, user_id: int) -> models.Project:
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_owner_or_admin, db, project.id, user_id)
    return crud.update_project(db, project, fields.model_dump(exclude_unset=True))


def delete_project(db: Session, project_id: int, user_id: int) -> schemas.ProjectOut:
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_owner, db, project.id, user_id)
    # Snapshot before the row (and its members and tasks) disappears
    deleted = schemas.ProjectOut.model_validate(project)
    crud.delete_project(db, project)
    logger.info("Project %s deleted by user %s", project_id, user_id)
    return deleted
