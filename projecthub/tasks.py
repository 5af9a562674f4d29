"""Task lifecycle within a project: PENDING -> ACTIVE -> COMPLETED.

Completing straight from PENDING is allowed. The parent project is always
resolved first, so a missing project reports ProjectNotFound even when the
task id is also bogus.
"""
import logging

from sqlalchemy.orm import Session

from . import crud, models, permissions, schemas
from .exceptions import TaskAlreadyCompleted, TaskNotFound, TaskNotPending
from .projects import get_project_or_404

logger = logging.getLogger(__name__)


def _get_task_or_404(db: Session, project_id: int, task_id: int) -> models.Task:
    task = crud.get_task(db, project_id, task_id)
    if not task:
        raise TaskNotFound()
    return task


def add_task(db: Session, project_id: int, task: schemas.TaskCreate, user_id: int) -> models.Task:
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_owner_or_admin, db, project.id, user_id)
    db_task = crud.create_task(db, project.id, task.model_dump())
    logger.info("Task %s added to project %s", db_task.id, project.id)
    return db_task


def update_task(db: Session, project_id: int, task_id: int, fields: schemas.TaskUpdate, user_id: int) -> models.Task:
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_owner_or_admin, db, project.id, user_id)
    task = _get_task_or_404(db, project.id, task_id)
    return crud.update_task(db, task, fields.model_dump(exclude_unset=True))


def start_task(db: Session, project_id: int, task_id: int, user_id: int) -> models.Task:
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_active_member, db, project.id, user_id)
    task = _get_task_or_404(db, project.id, task_id)

    if task.status != models.TaskStatus.PENDING:
        raise TaskNotPending()

    updated = crud.transition_task_status(
        db,
        task.id,
        allowed_from={models.TaskStatus.PENDING},
        new_status=models.TaskStatus.ACTIVE,
        started_at=crud.utcnow(),
    )
    if not updated:
        raise TaskNotPending()

    db.refresh(task)
    logger.info("Task %s started by user %s", task.id, user_id)
    return task


def complete_task(db: Session, project_id: int, task_id: int, user_id: int) -> models.Task:
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_active_member, db, project.id, user_id)
    task = _get_task_or_404(db, project.id, task_id)

    if task.status == models.TaskStatus.COMPLETED:
        raise TaskAlreadyCompleted()

    updated = crud.transition_task_status(
        db,
        task.id,
        allowed_from={models.TaskStatus.PENDING, models.TaskStatus.ACTIVE},
        new_status=models.TaskStatus.COMPLETED,
        completed_at=crud.utcnow(),
    )
    if not updated:
        raise TaskAlreadyCompleted()

    db.refresh(task)
    logger.info("Task %s completed by user %s", task.id, user_id)
    return task


def delete_task(db: Session, project_id: int, task_id: int, user_id: int):
    project = get_project_or_404(db, project_id)
    permissions.require(permissions.is_owner_or_admin, db, project.id, user_id)
    task = _get_task_or_404(db, project.id, task_id)
    crud.delete_task(db, task)
    logger.info("Task %s deleted from project %s", task_id, project.id)
