import logging

from fastapi import BackgroundTasks, Depends, FastAPI, status
from sqlalchemy.orm import Session

from . import auth, database, email_utils, invitations, models, projects, schemas, tasks, users
from .auth import get_current_user_id
from .config import LOG_LEVEL
from .database import get_db

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

models.Base.metadata.create_all(bind=database.engine)

app = FastAPI(title="ProjectHub API", description="Project management REST API", version="1.0.0")


# AUTH
@app.post("/auth/signup", response_model=schemas.DataResponse[schemas.AuthPayload], status_code=status.HTTP_201_CREATED)
def sign_up(user: schemas.UserCreate, db: Session = Depends(get_db)):
    db_user, token = auth.sign_up(db, user)
    return {"data": {"user": db_user, "access_token": token}, "message": "User successfully signed up."}


@app.post("/auth/signin", response_model=schemas.DataResponse[schemas.AuthPayload])
def sign_in(credentials: schemas.UserLogin, db: Session = Depends(get_db)):
    user, token = auth.sign_in(db, credentials)
    return {"data": {"user": user, "access_token": token}, "message": "User successfully signed in."}


# PROJECTS
@app.post("/projects", response_model=schemas.DataResponse[schemas.ProjectPayload], status_code=status.HTTP_201_CREATED)
def create_project(project: schemas.ProjectCreate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    db_project = projects.create_project(db, user_id, project)
    return {"data": {"project": db_project}, "message": "Project successfully created."}


@app.get("/projects/{project_id}", response_model=schemas.DataResponse[schemas.ProjectDetail])
def get_project_details(project_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return {"data": projects.get_project_details(db, project_id, user_id)}


@app.post("/projects/{project_id}/start", response_model=schemas.DataResponse[schemas.ProjectPayload])
def start_project(project_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    project = projects.start_project(db, project_id, user_id)
    return {"data": {"project": project}, "message": "Project successfully started."}


@app.patch("/projects/{project_id}", response_model=schemas.DataResponse[schemas.ProjectPayload])
def update_project(project_id: int, fields: schemas.ProjectUpdate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    project = projects.update_project(db, project_id, fields, user_id)
    return {"data": {"project": project}, "message": "Project details successfully updated."}


@app.delete("/projects/{project_id}", response_model=schemas.DataResponse[schemas.ProjectPayload])
def delete_project(project_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    project = projects.delete_project(db, project_id, user_id)
    return {"data": {"project": project}, "message": "Project successfully deleted."}


# TASKS
@app.post("/projects/{project_id}/tasks", response_model=schemas.DataResponse[schemas.TaskPayload], status_code=status.HTTP_201_CREATED)
def add_task(project_id: int, task: schemas.TaskCreate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    db_task = tasks.add_task(db, project_id, task, user_id)
    return {"data": {"task": db_task}, "message": "Task successfully added to the project."}


@app.patch("/projects/{project_id}/tasks/{task_id}", response_model=schemas.DataResponse[schemas.TaskPayload])
def update_task(project_id: int, task_id: int, fields: schemas.TaskUpdate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    db_task = tasks.update_task(db, project_id, task_id, fields, user_id)
    return {"data": {"task": db_task}, "message": "Task details successfully updated."}


@app.post("/projects/{project_id}/tasks/{task_id}/start", response_model=schemas.MessageResponse)
def start_task(project_id: int, task_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    tasks.start_task(db, project_id, task_id, user_id)
    return {"message": "Task successfully started."}


@app.post("/projects/{project_id}/tasks/{task_id}/complete", response_model=schemas.MessageResponse)
def complete_task(project_id: int, task_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    tasks.complete_task(db, project_id, task_id, user_id)
    return {"message": "Task successfully completed."}


@app.delete("/projects/{project_id}/tasks/{task_id}", response_model=schemas.MessageResponse)
def delete_task(project_id: int, task_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    tasks.delete_task(db, project_id, task_id, user_id)
    return {"message": "Task successfully deleted."}


# MEMBERS
@app.post("/projects/{project_id}/invite", response_model=schemas.MessageResponse)
def invite_users(project_id: int, invite: schemas.InviteUsers, background_tasks: BackgroundTasks, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    members = invitations.invite_users(db, project_id, invite, user_id)
    email_utils.notify_invited_users(
        background_tasks,
        members[0].project.name,
        [member.user.email for member in members],
    )
    return {"message": "Invitations successfully sent."}


@app.patch("/projects/{project_id}/members", response_model=schemas.DataResponse[schemas.MemberPayload])
def update_member_role(project_id: int, update: schemas.MemberRoleUpdate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    member = invitations.update_member_role(db, project_id, update, user_id)
    return {"data": {"member": member}, "message": "Member role successfully updated."}


@app.delete("/projects/{project_id}/members/{member_id}", response_model=schemas.MessageResponse)
def remove_member(project_id: int, member_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    invitations.remove_member(db, project_id, member_id, user_id)
    return {"message": "Member successfully removed."}


# USERS
@app.get("/users", response_model=schemas.DataResponse[schemas.UserPayload])
def get_profile(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return {"data": {"user": users.get_profile(db, user_id)}}


@app.get("/users/projects", response_model=schemas.DataResponse[schemas.UserProjects])
def get_user_projects(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return {"data": users.get_user_projects(db, user_id)}


@app.patch("/users", response_model=schemas.MessageResponse)
def update_password(passwords: schemas.PasswordUpdate, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    auth.update_password(db, user_id, passwords)
    return {"message": "Password successfully updated."}


@app.post("/users/invitations/{project_id}", response_model=schemas.MessageResponse)
def accept_project_invitation(project_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    invitations.accept_project_invitation(db, user_id, project_id)
    return {"message": "Project invitation successfully accepted."}
