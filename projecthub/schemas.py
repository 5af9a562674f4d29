from datetime import date, datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, EmailStr, Field, field_validator

from .models import MemberStatus, Priority, ProjectStatus, Role, TaskStatus

T = TypeVar("T")


# Envelopes
class DataResponse(BaseModel, Generic[T]):
    data: T
    message: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


# Users / auth
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    confirm_password: str
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class PasswordUpdate(BaseModel):
    current_password: str = Field(min_length=8)
    new_password: str = Field(min_length=8)


class UserOut(BaseModel):
    id: int
    email: EmailStr
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AuthPayload(BaseModel):
    user: UserOut
    access_token: str
    token_type: str = "bearer"


# Tasks
class TaskCreate(BaseModel):
    description: str = Field(min_length=2)
    priority: Priority
    due_date: Optional[date] = None


class TaskUpdate(BaseModel):
    description: Optional[str] = Field(default=None, min_length=2)
    priority: Optional[Priority] = None
    due_date: Optional[date] = None

    @field_validator("description", "priority")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class TaskOut(BaseModel):
    id: int
    project_id: int
    description: str
    priority: Priority
    due_date: Optional[date] = None
    status: TaskStatus
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TaskPayload(BaseModel):
    task: TaskOut


# Projects
class ProjectCreate(BaseModel):
    name: str = Field(min_length=2)
    description: Optional[str] = Field(default=None, min_length=2)
    due_date: Optional[date] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = Field(default=None, min_length=2)
    due_date: Optional[date] = None

    @field_validator("name")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class ProjectOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    owner_id: int
    status: ProjectStatus
    started_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectPayload(BaseModel):
    project: ProjectOut


# Members
class MemberOut(BaseModel):
    id: int
    project_id: int
    user_id: int
    role: Role
    status: MemberStatus
    joined_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MemberPayload(BaseModel):
    member: MemberOut


class ProjectDetail(ProjectOut):
    tasks: List[TaskOut] = []
    members: List[MemberOut] = []


class UserInvited(BaseModel):
    email: EmailStr
    role: Role


class InviteUsers(BaseModel):
    users_list: List[UserInvited] = Field(min_length=1)


class MemberRoleUpdate(BaseModel):
    member_id: int
    new_role: Role


class Invitation(BaseModel):
    member_id: int
    role: Role
    project: ProjectOut


class UserProjects(BaseModel):
    owned_projects: List[ProjectOut] = []
    joined_projects: List[ProjectOut] = []
    pending_invitations: List[Invitation] = []


class UserPayload(BaseModel):
    user: UserOut
