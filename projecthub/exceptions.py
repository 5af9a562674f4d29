"""HTTP-aware error types raised by the service layer.

Each class carries a fixed status code and a static message so callers
never see internal details. FastAPI renders them as ``{"detail": ...}``.
"""
from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Bad request."
    headers = None

    def __init__(self):
        super().__init__(status_code=self.status_code, detail=self.message, headers=self.headers)


# 404
class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found."


class UserNotFound(NotFound):
    message = "User not found."


class ProjectNotFound(NotFound):
    message = "Project not found."


class TaskNotFound(NotFound):
    message = "Task not found."


class MemberNotFound(NotFound):
    message = "Project member not found."


# 403
class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You do not have sufficient permissions to perform this action."


# 409
class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    message = "The request conflicts with the current state of the resource."


class ProjectAlreadyStarted(Conflict):
    message = "Project has already been started."


class TaskNotPending(Conflict):
    message = "Only pending tasks can be started."


class TaskAlreadyCompleted(Conflict):
    message = "Task has already been completed."


class InvitationAlreadyAccepted(Conflict):
    message = "Project invitation has already been accepted."


class EmailAlreadyInUse(Conflict):
    message = "The email address is already in use."


class MemberAlreadyInvited(Conflict):
    message = "One or more users are already members of this project."


class OwnerMembershipLocked(Conflict):
    message = "The project owner's membership cannot be changed."


# 400
class Validation(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request."


class PasswordsDoNotMatch(Validation):
    message = "The passwords do not match."


class OwnerRoleNotAssignable(Validation):
    message = "The OWNER role cannot be assigned."


# 401
class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials."
    headers = {"WWW-Authenticate": "Bearer"}
