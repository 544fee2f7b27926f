# app/exceptions.py
"""
Domain errors raised by the services.
app/main.py maps each one to an HTTP status, so services never import FastAPI.
"""


class AppError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidCredentials(AppError):
    status_code = 401

    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(detail)


class PermissionDenied(AppError):
    status_code = 403


class EntryNotFound(AppError):
    status_code = 404


class UsernameTaken(AppError):
    status_code = 409


class InvalidEntryTimes(AppError):
    status_code = 400


class InvalidDateRange(AppError):
    status_code = 400


class UploadRejected(AppError):
    def __init__(self, detail: str, status_code: int = 400):
        super().__init__(detail)
        self.status_code = status_code
