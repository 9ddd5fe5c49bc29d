"""
Domain errors raised by services and dependencies.

Each error carries the HTTP status and the ``type`` string used in the
``{"error": {...}}`` response envelope rendered by the application.
"""
from typing import Optional

class DailyDoseError(Exception):
    status_code: int = 400
    error_type: str = "error"
    message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, hint: Optional[str] = None):
        self.message = message or self.message
        self.hint = hint
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"message": self.message, "type": self.error_type, "status_code": self.status_code}
        if self.hint:
            body["hint"] = self.hint
        return body

class Unauthenticated(DailyDoseError):
    status_code = 401
    error_type = "unauthenticated"
    message = "Not authenticated"

class Forbidden(DailyDoseError):
    status_code = 403
    error_type = "forbidden"
    message = "Insufficient role"

class NoPrimarySubject(DailyDoseError):
    status_code = 409
    error_type = "no_primary_subject"
    message = "No primary subject selected"

    def __init__(self, message: Optional[str] = None, hint: Optional[str] = None):
        super().__init__(message, hint or "Select a primary subject before requesting daily questions")

class SetNotFound(DailyDoseError):
    status_code = 404
    error_type = "set_not_found"
    message = "Question set not found for the given date"

class AlreadyCompleted(DailyDoseError):
    status_code = 409
    error_type = "already_completed"
    message = "This question set has already been completed"

class InvalidSubmission(DailyDoseError):
    status_code = 400
    error_type = "invalid_submission"
    message = "Invalid question IDs in submission"

class PrimarySubjectLocked(DailyDoseError):
    status_code = 409
    error_type = "primary_subject_locked"
    message = "Primary subject already selected and cannot be changed"

class SubjectNotFound(DailyDoseError):
    status_code = 404
    error_type = "subject_not_found"
    message = "Selected subject does not exist"

class QuestionNotFound(DailyDoseError):
    status_code = 404
    error_type = "question_not_found"
    message = "Question not found"

class EmailTaken(DailyDoseError):
    status_code = 409
    error_type = "email_taken"
    message = "A user with this email already exists"
