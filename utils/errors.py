"""Error taxonomy shared by the services and the blueprints.

Services raise these exceptions; the blueprints turn them into the flat
``{"error": message}`` body with the exception's status code.
"""


class LiveQuizError(Exception):
    status_code = 400
    message = "Request failed"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self):
        return {"error": self.message}


class Unauthenticated(LiveQuizError):
    status_code = 401
    message = "Not authenticated"


class Forbidden(LiveQuizError):
    status_code = 403
    message = "Forbidden"


class NotFound(LiveQuizError):
    status_code = 404
    message = "Not found"


class SessionNotFound(NotFound):
    message = "Session not found"


class ParticipantNotFound(NotFound):
    message = "Participant not found"


class QuestionNotFound(NotFound):
    message = "Question not found"


class QuizNotFound(NotFound):
    message = "Quiz not found"


class TeamNotFound(NotFound):
    message = "No team found with this code"


class DiscussionNotFound(NotFound):
    message = "Discussion not found"


class TaskNotFound(NotFound):
    message = "Task not found"


class AssignmentNotFound(NotFound):
    message = "Task assignment not found"


class ValidationFailed(LiveQuizError):
    status_code = 400
    message = "Invalid request"


class Conflict(LiveQuizError):
    status_code = 409
    message = "Conflict"


class AlreadyAnswered(Conflict):
    message = "Question already answered"


class AnswerWindowClosed(Conflict):
    message = "Time is up for this question"


class SessionFinished(Conflict):
    message = "This session has already ended"


class AlreadyInTeam(Conflict):
    message = "You are already in a team"


class TeamFull(Conflict):
    message = "This team is full"


class BackendFailure(LiveQuizError):
    status_code = 500
    message = "Something went wrong"
