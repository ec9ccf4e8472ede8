from flask_sqlalchemy import SQLAlchemy

# Initialize SQLAlchemy
db = SQLAlchemy()

# Import models
from models.users import User

from models.quizzes import Quiz
from models.quiz_sessions import QuizSession
from models.session_participants import SessionParticipant
from models.session_answers import SessionAnswer
from models.session_events import SessionEvent
from models.leaderboard import LeaderboardEntry

from models.discussions import Discussion, DiscussionComment, DiscussionVote
from models.hackathon import HackathonTeam, HackathonTeamMember

from models.mentor_assignments import MentorAssignment
from models.tasks import Task, TaskStep, TaskAssignment, TaskStepCompletion
from models.points import PointsConfig, PointsHistory
