import os
from sqlalchemy.pool import QueuePool
from urllib.parse import urlparse
import pymysql
pymysql.install_as_MySQLdb()

DEFAULT_SESSION_SETTINGS = {
    "questionTimer": 20,
    "showAnswerDistribution": True,
    "showLeaderboard": True,
    "allowLateJoin": False,
    "pointsPerQuestion": 1000,
    "speedBonus": True,
    "maxSpeedBonus": 500,
    "streakMultiplier": True,
}

# Seed values for points_config; admins tune them at runtime
DEFAULT_POINTS = {
    "task_submission": (10, "Submitting a completed task"),
    "discussion_create": (100, "Starting a discussion"),
    "discussion_comment": (50, "Commenting on a discussion"),
    "quiz_completion": (20, "Finishing a quiz"),
    "quiz_perfect_score": (50, "Answering every quiz question correctly"),
    "resource_upload": (15, "Sharing a resource"),
    "hackathon_participation": (100, "Joining a hackathon team"),
    "feedback_submission": (10, "Submitting feedback"),
    "daily_login": (5, "Daily login"),
    "profile_completion": (25, "Completing the profile"),
}

class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'change_this_secret_key')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": QueuePool,
        "pool_size": 5,
        "max_overflow": 2,
        "pool_timeout": 10
    }

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if origin.strip()
    ]
    JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))
    ACCESS_TOKEN_COOKIE_SECURE = os.getenv("ACCESS_TOKEN_COOKIE_SECURE", "True") == "True"

    DEFAULT_SESSION_SETTINGS = DEFAULT_SESSION_SETTINGS
    DEFAULT_POINTS = DEFAULT_POINTS
    LATE_ANSWER_GRACE_MS = int(os.getenv("LATE_ANSWER_GRACE_MS", "2000"))
    HACKATHON_MAX_TEAM_MEMBERS = int(os.getenv("HACKATHON_MAX_TEAM_MEMBERS", "4"))
    REALTIME_KEEPALIVE_SECONDS = int(os.getenv("REALTIME_KEEPALIVE_SECONDS", "15"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

class DevConfig(Config):
    """Development Configuration"""
    DEBUG = True
    TESTING = False
    ACCESS_TOKEN_COOKIE_SECURE = False
    SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI', 'mysql+pymysql://root:@localhost/edu_platform')

class TestConfig(Config):
    TESTING = True
    DEBUG = False
    SECRET_KEY = "test-secret-key"
    ACCESS_TOKEN_COOKIE_SECURE = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    # The MySQL pool options do not apply to an in-memory database
    SQLALCHEMY_ENGINE_OPTIONS = {}
    REALTIME_KEEPALIVE_SECONDS = 1

class ProdConfig(Config):
    """Production Configuration"""
    DEBUG = False

    raw_db_url = os.getenv('DATABASE_URL')

    if raw_db_url:
        if raw_db_url.startswith("mysql://"):
            raw_db_url = raw_db_url.replace("mysql://", "mysql+pymysql://", 1)

        parsed_url = urlparse(raw_db_url)
        SQLALCHEMY_DATABASE_URI = f"{parsed_url.scheme}://{parsed_url.netloc}{parsed_url.path}"
    else:
        SQLALCHEMY_DATABASE_URI = os.getenv('JAWSDB_URL', 'sqlite:///:memory:')

ENV = os.getenv('FLASK_ENV', 'production').lower()

config_dict = {
    "development": DevConfig,
    "testing": TestConfig,
    "production": ProdConfig
}

CurrentConfig = config_dict.get(ENV, ProdConfig)
