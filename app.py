import os
from dotenv import load_dotenv
load_dotenv()
from flask import Flask
from flask_cors import CORS
from flask_migrate import Migrate
from config import config_dict
from models import db
from utils.logging_config import configure_logging
from utils.realtime import init_change_notifier
from routes.authentication import auth_bp
from routes.quizzes import quiz_bp
from routes.mentors import mentor_bp
from routes.students import student_bp
from routes.leaderboard import leaderboard_bp
from routes.discussions import discussion_bp
from routes.hackathon import hackathon_bp
from routes.realtime import realtime_bp
from routes.tasks import task_bp
from routes.points import points_bp
from routes.admin import admin_bp

migrate = Migrate()


def create_app(config_name=None):
    env = config_name or os.environ.get("FLASK_ENV", "production")

    app = Flask(__name__)
    app.config.from_object(config_dict.get(env, config_dict["production"]))

    configure_logging(app.config["LOG_LEVEL"])
    app.logger.info("Starting LearnHub backend (%s)", env)

    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}, supports_credentials=True)

    db.init_app(app)
    migrate.init_app(app, db)
    init_change_notifier(app)

    @app.route('/')
    def home():
        return "Welcome to the LearnHub live quiz API!"

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(quiz_bp, url_prefix='/api/quizzes')
    app.register_blueprint(mentor_bp, url_prefix='/api/mentor')
    app.register_blueprint(student_bp, url_prefix='/api/student')
    app.register_blueprint(leaderboard_bp, url_prefix='/api/leaderboard')
    app.register_blueprint(discussion_bp, url_prefix='/api/discussions')
    app.register_blueprint(hackathon_bp, url_prefix='/api/hackathon')
    app.register_blueprint(realtime_bp, url_prefix='/api/realtime')
    app.register_blueprint(task_bp, url_prefix='/api/tasks')
    app.register_blueprint(points_bp, url_prefix='/api/points')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=app.config['DEBUG'], threaded=True)
