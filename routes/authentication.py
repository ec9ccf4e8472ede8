import logging

from flask import Blueprint, request, jsonify, make_response, current_app
from models.users import User
from models import db
from utils.tokens import get_jwt_token
from utils.utils import login_required, current_user_id
from utils.responses import handle_errors

auth_bp = Blueprint('auth_bp', __name__)
logger = logging.getLogger("routes")

def _set_token_cookie(response, token, max_age):
    response.set_cookie(
        "access_token", token,
        httponly=True,
        secure=current_app.config.get("ACCESS_TOKEN_COOKIE_SECURE", True),
        samesite="None" if current_app.config.get("ACCESS_TOKEN_COOKIE_SECURE", True) else "Lax",
        path="/",
        max_age=max_age
    )

# Login
@auth_bp.route('/login', methods=['POST'])
@handle_errors("Failed to log in")
def login():
    data = request.get_json() or {}
    username = data.get("username_or_email")
    password = data.get("password")

    user = User.query.filter(
        (User.username == username) | (User.email == username)
    ).first()

    if not user or not password or not user.check_password(password):
        return jsonify({"error": "Invalid credentials"}), 401

    token = get_jwt_token({
        "user_id": user.id,
        "username_or_email": user.username,
        "role": user.role,
    })

    response = make_response(jsonify({
        "message": "Login successful",
        "user": {
            "id": user.id,
            "role": user.role,
            "username": user.username,
            "email": user.email
        }
    }))
    _set_token_cookie(response, token, current_app.config.get("JWT_EXPIRATION_HOURS", 24) * 3600)
    logger.info("User %s logged in", user.id)

    return response

# Logout
@auth_bp.route('/logout', methods=['POST'])
def logout():
    response = make_response(jsonify({"message": "Logout successful"}))
    _set_token_cookie(response, "", 0)
    return response

# Register
@auth_bp.route('/register', methods=['POST'])
@handle_errors("Failed to register")
def register():
    data = request.get_json() or {}

    username = data.get('username')
    email = data.get('email')
    password = data.get('password')
    full_name = data.get('full_name')
    role = data.get('role', 'student')

    if not username or not email or not password:
        return jsonify({"error": "Username, email and password are required"}), 400
    if role != "student":
        return jsonify({"error": "Only student accounts can self-register"}), 403

    existing_user = User.query.filter(
        (User.username == username) | (User.email == email)
    ).first()

    if existing_user:
        return jsonify({"error": "User already exists"}), 409

    new_user = User(
        username=username,
        email=email,
        full_name=full_name,
        role=role
    )
    new_user.set_password(password)

    db.session.add(new_user)
    db.session.commit()

    return jsonify({"message": "User registered successfully!", "user": new_user.to_dict()}), 201

# Current user
@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    user = db.session.get(User, current_user_id())
    if not user:
        return jsonify({"error": "User not found"}), 404
    return jsonify({"message": "Authenticated", "user": user.to_dict()}), 200
