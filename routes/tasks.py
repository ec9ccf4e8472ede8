from flask import Blueprint, jsonify, request

from classes.task_manager import TaskManager
from utils.responses import handle_errors
from utils.utils import login_required, role_required, current_user_id

# Mentor tasks and student progress blueprint
task_bp = Blueprint("tasks", __name__)

@task_bp.route("", methods=["GET"])
@login_required
@role_required("mentor")
@handle_errors("Failed to load tasks")
def list_tasks():
    tasks = TaskManager.list_tasks(current_user_id())
    return jsonify({"tasks": [
        {**task.to_dict(), "assigned_count": len(task.assignments)} for task in tasks
    ]}), 200

# Create a task; every current mentee gets it straight away
@task_bp.route("", methods=["POST"])
@login_required
@role_required("mentor")
@handle_errors("Failed to create task")
def create_task():
    data = request.get_json() or {}
    task = TaskManager.create_task(current_user_id(), data)
    return jsonify({"message": "Task created", "task": task.to_dict(),
                    "assigned_count": len(task.assignments)}), 201

@task_bp.route("/<int:task_id>/assign", methods=["POST"])
@login_required
@role_required("mentor")
@handle_errors("Failed to assign task")
def assign_task(task_id):
    data = request.get_json() or {}
    added = TaskManager.assign_students(current_user_id(), task_id, data.get("studentIds"))
    return jsonify({"message": "Task assigned", "added": added}), 200

@task_bp.route("/<int:task_id>/active", methods=["PUT"])
@login_required
@role_required("mentor")
@handle_errors("Failed to update task")
def set_task_active(task_id):
    data = request.get_json() or {}
    task = TaskManager.set_active(current_user_id(), task_id, data.get("is_active"))
    return jsonify({"task": task.to_dict(include_steps=False)}), 200

@task_bp.route("/<int:task_id>", methods=["DELETE"])
@login_required
@role_required("mentor")
@handle_errors("Failed to delete task")
def delete_task(task_id):
    TaskManager.delete_task(current_user_id(), task_id)
    return jsonify({"message": "Task deleted"}), 200

# Per-student progress on one task
@task_bp.route("/<int:task_id>/submissions", methods=["GET"])
@login_required
@role_required("mentor")
@handle_errors("Failed to load submissions")
def get_submissions(task_id):
    task, assignments = TaskManager.submissions(current_user_id(), task_id)
    return jsonify({
        "task": task.to_dict(),
        "submissions": [assignment.to_dict() for assignment in assignments],
    }), 200

# Student side
# --------------------------------------------------------------------------------
@task_bp.route("/mine", methods=["GET"])
@login_required
@role_required("student")
@handle_errors("Failed to load tasks")
def get_my_tasks():
    assignments = TaskManager.my_tasks(current_user_id())
    return jsonify({"tasks": [assignment.to_dict(include_task=True) for assignment in assignments]}), 200

@task_bp.route("/assignments/<int:assignment_id>/steps/<int:step_id>", methods=["PUT"])
@login_required
@role_required("student")
@handle_errors("Failed to save step")
def complete_step(assignment_id, step_id):
    data = request.get_json() or {}
    completion = TaskManager.complete_step(
        current_user_id(),
        assignment_id,
        step_id,
        text_content=data.get("text_content"),
        link_url=data.get("link_url"),
        file_url=data.get("file_url"),
    )
    return jsonify({"completion": completion.to_dict()}), 200

@task_bp.route("/assignments/<int:assignment_id>/steps/<int:step_id>", methods=["DELETE"])
@login_required
@role_required("student")
@handle_errors("Failed to reopen step")
def reopen_step(assignment_id, step_id):
    completion = TaskManager.reopen_step(current_user_id(), assignment_id, step_id)
    return jsonify({"completion": completion.to_dict()}), 200

@task_bp.route("/assignments/<int:assignment_id>/submit", methods=["POST"])
@login_required
@role_required("student")
@handle_errors("Failed to submit task")
def submit_task(assignment_id):
    assignment, points = TaskManager.submit(current_user_id(), assignment_id)
    return jsonify({"message": "Task submitted", "assignment": assignment.to_dict(),
                    "pointsAwarded": points}), 200
