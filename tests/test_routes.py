from models import db, Quiz, User
from classes.mentorship_manager import MentorshipManager
from classes.team_manager import TeamManager
from tests.conftest import QUESTIONS, auth_headers, make_user
from utils.leaderboard_service import user_stats


def test_register_and_login(client):
    response = client.post("/api/auth/register", json={
        "username": "newbie", "email": "newbie@example.com", "password": "secret123", "full_name": "New Bie",
    })
    assert response.status_code == 201

    response = client.post("/api/auth/login", json={"username_or_email": "newbie@example.com",
                                                    "password": "secret123"})
    assert response.status_code == 200
    assert "access_token" in response.headers.get("Set-Cookie", "")

    response = client.post("/api/auth/login", json={"username_or_email": "newbie", "password": "nope"})
    assert response.status_code == 401
    assert response.get_json() == {"error": "Invalid credentials"}


def test_requests_without_a_token_are_rejected(client):
    response = client.get("/api/leaderboard")
    assert response.status_code == 401
    assert "error" in response.get_json()


def test_students_cannot_author_quizzes(client, student):
    response = client.post("/api/quizzes", json={"title": "Mine"}, headers=auth_headers(student))
    assert response.status_code == 403


def test_mentor_publishes_and_hosts_a_quiz(client, mentor, student):
    headers = auth_headers(mentor)

    response = client.post("/api/quizzes", json={"title": "Space", "questions": QUESTIONS}, headers=headers)
    assert response.status_code == 201
    quiz_id = response.get_json()["quiz"]["id"]

    response = client.post(f"/api/quizzes/{quiz_id}/publish", headers=headers)
    quiz_code = response.get_json()["quiz_code"]
    assert response.status_code == 200
    assert len(quiz_code) == 8

    response = client.get(f"/api/quizzes/code/{quiz_code}", headers=auth_headers(student))
    assert response.status_code == 200
    assert "correctOptionIndex" not in response.get_json()["quiz"]["questions"][0]

    response = client.post(f"/api/mentor/quizzes/{quiz_id}/sessions", json={}, headers=headers)
    assert response.status_code == 201
    session_id = response.get_json()["session"]["id"]
    session_code = response.get_json()["sessionCode"]

    response = client.post("/api/student/sessions/join", json={"sessionCode": session_code},
                           headers=auth_headers(student))
    assert response.status_code == 200
    assert response.get_json()["alreadyJoined"] is False

    response = client.post(f"/api/mentor/sessions/{session_id}/start", headers=headers)
    assert response.get_json()["session"]["status"] == "active"

    response = client.post(f"/api/student/sessions/{session_id}/answers", headers=auth_headers(student),
                           json={"questionIndex": 0, "selectedOptionIndex": 1, "answerTimeMs": 4000})
    assert response.status_code == 200
    assert response.get_json()["isCorrect"] is True

    response = client.post(f"/api/student/sessions/{session_id}/answers", headers=auth_headers(student),
                           json={"questionIndex": 0, "selectedOptionIndex": 1, "answerTimeMs": 4000})
    assert response.status_code == 409

    response = client.get(f"/api/mentor/sessions/{session_id}/questions/0/stats", headers=headers)
    assert response.get_json()["stats"]["1"] == 1

    response = client.get(f"/api/mentor/sessions/{session_id}/leaderboard", headers=headers)
    assert response.get_json()["leaderboard"][0]["rank"] == 1


def test_unknown_session_returns_flat_error(client, mentor):
    response = client.post("/api/mentor/sessions/999/advance", headers=auth_headers(mentor))
    assert response.status_code == 404
    assert response.get_json() == {"error": "Session not found or unauthorized"}


def test_global_leaderboard_and_my_stats(client, student):
    response = client.get("/api/leaderboard/me", headers=auth_headers(student))
    stats = response.get_json()["stats"]
    assert stats["total_points"] == 0
    assert stats["tier"]["id"] == "seedling"

    response = client.get("/api/leaderboard", headers=auth_headers(student))
    assert response.get_json() == {"leaderboard": []}


def test_team_endpoints(client, student):
    response = client.post("/api/hackathon/teams", json={"teamName": "Byte Club"}, headers=auth_headers(student))
    assert response.status_code == 201

    response = client.get("/api/hackathon/teams/me", headers=auth_headers(student))
    assert response.get_json()["team"]["team_name"] == "Byte Club"

    response = client.post("/api/hackathon/teams/leave", headers=auth_headers(student))
    assert response.get_json()["disbanded"] is True


def test_only_students_can_self_register(client):
    for role in ("mentor", "admin"):
        response = client.post("/api/auth/register", json={
            "username": f"want-{role}", "email": f"{role}@example.com", "password": "secret123", "role": role,
        })
        assert response.status_code == 403
    assert User.query.count() == 0


def test_bad_session_settings_return_400(client, mentor, quiz):
    response = client.post(f"/api/mentor/quizzes/{quiz.id}/sessions", headers=auth_headers(mentor),
                           json={"settings": {"questionTimer": "abc"}})
    assert response.status_code == 400
    assert response.get_json() == {"error": "questionTimer must be an integer of at least 1"}


def test_unexpected_errors_become_a_flat_500(client, student, monkeypatch):
    def broken_code(*args, **kwargs):
        raise RuntimeError("code generator exploded")

    monkeypatch.setattr("classes.team_manager.generate_unique_code", broken_code)
    response = client.post("/api/hackathon/teams", json={"teamName": "Byte Club"}, headers=auth_headers(student))

    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to create team"}


def test_admin_promotes_and_assigns_a_mentor(client, student):
    admin = make_user("root", role="admin")
    candidate = make_user("candidate")
    headers = auth_headers(admin)

    response = client.put(f"/api/admin/users/{candidate.id}/role", json={"role": "mentor"}, headers=headers)
    assert response.status_code == 200
    assert response.get_json()["user"]["role"] == "mentor"

    response = client.put(f"/api/admin/users/{candidate.id}/role", json={"role": "wizard"}, headers=headers)
    assert response.status_code == 400

    response = client.post("/api/admin/mentor-assignments", headers=headers,
                           json={"mentorId": candidate.id, "studentId": student.id})
    assert response.status_code == 200
    assert response.get_json()["assignment"]["student_id"] == student.id

    response = client.put(f"/api/admin/users/{student.id}/role", json={"role": "admin"},
                          headers=auth_headers(student))
    assert response.status_code == 403


def test_task_flow_over_http(client, mentor, student):
    admin = make_user("root", role="admin")
    client.post("/api/admin/mentor-assignments", headers=auth_headers(admin),
                json={"mentorId": mentor.id, "studentId": student.id})

    response = client.post("/api/tasks", headers=auth_headers(mentor), json={
        "title": "Write a README", "points": 25, "steps": [{"title": "Link the repo", "submission_type": "link"}],
    })
    assert response.status_code == 201
    assert response.get_json()["assigned_count"] == 1
    step_id = response.get_json()["task"]["steps"][0]["id"]

    response = client.get("/api/tasks/mine", headers=auth_headers(student))
    assignment_id = response.get_json()["tasks"][0]["id"]

    response = client.put(f"/api/tasks/assignments/{assignment_id}/steps/{step_id}",
                          json={"link_url": "https://github.com/sam/readme"}, headers=auth_headers(student))
    assert response.status_code == 200

    response = client.post(f"/api/tasks/assignments/{assignment_id}/submit", headers=auth_headers(student))
    assert response.status_code == 200
    assert response.get_json()["pointsAwarded"] == 25

    response = client.get("/api/points/history", headers=auth_headers(student))
    assert response.get_json()["history"][0]["points"] == 25


def test_mentors_adjust_only_their_own_students(client, mentor, student, other_student):
    MentorshipManager.assign(mentor.id, student.id)

    response = client.post(f"/api/points/users/{student.id}/adjust", json={"points": 15},
                           headers=auth_headers(mentor))
    assert response.status_code == 200
    assert user_stats(student.id)["bonus_points"] == 15

    response = client.post(f"/api/points/users/{other_student.id}/adjust", json={"points": 15},
                           headers=auth_headers(mentor))
    assert response.status_code == 403

    response = client.post(f"/api/points/users/{student.id}/adjust", json={"points": 15},
                           headers=auth_headers(other_student))
    assert response.status_code == 403


def test_mentor_team_overview(client, mentor, student):
    team = TeamManager.create_team(student.id, "Byte Club")

    response = client.get("/api/hackathon/teams", headers=auth_headers(student))
    assert response.status_code == 403

    response = client.put(f"/api/hackathon/teams/{team.id}/theme", json={"theme": "Open data"},
                          headers=auth_headers(mentor))
    assert response.get_json()["team"]["theme"] == "Open data"

    response = client.get("/api/hackathon/teams", headers=auth_headers(mentor))
    teams = response.get_json()["teams"]
    assert [row["team_name"] for row in teams] == ["Byte Club"]
    assert teams[0]["members"][0]["user_id"] == student.id
