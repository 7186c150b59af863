import base64
import inspect

from fastapi.routing import APIRoute

from jobboard.main import app

from conftest import auth_header, count_rows


def signup(client, **body):
    return client.post("/api/auth/signup", json=body)


def employer_headers(client, email="hr@acme.com", company="Acme Corp"):
    response = signup(client, email=email, password="secret123", role="employer", company_name=company)
    assert response.status_code == 200, response.text
    return auth_header(client, email, "secret123", "employer")


def student_headers(client, email="ada@uni.edu"):
    response = signup(client, email=email, password="secret123", role="student", full_name="Ada")
    assert response.status_code == 200, response.text
    return auth_header(client, email, "secret123", "student")


def create_job(client, headers, **overrides):
    body = {
        "title": "Frontend Intern", "description": "React work", "requirements": "React\nCSS",
        "location": "Remote", "type": "internship", "work_mode": "remote",
    }
    body.update(overrides)
    response = client.post("/api/jobs", json=body, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["job"]


def test_health(client):
    assert client.get("/").json()["status"] == "healthy"
    body = client.get("/health").json()
    assert body == {"status": "healthy", "database": "connected"}


class TestAuthEndpoints:
    def test_signup_signin_me(self, client):
        headers = student_headers(client)
        me = client.get("/api/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["email"] == "ada@uni.edu"
        assert me.json()["role"] == "student"

    def test_duplicate_signup_is_400(self, client):
        student_headers(client)
        response = signup(client, email="ada@uni.edu", password="secret123", role="student", full_name="Ada")
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    def test_bad_signin_is_401(self, client):
        student_headers(client)
        response = client.post("/api/auth/signin",
                               json={"email": "ada@uni.edu", "password": "wrong-pass", "role": "student"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_unknown_field_is_400_with_field_errors(self, client):
        response = signup(client, email="ada@uni.edu", password="secret123", role="student",
                          full_name="Ada", is_admin=True)
        assert response.status_code == 400
        assert "is_admin" in response.json()["errors"]

    def test_missing_token_is_401(self, client):
        assert client.get("/api/auth/me").status_code == 401
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_signout(self, client):
        headers = student_headers(client)
        assert client.post("/api/auth/signout", headers=headers).json()["success"] is True


class TestJobEndpoints:
    def test_post_list_delete(self, client):
        headers = employer_headers(client)
        job = create_job(client, headers)
        assert job["requirements"] == ["React", "CSS"]

        listing = client.get("/api/jobs").json()
        assert [j["id"] for j in listing] == [job["id"]]
        assert listing[0]["employer"]["company_name"] == "Acme Corp"

        response = client.delete(f"/api/jobs/{job['id']}", headers=headers)
        assert response.status_code == 200
        assert client.get("/api/jobs").json() == []

    def test_student_cannot_post(self, client):
        headers = student_headers(client)
        response = client.post("/api/jobs", headers=headers, json={
            "title": "X", "description": "Y", "location": "Z", "type": "internship", "work_mode": "remote",
        })
        assert response.status_code == 401
        assert count_rows("jobs") == 0

    def test_invalid_job_type_is_400(self, client):
        headers = employer_headers(client)
        response = client.post("/api/jobs", headers=headers, json={
            "title": "X", "description": "Y", "location": "Z", "type": "full-time", "work_mode": "remote",
        })
        assert response.status_code == 400
        assert "type" in response.json()["errors"]

    def test_foreign_delete_looks_like_missing(self, client):
        owner = employer_headers(client)
        rival = employer_headers(client, email="rival@example.com", company="Rival Inc")
        job = create_job(client, owner)

        foreign = client.delete(f"/api/jobs/{job['id']}", headers=rival)
        missing = client.delete("/api/jobs/does-not-exist", headers=rival)
        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()
        assert count_rows("jobs") == 1

    def test_applicants_endpoint(self, client):
        employer = employer_headers(client)
        student = student_headers(client)
        job = create_job(client, employer)
        client.post("/api/student/apply", json={"job_id": job["id"]}, headers=student)

        applicants = client.get(f"/api/jobs/{job['id']}/applicants", headers=employer)
        assert applicants.status_code == 200
        assert [a["email"] for a in applicants.json()] == ["ada@uni.edu"]

        assert client.get(f"/api/jobs/{job['id']}/applicants", headers=student).status_code == 401

        counts = client.get("/api/employer/jobs", headers=employer).json()
        assert counts[0]["applicant_count"] == 1


class TestStudentEndpoints:
    def test_apply_twice(self, client):
        job = create_job(client, employer_headers(client))
        headers = student_headers(client)

        first = client.post("/api/student/apply", json={"job_id": job["id"]}, headers=headers)
        assert first.status_code == 200
        assert first.json()["application"]["status"] == "submitted"

        second = client.post("/api/student/apply", json={"job_id": job["id"]}, headers=headers)
        assert second.status_code == 400
        assert second.json()["detail"] == "Already applied to this job"
        assert count_rows("applications") == 1

        mine = client.get("/api/student/applications", headers=headers).json()
        assert [a["job_id"] for a in mine] == [job["id"]]

    def test_apply_to_missing_job_is_404(self, client):
        headers = student_headers(client)
        response = client.post("/api/student/apply", json={"job_id": "nope"}, headers=headers)
        assert response.status_code == 404

    def test_employer_cannot_apply(self, client):
        headers = employer_headers(client)
        job = create_job(client, headers)
        response = client.post("/api/student/apply", json={"job_id": job["id"]}, headers=headers)
        assert response.status_code == 401

    def test_toggle_save(self, client):
        job = create_job(client, employer_headers(client))
        headers = student_headers(client)

        saved = client.post("/api/student/save-job", json={"job_id": job["id"]}, headers=headers)
        assert saved.json() == {"success": True, "saved": True}
        listing = client.get("/api/student/saved-jobs", headers=headers).json()
        assert [s["job_id"] for s in listing] == [job["id"]]

        unsaved = client.post("/api/student/save-job", json={"job_id": job["id"]}, headers=headers)
        assert unsaved.json()["saved"] is False
        assert client.get("/api/student/saved-jobs", headers=headers).json() == []

    def test_profile_patch(self, client):
        headers = student_headers(client)
        response = client.patch("/api/student/profile", json={"major": "Math"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["profile"]["major"] == "Math"
        assert client.get("/api/student/profile", headers=headers).json()["full_name"] == "Ada"

    def test_upload_resume_and_download(self, client):
        headers = student_headers(client)
        content = base64.b64encode(b"%PDF-1.4 hello").decode()
        response = client.post("/api/student/upload-resume",
                               json={"file_name": "cv.pdf", "content": content}, headers=headers)
        assert response.status_code == 200
        url = response.json()["url"]
        assert client.get(url).content == b"%PDF-1.4 hello"

    def test_upload_rejects_bad_base64(self, client):
        headers = student_headers(client)
        response = client.post("/api/student/upload-resume",
                               json={"file_name": "cv.pdf", "content": "@@@"}, headers=headers)
        assert response.status_code == 400
        assert "content" in response.json()["errors"]


def test_employer_profile_endpoints(client):
    headers = employer_headers(client)
    profile = client.get("/api/employer/profile", headers=headers).json()
    assert profile["company_name"] == "Acme Corp"
    response = client.patch("/api/employer/profile", json={"industry": "Robotics"}, headers=headers)
    assert response.json()["profile"]["industry"] == "Robotics"


def test_database_routes_run_in_threadpool():
    # Sync handlers keep blocking SQLAlchemy and bcrypt calls off the event loop
    blocking = [
        route for route in app.routes
        if isinstance(route, APIRoute) and route.path != "/" and inspect.iscoroutinefunction(route.endpoint)
    ]
    assert blocking == []
