from app.extensions import db
from app.models import Application, Evaluation
from app.services import criteria as registry

from conftest import YEAR


def test_admin_endpoints_require_login(client):
    res = client.get(f"/criteria?year={YEAR}")
    assert res.status_code == 401
    assert res.get_json()["error"] == "unauthorized"


def test_login_rejects_bad_password(app, admin_client):
    c = app.test_client()
    res = c.post("/auth/login", json={"email": "admin@example.com", "password": "nope"})
    assert res.status_code == 401


def test_criteria_crud(admin_client):
    res = admin_client.post("/criteria", json={"year": YEAR, "name": "Academic Excellence", "weight": 0.3})
    assert res.status_code == 201
    created = res.get_json()
    assert created["max_points"] == 10
    assert created["category"] == "objective"

    res = admin_client.patch(f"/criteria/{created['id']}", json={"weight": 0.4, "display_name": "Academics"})
    assert res.status_code == 200
    assert res.get_json()["weight"] == 0.4
    assert res.get_json()["display_name"] == "Academics"
    assert res.get_json()["name"] == "Academic Excellence"

    res = admin_client.post(f"/criteria/{created['id']}/deactivate")
    assert res.get_json()["active"] is False
    assert admin_client.get(f"/criteria?year={YEAR}").get_json()["items"] == []
    assert len(admin_client.get(f"/criteria?year={YEAR}&include_inactive=1").get_json()["items"]) == 1


def test_criteria_validation_errors(admin_client):
    res = admin_client.post("/criteria", json={"year": YEAR, "name": "Bad", "weight": -1})
    assert res.status_code == 400
    assert "weight" in res.get_json()["fields"]
    res = admin_client.post("/criteria", json={"year": YEAR, "name": "Bad", "category": "other"})
    assert res.status_code == 400
    res = admin_client.get("/criteria")
    assert res.status_code == 400
    assert res.get_json()["field"] == "year"


def test_missing_criterion_is_404(admin_client):
    res = admin_client.patch("/criteria/999", json={"weight": 1})
    assert res.status_code == 404
    assert res.get_json()["error"] == "not_found"


def test_score_submission_and_breakdown(admin_client, make_institution, make_application):
    crit = registry.create_criterion(YEAR, "Academic Excellence", weight=0.3)
    app_row = make_application(make_institution())

    res = admin_client.post(f"/applications/{app_row.id}/evaluations", json={"criterion_id": crit.id, "score": 12})
    assert res.status_code == 400
    body = res.get_json()
    assert body["error"] == "validation_error"
    assert body["bound"] == "max"
    assert body["limit"] == 10

    res = admin_client.post(f"/applications/{app_row.id}/evaluations", json={"criterion_id": crit.id, "score": 8})
    assert res.status_code == 200
    assert abs(res.get_json()["objective_score"] - 2.4) < 1e-9
    assert Evaluation.query.one().evaluator == "admin@example.com"

    res = admin_client.get(f"/applications/{app_row.id}/scores")
    assert res.get_json()["criteria"][0]["score"] == 8


def test_batch_endpoint(admin_client, make_application):
    a = registry.create_criterion(YEAR, "A", weight=1)
    b = registry.create_criterion(YEAR, "B", weight=2)
    app_row = make_application()
    res = admin_client.post(f"/applications/{app_row.id}/evaluations/batch", json={"entries": [
        {"criterion_id": a.id, "score": 3},
        {"criterion_id": b.id, "score": 4},
    ]})
    assert res.status_code == 200
    assert res.get_json()["total_score"] == 11
    res = admin_client.post(f"/applications/{app_row.id}/evaluations/batch", json={"entries": "nope"})
    assert res.status_code == 400


def test_ranking_endpoints(admin_client, make_institution, make_application):
    crit = registry.create_criterion(YEAR, "Overall", max_points=20, weight=1)
    harvard = make_institution("Harvard", spots=1)
    x = make_application(harvard)
    y = make_application(harvard)
    for app_row, score in ((x, 11.9), (y, 15)):
        admin_client.post(f"/applications/{app_row.id}/evaluations", json={"criterion_id": crit.id, "score": score})

    res = admin_client.get(f"/ranking?year={YEAR}")
    assert res.status_code == 200
    entries = res.get_json()["institutions"][0]["entries"]
    assert [e["application_id"] for e in entries] == [y.id, x.id]
    assert db.session.get(Application, y.id).rank_position is None

    res = admin_client.post("/ranking/generate", json={"year": YEAR})
    assert res.status_code == 200
    assert db.session.get(Application, y.id).rank_position == 1

    res = admin_client.post("/ranking/publish", json={"year": YEAR})
    assert res.get_json() == {"year": YEAR, "published": 2, "skipped": 0}

    res = admin_client.get(f"/ranking/export.csv?year={YEAR}")
    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert res.data.decode("utf-8").splitlines()[1].startswith("Harvard,1,")

    res = admin_client.post(f"/ranking/applications/{y.id}/accept")
    assert res.get_json() == {"application_id": y.id, "status": "accepted"}
    res = admin_client.post(f"/ranking/applications/{x.id}/accept")
    assert res.status_code == 400


def test_viewer_can_read_but_not_write(viewer_client):
    assert viewer_client.get(f"/ranking?year={YEAR}").status_code == 200
    res = viewer_client.post("/criteria", json={"year": YEAR, "name": "Nope"})
    assert res.status_code == 403


def test_interviewer_lifecycle_and_magic_link(admin_client, client, make_institution, make_application):
    crit = registry.create_criterion(YEAR, "Motivation", weight=0.5)
    app_row = make_application(make_institution())

    res = admin_client.post("/interviewers", json={"year": YEAR, "name": "Dr. Ana", "email": "ana@example.org"})
    assert res.status_code == 201
    iv = res.get_json()
    token = iv["access_token"]
    assert iv["access_link"].endswith(token)

    res = client.get(f"/api/evaluate/{token}")
    assert res.status_code == 200
    assert res.get_json()["applications"][0]["candidate_id"] == app_row.candidate_id

    res = client.post(f"/api/evaluate/{token}/applications/{app_row.id}/criteria/{crit.id}", json={"score": 9})
    assert res.status_code == 200
    res = client.post(f"/api/evaluate/{token}/applications/{app_row.id}/criteria/{crit.id}", json={"score": 11})
    assert res.status_code == 400
    res = client.post(f"/api/evaluate/{token}/applications/{app_row.id}/interview-score", json={"score": 7})
    assert res.status_code == 200

    res = admin_client.post(f"/interviewers/{iv['id']}/send-link")
    assert res.status_code == 202

    unknown = client.get("/api/evaluate/not-a-real-token")
    admin_client.post(f"/interviewers/{iv['id']}/deactivate")
    revoked = client.get(f"/api/evaluate/{token}")
    assert unknown.status_code == revoked.status_code == 403
    assert unknown.get_json() == revoked.get_json()

    res = admin_client.post(f"/interviewers/{iv['id']}/reactivate")
    new_token = res.get_json()["access_token"]
    assert new_token != token
    assert client.get(f"/api/evaluate/{new_token}").status_code == 200


def test_interviewer_validation(admin_client):
    res = admin_client.post("/interviewers", json={"year": YEAR, "name": "No Mail", "email": "not-an-email"})
    assert res.status_code == 400
    assert "email" in res.get_json()["fields"]


def test_criteria_null_and_nested_json_values(admin_client):
    res = admin_client.post("/criteria", json={"year": YEAR, "name": "Motivation", "max_points": None, "weight": None})
    assert res.status_code == 201
    created = res.get_json()
    assert created["max_points"] == 10
    assert created["weight"] == 1

    res = admin_client.patch(f"/criteria/{created['id']}", json={"weight": None})
    assert res.status_code == 200
    assert res.get_json()["weight"] == 1

    res = admin_client.post("/criteria", json={"year": None, "name": "Other"})
    assert res.status_code == 400
    assert "year" in res.get_json()["fields"]

    res = admin_client.post("/criteria", json={"year": YEAR, "name": ["not", "a", "name"]})
    assert res.status_code == 400
    assert "name" in res.get_json()["fields"]

    res = admin_client.patch(f"/criteria/{created['id']}", json={"max_points": "lots"})
    assert res.status_code == 400
    assert "max_points" in res.get_json()["fields"]


def test_numeric_name_is_read_as_text(admin_client):
    res = admin_client.post("/criteria", json={"year": YEAR, "name": 5, "weight": 2})
    assert res.status_code == 201
    assert res.get_json()["name"] == "5"
