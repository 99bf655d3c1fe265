from datetime import datetime, timedelta, timezone

from app.extensions import db
from app.models import Applicant


def create_questionnaire(client, tenant_id):
    r = client.post(f"/api/tenants/{tenant_id}/questions", json={
        "id": "Q1", "type": "radio", "questionText": "Can you work weekends?",
        "options": [{"value": "Yes", "points": 5}, {"value": "No", "points": 0}],
    })
    assert r.status_code == 201
    r = client.post(f"/api/tenants/{tenant_id}/questions", json={
        "id": "Q2", "type": "long-text-ai", "questionText": "Describe a busy shift.",
        "scoringRubric": ["Teamwork", "Initiative"], "points": 10,
    })
    assert r.status_code == 201


def test_create_tenant_and_duplicate_name(client):
    r = client.post("/api/tenants", json={"name": "Harbor Cafe"})
    assert r.status_code == 201
    assert r.get_json()["name"] == "Harbor Cafe"
    assert client.post("/api/tenants", json={"name": "Harbor Cafe"}).status_code == 400
    assert client.post("/api/tenants", json={}).status_code == 400


def test_question_validation(client, tenant):
    base = f"/api/tenants/{tenant.id}/questions"
    assert client.post(base, json={"type": "essay"}).status_code == 400
    assert client.post(base, json={"type": "radio", "options": []}).status_code == 400
    assert client.post(base, json={"type": "radio", "options": [{"value": "Y", "points": "x"}]}).status_code == 400
    assert client.post(base, json={"type": "long-text-ai", "scoringRubric": ["Team work"], "points": 10}).status_code == 400
    assert client.post(base, json={"type": "long-text-ai", "scoringRubric": ["A", "A"], "points": 10}).status_code == 400
    too_many = [f"T{i}" for i in range(11)]
    assert client.post(base, json={"type": "long-text-ai", "scoringRubric": too_many, "points": 10}).status_code == 400
    assert client.post(base, json={"type": "long-text-ai", "scoringRubric": ["A"], "points": 0}).status_code == 400


def test_question_crud_keeps_order(client, tenant):
    create_questionnaire(client, tenant.id)
    r = client.get(f"/api/tenants/{tenant.id}/questions")
    assert [q["id"] for q in r.get_json()["questions"]] == ["Q1", "Q2"]

    r = client.patch(f"/api/tenants/{tenant.id}/questions/Q1", json={"questionText": "Weekends OK?"})
    assert r.status_code == 200
    assert r.get_json()["questionText"] == "Weekends OK?"
    assert r.get_json()["options"][0] == {"value": "Yes", "points": 5}

    assert client.post(f"/api/tenants/{tenant.id}/questions", json={"id": "Q1", "type": "short-text"}).status_code == 400
    assert client.delete(f"/api/tenants/{tenant.id}/questions/Q2").status_code == 204
    assert client.delete(f"/api/tenants/{tenant.id}/questions/Q2").status_code == 404


def test_submission_triggers_scoring(client, tenant, monkeypatch):
    create_questionnaire(client, tenant.id)
    client.put(f"/api/tenants/{tenant.id}/settings", json={"scoreThreshold": 10})
    monkeypatch.setattr("app.services.openai_wrap.score_answer",
                        lambda rubric, text, pts: {"trait_scores": {"Teamwork": 8, "Initiative": 6}, "analysis": {}})

    r = client.post(f"/api/tenants/{tenant.id}/applicants", json={
        "answers": {"Q1": "Yes", "Q2": "I helped my teammate..."},
        "resumeUrl": "https://files.example.com/cv.pdf",
    })
    assert r.status_code == 201
    aid = r.get_json()["id"]

    r = client.get(f"/api/tenants/{tenant.id}/applicants/{aid}")
    body = r.get_json()
    assert body["score"] == 12
    assert body["manualScore"] == 5
    assert body["status"] == "Interview"
    assert body["resumeUrl"] == "https://files.example.com/cv.pdf"
    assert body["aiAnalysis"]["Q2"]["trait_scores"] == {"Teamwork": 8, "Initiative": 6}

    listed = client.get(f"/api/tenants/{tenant.id}/applicants?status=Interview").get_json()["applicants"]
    assert [a["id"] for a in listed] == [aid]


def test_submission_rejects_bad_payload(client, tenant):
    assert client.post(f"/api/tenants/{tenant.id}/applicants", json={"answers": ["Yes"]}).status_code == 400
    assert client.post("/api/tenants/999/applicants", json={"answers": {}}).status_code == 404


def test_submission_without_questionnaire_stays_new(client, tenant):
    r = client.post(f"/api/tenants/{tenant.id}/applicants", json={"answers": {"Q1": "Yes"}})
    assert r.status_code == 201
    a = db.session.get(Applicant, r.get_json()["id"])
    assert a.status == "New" and a.processed_at is None


def test_rescore_endpoint(client, tenant, monkeypatch):
    create_questionnaire(client, tenant.id)
    monkeypatch.setattr("app.services.openai_wrap.score_answer",
                        lambda rubric, text, pts: {"trait_scores": {"Teamwork": 2, "Initiative": 2}, "analysis": {}})
    aid = client.post(f"/api/tenants/{tenant.id}/applicants",
                      json={"answers": {"Q1": "No", "Q2": "short"}}).get_json()["id"]
    assert db.session.get(Applicant, aid).score == 2

    a = db.session.get(Applicant, aid)
    a.answers = {"Q1": "Yes", "Q2": "short"}
    db.session.commit()
    r = client.post(f"/api/tenants/{tenant.id}/applicants/{aid}/rescore")
    assert r.status_code == 202
    assert db.session.get(Applicant, aid).score == 7
    assert client.post(f"/api/tenants/{tenant.id}/applicants/12345/rescore").status_code == 404


def test_settings_roundtrip(client, tenant):
    assert client.get(f"/api/tenants/{tenant.id}/settings").get_json() == {"scoreThreshold": 75}
    assert client.put(f"/api/tenants/{tenant.id}/settings", json={"scoreThreshold": "high"}).status_code == 400
    client.put(f"/api/tenants/{tenant.id}/settings", json={"scoreThreshold": 60})
    assert client.get(f"/api/tenants/{tenant.id}/settings").get_json() == {"scoreThreshold": 60}


def test_questions_listed_by_section_then_order(client, tenant):
    base = f"/api/tenants/{tenant.id}"
    later = client.post(f"{base}/sections", json={"title": "Availability", "order": 1}).get_json()
    first = client.post(f"{base}/sections", json={"title": "Personal Information", "order": 0}).get_json()
    client.post(f"{base}/questions", json={"id": "shift", "type": "radio", "sectionId": later["id"],
                                           "options": [{"value": "Nights", "points": 3}]})
    client.post(f"{base}/questions", json={"id": "phone", "type": "short-text", "sectionId": first["id"],
                                           "questionText": "Phone Number", "order": 1})
    client.post(f"{base}/questions", json={"id": "name", "type": "short-text", "sectionId": first["id"],
                                           "questionText": "Full Name", "order": 0})

    listed = client.get(f"{base}/questions").get_json()["questions"]
    assert [q["id"] for q in listed] == ["name", "phone", "shift"]

    sections = client.get(f"{base}/questionnaire").get_json()["sections"]
    assert [s["title"] for s in sections] == ["Personal Information", "Availability"]
    assert [q["id"] for q in sections[0]["questions"]] == ["name", "phone"]


def test_question_section_must_belong_to_tenant(client, tenant):
    other = client.post("/api/tenants", json={"name": "Other Shop"}).get_json()
    foreign = client.post(f"/api/tenants/{other['id']}/sections", json={"title": "Theirs"}).get_json()
    r = client.post(f"/api/tenants/{tenant.id}/questions",
                    json={"type": "short-text", "sectionId": foreign["id"]})
    assert r.status_code == 400


def test_question_without_section_goes_to_first_section(client, tenant):
    r = client.post(f"/api/tenants/{tenant.id}/questions", json={"id": "Q1", "type": "short-text"})
    section_id = r.get_json()["sectionId"]
    assert section_id is not None
    sections = client.get(f"/api/tenants/{tenant.id}/questionnaire").get_json()["sections"]
    assert [s["id"] for s in sections] == [section_id]
    # a section that still holds questions can't be removed
    assert client.delete(f"/api/tenants/{tenant.id}/sections/{section_id}").status_code == 400
    client.delete(f"/api/tenants/{tenant.id}/questions/Q1")
    assert client.delete(f"/api/tenants/{tenant.id}/sections/{section_id}").status_code == 204


CREW_TEMPLATE = {
    "id": "crew-member",
    "name": "Crew Member",
    "description": "Starter application for restaurant crew.",
    "sections": [
        {"title": "Personal Information", "questions": [
            {"type": "short-text", "questionText": "Full Name", "required": True},
            {"type": "short-text", "questionText": "Email Address", "required": True},
        ]},
        {"title": "Scenarios", "questions": [
            {"type": "radio", "questionText": "When can you start?",
             "options": [{"value": "Immediately", "points": 10}, {"value": "Later", "points": 0}]},
            {"type": "long-text-ai", "questionText": "Describe a rush hour.",
             "scoringRubric": ["Teamwork", "Composure"], "points": 10},
        ]},
    ],
}


def test_template_validation(client):
    bad = dict(CREW_TEMPLATE, id="broken", sections=[{"title": "x", "questions": [{"type": "long-text-ai"}]}])
    assert client.post("/api/templates", json=bad).status_code == 400
    assert client.post("/api/templates", json={"id": "empty", "name": "Empty", "sections": []}).status_code == 400


def test_questionnaire_from_template(client, tenant):
    assert client.post("/api/templates", json=CREW_TEMPLATE).status_code == 201
    assert client.post("/api/templates", json=CREW_TEMPLATE).status_code == 400
    assert [t["id"] for t in client.get("/api/templates").get_json()["templates"]] == ["crew-member"]

    base = f"/api/tenants/{tenant.id}"
    client.post(f"{base}/sections", json={"title": "Intro", "order": 0})
    r = client.post(f"{base}/questionnaire/from-template", json={"templateId": "crew-member"})
    assert r.status_code == 201
    sections = r.get_json()["sections"]
    assert [s["title"] for s in sections] == ["Intro", "Personal Information", "Scenarios"]
    assert [q["questionText"] for q in sections[1]["questions"]] == ["Full Name", "Email Address"]
    ai = sections[2]["questions"][1]
    assert ai["scoringRubric"] == ["Teamwork", "Composure"] and ai["points"] == 10

    # copying twice yields independent question ids
    client.post(f"{base}/questionnaire/from-template", json={"templateId": "crew-member"})
    ids = [q["id"] for q in client.get(f"{base}/questions").get_json()["questions"]]
    assert len(ids) == 8 and len(set(ids)) == 8

    assert client.post(f"{base}/questionnaire/from-template", json={"templateId": "nope"}).status_code == 404


def test_dashboard_stats(client, tenant):
    old = datetime.now(timezone.utc) - timedelta(days=30)
    rows = [Applicant(tenant_id=tenant.id, answers={}, status="Interview", score=90),
            Applicant(tenant_id=tenant.id, answers={}, status="Review", score=20),
            Applicant(tenant_id=tenant.id, answers={}, status="Interview", score=80, submitted_at=old)]
    rows += [Applicant(tenant_id=tenant.id, answers={}, status="New") for _ in range(8)]
    db.session.add_all(rows)
    db.session.commit()

    stats = client.get(f"/api/tenants/{tenant.id}/stats").get_json()
    assert stats == {"totalApplicants": 11, "newApplicants": 10, "interviews": 2, "highScores": 2}


def test_dashboard_stats_empty_tenant(client, tenant):
    stats = client.get(f"/api/tenants/{tenant.id}/stats").get_json()
    assert stats == {"totalApplicants": 0, "newApplicants": 0, "interviews": 0, "highScores": 0}
