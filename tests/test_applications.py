from datetime import datetime

from app.extensions import db
from app.models import Application
from conftest import make_application


def test_create_then_fetch_round_trips_fields(auth_client):
    app_id = make_application(
        auth_client,
        company="  PT Example  ",
        role="Backend Developer ",
        location=" Jakarta",
        workSetup="Remote",
        status="screening",
        jobLink="https://example.com/jobs/1",
        requiredSkills=["Python", " SQL ", "Python", ""],
        niceToHave=["Docker"],
        source="LinkedIn",
        notes="  referral from a friend ",
    )

    response = auth_client.get(f"/api/applications/{app_id}")
    assert response.status_code == 200
    body = response.get_json()
    application = body["application"]

    assert application["company"] == "PT Example"
    assert application["role"] == "Backend Developer"
    assert application["location"] == "Jakarta"
    assert application["workSetup"] == "Remote"
    assert application["status"] == "screening"
    assert application["statusDetail"] is None
    assert application["jobLink"] == "https://example.com/jobs/1"
    assert application["requiredSkills"] == ["Python", "SQL", "Python"]
    assert application["niceToHave"] == ["Docker"]
    assert application["notes"] == "referral from a friend"
    assert application["appliedAt"] == "2026-03-01T00:00:00.000Z"
    assert application["lastUpdate"] == "2026-03-01T00:00:00.000Z"
    assert application["nextEventAt"] is None
    assert body["timeline"] == []


def test_create_returns_only_id(auth_client):
    response = auth_client.post("/api/applications", json={
        "company": "A", "role": "B", "location": "C",
        "workSetup": "Onsite", "status": "applied", "appliedAt": "2026-01-31",
    })
    assert response.status_code == 201
    assert set(response.get_json()["application"]) == {"id"}


def test_create_validation_errors(auth_client):
    base = {
        "company": "A", "role": "B", "location": "C",
        "workSetup": "Onsite", "status": "applied", "appliedAt": "2026-01-31",
    }
    cases = [
        ({"company": "   "}, "Company is required"),
        ({"role": None}, "Role is required"),
        ({"location": ""}, "Location is required"),
        ({"workSetup": "Office"}, "Work setup invalid"),
        ({"status": "pending"}, "Status invalid"),
        ({"appliedAt": "31/01/2026"}, "Applied date invalid"),
        ({"appliedAt": "2026-02-30"}, "Applied date invalid"),
        ({"jobLink": "not a link"}, "Job link is invalid"),
    ]
    for override, message in cases:
        payload = dict(base, **override)
        response = auth_client.post("/api/applications", json=payload)
        assert response.status_code == 400, override
        assert response.get_json()["message"] == message

    assert Application.query.count() == 0


def test_applications_are_scoped_to_owner(auth_client, other_client):
    app_id = make_application(auth_client)

    assert other_client.get(f"/api/applications/{app_id}").status_code == 404
    assert other_client.post(
        f"/api/applications/{app_id}/timeline", json={"stage": "interview", "at": "2026-03-11T10:00:00Z"}
    ).status_code == 404
    assert other_client.get("/api/applications").get_json()["items"] == []
    assert auth_client.get("/api/applications/does-not-exist").status_code == 404


def test_advance_stage_to_future_interview_sets_next_event(auth_client, clock):
    app_id = make_application(auth_client)

    response = auth_client.post(f"/api/applications/{app_id}/timeline", json={
        "stage": "interview",
        "detail": "hr",
        "at": "2026-03-10T10:30:00Z",
        "mode": "online",
        "meetLink": "https://meet.google.com/abc-defg-hij",
        "notes": " bring portfolio ",
    })
    assert response.status_code == 200
    body = response.get_json()

    assert body["application"]["status"] == "interview"
    assert body["application"]["statusDetail"] == "hr"
    assert body["application"]["lastUpdate"] == "2026-03-10T10:30:00.000Z"
    assert body["application"]["nextEventAt"] == "2026-03-10T10:30:00.000Z"
    assert body["application"]["nextEventTitle"] == "HR Interview"

    assert body["event"]["stage"] == "interview"
    assert body["event"]["mode"] == "online"
    assert body["event"]["meetLink"] == "https://meet.google.com/abc-defg-hij"
    assert body["event"]["notes"] == "bring portfolio"

    detail = auth_client.get(f"/api/applications/{app_id}").get_json()
    assert len(detail["timeline"]) == 1
    assert detail["timeline"][0]["id"] == body["event"]["id"]


def test_advance_stage_in_the_past_clears_next_event(auth_client):
    app_id = make_application(auth_client)
    auth_client.post(f"/api/applications/{app_id}/timeline", json={
        "stage": "interview", "detail": "hr", "at": "2026-03-10T10:30:00Z",
    })

    response = auth_client.post(f"/api/applications/{app_id}/timeline", json={
        "stage": "interview", "detail": "hr", "at": "2026-03-10T08:30:00Z",
    })
    application = response.get_json()["application"]
    assert application["nextEventAt"] is None
    assert application["nextEventTitle"] is None
    # no ordering check: an earlier entry moves lastUpdate backwards
    assert application["lastUpdate"] == "2026-03-10T08:30:00.000Z"


def test_timeline_is_newest_first(auth_client):
    app_id = make_application(auth_client)
    for stage, at in [("screening", "2026-03-03T09:00:00Z"), ("interview", "2026-03-05T09:00:00Z"),
                      ("technical_test", "2026-03-04T09:00:00+07:00")]:
        auth_client.post(f"/api/applications/{app_id}/timeline", json={"stage": stage, "at": at})

    timeline = auth_client.get(f"/api/applications/{app_id}").get_json()["timeline"]
    assert [e["stage"] for e in timeline] == ["interview", "technical_test", "screening"]
    assert timeline[1]["at"] == "2026-03-04T02:00:00.000Z"


def test_any_stage_may_follow_any_stage(auth_client):
    app_id = make_application(auth_client, status="hired")
    response = auth_client.post(f"/api/applications/{app_id}/timeline", json={
        "stage": "applied", "at": "2026-03-09T09:00:00Z",
    })
    assert response.status_code == 200
    assert response.get_json()["application"]["status"] == "applied"


def test_advance_stage_validation(auth_client):
    app_id = make_application(auth_client)
    url = f"/api/applications/{app_id}/timeline"

    assert auth_client.post(url, json={"stage": "interview", "at": "yesterday"}).status_code == 400
    assert auth_client.post(url, json={"stage": "lunch", "at": "2026-03-10T10:00:00Z"}).status_code == 400
    assert auth_client.post(url, json={"stage": "interview", "at": "2026-03-10T10:00:00Z",
                                       "mode": "phone"}).status_code == 400
    assert auth_client.post(url, json={"stage": "interview", "at": "2026-03-10T10:00:00Z",
                                       "mode": "online", "meetLink": "meet me"}).status_code == 400

    detail = auth_client.get(f"/api/applications/{app_id}").get_json()
    assert detail["timeline"] == []
    assert detail["application"]["status"] == "applied"


def test_list_flips_stale_applications_to_ghosting(auth_client, clock):
    stale = make_application(auth_client, status="screening", appliedAt="2026-02-23")
    hired = make_application(auth_client, status="hired", appliedAt="2025-12-01")
    fresh = make_application(auth_client, status="screening", appliedAt="2026-03-05")

    items = {i["id"]: i for i in auth_client.get("/api/applications").get_json()["items"]}

    assert items[stale]["status"] == "ghosting"
    assert items[stale]["lastUpdate"] == "2026-03-10T09:30:00.000Z"
    assert items[stale]["nextEventAt"] is None
    assert items[hired]["status"] == "hired"
    assert items[hired]["lastUpdate"] == "2025-12-01T00:00:00.000Z"
    assert items[fresh]["status"] == "screening"


def test_fetching_detail_does_not_sweep(auth_client):
    stale = make_application(auth_client, status="screening", appliedAt="2026-01-01")
    detail = auth_client.get(f"/api/applications/{stale}").get_json()
    assert detail["application"]["status"] == "screening"


def test_sweep_runs_against_injected_clock(auth_client, clock):
    app_id = make_application(auth_client, status="interview", appliedAt="2026-03-01")
    assert auth_client.get("/api/applications").get_json()["items"][0]["status"] == "interview"

    clock.now = datetime(2026, 3, 16, 0, 0, 0)
    assert auth_client.get("/api/applications").get_json()["items"][0]["status"] == "ghosting"
    assert auth_client.get(f"/api/applications/{app_id}").get_json()["application"]["lastUpdate"] == \
        "2026-03-16T00:00:00.000Z"


def test_sweep_only_touches_the_callers_rows(auth_client, other_client):
    theirs = make_application(other_client, status="screening", appliedAt="2026-01-01")
    auth_client.get("/api/applications")
    assert other_client.get(f"/api/applications/{theirs}").get_json()["application"]["status"] == "screening"


def test_list_is_ordered_by_last_update_and_filterable(auth_client):
    older = make_application(auth_client, company="Acme", role="QA", appliedAt="2026-03-02")
    newer = make_application(auth_client, company="Globex", role="Data Engineer", appliedAt="2026-03-08")

    items = auth_client.get("/api/applications").get_json()["items"]
    assert [i["id"] for i in items] == [newer, older]

    by_query = auth_client.get("/api/applications?q=engineer").get_json()["items"]
    assert [i["id"] for i in by_query] == [newer]

    by_status = auth_client.get("/api/applications?status=applied").get_json()["items"]
    assert len(by_status) == 2
    assert auth_client.get("/api/applications?status=nope").status_code == 400


def test_patch_updates_details_without_touching_stage(auth_client):
    app_id = make_application(auth_client, status="screening")
    response = auth_client.patch(f"/api/applications/{app_id}", json={
        "role": " Senior Backend Developer ",
        "jobLink": "",
        "requiredSkills": ["Go"],
        "status": "offer",
    })
    assert response.status_code == 200
    application = response.get_json()["application"]
    assert application["role"] == "Senior Backend Developer"
    assert application["jobLink"] is None
    assert application["requiredSkills"] == ["Go"]
    assert application["status"] == "screening"

    assert auth_client.patch(f"/api/applications/{app_id}", json={"company": ""}).status_code == 400


def test_delete_application_keeps_calendar_events_unlinked(auth_client):
    app_id = make_application(auth_client)
    auth_client.post(f"/api/applications/{app_id}/timeline", json={"stage": "screening", "at": "2026-03-05T00:00:00Z"})
    event = auth_client.post("/api/calendar-events", json={
        "title": "Call", "type": "follow_up", "startAt": "2026-03-12T03:00:00Z", "applicationId": app_id,
    }).get_json()["item"]

    assert auth_client.delete(f"/api/applications/{app_id}").status_code == 200
    assert auth_client.get(f"/api/applications/{app_id}").status_code == 404
    assert auth_client.delete(f"/api/applications/{app_id}").status_code == 404

    kept = auth_client.get(f"/api/calendar-events/{event['id']}").get_json()["item"]
    assert kept["applicationId"] is None
    assert db.session.query(Application).count() == 0


def test_sweep_keeps_stage_detail(auth_client):
    app_id = make_application(auth_client, appliedAt="2026-01-15")
    auth_client.post(f"/api/applications/{app_id}/timeline", json={
        "stage": "interview", "detail": "hr", "at": "2026-02-01T03:00:00.000Z",
    })

    item = auth_client.get("/api/applications").get_json()["items"][0]
    assert item["status"] == "ghosting"
    assert item["statusDetail"] == "hr"


def test_overlong_fields_are_rejected_without_writing(auth_client):
    payload = {
        "company": "A" * 256, "role": "B", "location": "C",
        "workSetup": "Onsite", "status": "applied", "appliedAt": "2026-01-31",
    }
    response = auth_client.post("/api/applications", json=payload)
    assert response.status_code == 400
    assert response.get_json()["message"] == "Company too long (max 255 characters)"

    link = auth_client.post("/api/applications", json=dict(
        payload, company="A", jobLink="https://example.com/" + "x" * 1024,
    ))
    assert link.status_code == 400
    assert Application.query.count() == 0

    assert auth_client.post("/api/applications", json=dict(payload, company="A" * 255)).status_code == 201


def test_overlong_timeline_detail_is_rejected(auth_client):
    app_id = make_application(auth_client)
    url = f"/api/applications/{app_id}/timeline"

    response = auth_client.post(url, json={"stage": "interview", "detail": "x" * 51, "at": "2026-03-11T03:00:00Z"})
    assert response.status_code == 400
    assert response.get_json()["message"] == "Detail too long (max 50 characters)"
    assert auth_client.post(url, json={"stage": "interview", "location": "y" * 256,
                                       "at": "2026-03-11T03:00:00Z"}).status_code == 400

    detail = auth_client.get(f"/api/applications/{app_id}").get_json()
    assert detail["timeline"] == []
    assert detail["application"]["status"] == "applied"


def test_search_matches_percent_and_underscore_literally(auth_client):
    literal = make_application(auth_client, company="100% Remote Co", role="QA_Lead")
    make_application(auth_client, company="Acme", role="QA Lead")

    by_percent = auth_client.get("/api/applications?q=100%25").get_json()["items"]
    assert [i["id"] for i in by_percent] == [literal]

    by_underscore = auth_client.get("/api/applications?q=qa_").get_json()["items"]
    assert [i["id"] for i in by_underscore] == [literal]

    only_percent = auth_client.get("/api/applications?q=%25").get_json()["items"]
    assert [i["id"] for i in only_percent] == [literal]
