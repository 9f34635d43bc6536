from __future__ import annotations

import copy
from datetime import datetime

import pytest

from quizapp.models.db_models import QuizResult

ADMIN = "/api/quiz/admin/quizzes"
PUBLIC = "/api/quiz/quizzes"


@pytest.fixture()
def published(client, admin_headers, sample_quiz):
    resp = client.post(ADMIN, json=sample_quiz, headers=admin_headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_root_and_health(client):
    assert client.get("/").json()["prefix"] == "/api/quiz"
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "database": "ok"}
    assert resp.headers["content-type"] == "application/json; charset=utf-8"


def test_list_only_published(client, admin_headers, sample_quiz, published):
    draft = copy.deepcopy(sample_quiz)
    draft["slug"] = "draft"
    draft["isPublished"] = False
    client.post(ADMIN, json=draft, headers=admin_headers)

    items = client.get(PUBLIC).json()
    assert [q["slug"] for q in items] == ["stress-check"]
    assert items[0]["questionCount"] == 4
    assert client.get(f"{PUBLIC}/draft").status_code == 404


def test_list_respects_order(client, admin_headers, sample_quiz):
    for slug, order in (("second", 2), ("unordered", None), ("first", 1)):
        doc = copy.deepcopy(sample_quiz)
        doc["slug"] = slug
        doc["order"] = order
        client.post(ADMIN, json=doc, headers=admin_headers)
    assert [q["slug"] for q in client.get(PUBLIC).json()] == ["first", "second", "unordered"]


def test_get_quiz_by_slug(client, published):
    resp = client.get(f"{PUBLIC}/stress-check")
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == published["id"]
    assert body["maxScore"] == 12
    assert body["questions"][0]["type"] == "scale"


def test_unknown_quiz_is_404(client):
    resp = client.get(f"{PUBLIC}/nope")
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"


def test_submit_scores_and_persists(client, published):
    payload = {
        "userId": "user-1",
        "sessionId": "s-1",
        "answers": {
            "question_q1": "4",
            "question_q2": "3",
            "question_q3": "Sometimes",
            "question_q4": "busy week",
        },
    }
    resp = client.post(f"{PUBLIC}/stress-check/submit", json=payload)
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["totalScore"] == 8
    assert body["subScores"] == {"Stress": 4, "Anxiety": 3}
    assert body["resultMessage"] == "High"
    assert body["resultDescription"] == "High stress."
    assert body["maxScore"] == 12
    assert body["quizTitle"] == "Stress Check"
    assert body["answers"] == [
        {"questionId": "q1", "value": 4},
        {"questionId": "q2", "value": 3},
        {"questionId": "q3", "value": "Sometimes"},
        {"questionId": "q4", "value": "busy week"},
    ]

    stored = client.get(f"/api/quiz/results/{body['id']}")
    assert stored.status_code == 200
    assert stored.json()["totalScore"] == 8
    assert stored.json()["subScores"] == {"Stress": 4, "Anxiety": 3}
    assert stored.json()["sessionId"] == "s-1"


def test_submit_without_categories_omits_sub_scores(client, published):
    resp = client.post(f"{PUBLIC}/stress-check/submit", json={"userId": "u", "answers": {"question_q3": "Often"}})
    body = resp.json()
    assert body["totalScore"] == 2
    assert body["resultMessage"] == "Low"
    assert "subScores" not in body


def test_submit_applies_quiz_multiplier(client, admin_headers, sample_quiz):
    doubled = copy.deepcopy(sample_quiz)
    doubled["scoreMultiplier"] = 2
    client.post(ADMIN, json=doubled, headers=admin_headers)

    resp = client.post(f"{PUBLIC}/stress-check/submit", json={
        "userId": "u", "answers": {"question_q1": "4", "question_q2": "3"},
    })
    body = resp.json()
    assert body["totalScore"] == 14
    assert body["subScores"] == {"Stress": 8, "Anxiety": 6}
    assert body["maxScore"] == 24
    assert body["resultMessage"] == "Assessment Complete"


def test_submit_requires_user(client, published):
    resp = client.post(f"{PUBLIC}/stress-check/submit", json={"answers": {}})
    assert resp.status_code == 422


def test_submit_to_unpublished_quiz_is_404(client, admin_headers, sample_quiz):
    sample_quiz["isPublished"] = False
    client.post(ADMIN, json=sample_quiz, headers=admin_headers)
    resp = client.post(f"{PUBLIC}/stress-check/submit", json={"userId": "u", "answers": {}})
    assert resp.status_code == 404


def test_missing_result_is_404(client):
    assert client.get("/api/quiz/results/does-not-exist").status_code == 404


def test_progress_history_and_stats(client, published):
    for value in ("1", "4", "5"):
        client.post(f"{PUBLIC}/stress-check/submit", json={"userId": "u1", "answers": {"question_q1": value}})
    client.post(f"{PUBLIC}/stress-check/submit", json={"userId": "someone-else", "answers": {"question_q1": "2"}})

    resp = client.get(f"/api/quiz/progress/{published['id']}", params={"userId": "u1"})
    assert resp.status_code == 200
    body = resp.json()
    assert [r["score"] for r in body["results"]] == [1, 4, 5]
    assert body["maxScore"] == 12
    assert body["stats"] == {
        "attempts": 3,
        "trend": "improving",
        "average": 3.3,
        "best": 5,
        "worst": 1,
        "latest": 5,
        "change": 4,
    }


def test_progress_unknown_quiz(client):
    assert client.get("/api/quiz/progress/999", params={"userId": "u"}).status_code == 404


def test_progress_requires_user_id(client, published):
    assert client.get(f"/api/quiz/progress/{published['id']}").status_code == 422


def test_overview_shows_visible_sections_in_order(client, admin_headers, sample_quiz):
    sample_quiz.update({
        "shortName": "SC",
        "baseTestName": "Stress Check Base",
        "instructions": "Answer honestly.",
        "overview": {"sections": [
            {"id": "c", "type": "privacy", "title": "Privacy", "content": "Private.", "visible": True, "order": 3},
            {"id": "a", "type": "purpose", "title": "Purpose", "content": "Why.", "visible": True, "order": 1},
            {"id": "b", "type": "limitations", "title": "Hidden", "content": "-", "visible": False, "order": 2},
        ]},
    })
    client.post(ADMIN, json=sample_quiz, headers=admin_headers)

    resp = client.get(f"{PUBLIC}/stress-check/overview")
    assert resp.status_code == 200
    body = resp.json()
    assert body["shortName"] == "SC"
    assert body["baseTestName"] == "Stress Check Base"
    assert body["instructions"] == "Answer honestly."
    assert body["questionCount"] == 4
    assert [s["id"] for s in body["sections"]] == ["a", "c"]


def test_overview_without_sections(client, published):
    body = client.get(f"{PUBLIC}/stress-check/overview").json()
    assert body["sections"] == []
    assert "shortName" not in body


def test_overview_of_draft_is_404(client, admin_headers, sample_quiz):
    sample_quiz["isPublished"] = False
    client.post(ADMIN, json=sample_quiz, headers=admin_headers)
    assert client.get(f"{PUBLIC}/stress-check/overview").status_code == 404


def test_progress_history_survives_equal_timestamps(client, published, session):
    same_time = datetime(2026, 1, 1, 12, 0, 0)
    # inserted out of attempt order, all completed in the same tick
    for attempt, score in ((3, 9), (1, 1), (2, 5)):
        session.add(QuizResult(
            quiz_id=published["id"], user_id="u1", attempt_no=attempt,
            score=score, completed_at=same_time,
        ))
    session.commit()

    body = client.get(f"/api/quiz/progress/{published['id']}", params={"userId": "u1"}).json()
    assert [r["attempt"] for r in body["results"]] == [1, 2, 3]
    assert [r["score"] for r in body["results"]] == [1, 5, 9]
    assert body["stats"]["trend"] == "improving"
    assert body["stats"]["change"] == 8


def test_submissions_are_numbered_per_user(client, published):
    for user in ("u1", "u1", "u2"):
        client.post(f"{PUBLIC}/stress-check/submit", json={"userId": user, "answers": {"question_q1": "1"}})
    u1 = client.get(f"/api/quiz/progress/{published['id']}", params={"userId": "u1"}).json()
    u2 = client.get(f"/api/quiz/progress/{published['id']}", params={"userId": "u2"}).json()
    assert [r["attempt"] for r in u1["results"]] == [1, 2]
    assert [r["attempt"] for r in u2["results"]] == [1]


def test_progress_summary_across_quizzes(client, admin_headers, sample_quiz, published, session):
    other = copy.deepcopy(sample_quiz)
    other["slug"] = "other-check"
    other["title"] = "Other Check"
    other["scoringDirection"] = "lower-is-better"
    other_id = client.post(ADMIN, json=other, headers=admin_headers).json()["id"]

    rows = [
        (published["id"], "u1", 1, 1, datetime(2026, 3, 1)),
        (published["id"], "u1", 2, 5, datetime(2026, 3, 2)),
        (other_id, "u1", 1, 5, datetime(2026, 3, 3)),
        (other_id, "u1", 2, 1, datetime(2026, 3, 4)),
        (published["id"], "u2", 1, 3, datetime(2026, 3, 5)),
    ]
    for quiz_id, user, attempt, score, when in rows:
        session.add(QuizResult(quiz_id=quiz_id, user_id=user, attempt_no=attempt, score=score, completed_at=when))
    session.commit()

    resp = client.get("/api/quiz/progress", params={"userId": "u1"})
    assert resp.status_code == 200
    entries = resp.json()
    assert [e["quizTitle"] for e in entries] == ["Other Check", "Stress Check"]

    other_entry, stress_entry = entries
    assert other_entry["scores"] == [5, 1]
    assert other_entry["trend"] == "improving"
    assert other_entry["best"] == 1
    assert stress_entry["scores"] == [1, 5]
    assert stress_entry["attempts"] == 2
    assert stress_entry["maxScore"] == 12
    assert stress_entry["dates"][0].startswith("2026-03-01")

def test_progress_summary_for_new_user_is_empty(client, published):
    assert client.get("/api/quiz/progress", params={"userId": "nobody"}).json() == []
