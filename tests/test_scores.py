"""Tests for current scores, the score-history ledger and recommendations."""

import pytest

from conftest import bearer, login, register, seed_video
from skypath.scores import weak_subjects, latest_scores


def add_entry(client, token, date="2025-03", korean=70, math=85, english=90, science=80):
    return client.post("/api/users/score-history", headers=bearer(token), json={
        "date": date, "korean": korean, "math": math, "english": english, "science": science,
    })


class TestWeakSubjects:
    def test_threshold(self):
        scores = {"korean": 79, "math": 80, "english": 100, "science": 0}
        assert weak_subjects(scores) == ["국어", "과학"]

    def test_defaults_are_all_weak(self):
        assert weak_subjects({}) == ["국어", "수학", "영어", "과학"]
        assert weak_subjects(None) == ["국어", "수학", "영어", "과학"]

    def test_latest_scores(self):
        entries = [
            {"date": "2025-05", "korean": 50, "math": 60, "english": 70, "science": 80},
            {"date": "2025-03", "korean": 90, "math": 90, "english": 90, "science": 90},
        ]
        assert latest_scores(entries) == {"korean": 50, "math": 60, "english": 70, "science": 80}
        assert latest_scores([]) is None


class TestCurrentScores:
    def test_update_scores(self, client, student):
        resp = client.put("/api/users/scores", headers=bearer(student["token"]), json={
            "korean": 95, "math": 88, "english": 72, "science": 60,
        })
        assert resp.status_code == 200
        assert resp.get_json()["user"]["scores"] == {
            "korean": 95, "math": 88, "english": 72, "science": 60,
        }
        assert "password" not in resp.get_json()["user"]

    def test_scores_out_of_range(self, client, student):
        resp = client.put("/api/users/scores", headers=bearer(student["token"]), json={
            "korean": 101, "math": 88, "english": 72, "science": 60,
        })
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Scores must be between 0 and 100"

    def test_boolean_score_rejected(self, client, fake_db, student):
        resp = client.put("/api/users/scores", headers=bearer(student["token"]), json={
            "korean": True, "math": 88, "english": 72, "science": 60,
        })
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Scores must be numbers"
        assert fake_db.docs("users")[student["user"]["id"]]["scores"]["korean"] == 0

    def test_scores_missing(self, client, student):
        resp = client.put("/api/users/scores", headers=bearer(student["token"]), json={"korean": 50})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "All scores required"


class TestScoreHistory:
    def test_add_entry(self, client, fake_db, student):
        resp = add_entry(client, student["token"])
        assert resp.status_code == 201
        entry = resp.get_json()["scoreHistory"]
        assert entry["date"] == "2025-03"
        assert entry["userId"] == student["user"]["id"]
        assert entry["korean"] == 70

    def test_numeric_strings_accepted(self, client, student):
        resp = add_entry(client, student["token"], korean="65")
        assert resp.status_code == 201
        assert resp.get_json()["scoreHistory"]["korean"] == 65

    @pytest.mark.parametrize("date", ["2025-3", "2025/03", "25-03", "2025-03-01", "2025-13", "2025-00", "abcd-ef"])
    def test_invalid_period(self, client, student, date):
        resp = add_entry(client, student["token"], date=date)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid date format. Use YYYY-MM"

    @pytest.mark.parametrize("field,value", [("korean", -1), ("math", 101), ("science", 150)])
    def test_score_out_of_range(self, client, student, field, value):
        resp = add_entry(client, student["token"], **{field: value})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Scores must be between 0 and 100"

    @pytest.mark.parametrize("value", [True, False])
    def test_boolean_score_rejected(self, client, fake_db, student, value):
        resp = add_entry(client, student["token"], korean=value)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Scores must be numbers"
        assert fake_db.docs("score_history") == {}

    def test_missing_fields(self, client, student):
        resp = client.post("/api/users/score-history", headers=bearer(student["token"]),
                           json={"date": "2025-03", "korean": 70})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "All fields required"

        resp = add_entry(client, student["token"], math=None)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "All fields required"

    def test_duplicate_period_rejected(self, client, fake_db, student):
        assert add_entry(client, student["token"], korean=70).status_code == 201
        resp = add_entry(client, student["token"], korean=20)
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Score for this date already exists"}

        entries = list(fake_db.docs("score_history").values())
        assert len(entries) == 1
        assert entries[0]["korean"] == 70

    def test_same_period_different_users(self, client, student):
        other = register(client, email="other@test.com").get_json()
        assert add_entry(client, student["token"]).status_code == 201
        assert add_entry(client, other["token"]).status_code == 201

    def test_list_ascending_and_scoped(self, client, student):
        other = register(client, email="other@test.com").get_json()
        for date in ("2025-06", "2024-11", "2025-03"):
            add_entry(client, student["token"], date=date)
        add_entry(client, other["token"], date="2025-01")

        resp = client.get("/api/users/score-history", headers=bearer(student["token"]))
        assert resp.status_code == 200
        data = resp.get_json()
        assert [e["date"] for e in data["scoreHistory"]] == ["2024-11", "2025-03", "2025-06"]
        assert data["count"] == 3

    def test_delete_own_entry(self, client, fake_db, student):
        entry_id = add_entry(client, student["token"]).get_json()["scoreHistory"]["id"]
        resp = client.delete(f"/api/users/score-history/{entry_id}", headers=bearer(student["token"]))
        assert resp.status_code == 200
        assert fake_db.docs("score_history") == {}

    def test_delete_other_users_entry_is_not_found(self, client, fake_db, student):
        other = register(client, email="other@test.com").get_json()
        entry_id = add_entry(client, other["token"]).get_json()["scoreHistory"]["id"]

        resp = client.delete(f"/api/users/score-history/{entry_id}", headers=bearer(student["token"]))
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Score history not found"}
        assert entry_id in fake_db.docs("score_history")

    def test_delete_missing_entry(self, client, student):
        resp = client.delete("/api/users/score-history/nope", headers=bearer(student["token"]))
        assert resp.status_code == 404

    def test_delete_then_recreate(self, client, student):
        entry_id = add_entry(client, student["token"], korean=40).get_json()["scoreHistory"]["id"]
        client.delete(f"/api/users/score-history/{entry_id}", headers=bearer(student["token"]))
        resp = add_entry(client, student["token"], korean=45)
        assert resp.status_code == 201
        assert resp.get_json()["scoreHistory"]["korean"] == 45


class TestLedgerDrivesCurrentScores:
    def me(self, client, token):
        return client.get("/api/users/me", headers=bearer(token)).get_json()

    def test_latest_entry_becomes_current(self, client, student):
        add_entry(client, student["token"], date="2025-03", korean=60)
        assert self.me(client, student["token"])["scores"]["korean"] == 60

    def test_older_entry_does_not_override(self, client, student):
        add_entry(client, student["token"], date="2025-05", korean=60)
        add_entry(client, student["token"], date="2025-01", korean=30)
        assert self.me(client, student["token"])["scores"]["korean"] == 60

    def test_deleting_latest_falls_back(self, client, student):
        add_entry(client, student["token"], date="2025-01", korean=30)
        latest = add_entry(client, student["token"], date="2025-05", korean=60).get_json()
        client.delete(f"/api/users/score-history/{latest['scoreHistory']['id']}",
                      headers=bearer(student["token"]))
        assert self.me(client, student["token"])["scores"]["korean"] == 30


class TestRecommendations:
    def test_requires_token(self, client):
        assert client.get("/api/recommendations").status_code == 401

    def test_end_to_end(self, client, fake_db):
        seed_video(fake_db, id="kor10", subject="국어", grade="10")
        seed_video(fake_db, id="kor11", subject="국어", grade="11")
        seed_video(fake_db, id="math10", subject="수학", grade="10")
        seed_video(fake_db, id="kor10-off", subject="국어", grade="10", status="inactive")

        assert register(client, email="a@test.com", password="Apassword1", grade="10").status_code == 201
        token = login(client, "a@test.com", "Apassword1")
        resp = add_entry(client, token, date="2025-03", korean=60, math=85, english=90, science=80)
        assert resp.status_code == 201

        resp = client.get("/api/recommendations", headers=bearer(token))
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["weakSubjects"] == ["국어"]
        assert [v["id"] for v in data["recommendations"]] == ["kor10"]

    def test_default_scores_recommend_every_subject(self, client, fake_db, student):
        seed_video(fake_db, id="sci10", subject="과학", grade="10")
        data = client.get("/api/recommendations", headers=bearer(student["token"])).get_json()
        assert data["weakSubjects"] == ["국어", "수학", "영어", "과학"]
        assert [v["id"] for v in data["recommendations"]] == ["sci10"]

    def test_no_weak_subjects(self, client, fake_db, student):
        seed_video(fake_db, id="math10", subject="수학", grade="10")
        client.put("/api/users/scores", headers=bearer(student["token"]), json={
            "korean": 80, "math": 90, "english": 95, "science": 100,
        })
        data = client.get("/api/recommendations", headers=bearer(student["token"])).get_json()
        assert data == {"weakSubjects": [], "recommendations": []}

    def test_capped_at_10(self, client, fake_db, student):
        for i in range(12):
            seed_video(fake_db, id=f"m{i}", subject="수학", grade="10")
        data = client.get("/api/recommendations", headers=bearer(student["token"])).get_json()
        assert len(data["recommendations"]) == 10
