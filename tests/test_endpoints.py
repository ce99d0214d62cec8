"""
Integration tests for API endpoints. Each client starts from the default
catalogs with an empty in-memory document storage.
"""
import pytest
from fastapi.testclient import TestClient

from yeartrace.main import create_app


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["records"] == 0


class TestStartup:
    def test_startup_loads_persisted_document(self, memory_storage):
        storage = memory_storage({
            "behaviors": [{"id": "run", "name": "Run", "score": 4, "repeatable": False,
                           "type": "habit"}],
            "records": {"2024-02-02": {"date": "2024-02-02", "behaviors": {"run": True},
                                       "score": 4, "statusTierId": "t2"}},
        })
        with TestClient(create_app(storage=storage)) as c:
            behaviors = c.get("/catalog/behaviors").json()
            assert [b["id"] for b in behaviors] == ["run"]
            # goals were missing from the document and default to empty
            assert c.get("/catalog/goals").json() == []
            panel = c.get("/records/2024-02-02").json()
            assert panel["score"] == 4
            assert panel["tier"]["id"] == "t2"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class TestRecords:
    def test_log_behaviors_end_to_end(self, client, storage):
        r = client.post("/records/2024-03-01/behaviors", json={"behavior_id": "b1", "value": True})
        assert r.status_code == 200
        r = client.post("/records/2024-03-01/behaviors", json={"behavior_id": "b2", "value": 4})
        body = r.json()
        assert body["behaviors"] == {"b1": True, "b2": 4}
        assert body["score"] == 5
        assert body["status_tier_id"] == "t2"

        # every mutation is persisted
        assert storage.saves == 2
        assert storage.document["records"]["2024-03-01"]["statusTierId"] == "t2"

    def test_day_panel(self, client):
        client.post("/records/2024-03-01/behaviors", json={"behavior_id": "b2", "value": 12})
        r = client.get("/records/2024-03-01")
        assert r.status_code == 200
        body = r.json()
        assert body["score"] == 10
        assert body["tier"]["name"] == "高峰"
        entries = {e["behavior"]["id"]: e for e in body["entries"]}
        assert entries["b2"]["value"] == 12
        assert entries["b2"]["contribution"] == 10
        assert entries["b2"]["behavior"]["max_count"] == 10
        assert entries["b3"]["value"] is None

    def test_empty_day_panel(self, client):
        body = client.get("/records/2024-07-07").json()
        assert body["score"] == 0
        assert body["tier"] is None

    def test_increment(self, client):
        client.post("/records/2024-03-01/behaviors/b2/increment", json={})
        r = client.post("/records/2024-03-01/behaviors/b2/increment", json={"delta": 3})
        assert r.json()["behaviors"]["b2"] == 4
        assert r.json()["score"] == 4

    def test_clear_behavior(self, client):
        client.post("/records/2024-03-01/behaviors", json={"behavior_id": "b3", "value": True})
        r = client.delete("/records/2024-03-01/behaviors/b3")
        assert r.status_code == 200
        assert r.json()["behaviors"] == {}
        assert r.json()["score"] == 0

    def test_note(self, client):
        r = client.put("/records/2024-03-01/note", json={"note": "slept badly"})
        assert r.json()["note"] == "slept badly"
        panel = client.get("/records/2024-03-01").json()
        assert panel["note"] == "slept badly"

    def test_unknown_behavior(self, client):
        r = client.post("/records/2024-03-01/behaviors", json={"behavior_id": "zzz", "value": True})
        assert r.status_code == 404
        assert r.json()["code"] == "BEHAVIOR_NOT_FOUND"

    @pytest.mark.parametrize("value", [-1, "4", 1.5, None])
    def test_invalid_value(self, client, value):
        r = client.post("/records/2024-03-01/behaviors", json={"behavior_id": "b1", "value": value})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_invalid_date(self, client):
        r = client.get("/records/2024-02-30")
        assert r.status_code == 422


# ---------------------------------------------------------------------------
# Heatmap
# ---------------------------------------------------------------------------

class TestHeatmap:
    def test_year_grid(self, client):
        client.post("/records/2024-03-01/behaviors", json={"behavior_id": "b3", "value": True})
        r = client.get("/heatmap?year=2024")
        assert r.status_code == 200
        body = r.json()
        assert body["year"] == 2024
        assert len(body["cells"]) == 366
        assert body["logged_days"] == 1
        assert body["years_with_data"] == [2024]
        assert [t["id"] for t in body["legend"]] == ["t1", "t2", "t3", "t4"]
        march_first = body["cells"][31 + 29]
        assert march_first["date"] == "2024-03-01"
        assert march_first["score"] == 2
        assert march_first["color"] == "var(--color-base-40)"

    def test_bad_record_key_in_document(self, memory_storage):
        storage = memory_storage({"records": {
            "notadate": {"date": "notadate", "behaviors": {"b1": True}},
            "2024-03-01": {"date": "2024-03-01", "behaviors": {"b3": True}},
        }})
        with TestClient(create_app(storage=storage)) as c:
            r = c.get("/heatmap?year=2024")
        assert r.status_code == 200
        assert r.json()["years_with_data"] == [2024]
        assert r.json()["logged_days"] == 1

    def test_default_year(self, client):
        r = client.get("/heatmap")
        assert r.status_code == 200
        assert len(r.json()["cells"]) in (365, 366)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class TestCatalog:
    def test_list_defaults(self, client):
        assert [b["id"] for b in client.get("/catalog/behaviors").json()] == ["b1", "b2", "b3"]
        assert [b["type"] for b in client.get("/catalog/behaviors").json()] == ["main", "secondary", "habit"]
        assert [t["min_score"] for t in client.get("/catalog/tiers").json()] == [0, 3, 6, 9]

    def test_create_behavior_and_log_it(self, client):
        r = client.post("/catalog/behaviors", json={"name": "喝水", "score": 1,
                                                    "repeatable": True, "max_count": 8})
        assert r.status_code == 201
        new_id = r.json()["id"]
        r = client.post("/records/2024-03-01/behaviors", json={"behavior_id": new_id, "value": 20})
        assert r.json()["score"] == 8

    def test_patch_behavior_rescoring(self, client, storage):
        client.post("/records/2024-03-01/behaviors", json={"behavior_id": "b3", "value": True})
        r = client.patch("/catalog/behaviors/b3", json={"score": "6"})
        assert r.status_code == 200
        assert r.json()["ignored"] == []
        assert r.json()["behavior"]["score"] == 6

        panel = client.get("/records/2024-03-01").json()
        assert panel["score"] == 6
        assert panel["tier"]["id"] == "t3"
        assert storage.document["records"]["2024-03-01"]["score"] == 6

    def test_patch_behavior_non_numeric_ignored(self, client):
        r = client.patch("/catalog/behaviors/b1", json={"score": "many", "name": "Reading"})
        assert r.status_code == 200
        body = r.json()
        assert body["ignored"] == ["score"]
        assert body["behavior"]["score"] == 1
        assert body["behavior"]["name"] == "Reading"

    def test_delete_behavior_keeps_history(self, client, storage):
        client.post("/records/2024-03-01/behaviors", json={"behavior_id": "b3", "value": True})
        r = client.delete("/catalog/behaviors/b3")
        assert r.status_code == 200
        panel = client.get("/records/2024-03-01").json()
        assert panel["score"] == 0
        assert panel["orphaned"] == {"b3": True}
        assert storage.document["records"]["2024-03-01"]["behaviors"] == {"b3": True}

    def test_create_tier_sorted(self, client):
        r = client.post("/catalog/tiers", json={"name": "起步", "min_score": 1, "color": "#ccc"})
        assert r.status_code == 201
        assert [t["min_score"] for t in client.get("/catalog/tiers").json()] == [0, 1, 3, 6, 9]

    def test_create_tier_rederives_records(self, client):
        client.post("/records/2024-03-01/behaviors", json={"behavior_id": "b1", "value": True})
        client.post("/catalog/tiers", json={"name": "起步", "min_score": 1})
        assert client.get("/records/2024-03-01").json()["tier"]["name"] == "起步"

    def test_create_duplicate_tier(self, client):
        r = client.post("/catalog/tiers", json={"name": "again", "min_score": 6})
        assert r.status_code == 409
        assert r.json()["code"] == "DUPLICATE_TIER_THRESHOLD"

    def test_patch_tier(self, client):
        r = client.patch("/catalog/tiers/t4", json={"min_score": "12", "color": "gold"})
        assert r.status_code == 200
        assert r.json()["tier"]["min_score"] == 12
        assert r.json()["tier"]["color"] == "gold"

    def test_patch_tier_non_numeric(self, client):
        r = client.patch("/catalog/tiers/t4", json={"min_score": "twelve"})
        assert r.json()["ignored"] == ["min_score"]
        assert r.json()["tier"]["min_score"] == 9

    def test_delete_tier(self, client):
        assert client.delete("/catalog/tiers/t4").status_code == 200
        assert client.delete("/catalog/tiers/t4").status_code == 404
