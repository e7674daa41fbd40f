import pytest
from sqlalchemy.exc import OperationalError

from dental_api.core.exceptions import StoreError
from dental_api.core.store import Filter, OrderBy, generate_id


class TestDocumentStore:

    def test_add_and_get(self, store):
        record = store.add("treatments", {"name": "Cleaning", "price": 40})
        assert len(record["id"]) == 20
        assert record["id"].isalnum()
        assert store.get("treatments", record["id"]) == record

    def test_get_scoped_to_collection(self, store):
        record = store.add("treatments", {"name": "Cleaning"})
        assert store.get("users", record["id"]) is None

    def test_put_merges(self, store):
        record = store.add("users", {"name": "Ana", "state": "closedSession"})
        updated = store.put("users", record["id"], {"state": "sessionStarted"})
        assert updated == {"id": record["id"], "name": "Ana", "state": "sessionStarted"}
        assert store.get("users", record["id"])["state"] == "sessionStarted"

    def test_put_replace(self, store):
        record = store.add("users", {"name": "Ana", "state": "closedSession"})
        store.put("users", record["id"], {"name": "Eva"}, merge=False)
        assert store.get("users", record["id"]) == {"id": record["id"], "name": "Eva"}

    def test_put_creates(self, store):
        doc_id = generate_id()
        store.put("users", doc_id, {"name": "Ana"})
        assert store.get("users", doc_id)["name"] == "Ana"

    def test_delete(self, store):
        record = store.add("users", {"name": "Ana"})
        assert store.delete("users", record["id"]) is True
        assert store.delete("users", record["id"]) is False
        assert store.get("users", record["id"]) is None

    def test_query_filters_and_order(self, store):
        for start in ("14:00", "09:00", "11:30"):
            store.add("appointments", {"date": "2030-01-01", "startTime": start})
        store.add("appointments", {"date": "2030-01-02", "startTime": "08:00"})

        results = store.query(
            "appointments",
            filters=[Filter("date", "==", "2030-01-01")],
            order_by=OrderBy("startTime"),
        )
        assert [r["startTime"] for r in results] == ["09:00", "11:30", "14:00"]

    def test_query_descending_with_limit(self, store):
        for day in ("2030-01-01", "2030-03-01", "2030-02-01"):
            store.add("appointments", {"date": day})

        results = store.query("appointments", order_by=OrderBy("date", descending=True), limit=2)
        assert [r["date"] for r in results] == ["2030-03-01", "2030-02-01"]

    def test_query_numeric_comparison(self, store):
        for price in (10, 50, 120):
            store.add("treatments", {"price": price})

        results = store.query("treatments", filters=[Filter("price", ">=", 50)])
        assert sorted(r["price"] for r in results) == [50, 120]

    def test_unsupported_operator(self, store):
        with pytest.raises(ValueError):
            store.query("users", filters=[Filter("name", "~", "Ana")])

    def test_driver_errors_wrapped(self, store, monkeypatch):
        """Driver failures surface as StoreError."""
        class BrokenSession:
            def get(self, *args):
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

            def rollback(self):
                pass

            def close(self):
                pass

        monkeypatch.setattr(store, "session_factory", BrokenSession)
        with pytest.raises(StoreError):
            store.get("users", generate_id())

    def test_update_merges_existing(self, store):
        record = store.add("users", {"name": "Ana", "state": "closedSession"})
        updated = store.update("users", record["id"], {"state": "sessionStarted"})
        assert updated == {"id": record["id"], "name": "Ana", "state": "sessionStarted"}

    def test_update_missing_does_not_create(self, store):
        doc_id = generate_id()
        assert store.update("users", doc_id, {"state": "sessionStarted"}) is None
        assert store.get("users", doc_id) is None
        assert store.query("users") == []
