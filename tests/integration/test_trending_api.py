"""
Integration tests for the trending list.
"""
from datetime import datetime, timedelta, timezone

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _seed(memory_db, count):
    for i in range(count):
        memory_db.add_trending(
            "m1" if i % 2 else "m3",
            "day" if i % 3 else "week",
            created_at=BASE_TIME + timedelta(minutes=i),
        )


class TestTrending:
    def test_capped_at_twenty(self, test_client, memory_db):
        _seed(memory_db, 30)

        response = test_client.get("/trending")

        assert response.status_code == 200
        assert len(response.json()) == 20

    def test_paging_parameters_do_not_lift_cap(self, test_client, memory_db):
        _seed(memory_db, 30)

        response = test_client.get("/trending", params={"page": 2, "per_page": 50, "limit": 100})

        assert len(response.json()) == 20

    def test_newest_first_with_media(self, test_client, memory_db):
        _seed(memory_db, 3)

        entries = test_client.get("/trending").json()

        created = [e["created_at"] for e in entries]
        assert created == sorted(created, reverse=True)
        assert entries[0]["media"]["id"] == "m3"
        assert entries[1]["media"]["title"] == "The Matrix"

    def test_type_filter(self, test_client, memory_db):
        _seed(memory_db, 9)

        entries = test_client.get("/trending", params={"type": "week"}).json()

        assert len(entries) == 3
        assert {e["trending_type"] for e in entries} == {"week"}

    def test_empty(self, test_client):
        response = test_client.get("/trending")

        assert response.status_code == 200
        assert response.json() == []
