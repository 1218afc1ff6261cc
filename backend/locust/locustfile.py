"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags roster      # Concurrent duplicate attendee adds
  locust -f locustfile.py --tags throughput  # Owner-scoped reads
  locust -f locustfile.py --tags edge        # Bad tokens and bad input
  locust -f locustfile.py                    # All tests
"""

import random
import string
from datetime import datetime, timezone, timedelta

from locust import HttpUser, task, between, tag

PASSWORD = "loadtest-password"


def random_email():
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=12))
    return f"load_{suffix}@test.com"


def future_date():
    return (datetime.now(timezone.utc) + timedelta(days=30)).isoformat()


class AuthenticatedUser(HttpUser):
    abstract = True

    def on_start(self):
        email = random_email()
        resp = self.client.post("/api/v1/auth/register", json={
            "email": email,
            "name": "Load Tester",
            "password": PASSWORD,
        })
        self.user_id = resp.json()["id"] if resp.status_code == 201 else None

        resp = self.client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
        if resp.status_code == 200:
            self.headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}
        else:
            self.headers = {}

    def create_event(self, name):
        resp = self.client.post(
            "/api/v1/events",
            json={
                "name": name,
                "description": "Created by the load test",
                "date": future_date(),
                "location": "Load Test Hall",
            },
            headers=self.headers,
            name="/api/v1/events [create]",
        )
        return resp.json()["id"] if resp.status_code == 201 else None


class RosterUser(AuthenticatedUser):
    """
    TEST 1: Every iteration adds the same user to the same event twice in a row.

    Run: locust -f locustfile.py --tags roster -u 50 -r 25 --run-time 30s

    After test, verify no duplicates:
      SELECT event_id, user_id, COUNT(*) FROM attendees GROUP BY 1, 2 HAVING COUNT(*) > 1;
    Should return no rows.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        super().on_start()
        self.event_id = self.create_event("Roster Load Event") if self.headers else None

    @tag("roster")
    @task
    def add_same_attendee_twice(self):
        if not self.event_id or not self.user_id:
            return
        url = f"/api/v1/events/{self.event_id}/attendees/{self.user_id}"
        for _ in range(2):
            with self.client.post(
                url, headers=self.headers, catch_response=True,
                name="/api/v1/events/[id]/attendees/[user]",
            ) as resp:
                if resp.status_code in (201, 409):
                    resp.success()
                else:
                    resp.failure(f"Unexpected: {resp.status_code}")
        self.client.delete(url, headers=self.headers, name="/api/v1/events/[id]/attendees/[user]")


class ThroughputUser(AuthenticatedUser):
    """
    TEST 2: Authenticated read throughput. Each request re-resolves the
    user from the database, so this measures the auth gate as well.

    Run: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        super().on_start()
        self.event_ids = [
            event_id
            for event_id in (self.create_event(f"Throughput Event {i}") for i in range(3))
            if event_id
        ]

    @tag("throughput")
    @task(5)
    def list_events(self):
        self.client.get("/api/v1/events?page=1&page_size=20", headers=self.headers)

    @tag("throughput")
    @task(3)
    def get_event(self):
        if self.event_ids:
            self.client.get(
                f"/api/v1/events/{random.choice(self.event_ids)}",
                headers=self.headers,
                name="/api/v1/events/[id]",
            )

    @tag("throughput")
    @task(1)
    def read_profile(self):
        self.client.get("/api/v1/auth/me", headers=self.headers)


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Rejections stay fast and never 5xx.

    Run: locust -f locustfile.py --tags edge -u 20 -r 10 --run-time 30s
    """
    wait_time = between(0.1, 0.3)

    def _expect(self, resp, status):
        if resp.status_code == status:
            resp.success()
        else:
            resp.failure(f"Expected {status}, got {resp.status_code}")

    @tag("edge")
    @task
    def missing_header(self):
        with self.client.get("/api/v1/events", catch_response=True) as resp:
            self._expect(resp, 401)

    @tag("edge")
    @task
    def bare_token(self):
        with self.client.get(
            "/api/v1/events", headers={"Authorization": "not.a.token"}, catch_response=True
        ) as resp:
            self._expect(resp, 401)

    @tag("edge")
    @task
    def invalid_registration(self):
        with self.client.post(
            "/api/v1/auth/register",
            json={"email": "bad", "name": "x", "password": "short"},
            catch_response=True,
        ) as resp:
            self._expect(resp, 400)
