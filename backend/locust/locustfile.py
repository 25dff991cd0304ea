"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test capacity under contention
  locust -f locustfile.py --tags browse       # Test page throughput
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests

Every user signs up through the HTML form and keeps the session cookie that
the site sets, exactly like a browser.
"""

import random
from datetime import datetime, timezone, timedelta
from locust import HttpUser, task, between, tag

# Shared state
EVENT_IDS = []
CONCURRENCY_EVENT_ID = None
CONCURRENCY_CAPACITY = 10
PASSWORD = "test123"


def random_email():
    return f"load_{random.randint(100000, 999999)}@test.com"


def future_start(days: int = 30) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).strftime("%Y-%m-%dT%H:%M")


def event_id_from(resp):
    """Event creation answers with a redirect to /events/{id}."""
    location = resp.headers.get("location", "")
    if resp.status_code == 303 and location.startswith("/events/"):
        return int(location.rsplit("/", 1)[1])
    return None


class SignedUpUser(HttpUser):
    abstract = True

    def on_start(self):
        resp = self.client.post("/signup", data={
            "name": "Load Tester",
            "email": random_email(),
            "password": PASSWORD,
        }, allow_redirects=False, name="/signup")
        self.logged_in = resp.status_code == 303

    def create_event(self, capacity: int, title: str):
        resp = self.client.post("/events/new", data={
            "title": title,
            "description": "Load test event",
            "location": "Test",
            "starts_at": future_start(random.randint(1, 90)),
            "capacity": str(capacity),
        }, allow_redirects=False, name="/events/new")
        return event_id_from(resp)


class ConcurrencyUser(SignedUpUser):
    """
    TEST 1: Concurrency - 100 users -> 10 places

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM registrations WHERE event_id = X;
    Should be <= 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        super().on_start()
        global CONCURRENCY_EVENT_ID
        if self.logged_in and not CONCURRENCY_EVENT_ID:
            CONCURRENCY_EVENT_ID = self.create_event(CONCURRENCY_CAPACITY, "Concurrency Test Event")
            if CONCURRENCY_EVENT_ID:
                print(f"\nCreated event {CONCURRENCY_EVENT_ID} with {CONCURRENCY_CAPACITY} places\n")

    @tag("concurrency")
    @task
    def register_limited_places(self):
        """All users fight for the same 10 places."""
        if not CONCURRENCY_EVENT_ID or not self.logged_in:
            return

        with self.client.post(f"/events/{CONCURRENCY_EVENT_ID}/register",
            name="/events/{id}/register",
            catch_response=True
        ) as resp:
            if resp.status_code == 200:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: full or already registered
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class BrowsingUser(HttpUser):
    """
    TEST 2: Throughput - anonymous page views

    Run: locust -f locustfile.py --tags browse -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("browse")
    @task(10)
    def list_events(self):
        self.client.get("/", name="/")

    @tag("browse")
    @task(3)
    def view_event(self):
        if EVENT_IDS:
            self.client.get(f"/events/{random.choice(EVENT_IDS)}", name="/events/{id}")

    @tag("browse")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(SignedUpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    @tag("edge")
    @task
    def invalid_event_id(self):
        with self.client.post("/events/999999/register",
            name="/events/[missing]/register",
            catch_response=True
        ) as resp:
            if resp.status_code == 404:
                resp.success()
            else:
                resp.failure(f"Expected 404, got {resp.status_code}")

    @tag("edge")
    @task
    def out_of_range_capacity(self):
        with self.client.post("/events/new", data={
            "title": "Too big",
            "description": "Capacity out of range",
            "location": "Nowhere",
            "starts_at": future_start(),
            "capacity": random.choice(["0", "5001", "-5", "abc", "2.5"]),
        }, name="/events/new [bad capacity]", catch_response=True) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Expected 400, got {resp.status_code}")

    @tag("edge")
    @task
    def wrong_password(self):
        with self.client.post("/login", data={
            "email": random_email(),
            "password": "nope",
        }, name="/login [bad]", catch_response=True) as resp:
            if resp.status_code == 401:
                resp.success()
            else:
                resp.failure(f"Expected 401, got {resp.status_code}")


class RealisticUser(SignedUpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing
      - Some registrations
      - Rare creates
    """
    wait_time = between(1, 3)

    @task(50)
    def browse_events(self):
        self.client.get("/", name="/")

    @task(20)
    def view_event(self):
        if EVENT_IDS:
            self.client.get(f"/events/{random.choice(EVENT_IDS)}", name="/events/{id}")

    @task(10)
    def register(self):
        if EVENT_IDS and self.logged_in:
            with self.client.post(f"/events/{random.choice(EVENT_IDS)}/register",
                name="/events/{id}/register",
                catch_response=True
            ) as resp:
                if resp.status_code in (200, 409):
                    resp.success()

    @task(3)
    def create(self):
        if self.logged_in:
            event_id = self.create_event(random.randint(10, 500), f"Event {random.randint(1, 10000)}")
            if event_id:
                EVENT_IDS.append(event_id)
