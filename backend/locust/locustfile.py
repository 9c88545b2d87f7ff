"""
Locust Load Test Suite

Trips are created by providers outside this API, so seed at least one
published, approved trip first. Point the contention test at a small one:

  CONTENTION_TRIP_UUID=<uuid> locust -f locustfile.py --tags contention
  locust -f locustfile.py --tags throughput   # Test listing cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import os
import random
import string
import uuid
from locust import HttpUser, task, between, tag, events

# Shared state
TRIP_UUIDS = []
CONTENTION_TRIP_UUID = os.environ.get("CONTENTION_TRIP_UUID")
PASSWORD = "loadtest-password"


def random_email():
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=10))
    return f"load_{suffix}@test.com"


def register_and_login(client) -> dict:
    """Fresh customer account; returns auth headers or {} if login failed."""
    email = random_email()
    client.post("/api/v1/auth/register", json={
        "name": "Load Tester",
        "email": email,
        "password": PASSWORD,
    })
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    if resp.status_code != 200:
        return {}
    return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    if CONTENTION_TRIP_UUID:
        print(f"Contention target: trip {CONTENTION_TRIP_UUID}")
    else:
        print("CONTENTION_TRIP_UUID not set; contention users will use the first listed trip")
    print("=" * 60)


class ContentionUser(HttpUser):
    """
    TEST 1: Contention - many customers, few seats

    Run: CONTENTION_TRIP_UUID=<uuid> locust -f locustfile.py --tags contention -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT max_participants, booked_participants FROM trips WHERE public_id = '<uuid>';
      SELECT COALESCE(SUM(num_of_people), 0) FROM bookings b JOIN trips t ON t.id = b.trip_id
        WHERE t.public_id = '<uuid>' AND b.status <> 'cancelled';
    booked_participants must equal the sum and never exceed max_participants.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = register_and_login(self.client)
        if not CONTENTION_TRIP_UUID and not TRIP_UUIDS:
            resp = self.client.get("/api/v1/trips?page=1&page_size=1")
            if resp.status_code == 200:
                TRIP_UUIDS.extend(t["uuid"] for t in resp.json()["data"]["trips"])

    @tag("contention")
    @task
    def book_last_seats(self):
        """All users fight for the same seats."""
        trip_uuid = CONTENTION_TRIP_UUID or (TRIP_UUIDS[0] if TRIP_UUIDS else None)
        if not trip_uuid or not self.headers:
            return

        with self.client.post("/api/v1/booking",
            json={"trip_id": trip_uuid, "num_of_people": 1},
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: sold out, expected
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false on the API, run again

    Compare avg response time, requests/sec and P95/P99 latency.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_trips_cached(self):
        page = random.randint(1, 5)
        resp = self.client.get(f"/api/v1/trips?page={page}&page_size=20",
            name="/api/v1/trips [cached]")
        if resp.status_code == 200:
            for trip in resp.json()["data"]["trips"]:
                if trip["uuid"] not in TRIP_UUIDS:
                    TRIP_UUIDS.append(trip["uuid"])

    @tag("throughput", "read")
    @task(3)
    def get_trip_detail(self):
        if TRIP_UUIDS:
            self.client.get(f"/api/v1/trips/{random.choice(TRIP_UUIDS)}",
                name="/api/v1/trips/{uuid}")

    @tag("throughput", "read")
    @task(2)
    def search_trips(self):
        keyword = random.choice(["bali", "bromo", "lombok", "jakarta"])
        self.client.get(f"/api/v1/trips/search?location={keyword}",
            name="/api/v1/trips/search")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = register_and_login(self.client)

    def _expect(self, resp, *codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_trip(self):
        with self.client.post("/api/v1/booking",
            json={"trip_id": str(uuid.uuid4()), "num_of_people": 1},
            headers=self.headers,
            catch_response=True
        ) as resp:
            self._expect(resp, 404)

    @tag("edge")
    @task
    def non_positive_party(self):
        with self.client.post("/api/v1/booking",
            json={"trip_id": str(uuid.uuid4()), "num_of_people": random.choice([0, -5])},
            headers=self.headers,
            catch_response=True
        ) as resp:
            self._expect(resp, 400)

    @tag("edge")
    @task
    def huge_party(self):
        if not TRIP_UUIDS:
            return
        with self.client.post("/api/v1/booking",
            json={"trip_id": random.choice(TRIP_UUIDS), "num_of_people": 999999},
            headers=self.headers,
            catch_response=True
        ) as resp:
            self._expect(resp, 409)

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/booking",
            data="not json at all",
            headers={**self.headers, "Content-Type": "application/json"},
            catch_response=True
        ) as resp:
            self._expect(resp, 400)

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/api/v1/booking",
            json={"trip_id": str(uuid.uuid4()), "num_of_people": 1},
            catch_response=True
        ) as resp:
            self._expect(resp, 401)

    @tag("edge")
    @task
    def cancel_unknown_booking(self):
        with self.client.put(f"/api/v1/booking/cancel/{uuid.uuid4()}",
            headers=self.headers,
            name="/api/v1/booking/cancel/{uuid}",
            catch_response=True
        ) as resp:
            self._expect(resp, 404)


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Mostly browsing, some bookings, a few cancellations.
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = register_and_login(self.client)
        self.my_bookings = []

    @task(50)
    def browse_trips(self):
        resp = self.client.get("/api/v1/trips?page=1&page_size=20")
        if resp.status_code == 200:
            for trip in resp.json()["data"]["trips"]:
                if trip["uuid"] not in TRIP_UUIDS:
                    TRIP_UUIDS.append(trip["uuid"])

    @task(20)
    def view_trip(self):
        if TRIP_UUIDS:
            self.client.get(f"/api/v1/trips/{random.choice(TRIP_UUIDS)}",
                name="/api/v1/trips/{uuid}")

    @task(10)
    def book_seats(self):
        if TRIP_UUIDS and self.headers:
            resp = self.client.post("/api/v1/booking",
                json={"trip_id": random.choice(TRIP_UUIDS), "num_of_people": random.randint(1, 3)},
                headers=self.headers)
            if resp.status_code == 201:
                self.my_bookings.append(resp.json()["data"]["booking_uuid"])

    @task(5)
    def booking_history(self):
        if self.headers:
            self.client.get("/api/v1/booking", headers=self.headers)

    @task(2)
    def cancel_booking(self):
        if self.my_bookings:
            booking_uuid = self.my_bookings.pop()
            self.client.put(f"/api/v1/booking/cancel/{booking_uuid}",
                headers=self.headers,
                name="/api/v1/booking/cancel/{uuid}")
