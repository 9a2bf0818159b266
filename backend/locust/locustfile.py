"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test double-booking
  locust -f locustfile.py --tags throughput   # Test facility cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
from datetime import date, datetime, time, timedelta

from locust import HttpUser, task, between, tag, events

# Shared state
FACILITY_IDS = []
CONTESTED_FACILITY_ID = None
CONTESTED_START = datetime.combine(date.today() + timedelta(days=30), time(9))
CONTESTED_END = CONTESTED_START + timedelta(days=2)


def random_email():
    return f"load_{random.randint(100000, 999999)}@loadtest.se"


def window(days_ahead: int, length: int = 1) -> dict:
    start = datetime.combine(date.today() + timedelta(days=days_ahead), time(9))
    return {
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=length)).isoformat(),
    }


def create_customer(client) -> int | None:
    resp = client.post("/api/v1/customers/", json={
        "first_name": "Load",
        "last_name": "Tester",
        "email": random_email(),
    }, name="/api/v1/customers/ [setup]")
    if resp.status_code == 201:
        return resp.json()["id"]
    return None


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("SETUP: contested window "
          f"{CONTESTED_START:%Y-%m-%d %H:%M} -> {CONTESTED_END:%Y-%m-%d %H:%M}")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - many customers, one facility, one window

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM bookings
      WHERE facility_id = X AND status IN ('pending', 'confirmed');
    Should be exactly 1
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.customer_id = create_customer(self.client)

        if not CONTESTED_FACILITY_ID:
            resp = self.client.post("/api/v1/facilities/", json={
                "name": f"Contested Hall {random.randint(1, 10000)}",
                "address": "Loadvägen 1",
                "postal_code": "11111",
                "city": "Stockholm",
                "max_capacity": 100,
                "price_per_day": "1000",
            }, name="/api/v1/facilities/ [setup]")
            if resp.status_code == 201:
                globals()["CONTESTED_FACILITY_ID"] = resp.json()["id"]
                print(f"\n✓ Created facility {CONTESTED_FACILITY_ID}\n")

    @tag("concurrency")
    @task
    def book_contested_window(self):
        """Everybody wants the same facility on the same days."""
        if not CONTESTED_FACILITY_ID or not self.customer_id:
            return

        with self.client.post("/api/v1/bookings/",
            json={
                "customer_id": self.customer_id,
                "facility_id": CONTESTED_FACILITY_ID,
                "start_date": CONTESTED_START.isoformat(),
                "end_date": CONTESTED_END.isoformat(),
                "number_of_participants": 10,
            },
            catch_response=True
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: already booked
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - facility listing cache

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_active_facilities(self):
        resp = self.client.get("/api/v1/facilities/active", name="/api/v1/facilities/active [cached]")
        if resp.status_code == 200:
            for facility in resp.json():
                if facility["id"] not in FACILITY_IDS:
                    FACILITY_IDS.append(facility["id"])

    @tag("throughput", "read")
    @task(3)
    def get_facility_detail(self):
        if FACILITY_IDS:
            self.client.get(f"/api/v1/facilities/{random.choice(FACILITY_IDS)}",
                name="/api/v1/facilities/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    Every response must be a 4xx problem body, never a 500.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, payload, allowed, body=None):
        kwargs = {"json": payload} if body is None else {"data": body}
        with self.client.post("/api/v1/bookings/", catch_response=True, **kwargs) as resp:
            if resp.status_code in allowed:
                resp.success()
            else:
                resp.failure(f"Expected {allowed}, got {resp.status_code}")

    def _booking(self, **overrides):
        payload = {
            "customer_id": 1,
            "facility_id": 1,
            "number_of_participants": 5,
            **window(40),
        }
        payload.update(overrides)
        return payload

    @tag("edge")
    @task
    def unknown_facility(self):
        self._expect(self._booking(facility_id=999999), (404,))

    @tag("edge")
    @task
    def zero_participants(self):
        self._expect(self._booking(number_of_participants=0), (400,))

    @tag("edge")
    @task
    def past_dates(self):
        self._expect(self._booking(**window(-10)), (400,))

    @tag("edge")
    @task
    def reversed_dates(self):
        start = window(40)
        self._expect(self._booking(start_date=start["end_date"], end_date=start["start_date"]), (400,))

    @tag("edge")
    @task
    def huge_party(self):
        self._expect(self._booking(number_of_participants=999999), (400, 404, 409))

    @tag("edge")
    @task
    def malformed_json(self):
        self._expect(None, (400,), body="not json at all")


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

      - Mostly browsing facilities
      - Some bookings on random future windows
      - Occasional cancellations
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.customer_id = create_customer(self.client)
        self.booking_ids = []

    @task(50)
    def browse_facilities(self):
        resp = self.client.get("/api/v1/facilities/active")
        if resp.status_code == 200:
            for facility in resp.json():
                if facility["id"] not in FACILITY_IDS:
                    FACILITY_IDS.append(facility["id"])

    @task(10)
    def book_facility(self):
        if not FACILITY_IDS or not self.customer_id:
            return
        with self.client.post("/api/v1/bookings/",
            json={
                "customer_id": self.customer_id,
                "facility_id": random.choice(FACILITY_IDS),
                "number_of_participants": random.randint(1, 10),
                **window(random.randint(1, 180), random.randint(1, 3)),
            },
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                self.booking_ids.append(resp.json()["id"])
                resp.success()
            elif resp.status_code in (400, 409):
                resp.success()  # taken or over capacity
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @task(2)
    def cancel_booking(self):
        if self.booking_ids:
            booking_id = self.booking_ids.pop()
            self.client.delete(f"/api/v1/bookings/{booking_id}", name="/api/v1/bookings/{id}")
