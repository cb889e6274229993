"""
HTTP API tests with the distance and email collaborators replaced.
"""
import pytest
from fastapi.testclient import TestClient

from pellet_tool.api.main import app
from pellet_tool.api.state import get_engine, get_distance_service, get_email_service
from pellet_tool.engine import GeoCoordinate, PricingEngine
from pellet_tool.services.errors import DistanceLookupError, EmailDeliveryError


class FakeDistance:
    configured = True

    def __init__(self, km=80.0, error=None):
        self.km = km
        self.error = error
        self.calls = []

    def one_way_km(self, destination):
        self.calls.append(destination)
        if self.error:
            raise self.error
        return self.km


class FakeEmail:
    configured = True

    def __init__(self, error=None):
        self.error = error
        self.sent = []

    def send_contact(self, form):
        if self.error:
            raise self.error
        self.sent.append(form)


@pytest.fixture
def distance():
    return FakeDistance()


@pytest.fixture
def email():
    return FakeEmail()


@pytest.fixture
def client(settings, distance, email):
    engine = PricingEngine(settings)
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_distance_service] = lambda: distance
    app.dependency_overrides[get_email_service] = lambda: email
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    assert client.get("/").json()["status"] == "online"


def test_status(client):
    data = client.get("/system/status").json()
    assert data["engine_active"] is True
    assert [t["label"] for t in data["tiers"]] == ["STANDARD", "BULK"]
    assert data["distance_configured"] is True


def test_quote_with_known_distance(client, distance):
    resp = client.post("/api/quote", json={"area": 10, "unit": "acre", "one_way_km": 80})
    assert resp.status_code == 200
    data = resp.json()
    assert data["product_lbs"] == 15000
    assert data["product_cost"] == pytest.approx(26250.0)
    assert data["bags"] == 15
    assert data["delivery"]["round_trip_hours"] == 2
    assert data["delivery"]["cost"] == 300.0
    assert data["total"] == pytest.approx(26550.0)
    assert distance.calls == []


def test_quote_looks_up_town(client, distance):
    resp = client.post("/api/quote", json={"area": 10, "destination": "Olds, AB"})
    assert resp.status_code == 200
    assert distance.calls == ["Olds, AB"]
    assert resp.json()["destination"] == "Olds, AB"
    assert resp.json()["delivery"]["cost"] == 300.0


def test_quote_geocodes_land_description(client, distance):
    land = {"lsd": "4", "section": "12", "township": "34", "range": "5", "meridian": "W5"}
    resp = client.post("/api/quote", json={"area": 2, "unit": "ha", "land": land})
    assert resp.status_code == 200
    assert isinstance(distance.calls[0], GeoCoordinate)
    assert resp.json()["destination"] == "4-12-34-5 W5"


def test_quote_without_destination_skips_delivery(client):
    resp = client.post("/api/quote", json={"area": 1})
    assert resp.status_code == 200
    assert resp.json()["delivery"] is None


def test_quote_unknown_unit(client):
    resp = client.post("/api/quote", json={"area": 10, "unit": "furlong"})
    assert resp.status_code == 422
    assert resp.json()["detail"]["error"] == "unknown_unit"


def test_quote_invalid_land(client, distance):
    land = {"lsd": "0", "section": "37", "township": "34", "range": "5", "meridian": "W7"}
    resp = client.post("/api/quote", json={"area": 10, "land": land})
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["error"] == "invalid_input"
    assert set(detail["fields"]) == {"lsd", "section", "meridian"}
    assert distance.calls == []


def test_quote_distance_failure_is_502(client, distance):
    distance.error = DistanceLookupError("Could not calculate distance")
    resp = client.post("/api/quote", json={"area": 10, "destination": "Nowhere"})
    assert resp.status_code == 502
    assert resp.json()["detail"]["error"] == "upstream_error"


def test_convert_land(client):
    resp = client.post("/api/lsd/convert", json={
        "lsd": 1, "section": 1, "township": 1, "range": 1, "meridian": "W4",
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["latitude"] == 49.0
    assert data["longitude"] == -110.0
    assert "trace" not in data


def test_convert_land_with_trace(client):
    resp = client.post("/api/lsd/convert", json={
        "lsd": "4", "section": "12", "township": "34", "range": "5", "meridian": "W5", "trace": True,
    })
    trace = resp.json()["trace"]
    assert trace[0]["step"] == "Input"
    assert trace[-1]["step"] == "Result"


def test_convert_land_invalid(client):
    resp = client.post("/api/lsd/convert", json={
        "lsd": "0", "section": "1", "township": "1", "range": "1", "meridian": "W4",
    })
    assert resp.status_code == 422
    assert resp.json()["detail"]["fields"] == ["lsd"]


def test_distance_endpoint(client):
    resp = client.post("/api/distance", json={"destination": "Calgary"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["one_way_km"] == 80.0
    assert data["delivery"]["round_trip_hours"] == 2


def test_distance_requires_destination(client):
    resp = client.post("/api/distance", json={})
    assert resp.status_code == 422


def test_contact_order(client, email):
    resp = client.post("/api/contact", json={
        "name": "Pat", "phone": "403-555-0100", "email": "pat@example.com",
        "company": "Dusty Leases", "address": "Sundre", "type": "order",
        "product": "15,000.00", "cost": "26,250.00",
    })
    assert resp.status_code == 200
    assert resp.json() == {"message": "Form submitted successfully"}
    assert email.sent[0].company == "Dusty Leases"


def test_contact_invalid_form(client, email):
    resp = client.post("/api/contact", json={
        "name": "Pat", "phone": "403-555-0100", "email": "pat@example.com",
        "company": "Dusty Leases", "address": "Sundre", "type": "call",
    })
    assert resp.status_code == 422
    assert email.sent == []


def test_contact_email_failure(client, email):
    email.error = EmailDeliveryError("relay refused")
    resp = client.post("/api/contact", json={
        "name": "Pat", "phone": "403-555-0100", "email": "pat@example.com",
        "company": "Dusty Leases", "address": "Sundre", "type": "order",
    })
    assert resp.status_code == 502


@pytest.mark.parametrize("body", [
    {"area": 1e308},
    {"area": 1, "one_way_km": 1e308},
    {"area": -1},
    {"area": 1, "one_way_km": -5},
])
def test_quote_rejects_out_of_range_numbers(client, body):
    resp = client.post("/api/quote", json=body)
    assert resp.status_code == 422


def test_quote_unknown_unit_skips_distance_lookup(client, distance):
    resp = client.post("/api/quote", json={"area": 10, "unit": "furlong", "destination": "Olds"})
    assert resp.status_code == 422
    assert resp.json()["detail"]["error"] == "unknown_unit"
    assert distance.calls == []


def test_quote_unknown_unit_wins_over_distance_failure(client, distance):
    distance.error = DistanceLookupError("Could not calculate distance")
    land = {"lsd": "4", "section": "12", "township": "34", "range": "5", "meridian": "W5"}
    resp = client.post("/api/quote", json={"area": 10, "unit": "furlong", "land": land})
    assert resp.status_code == 422
    assert distance.calls == []


def test_quote_with_known_distance_still_validates_land(client, distance):
    land = {"lsd": "0", "section": "37", "township": "34", "range": "5", "meridian": "W7"}
    resp = client.post("/api/quote", json={"area": 10, "land": land, "one_way_km": 50})
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["error"] == "invalid_input"
    assert set(detail["fields"]) == {"lsd", "section", "meridian"}
    assert distance.calls == []


def test_quote_with_known_distance_labels_land(client, distance):
    land = {"lsd": "4", "section": "12", "township": "34", "range": "5", "meridian": "W5"}
    resp = client.post("/api/quote", json={"area": 10, "land": land, "one_way_km": 50})
    assert resp.status_code == 200
    assert resp.json()["destination"] == "4-12-34-5 W5"
    assert distance.calls == []


@pytest.mark.parametrize("field", ["company", "name", "address"])
def test_contact_rejects_multiline_header_fields(client, email, field):
    body = {
        "name": "Pat", "phone": "403-555-0100", "email": "pat@example.com",
        "company": "Dusty Leases", "address": "Sundre", "type": "order",
    }
    body[field] = "Acme\nInc"
    resp = client.post("/api/contact", json=body)
    assert resp.status_code == 422
    assert email.sent == []
