"""
Tests for the HTTP API
"""

import pytest


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_healthz(self, client):
        data = client.get("/healthz").json()
        assert data["status"] == "ok"
        assert data["service"] == "heatloss-api"


class TestCalculateEndpoint:

    def test_calculate(self, client, building_payload):
        response = client.post("/api/v1/heat-loss/calculate", json=building_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["room_count"] == 2
        assert data["rooms"][0]["result"]["breakdown"]["walls"][0]["loss"] == pytest.approx(360.0)
        assert data["rooms"][0]["provenance"]["method"] == "EN12831-simplified"

    def test_advisory_messages_do_not_block(self, client, building_payload):
        building_payload["rooms"][0]["area"] = 0.0

        response = client.post("/api/v1/heat-loss/calculate", json=building_payload)

        assert response.status_code == 200
        assert response.json()["validation_messages"] == ["Room Lounge: Area must be greater than 0"]

    def test_strict_rejects(self, client, building_payload):
        building_payload["rooms"][0]["area"] = 0.0

        response = client.post("/api/v1/heat-loss/calculate?strict=true", json=building_payload)

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["type"] == "InputValidationError"
        assert error["details"]["messages"] == ["Room Lounge: Area must be greater than 0"]

    def test_missing_door_u_value(self, client, building_payload):
        del building_payload["rooms"][1]["doors"][0]["u_value"]

        response = client.post("/api/v1/heat-loss/calculate", json=building_payload)

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["type"] == "MissingRequiredFieldError"
        assert error["details"] == {"field": "u_value", "element_id": "d1"}

    def test_body_must_be_an_object(self, client):
        response = client.post("/api/v1/heat-loss/calculate", json=[1, 2, 3])

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "RequestValidationError"


class TestValidateEndpoint:

    def test_valid(self, client, building_payload):
        response = client.post("/api/v1/heat-loss/validate", json=building_payload)
        assert response.json() == {"messages": [], "valid": True}

    def test_missing_door_u_value(self, client, building_payload):
        del building_payload["rooms"][1]["doors"][0]["u_value"]

        data = client.post("/api/v1/heat-loss/validate", json=building_payload).json()

        assert data["valid"] is False
        assert data["messages"] == ["Room Bedroom 1: Door d1 is missing a U-value (required)"]


class TestReferenceEndpoints:

    def test_uvalues(self, client):
        data = client.get("/api/v1/heat-loss/uvalues").json()
        assert data["glazing"]["triple"]["u_value"] == 1.2

    def test_radiator_catalog(self, client):
        radiators = client.get("/api/v1/radiators/catalog").json()["radiators"]
        assert "k2-600x1200" in [r["id"] for r in radiators]


class TestRadiatorSelectEndpoint:

    @pytest.fixture
    def request_body(self):
        return {
            "room": {
                "id": "bed1",
                "name": "Bedroom 1",
                "area": 10.0,
                "volume": 24.0,
                "walls": [{"id": "w1", "length": 4.0, "height": 2.4, "is_external": True}],
                "windows": [{"id": "win1", "wall_id": "w1", "width": 1.2, "height": 1.0, "position": 2.0}],
            },
            "required_output": 900.0,
            "flow_temperature": "70/50",
            "alternatives": 2,
        }

    def test_select(self, client, request_body):
        data = client.post("/api/v1/radiators/select", json=request_body).json()

        assert data["selection"]["radiator"]["id"] == "k1-600x1000"
        assert data["selection"]["placement"]["under_window"] is True
        assert len(data["alternatives"]) == 2
        assert "k1-600x1000" not in [alt["radiator"]["id"] for alt in data["alternatives"]]

    def test_no_fit(self, client, request_body):
        request_body["required_output"] = 50000.0

        data = client.post("/api/v1/radiators/select", json=request_body).json()

        assert data == {"selection": None, "alternatives": []}


class TestCors:

    def test_allowed_origin(self, client):
        response = client.get("/health", headers={"Origin": "http://localhost:3000"})
        assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"

    def test_other_origin(self, client):
        response = client.get("/health", headers={"Origin": "http://malicious-site.com"})
        assert response.headers.get("Access-Control-Allow-Origin") != "http://malicious-site.com"
