"""
Pytest configuration and fixtures
"""
import pytest
from fastapi.testclient import TestClient

from heatloss.app.config import Settings
from heatloss.app.main import create_app
from heatloss.domain.models.inputs import (
    BuildingData,
    ClimateData,
    DesignConditions,
    Room,
    RoomType,
    Wall,
)


@pytest.fixture
def lounge():
    """20 m² lounge at 21°C with a single 10 m² external wall (U = 1.5)"""
    return Room(
        id="lounge",
        name="Lounge",
        type=RoomType.LIVING_ROOM,
        area=20.0,
        volume=50.0,
        target_temperature=21.0,
        walls=[Wall(id="w1", length=4.0, height=2.5, is_external=True, u_value=1.5)],
    )


@pytest.fixture
def building():
    return BuildingData(air_changes_per_hour=1.0, floor_u_value=0.25)


@pytest.fixture
def climate():
    return ClimateData(outside_design_temp=-3.0)


@pytest.fixture
def design_conditions():
    return DesignConditions()


@pytest.fixture
def building_payload():
    """Raw request body for a two-room building"""
    return {
        "rooms": [
            {
                "id": "lounge",
                "name": "Lounge",
                "type": "living_room",
                "area": 20.0,
                "volume": 50.0,
                "target_temperature": 21.0,
                "walls": [
                    {"id": "w1", "length": 4.0, "height": 2.5, "is_external": True, "u_value": 1.5},
                ],
            },
            {
                "id": "bed1",
                "name": "Bedroom 1",
                "type": "bedroom",
                "area": 12.0,
                "volume": 28.8,
                "walls": [
                    {"id": "w2", "length": 3.0, "height": 2.4, "is_external": True},
                    {"id": "w3", "length": 4.0, "height": 2.4},
                ],
                "windows": [
                    {"id": "win1", "wall_id": "w2", "width": 1.2, "height": 1.0, "glazing_type": "double"},
                ],
                "doors": [
                    {"id": "d1", "wall_id": "w3", "width": 0.8, "height": 2.0, "u_value": 3.0},
                ],
            },
        ],
        "building": {
            "air_changes_per_hour": 1.0,
            "wall_construction": "cavity_full_fill",
            "floor_construction": "solid_insulated",
        },
        "climate": {"outside_design_temp": -3.0, "postcode": "SW1A 1AA", "region": "South East"},
        "design_conditions": {"safety_margin": 15.0},
    }


@pytest.fixture
def client():
    app = create_app(Settings(cors_origins=["http://localhost:3000"]))
    return TestClient(app)
