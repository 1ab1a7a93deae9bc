"""
Tests for building generation API endpoints.
"""

import sys
from pathlib import Path

# Add server directory to path
server_dir = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(server_dir))

import pytest
from fastapi.testclient import TestClient
from internal.buildgen.main import app

client = TestClient(app)


def test_health_check():
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "buildgen-service"
    assert data["version"] == "0.1.0"


def test_list_footprints():
    """Catalog endpoint lists the six built-in footprints"""
    response = client.get("/api/v1/footprints")
    assert response.status_code == 200
    data = response.json()
    assert [f["name"] for f in data] == ["rect_2x3", "rect_3x3", "l_shape", "u_shape", "notch", "step"]
    assert [f["concave"] for f in data] == [False, False, True, True, True, True]
    assert data[1]["occupied_cells"] == 9


def test_generate_buildings():
    """Batch generation returns meshes and openings per building"""
    response = client.post("/api/v1/buildings/generate", json={"seed": 42, "count": 3, "spacing": 5.0})
    assert response.status_code == 200

    data = response.json()
    assert data["success"] is True
    assert data["seed"] == 42
    assert len(data["buildings"]) == 3
    assert [b["position"] for b in data["buildings"]] == [[0.0, 0.0, 0.0], [5.0, 0.0, 0.0], [10.0, 0.0, 0.0]]

    for building in data["buildings"]:
        cells = building["footprint"]["occupied_cells"]
        mesh = building["mesh"]
        assert len(mesh["vertices"]) == 21 * cells
        assert len(mesh["walls"]) == 8 * cells
        assert len(mesh["roofs"]) == 4 * cells
        assert len(building["heights"]) == cells
        for opening in building["openings"]:
            assert opening["kind"] in ("door", "window")
            if opening["kind"] == "door":
                assert opening["floor"] == 0


def test_generate_buildings_deterministic():
    """Same request, same response"""
    request_data = {"seed": 99, "count": 2}
    first = client.post("/api/v1/buildings/generate", json=request_data).json()
    second = client.post("/api/v1/buildings/generate", json=request_data).json()
    assert first == second


def test_generate_with_named_footprint():
    """A catalog name pins every building to that footprint"""
    response = client.post(
        "/api/v1/buildings/generate", json={"seed": 1, "count": 2, "footprint": "l_shape"}
    )
    assert response.status_code == 200
    names = [b["footprint"]["name"] for b in response.json()["buildings"]]
    assert names == ["l_shape", "l_shape"]


def test_generate_with_explicit_grid():
    """An explicit grid is accepted as a custom footprint"""
    response = client.post(
        "/api/v1/buildings/generate", json={"seed": 1, "count": 1, "footprint": [[1, 1], [0, 1]]}
    )
    assert response.status_code == 200
    building = response.json()["buildings"][0]
    assert building["footprint"]["name"] == "custom"
    assert building["footprint"]["rows"] == [[1, 1], [0, 1]]


def test_generate_with_malformed_grid():
    """Ragged or empty grids are rejected before generation"""
    response = client.post(
        "/api/v1/buildings/generate", json={"seed": 1, "count": 1, "footprint": [[1], [1, 1]]}
    )
    assert response.status_code == 422
    assert "Invalid footprint" in response.json()["detail"]

    response = client.post(
        "/api/v1/buildings/generate", json={"seed": 1, "count": 1, "footprint": [[0, 0]]}
    )
    assert response.status_code == 422


def test_generate_with_unknown_footprint():
    """Unknown catalog names are a 404"""
    response = client.post(
        "/api/v1/buildings/generate", json={"seed": 1, "footprint": "castle"}
    )
    assert response.status_code == 404


@pytest.mark.parametrize("count", [0, 51])
def test_generate_count_bounds(count):
    """Count must be between 1 and 50"""
    response = client.post("/api/v1/buildings/generate", json={"seed": 1, "count": count})
    assert response.status_code == 422


def test_generate_with_oversized_grid():
    """Explicit grids larger than the side limit are rejected"""
    too_many_rows = [[1]] * 9
    response = client.post(
        "/api/v1/buildings/generate", json={"seed": 1, "count": 1, "footprint": too_many_rows}
    )
    assert response.status_code == 422
    assert "exceeds 8x8" in response.json()["detail"]

    too_many_cols = [[1] * 9]
    response = client.post(
        "/api/v1/buildings/generate", json={"seed": 1, "count": 1, "footprint": too_many_cols}
    )
    assert response.status_code == 422

    largest = [[1] * 8 for _ in range(8)]
    response = client.post(
        "/api/v1/buildings/generate", json={"seed": 1, "count": 1, "footprint": largest}
    )
    assert response.status_code == 200
