import pytest
from fastapi.testclient import TestClient

from territory_routing.data.catalog import TerritoryCatalog, generate_synthetic_catalog
from territory_routing.main import create_app
from territory_routing.services.routing.engine import RouteOptimizationEngine


@pytest.fixture
def api_client(depot, now) -> TestClient:
    catalog = TerritoryCatalog(generate_synthetic_catalog(22, seed=12, now=now))
    engine = RouteOptimizationEngine(catalog, depot=depot, clock=lambda: now)
    return TestClient(create_app(engine))


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "territories": 22}


def test_optimize_route_endpoint(api_client: TestClient):
    payload = {
        "conductor_id": "C42",
        "max_territories": 5,
        "max_travel_time": 300,
        "avoid_recent_visits": False,
        "time_slot_preference": "any",
        "conductor_skills": {"territory_experience": {"1": 0.8}, "time_slot_affinity": {"morning": 0.5}},
        "optimization_model": "territory-clusterer",
    }

    response = api_client.post("/api/routes/optimize", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["conductor_id"] == "C42"
    assert 0 < len(body["points"]) <= 5
    assert body["expected_calls"] == len(body["points"])
    assert 0.0 <= body["efficiency_score"] <= 1.0
    assert len(body["alternative_routes"]) <= 2
    for alternative in body["alternative_routes"]:
        assert alternative["pros"] and alternative["cons"]


def test_optimize_route_rejects_invalid_config(api_client: TestClient):
    payload = {"conductor_id": "C1", "max_territories": 0, "max_travel_time": 300}

    response = api_client.post("/api/routes/optimize", json=payload)

    assert response.status_code == 400
    assert "max_territories" in response.json()["detail"]


def test_optimize_route_rejects_unknown_time_slot(api_client: TestClient):
    payload = {"conductor_id": "C1", "max_territories": 3, "max_travel_time": 300, "time_slot_preference": "night"}

    response = api_client.post("/api/routes/optimize", json=payload)

    assert response.status_code == 422


def test_clusters_metrics_and_history(api_client: TestClient):
    clusters = api_client.get("/api/routes/clusters").json()
    assert clusters
    assert sum(cluster["density"] for cluster in clusters) == 22

    payload = {"conductor_id": "C7", "max_territories": 4, "max_travel_time": 480, "avoid_recent_visits": False}
    api_client.post("/api/routes/optimize", json=payload)

    metrics = api_client.get("/api/routes/metrics").json()
    assert metrics["total_routes_optimized"] == 1
    assert metrics["model_accuracy"] == pytest.approx((0.87 + 0.82 + 0.91) / 3)

    history = api_client.get("/api/routes/history").json()
    assert len(history) == 1
    assert history[0]["conductor_id"] == "C7"
