"""
Tests for the JSON API using Flask's test client.
"""

import pytest

from app import create_app


# Fixtures

@pytest.fixture
def app():
    """Create the app with the testing configuration."""
    return create_app("config.TestingConfig")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def grid_record():
    return {
        "widthColumns": ["50", "80", "100"],
        "dropRows": [{"drop": "100", "prices": [45, 50, 55]}],
    }


# Tests for the pricing endpoints

class TestGridPrice:

    def test_price_lookup(self, client, grid_record):
        response = client.post("/api/grid/price", json={"grid": grid_record, "width": 70, "drop": 90})
        assert response.status_code == 200
        data = response.get_json()
        assert data["price"] == 50
        assert data["cell"]["width_label"] == "80"

    def test_empty_grid_is_422(self, client):
        response = client.post("/api/grid/price", json={
            "grid": {"widthColumns": [], "dropRows": []}, "width": 70, "drop": 90,
        })
        assert response.status_code == 422
        data = response.get_json()
        assert data["type"] == "EmptyGridError"
        assert "resolution" in data["details"]

    def test_missing_width_is_400(self, client, grid_record):
        response = client.post("/api/grid/price", json={"grid": grid_record, "drop": 90})
        assert response.status_code == 400
        assert "width" in response.get_json()["error"]

    def test_non_json_body_is_400(self, client):
        response = client.post("/api/grid/price", data="not json", content_type="application/json")
        assert response.status_code == 400


class TestMarkupResolve:

    def test_resolves_with_selling_price(self, client):
        response = client.post("/api/markup/resolve", json={
            "category": "Curtains",
            "subcategory": "<b>sheer</b>",
            "rules": [
                {"category": "curtains", "percentage": 40},
                {"category": "curtains", "subcategory": "sheer", "percentage": 25},
            ],
            "cost": 200,
        })
        assert response.status_code == 200
        data = response.get_json()
        assert data["percentage"] == 25
        assert data["source"] == "subcategory"
        assert data["selling_price"] == 250

    def test_strict_mode_without_rules_is_422(self, client):
        response = client.post("/api/markup/resolve", json={
            "category": "curtains", "rules": [], "require_rules": True,
        })
        assert response.status_code == 422
        assert response.get_json()["type"] == "MarkupConfigurationError"

    def test_rules_must_be_objects(self, client):
        response = client.post("/api/markup/resolve", json={"category": "curtains", "rules": [40]})
        assert response.status_code == 400


class TestHeadingPrice:

    def test_resolves_override(self, client):
        response = client.post("/api/heading/price", json={
            "is_hand_finished": False,
            "heading_id": "wave",
            "headings": [{"id": "wave", "extras": {"machine_price": 18}}],
            "pricing_method": {"machine_price_per_length": 15},
        })
        assert response.get_json() == {"price": 18.0, "source": "heading_override", "finish": "machine"}


class TestFabricOrientation:

    def test_uses_configured_allowances(self, client):
        """Omitted hems come from config: 15 header, 10 bottom, 5 side, 3 seam."""
        response = client.post("/api/fabric/orientation", json={
            "dimensions": {"rail_width": 200, "drop": 250, "fullness": 2, "panel_count": 2},
            "fabric": {"width": 137, "type": "Plain", "pattern": ""},
            "price_per_length": 20,
        })
        assert response.status_code == 200
        data = response.get_json()
        assert data["recommendation"] == "vertical"
        assert data["vertical"]["total_length_m"] == 11.09
        assert data["savings"] == pytest.approx(31.4)

    def test_missing_fabric_width_is_422(self, client):
        response = client.post("/api/fabric/orientation", json={
            "dimensions": {"rail_width": 200, "drop": 250},
            "fabric": {"width": None, "type": "Plain", "pattern": ""},
            "price_per_length": 20,
        })
        assert response.status_code == 422
        assert response.get_json()["type"] == "MissingFabricWidthError"

    def test_selected_orientation_drives_warnings(self, client):
        response = client.post("/api/fabric/orientation", json={
            "dimensions": {"rail_width": 200, "drop": 100, "fullness": 2, "panel_count": 2},
            "fabric": {"width": 137, "type": "Plain"},
            "price_per_length": 20,
            "orientation": "Vertical",
        })
        assert response.status_code == 200
        assert "Consider horizontal orientation for fabric savings" in response.get_json()["warnings"]

    def test_unknown_orientation_is_400(self, client):
        response = client.post("/api/fabric/orientation", json={
            "dimensions": {"rail_width": 200, "drop": 100},
            "fabric": {"width": 137},
            "price_per_length": 20,
            "orientation": "diagonal",
        })
        assert response.status_code == 400


class TestServicesQuantity:

    def test_per_window(self, client):
        response = client.post("/api/services/quantity", json={
            "unit": "per-window",
            "project": {"rooms": ["lounge"], "surfaces": [{"id": "a"}, {"id": "b"}, {"id": "c"}]},
        })
        assert response.get_json() == {
            "quantity": 3, "is_automatic": True, "explanation": "3 windows detected",
        }

    def test_unknown_unit_is_422(self, client):
        response = client.post("/api/services/quantity", json={"unit": "per-sqm", "project": {}})
        assert response.status_code == 422
        assert response.get_json()["details"]["unit"] == "per-sqm"


class TestQuoteLine:

    def test_grid_line(self, client, grid_record):
        response = client.post("/api/quote/line", json={
            "snapshot": {
                "markup_settings": {"default_markup_percentage": 20},
                "grids": {"band_a": grid_record},
            },
            "quote_id": "Q-10042",
            "line": {"type": "grid", "grid": "band_a", "width": 70, "drop": 90, "category": "blinds"},
        })
        assert response.status_code == 200
        data = response.get_json()
        assert data["cost"] == 50
        assert data["selling_price"] == 60
        assert data["markup_source"] == "global_default"

    def test_service_line_with_manual_quantity(self, client):
        response = client.post("/api/quote/line", json={
            "snapshot": {},
            "line": {"type": "service", "unit": "per-hour", "unit_price": 40, "quantity": 3},
        })
        data = response.get_json()
        assert data["cost"] == 120
        assert data["markup_source"] == "none"

    def test_unknown_grid_is_422(self, client):
        response = client.post("/api/quote/line", json={
            "snapshot": {},
            "line": {"type": "grid", "grid": "missing", "width": 70, "drop": 90},
        })
        assert response.status_code == 422
        assert response.get_json()["type"] == "GridNotFoundError"

    def test_unknown_line_type_is_400(self, client):
        response = client.post("/api/quote/line", json={"snapshot": {}, "line": {"type": "tax"}})
        assert response.status_code == 400


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.get_json()["status"] == "ok"

    def test_unknown_route_is_json_404(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        assert response.get_json()["type"] == "NotFound"
