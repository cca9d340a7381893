"""
Tests for API layer.

Tests:
- API service methods
- HTTP routes and status codes
- Error mapping
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    CatalogRequest,
    CardModel,
    ClassifyRequest,
    CreateSheetRequest,
    EquipRequest,
    ErrorCode,
    ErrorResponse,
    FormulaRequest,
    ResourceRequest,
    SelectionRequest,
    SheetResponse,
)
from ..api.service import APIService
from ..engine_core.errors import UnknownItemError
from ..session import SheetManager
from .conftest import CATALOG_ROWS


@pytest.fixture
def service(table, catalog):
    """Service over the sample catalog."""
    return APIService(manager=SheetManager(table=table, catalog=catalog))


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


class TestAPIService:
    """Tests for APIService."""

    def test_create_sheet(self, service):
        response = service.create_sheet(CreateSheetRequest(name="Bram", race="Dwarf"))
        assert isinstance(response, SheetResponse)
        assert response.name == "Bram"
        assert response.race == "Dwarf"
        assert len(response.slots) == 5
        assert response.derived.hand.name == "High Card"
        assert response.formula.value is not None

    def test_create_with_selections_sets_gold(self, service):
        response = service.create_sheet(CreateSheetRequest(race="Goblin", class_name="Rogue", affinity="Shadow"))
        assert response.resources.gold == 15 + 13 + 7

    def test_get_missing_sheet(self, service):
        response = service.get_sheet("nope")
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SHEET_NOT_FOUND
        assert response.details == {"sheet_id": "nope"}

    def test_equip_reports_slot(self, service):
        sheet_id = service.create_sheet(CreateSheetRequest()).sheet_id
        response = service.equip(sheet_id, "slot1", EquipRequest(item_name="Iron Spur"))
        slot = response.slots[0]
        assert slot.rank == 14
        assert slot.rank_label == "A"
        assert slot.is_card

    def test_equip_unknown_item_propagates(self, service):
        sheet_id = service.create_sheet(CreateSheetRequest()).sheet_id
        with pytest.raises(UnknownItemError):
            service.equip(sheet_id, "slot1", EquipRequest(item_name="Excalibur"))

    def test_set_resource_is_clamped(self, service):
        sheet_id = service.create_sheet(CreateSheetRequest()).sheet_id
        response = service.set_resource(sheet_id, "lifeCurrent", ResourceRequest(value=99))
        assert response.resources.life_current == response.resources.life_max == 13

    def test_formula_error_is_in_response(self, service):
        sheet_id = service.create_sheet(CreateSheetRequest()).sheet_id
        response = service.set_formula(sheet_id, FormulaRequest(formula="gold **"))
        assert response.formula.value is None
        assert response.formula.error_kind == "syntax"

    def test_select(self, service):
        sheet_id = service.create_sheet(CreateSheetRequest()).sheet_id
        response = service.select(sheet_id, SelectionRequest(affinity="Nature"))
        assert response.affinity == "Nature"

    def test_classify_skips_incomplete_cards(self, service):
        request = ClassifyRequest(cards=[
            CardModel(rank="9", affinity="Iron"),
            CardModel(rank=9, affinity="Bone"),
            CardModel(rank="", affinity="Bone"),
            CardModel(rank="9"),
        ])
        response = service.classify(request)
        assert response.hand.name == "Pair"
        assert response.valid_card_count == 2
        assert response.bonus_text == "Unified Effort: +1 Attack Score"

    def test_load_catalog_replaces_items(self, service):
        response = service.load_catalog(CatalogRequest(rows=[{"ItemName": "Grave Bell", "Rank": "9"}]))
        assert response.count == 1
        assert service.get_catalog().items[0].item_name == "Grave Bell"

    def test_search_catalog(self, service):
        response = service.get_catalog("iron")
        assert response.count == 5


class TestRoutes:
    """HTTP behavior through the FastAPI app."""

    def create(self, client, **body):
        response = client.post("/api/v1/sheets", json=body)
        assert response.status_code == 201
        return response.json()["sheet_id"]

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_sheet_lifecycle(self, client):
        sheet_id = self.create(client, name="Ash")
        assert sheet_id in client.get("/api/v1/sheets").json()["sheets"]
        assert client.get(f"/api/v1/sheets/{sheet_id}").json()["name"] == "Ash"
        assert client.delete(f"/api/v1/sheets/{sheet_id}").json()["success"] is True
        assert client.get(f"/api/v1/sheets/{sheet_id}").status_code == 404

    def test_missing_sheet(self, client):
        response = client.get("/api/v1/sheets/missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "SHEET_NOT_FOUND"

    def test_straight_flush_over_http(self, client):
        sheet_id = self.create(client)
        for slot, name in enumerate(["Iron Fang", "Iron Hook", "Iron Lantern", "Iron Crown", "Iron Spur"], 1):
            response = client.put(f"/api/v1/sheets/{sheet_id}/slots/slot{slot}", json={"item_name": name})
            assert response.status_code == 200
        derived = response.json()["derived"]
        assert derived["hand"]["name"] == "Straight Flush"
        assert derived["hand"]["display_name"] == "Primal Current"
        assert derived["total"]["life_max"] == 15

    def test_unequip(self, client):
        sheet_id = self.create(client)
        client.put(f"/api/v1/sheets/{sheet_id}/slots/slot1", json={"item_name": "Bone Dice"})
        response = client.delete(f"/api/v1/sheets/{sheet_id}/slots/slot1")
        assert response.json()["slots"][0]["item_name"] is None

    def test_unknown_selection_is_400(self, client):
        response = client.post("/api/v1/sheets", json={"race": "Lich"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "UNKNOWN_SELECTION"

    def test_unknown_slot_is_404(self, client):
        sheet_id = self.create(client)
        response = client.put(f"/api/v1/sheets/{sheet_id}/slots/slot9", json={"item_name": "Bone Dice"})
        assert response.status_code == 404
        assert response.json()["error_code"] == "UNKNOWN_SLOT"

    def test_unknown_item_is_404(self, client):
        sheet_id = self.create(client)
        response = client.put(f"/api/v1/sheets/{sheet_id}/slots/slot1", json={"item_name": "Excalibur"})
        assert response.status_code == 404
        assert response.json()["error_code"] == "UNKNOWN_ITEM"

    def test_oversized_formula_is_not_a_server_error(self, client):
        sheet_id = self.create(client)
        response = client.put(f"/api/v1/sheets/{sheet_id}/formula", json={"formula": "(" * 2000 + "1" + ")" * 2000})
        assert response.status_code == 200
        assert response.json()["formula"]["error_kind"] == "syntax"
        response = client.put(f"/api/v1/sheets/{sheet_id}/resources/gold", json={"value": 5})
        assert response.status_code == 200

    def test_unexpected_failure_is_500(self, service):
        class BrokenService(APIService):
            def list_sheets(self):
                raise RuntimeError("boom")

        client = TestClient(create_app(BrokenService(manager=service.manager)), raise_server_exceptions=False)
        response = client.get("/api/v1/sheets")
        assert response.status_code == 500
        assert response.json()["error_code"] == "INTERNAL_ERROR"

    def test_unknown_resource_is_404(self, client):
        sheet_id = self.create(client)
        response = client.put(f"/api/v1/sheets/{sheet_id}/resources/mana", json={"value": 1})
        assert response.json()["error_code"] == "UNKNOWN_RESOURCE"
        assert response.status_code == 404

    def test_adjust_resource(self, client):
        sheet_id = self.create(client)
        response = client.post(f"/api/v1/sheets/{sheet_id}/resources/xp/adjust", json={"amount": 4})
        assert response.json()["resources"]["xp"] == 4

    def test_formula(self, client):
        sheet_id = self.create(client)
        response = client.put(f"/api/v1/sheets/{sheet_id}/formula", json={"formula": "strength * 2"})
        assert response.status_code == 200
        assert response.json()["formula"]["value"] == 12

    def test_classify(self, client):
        cards = [{"rank": "Q", "affinity": a} for a in ("Iron", "Bone", "Blood")]
        response = client.post("/api/v1/hands/classify", json={"cards": cards})
        assert response.json()["hand"]["level"] == 3

    def test_classify_rejects_six_cards(self, client):
        cards = [{"rank": str(r), "affinity": "Iron"} for r in range(2, 8)]
        response = client.post("/api/v1/hands/classify", json={"cards": cards})
        assert response.status_code == 422

    def test_catalog_roundtrip(self, client):
        response = client.put("/api/v1/catalog", json={"rows": CATALOG_ROWS[:2]})
        assert response.json()["count"] == 2
        response = client.get("/api/v1/catalog", params={"term": "hook"})
        assert [item["item_name"] for item in response.json()["items"]] == ["Iron Hook"]
