"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to sheet operations
2. Manages sheets through the SheetManager
3. Formats engine results as response schemas

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Unknown sheets come back as ErrorResponse; engine lookup errors
(GrimHandError subclasses) propagate for the framework layer to map.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    CreateSheetRequest,
    SelectionRequest,
    EquipRequest,
    ResourceRequest,
    AdjustResourceRequest,
    FormulaRequest,
    ClassifyRequest,
    CatalogRequest,
    # Responses
    SheetResponse,
    HandResponse,
    CatalogResponse,
    SheetListResponse,
    DeleteSheetResponse,
    ErrorResponse,
    # Shared
    StatTotalsModel,
    HandModel,
    DerivedStatsModel,
    FormulaResultModel,
    SlotModel,
    ResourcesModel,
    CatalogRowModel,
    # Enums
    ErrorCode,
)
from ..engine_core.aggregator import DerivedStats
from ..engine_core.bonuses import describe_bonus, display_name
from ..engine_core.catalog import EquipmentCatalog
from ..engine_core.hand import HandClassification, classify_hand
from ..engine_core.state import Card, EquippedItem, parse_rank, rank_label
from ..session import SheetManager, ManagedSheet


def _hand_model(hand: HandClassification) -> HandModel:
    return HandModel(name=hand.name, level=hand.level, display_name=display_name(hand))


def _derived_model(derived: DerivedStats) -> DerivedStatsModel:
    return DerivedStatsModel(
        base=StatTotalsModel.model_validate(derived.base),
        total=StatTotalsModel.model_validate(derived.total),
        aligned_bonus=derived.aligned_bonus,
        hand=_hand_model(derived.hand),
        hand_bonus_text=derived.hand_bonus_text,
        damage_reduction=derived.damage_reduction,
    )


def _slot_model(item: EquippedItem) -> SlotModel:
    return SlotModel(
        slot_id=item.slot_id,
        item_name=item.item_name,
        rank=item.rank,
        rank_label=rank_label(item.rank) if item.rank is not None else None,
        affinity=item.affinity,
        primary_effect_text=item.primary_effect_text,
        is_card=item.is_complete,
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create a sheet
        response = service.create_sheet(CreateSheetRequest(race="Elf"))

        # Equip an item
        response = service.equip(response.sheet_id, "slot1", EquipRequest(item_name="Iron Fang"))
    """
    manager: SheetManager = field(default_factory=SheetManager)

    # =========================================================================
    # Sheets
    # =========================================================================

    def create_sheet(self, request: CreateSheetRequest) -> SheetResponse:
        managed = self.manager.create_sheet(
            name=request.name,
            race=request.race,
            class_name=request.class_name,
            affinity=request.affinity,
            formula=request.formula,
        )
        return self._sheet_to_response(managed)

    def get_sheet(self, sheet_id: str) -> SheetResponse | ErrorResponse:
        managed = self.manager.get_sheet(sheet_id)
        if not managed:
            return self._not_found(sheet_id)
        return self._sheet_to_response(managed)

    def delete_sheet(self, sheet_id: str) -> DeleteSheetResponse:
        return DeleteSheetResponse(success=self.manager.delete_sheet(sheet_id), sheet_id=sheet_id)

    def list_sheets(self) -> SheetListResponse:
        sheets = self.manager.list_sheets()
        return SheetListResponse(sheets=sheets, count=len(sheets))

    # =========================================================================
    # Sheet edits
    # =========================================================================

    def select(self, sheet_id: str, request: SelectionRequest) -> SheetResponse | ErrorResponse:
        return self._edit(
            sheet_id,
            lambda sheet: sheet.select(
                race=request.race,
                class_name=request.class_name,
                affinity=request.affinity,
            ),
        )

    def equip(self, sheet_id: str, slot_id: str, request: EquipRequest) -> SheetResponse | ErrorResponse:
        return self._edit(sheet_id, lambda sheet: sheet.equip(slot_id, request.item_name))

    def unequip(self, sheet_id: str, slot_id: str) -> SheetResponse | ErrorResponse:
        return self._edit(sheet_id, lambda sheet: sheet.unequip(slot_id))

    def set_resource(
        self, sheet_id: str, name: str, request: ResourceRequest
    ) -> SheetResponse | ErrorResponse:
        return self._edit(sheet_id, lambda sheet: sheet.set_resource(name, request.value))

    def adjust_resource(
        self, sheet_id: str, name: str, request: AdjustResourceRequest
    ) -> SheetResponse | ErrorResponse:
        return self._edit(sheet_id, lambda sheet: sheet.adjust_resource(name, request.amount))

    def set_formula(self, sheet_id: str, request: FormulaRequest) -> SheetResponse | ErrorResponse:
        return self._edit(sheet_id, lambda sheet: sheet.set_formula(request.formula))

    # =========================================================================
    # Stateless helpers
    # =========================================================================

    def classify(self, request: ClassifyRequest) -> HandResponse:
        """Classify loose cards; incomplete ones are skipped."""
        cards = []
        for card in request.cards:
            rank = parse_rank(card.rank)
            if rank is not None and card.affinity:
                cards.append(Card(rank=rank, affinity=card.affinity))
        hand = classify_hand(cards)
        return HandResponse(
            hand=_hand_model(hand),
            bonus_text=describe_bonus(hand),
            valid_card_count=len(cards),
        )

    def load_catalog(self, request: CatalogRequest) -> CatalogResponse:
        catalog = EquipmentCatalog.from_rows(request.rows)
        self.manager.replace_catalog(catalog)
        return self.get_catalog()

    def get_catalog(self, term: str = "") -> CatalogResponse:
        rows = self.manager.catalog.search(term)
        return CatalogResponse(
            items=[CatalogRowModel.model_validate(row) for row in rows],
            count=len(rows),
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _edit(self, sheet_id: str, operation) -> SheetResponse | ErrorResponse:
        managed = self.manager.get_sheet(sheet_id)
        if not managed:
            return self._not_found(sheet_id)
        operation(managed.sheet)
        managed.touch()
        return self._sheet_to_response(managed)

    @staticmethod
    def _not_found(sheet_id: str) -> ErrorResponse:
        return ErrorResponse(
            error="Sheet not found",
            error_code=ErrorCode.SHEET_NOT_FOUND,
            details={"sheet_id": sheet_id},
        )

    def _sheet_to_response(self, managed: ManagedSheet) -> SheetResponse:
        sheet = managed.sheet
        character = sheet.character
        result = sheet.formula_result
        return SheetResponse(
            sheet_id=managed.sheet_id,
            name=character.name,
            race=character.race,
            class_name=character.class_name,
            affinity=character.affinity,
            slots=[_slot_model(item) for item in character.equipped_items],
            resources=ResourcesModel.model_validate(character),
            derived=_derived_model(sheet.derived),
            formula=FormulaResultModel(
                formula=sheet.formula,
                value=result.value,
                error_kind=result.error_kind,
                error=result.error,
            ),
        )
