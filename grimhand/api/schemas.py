"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a display client and the engine.
Engine dataclasses convert through from_attributes where the shapes match.

Error Codes:
- SHEET_NOT_FOUND: Sheet does not exist or was deleted
- UNKNOWN_SELECTION: Race, class or affinity not in the attribute table
- UNKNOWN_SLOT: Slot id is not slot1..slot5
- UNKNOWN_ITEM: Item name not in the equipment catalog
- UNKNOWN_RESOURCE: Counter name is not editable
- INTERNAL_ERROR: Unexpected server failure
"""

from enum import Enum
from typing import Any, Optional, Union
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    SHEET_NOT_FOUND = "SHEET_NOT_FOUND"
    UNKNOWN_SELECTION = "UNKNOWN_SELECTION"
    UNKNOWN_SLOT = "UNKNOWN_SLOT"
    UNKNOWN_ITEM = "UNKNOWN_ITEM"
    UNKNOWN_RESOURCE = "UNKNOWN_RESOURCE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class FormulaErrorKind(str, Enum):
    SYNTAX = "syntax"
    RESULT = "result"


# =============================================================================
# Shared Models
# =============================================================================

class StatTotalsModel(BaseModel):
    """One set of stat totals (base or grand)."""
    life_max: int
    strength: int
    agility: int
    ap_max: int
    gold: int
    attack: int

    model_config = {"from_attributes": True}


class HandModel(BaseModel):
    """A hand classification."""
    name: str
    level: int = Field(ge=0, le=9)
    display_name: str


class DerivedStatsModel(BaseModel):
    """Derived stats for display."""
    base: StatTotalsModel
    total: StatTotalsModel
    aligned_bonus: int
    hand: HandModel
    hand_bonus_text: str
    damage_reduction: int = 0


class FormulaResultModel(BaseModel):
    """Formula text and its outcome."""
    formula: str
    value: Optional[int] = None
    error_kind: Optional[FormulaErrorKind] = None
    error: Optional[str] = None


class SlotModel(BaseModel):
    """One equipment slot."""
    slot_id: str
    item_name: Optional[str] = None
    rank: Optional[int] = Field(None, ge=2, le=14)
    rank_label: Optional[str] = None
    affinity: Optional[str] = None
    primary_effect_text: str = ""
    is_card: bool = Field(False, description="True when rank and affinity are both set")


class ResourcesModel(BaseModel):
    """Resource counters."""
    life_current: int
    life_max: int
    ap_current: int
    ap_max: int
    gold: int
    xp: int
    doubt: int
    corruption: int

    model_config = {"from_attributes": True}


class CatalogRowModel(BaseModel):
    """One equipment catalog row."""
    item_name: str
    rank: Optional[str] = None
    affinity: Optional[str] = None
    primary_effect_text: str = ""

    model_config = {"from_attributes": True}


class CardModel(BaseModel):
    """A card as typed by a client. Incomplete cards are ignored."""
    rank: Optional[Union[int, str]] = None
    affinity: Optional[str] = None


# =============================================================================
# Requests
# =============================================================================

class CreateSheetRequest(BaseModel):
    name: str = "New Recruit"
    race: Optional[str] = None
    class_name: Optional[str] = None
    affinity: Optional[str] = None
    formula: Optional[str] = None


class SelectionRequest(BaseModel):
    race: Optional[str] = None
    class_name: Optional[str] = None
    affinity: Optional[str] = None


class EquipRequest(BaseModel):
    item_name: Optional[str] = Field(None, description="Catalog item; empty clears the slot")


class ResourceRequest(BaseModel):
    value: int


class AdjustResourceRequest(BaseModel):
    amount: int


class FormulaRequest(BaseModel):
    formula: str


class ClassifyRequest(BaseModel):
    cards: list[CardModel] = Field(default_factory=list, max_length=5)


class CatalogRequest(BaseModel):
    """Raw loader rows (ItemName/Rank/Affinity/PrimaryEffect or snake_case)."""
    rows: list[dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# Responses
# =============================================================================

class SheetResponse(BaseModel):
    """Full sheet state."""
    sheet_id: str
    name: str
    race: str
    class_name: str
    affinity: str
    slots: list[SlotModel]
    resources: ResourcesModel
    derived: DerivedStatsModel
    formula: FormulaResultModel


class HandResponse(BaseModel):
    """Result of classifying loose cards."""
    hand: HandModel
    bonus_text: str
    valid_card_count: int


class CatalogResponse(BaseModel):
    items: list[CatalogRowModel] = Field(default_factory=list)
    count: int = 0


class SheetListResponse(BaseModel):
    sheets: list[str] = Field(default_factory=list)
    count: int = 0


class DeleteSheetResponse(BaseModel):
    success: bool
    sheet_id: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    environment: str
    sheets: int = 0
