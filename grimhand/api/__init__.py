"""
API Module - HTTP interface to character sheets.

A display client:
1. Loads the equipment catalog
2. Creates a sheet
3. Sends edits (selections, equipment, counters, formula)
4. Renders the recomputed stats returned with each edit
"""

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
    ErrorResponse,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSheetRequest",
    "SelectionRequest",
    "EquipRequest",
    "ResourceRequest",
    "AdjustResourceRequest",
    "FormulaRequest",
    "ClassifyRequest",
    "CatalogRequest",
    # Responses
    "SheetResponse",
    "HandResponse",
    "CatalogResponse",
    "ErrorResponse",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
