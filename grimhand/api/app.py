"""
FastAPI Application - REST API for character sheets.

Endpoints:
    GET    /api/v1/health                                Health check
    POST   /api/v1/sheets                                Create sheet
    GET    /api/v1/sheets                                List sheets
    GET    /api/v1/sheets/{id}                           Get sheet
    DELETE /api/v1/sheets/{id}                           Delete sheet
    PUT    /api/v1/sheets/{id}/selection                 Change race/class/affinity
    PUT    /api/v1/sheets/{id}/slots/{slot_id}           Equip catalog item
    DELETE /api/v1/sheets/{id}/slots/{slot_id}           Unequip slot
    PUT    /api/v1/sheets/{id}/resources/{name}          Set counter
    POST   /api/v1/sheets/{id}/resources/{name}/adjust   Increment/decrement counter
    PUT    /api/v1/sheets/{id}/formula                   Replace formula
    POST   /api/v1/hands/classify                        Classify loose cards
    PUT    /api/v1/catalog                               Replace equipment catalog
    GET    /api/v1/catalog?term=                         Search equipment catalog

Every sheet response carries the freshly recomputed stats and formula.
Formula errors are part of the sheet response, not HTTP errors.
"""

from typing import Annotated, Optional, Union

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import settings
from ..engine_core.errors import (
    GrimHandError,
    UnknownItemError,
    UnknownResourceError,
    UnknownSelectionError,
    UnknownSlotError,
)
from ..logging import get_logger
from .schemas import (
    # Request models
    CreateSheetRequest,
    SelectionRequest,
    EquipRequest,
    ResourceRequest,
    AdjustResourceRequest,
    FormulaRequest,
    ClassifyRequest,
    CatalogRequest,
    # Response models
    SheetResponse,
    HandResponse,
    CatalogResponse,
    SheetListResponse,
    DeleteSheetResponse,
    ErrorResponse,
    HealthResponse,
    # Enums
    ErrorCode,
)
from ..session import SheetManager
from .service import APIService

logger = get_logger(__name__)

# Engine error -> (error code, HTTP status)
_ERROR_MAP: dict[type, tuple[ErrorCode, int]] = {
    UnknownSelectionError: (ErrorCode.UNKNOWN_SELECTION, 400),
    UnknownSlotError: (ErrorCode.UNKNOWN_SLOT, 404),
    UnknownItemError: (ErrorCode.UNKNOWN_ITEM, 404),
    UnknownResourceError: (ErrorCode.UNKNOWN_RESOURCE, 404),
}


def make_error_response(
    error_code: ErrorCode,
    message: str,
    status_code: int = 400,
    details: Optional[dict] = None,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=message,
            error_code=error_code,
            details=details,
        ).model_dump(mode="json"),
    )


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Grim Hand Engine API",
        description="""
Character stat resolution and equipment hand evaluation.

## Error Codes

| Code | Description |
|------|-------------|
| `SHEET_NOT_FOUND` | Sheet does not exist |
| `UNKNOWN_SELECTION` | Race, class or affinity not in the attribute table |
| `UNKNOWN_SLOT` | Slot id is not slot1..slot5 |
| `UNKNOWN_ITEM` | Item not in the equipment catalog |
| `UNKNOWN_RESOURCE` | Counter name is not editable |
| `INTERNAL_ERROR` | Unexpected server failure (HTTP 500) |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        manager=SheetManager(default_formula=settings.default_formula)
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    @app.exception_handler(GrimHandError)
    async def engine_error_handler(request: Request, exc: GrimHandError) -> JSONResponse:
        error_code, status_code = ErrorCode.VALIDATION_ERROR, 400
        for error_type, mapped in _ERROR_MAP.items():
            if isinstance(exc, error_type):
                error_code, status_code = mapped
                break
        logger.info("%s %s -> %s: %s", request.method, request.url.path, error_code.value, exc)
        return make_error_response(error_code, str(exc), status_code=status_code)

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("%s %s failed", request.method, request.url.path)
        return make_error_response(ErrorCode.INTERNAL_ERROR, "Internal server error", status_code=500)

    def respond(response: Union[SheetResponse, ErrorResponse]) -> Union[SheetResponse, JSONResponse]:
        if isinstance(response, ErrorResponse):
            return make_error_response(
                response.error_code,
                response.error,
                status_code=404,
                details=response.details,
            )
        return response

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Health"])
    async def health() -> HealthResponse:
        return HealthResponse(
            version=__version__,
            environment=settings.env,
            sheets=len(api_service.manager.list_sheets()),
        )

    # =========================================================================
    # Sheet Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sheets",
        response_model=SheetResponse,
        status_code=201,
        responses={400: {"model": ErrorResponse}},
        tags=["Sheets"],
        summary="Create a character sheet",
    )
    async def create_sheet(request: CreateSheetRequest) -> SheetResponse:
        return api_service.create_sheet(request)

    @app.get(
        "/api/v1/sheets",
        response_model=SheetListResponse,
        tags=["Sheets"],
        summary="List sheets",
    )
    async def list_sheets() -> SheetListResponse:
        return api_service.list_sheets()

    @app.get(
        "/api/v1/sheets/{sheet_id}",
        response_model=SheetResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sheets"],
        summary="Get a sheet",
    )
    async def get_sheet(sheet_id: str):
        return respond(api_service.get_sheet(sheet_id))

    @app.delete(
        "/api/v1/sheets/{sheet_id}",
        response_model=DeleteSheetResponse,
        tags=["Sheets"],
        summary="Delete a sheet",
    )
    async def delete_sheet(sheet_id: str) -> DeleteSheetResponse:
        return api_service.delete_sheet(sheet_id)

    @app.put(
        "/api/v1/sheets/{sheet_id}/selection",
        response_model=SheetResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Sheets"],
        summary="Change race, class or affinity",
    )
    async def select(sheet_id: str, request: SelectionRequest):
        return respond(api_service.select(sheet_id, request))

    # =========================================================================
    # Equipment Endpoints
    # =========================================================================

    @app.put(
        "/api/v1/sheets/{sheet_id}/slots/{slot_id}",
        response_model=SheetResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Equipment"],
        summary="Equip a catalog item",
    )
    async def equip(sheet_id: str, slot_id: str, request: EquipRequest):
        return respond(api_service.equip(sheet_id, slot_id, request))

    @app.delete(
        "/api/v1/sheets/{sheet_id}/slots/{slot_id}",
        response_model=SheetResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Equipment"],
        summary="Clear a slot",
    )
    async def unequip(sheet_id: str, slot_id: str):
        return respond(api_service.unequip(sheet_id, slot_id))

    # =========================================================================
    # Resource & Formula Endpoints
    # =========================================================================

    @app.put(
        "/api/v1/sheets/{sheet_id}/resources/{name}",
        response_model=SheetResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Resources"],
        summary="Set a resource counter",
    )
    async def set_resource(sheet_id: str, name: str, request: ResourceRequest):
        return respond(api_service.set_resource(sheet_id, name, request))

    @app.post(
        "/api/v1/sheets/{sheet_id}/resources/{name}/adjust",
        response_model=SheetResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Resources"],
        summary="Increment or decrement a resource counter",
    )
    async def adjust_resource(sheet_id: str, name: str, request: AdjustResourceRequest):
        return respond(api_service.adjust_resource(sheet_id, name, request))

    @app.put(
        "/api/v1/sheets/{sheet_id}/formula",
        response_model=SheetResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Formula"],
        summary="Replace the sheet's formula",
    )
    async def set_formula(sheet_id: str, request: FormulaRequest):
        return respond(api_service.set_formula(sheet_id, request))

    # =========================================================================
    # Hands & Catalog
    # =========================================================================

    @app.post(
        "/api/v1/hands/classify",
        response_model=HandResponse,
        tags=["Hands"],
        summary="Classify up to five cards",
    )
    async def classify(request: ClassifyRequest) -> HandResponse:
        return api_service.classify(request)

    @app.put(
        "/api/v1/catalog",
        response_model=CatalogResponse,
        tags=["Catalog"],
        summary="Replace the equipment catalog",
    )
    async def load_catalog(request: CatalogRequest) -> CatalogResponse:
        return api_service.load_catalog(request)

    @app.get(
        "/api/v1/catalog",
        response_model=CatalogResponse,
        tags=["Catalog"],
        summary="Search the equipment catalog",
    )
    async def get_catalog(
        term: Annotated[str, Query(description="Match on name, affinity or effect")] = "",
    ) -> CatalogResponse:
        return api_service.get_catalog(term)

    return app


# For running directly: uvicorn grimhand.api.app:app
app = create_app()
