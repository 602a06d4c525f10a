"""
JSON API routes used by the quoting worksheet.

Handles:
- /api/grid/price - Price from a pricing grid
- /api/markup/resolve - Markup percentage (and selling price) for a category
- /api/heading/price - Curtain manufacturing price per metre
- /api/fabric/orientation - Vertical vs horizontal fabric comparison
- /api/services/quantity - Automatic service quantity
- /api/quote/line - One fully priced worksheet line
- /health - Health check endpoint

Each request carries the configuration it should be priced against; nothing
is cached between requests.

Errors:
    PricingEngineError -> 422 {"error", "type", "details"}
    Malformed request  -> 400 {"error", "type", "details"}
"""

from typing import Any, Dict, Optional

import bleach
from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from core.exceptions import PricingEngineError
from logging_config import get_logger
from models.fabric import CurtainDimensions, FabricSpec, Orientation
from models.heading import HeadingPriceOverride, TierPrices
from models.markup import MarkupRule
from models.quote import PricingSnapshot
from models.service import ProjectContext
from modules.fabric_orientation import compare_orientations
from modules.grid_lookup import lookup_cell, normalize_grid_data
from modules.heading_price import resolve_manufacturing_price
from modules.markup import apply_markup, resolve_markup_detail
from modules.service_quantity import resolve_quantity
from services.quote_service import QuotePricingService


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)

# Input validation constants
MAX_NAME_LENGTH = 100

LINE_TYPES = ("grid", "manufacturing", "fabric", "service")


# =============================================================================
# REQUEST HELPERS
# =============================================================================

def _sanitize_text(text: Any, max_length: int = MAX_NAME_LENGTH) -> str:
    """Sanitize user input text."""
    if text is None:
        return ""
    text = str(text).strip()
    text = bleach.clean(text, tags=[], strip=True)
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def _optional_text(data: Dict[str, Any], key: str) -> Optional[str]:
    return _sanitize_text(data.get(key)) or None


def _orientation(data: Dict[str, Any]) -> Optional[Orientation]:
    value = _optional_text(data, "orientation")
    if value is None:
        return None
    try:
        return Orientation(value.lower())
    except ValueError:
        values = ", ".join(o.value for o in Orientation)
        raise BadRequest(f"Field 'orientation' must be one of: {values}") from None


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def _object(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise BadRequest(f"Field '{key}' must be an object")
    return value


def _number(data: Dict[str, Any], key: str, default: Optional[float] = None) -> float:
    value = data.get(key)
    if value is None:
        if default is None:
            raise BadRequest(f"Missing required field: {key}")
        return default
    if isinstance(value, bool):
        raise BadRequest(f"Field '{key}' must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise BadRequest(f"Field '{key}' must be a number") from None


def _allowance_defaults() -> Dict[str, float]:
    """Workroom allowances from config, used when a request omits them."""
    config = current_app.config
    return {
        "header_hem": config["CURTAIN_HEADER_HEM_CM"],
        "bottom_hem": config["CURTAIN_BOTTOM_HEM_CM"],
        "side_hem": config["CURTAIN_SIDE_HEM_CM"],
        "seam_hem": config["CURTAIN_SEAM_HEM_CM"],
        "waste_percent": config["CURTAIN_WASTE_PERCENT"],
    }


def _tier(data: Dict[str, Any], key: str) -> Optional[TierPrices]:
    record = _object(data, key)
    return TierPrices.from_dict(record) if record else None


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@api_bp.errorhandler(PricingEngineError)
def handle_pricing_error(e: PricingEngineError):
    """Configuration problems are the caller's to fix: 422 with details."""
    logger.warning(f"{request.path} rejected: {e}")
    return jsonify(e.to_dict()), 422


@api_bp.errorhandler(BadRequest)
def handle_bad_request(e: BadRequest):
    logger.info(f"{request.path} bad request: {e.description}")
    return jsonify({"error": e.description, "type": "BadRequest", "details": {}}), 400


# =============================================================================
# ENDPOINTS
# =============================================================================

@api_bp.route("/api/grid/price", methods=["POST"])
def grid_price():
    """
    Price a width x drop from a grid.

    Body: {"grid": {grid record}, "width": cm, "drop": cm}
    """
    data = _json_body()
    grid = normalize_grid_data(_object(data, "grid"))
    cell = lookup_cell(grid, _number(data, "width"), _number(data, "drop"))
    return jsonify({"price": cell.price, "cell": cell.to_dict()})


@api_bp.route("/api/markup/resolve", methods=["POST"])
def markup_resolve():
    """
    Resolve the markup for a category/subcategory.

    Body: {"category", "subcategory"?, "rules": [...], "cost"?, "require_rules"?}
    """
    data = _json_body()
    rules = data.get("rules") or []
    if not isinstance(rules, list) or not all(isinstance(r, dict) for r in rules):
        raise BadRequest("Field 'rules' must be a list of objects")

    resolution = resolve_markup_detail(
        _optional_text(data, "category"),
        _optional_text(data, "subcategory"),
        [MarkupRule.from_dict(rule) for rule in rules],
        require_rules=bool(data.get("require_rules", False)),
    )
    response = resolution.to_dict()
    if data.get("cost") is not None:
        cost = _number(data, "cost")
        response["cost"] = cost
        response["selling_price"] = round(apply_markup(cost, resolution.percentage), 2)
    return jsonify(response)


@api_bp.route("/api/heading/price", methods=["POST"])
def heading_price():
    """
    Resolve the manufacturing price per metre.

    Body: {"is_hand_finished", "heading_id"?, "headings": [heading records],
           "pricing_method": {...}?, "template_defaults": {...}?}
    """
    data = _json_body()
    overrides = [
        HeadingPriceOverride.from_heading_record(record)
        for record in data.get("headings") or []
        if isinstance(record, dict)
    ]
    result = resolve_manufacturing_price(
        bool(data.get("is_hand_finished", False)),
        _optional_text(data, "heading_id"),
        overrides,
        _tier(data, "pricing_method"),
        _tier(data, "template_defaults"),
    )
    return jsonify(result.to_dict())


@api_bp.route("/api/fabric/orientation", methods=["POST"])
def fabric_orientation():
    """
    Compare fabric orientations.

    Body: {"dimensions": {...}, "fabric": {"width", "type", "pattern", ...},
           "price_per_length", "orientation"?}

    "orientation" is the layout chosen on the worksheet (vertical or
    horizontal); warnings then describe that layout.
    """
    data = _json_body()
    dimensions = CurtainDimensions.from_dict(_object(data, "dimensions"), _allowance_defaults())
    fabric = FabricSpec.from_record(_object(data, "fabric"))
    result = compare_orientations(
        dimensions,
        fabric.width,
        _number(data, "price_per_length"),
        fabric.pattern_repeat,
        fabric,
        horizontal_pattern_repeat=fabric.horizontal_pattern_repeat,
        selected=_orientation(data),
    )
    return jsonify(result.to_dict())


@api_bp.route("/api/services/quantity", methods=["POST"])
def services_quantity():
    """
    Resolve a service quantity.

    Body: {"unit", "project": {"rooms": [...], "surfaces": [...]}}
    """
    data = _json_body()
    resolution = resolve_quantity(
        _sanitize_text(data.get("unit")),
        ProjectContext.from_dict(_object(data, "project")),
    )
    return jsonify(resolution.to_dict())


@api_bp.route("/api/quote/line", methods=["POST"])
def quote_line():
    """
    Price one worksheet line against a configuration snapshot.

    Body: {"snapshot": {...}, "quote_id"?, "line": {"type": grid|manufacturing|fabric|service, ...}}
    """
    data = _json_body()
    snapshot = PricingSnapshot.from_dict(_object(data, "snapshot"))
    service = QuotePricingService(snapshot, quote_id=_optional_text(data, "quote_id"))
    line = _object(data, "line")
    line_type = _sanitize_text(line.get("type"))
    category = _optional_text(line, "category")
    subcategory = _optional_text(line, "subcategory")

    if line_type == "grid":
        result = service.price_grid_item(
            _sanitize_text(line.get("grid")),
            _number(line, "width"),
            _number(line, "drop"),
            category,
            subcategory,
        )
    elif line_type == "manufacturing":
        result = service.price_manufacturing(
            bool(line.get("is_hand_finished", False)),
            _optional_text(line, "heading_id"),
            _tier(line, "pricing_method"),
            _tier(line, "template_defaults"),
            _number(line, "length_m"),
            category or "curtains",
            subcategory,
        )
    elif line_type == "fabric":
        result = service.price_fabric(
            CurtainDimensions.from_dict(_object(line, "dimensions"), _allowance_defaults()),
            FabricSpec.from_record(_object(line, "fabric")),
            _number(line, "price_per_length"),
            category or "fabric",
            subcategory,
        )
    elif line_type == "service":
        manual = line.get("quantity")
        result = service.price_service(
            _sanitize_text(line.get("unit")),
            _number(line, "unit_price"),
            ProjectContext.from_dict(_object(data, "project")),
            _number(line, "quantity") if manual is not None else None,
            category or "installation",
        )
    else:
        raise BadRequest(f"Field 'line.type' must be one of: {', '.join(LINE_TYPES)}")

    return jsonify(result.to_dict())


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {
            "logging": current_app.config.get("LOG_LEVEL", "INFO"),
        },
    }
    return health_status, 200
