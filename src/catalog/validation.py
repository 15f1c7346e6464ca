"""Shared validation for admin catalog submissions.

The admin API submits products and kits as dictionaries. These validators
ensure required fields are present and links are well-formed.

On validation failure, raise `CatalogValidationError`; the error handler turns
it into a `validation` OperationResult with structured `field_errors`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse


@dataclass
class CatalogValidationError(Exception):
    """Exception raised for catalog validation failures.

    Attributes:
        field_errors: mapping of field name -> human-readable error message.
        message: optional top-level message.
    """

    field_errors: Dict[str, str]
    message: str = "Validation failed"

    def __str__(self) -> str:  # pragma: no cover
        return self.message


def _strip(v: Any) -> str:
    return "" if v is None else str(v).strip()


def add_error(errors: Dict[str, str], field: str, message: str) -> None:
    if field not in errors:
        errors[field] = message


def is_valid_url(value: str) -> bool:
    """True for absolute http(s) URLs."""
    try:
        parsed = urlparse(_strip(value))
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_data_uri(value: str) -> bool:
    return _strip(value).startswith("data:image/")


def normalize_link(data: Dict[str, Any]) -> Dict[str, Any]:
    """Accept the attribute name `link` as an alias of the stored `shopeeLink` key."""
    if "link" not in data:
        return data
    normalized = dict(data)
    link = normalized.pop("link")
    if not _strip(normalized.get("shopeeLink")):
        normalized["shopeeLink"] = link
    return normalized


def require_str(payload: Dict[str, Any], field: str, errors: Dict[str, str], *, label: Optional[str] = None) -> str:
    value = _strip(payload.get(field))
    if not value:
        add_error(errors, field, f"{label or field} is required")
    return value


def optional_price(payload: Dict[str, Any], errors: Dict[str, str], field: str = "price") -> Optional[float]:
    raw = payload.get(field)
    if raw is None or _strip(raw) == "":
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        add_error(errors, field, f"{field} must be a number")
        return None
    if value < 0:
        add_error(errors, field, f"{field} cannot be negative")
    return value


def parse_product_ids(value: Any, errors: Dict[str, str], field: str = "productIds") -> List[int]:
    """Accept a list or a comma separated string; non-numeric entries are dropped."""
    if value is None:
        items: List[Any] = []
    elif isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        add_error(errors, field, f"{field} must be a list of product ids")
        return []

    ids: List[int] = []
    for item in items:
        try:
            ids.append(int(_strip(item)))
        except ValueError:
            continue
    if not ids:
        add_error(errors, field, "At least one valid product id is required")
    return ids


def raise_if_errors(errors: Dict[str, str], message: str = "Please correct the highlighted fields") -> None:
    if errors:
        raise CatalogValidationError(field_errors=errors, message=message)


# ---------------------------------------------------------------------------
# Entry validators
# ---------------------------------------------------------------------------

def validate_admin_product(data: Dict[str, Any]) -> Dict[str, Any]:
    """Remote admin form: only the affiliate link is mandatory, the rest get defaults."""
    data = normalize_link(data)
    errors: Dict[str, str] = {}
    link = require_str(data, "shopeeLink", errors, label="Affiliate link")
    if link and not is_valid_url(link):
        add_error(errors, "shopeeLink", "Affiliate link must be a valid http(s) URL")
    image = _strip(data.get("image"))
    if image and not (is_valid_url(image) or is_data_uri(image)):
        add_error(errors, "image", "Image must be an http(s) URL or an image data URI")
    price = optional_price(data, errors)
    raise_if_errors(errors)

    cleaned = {
        "name": _strip(data.get("name")) or "Produto sem nome",
        "description": _strip(data.get("description")) or "Sem descrição disponível",
        "image": image,
        "shopeeLink": link,
        "category": _strip(data.get("category")) or "geral",
        "price": price if price is not None else 0,
    }
    return cleaned


def validate_local_product(data: Dict[str, Any]) -> Dict[str, Any]:
    """Local cache form: every field is required and both URLs must be http(s)."""
    data = normalize_link(data)
    errors: Dict[str, str] = {}
    name = require_str(data, "name", errors, label="Name")
    description = require_str(data, "description", errors, label="Description")
    image = require_str(data, "image", errors, label="Image URL")
    link = require_str(data, "shopeeLink", errors, label="Affiliate link")
    if image and not (is_valid_url(image) or is_data_uri(image)):
        add_error(errors, "image", "Please enter a valid image URL")
    if link and not is_valid_url(link):
        add_error(errors, "shopeeLink", "Please enter a valid affiliate link URL")
    price = optional_price(data, errors)
    raise_if_errors(errors)

    cleaned: Dict[str, Any] = {"name": name, "description": description, "image": image, "shopeeLink": link}
    if _strip(data.get("category")):
        cleaned["category"] = _strip(data.get("category"))
    if price is not None:
        cleaned["price"] = price
    return cleaned


def validate_kit(data: Dict[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    name = require_str(data, "name", errors, label="Name")
    description = require_str(data, "description", errors, label="Description")
    image = require_str(data, "image", errors, label="Image URL")
    if image and not (is_valid_url(image) or is_data_uri(image)):
        add_error(errors, "image", "Please enter a valid image URL")
    product_ids = parse_product_ids(data.get("productIds"), errors)
    raise_if_errors(errors)
    return {"name": name, "description": description, "image": image, "productIds": product_ids}
