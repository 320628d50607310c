"""
Supplier payload normalizers.

Each supplier posts inventory changes in its own JSON shape. The functions
here map one raw body onto the canonical ``WebhookPayload``. They are total:
missing optional fields get defaults, a missing or non-list product array
gives an empty payload, and nothing raises on malformed input.

Raw bodies travel wrapped in a ``TaggedPayload`` so the supplier is always
explicit, and ``NORMALIZERS`` maps each tag to its function. Supporting a new
supplier means registering another function, not editing these ones.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from supplier_webhooks.core.enums import SupplierSource
from supplier_webhooks.core.exceptions import UnknownSupplierError
from supplier_webhooks.schemas.webhook import (
    ProductInventoryUpdate,
    SizeInventoryUpdate,
    WebhookPayload,
    utc_now,
)

logger = logging.getLogger(__name__)

_datetime_adapter = TypeAdapter(datetime)

Normalizer = Callable[[Any], WebhookPayload]


# ----------------------------------------------------------------------
# Coercion helpers
# ----------------------------------------------------------------------
def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _as_optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _as_quantity(value: Any) -> int:
    """Supplier quantity as a non-negative int; anything unusable is 0"""
    if isinstance(value, bool):
        return 0
    try:
        quantity = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(quantity, 0)


def _as_optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def _as_optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _parse_timestamp(value: Any) -> datetime:
    if value in (None, ""):
        return utc_now()
    try:
        return _datetime_adapter.validate_python(value)
    except ValidationError:
        logger.warning(f"Unparseable payload timestamp {value!r}; using now")
        return utc_now()


def _list_field(container: Any, name: str) -> List[Any]:
    if not isinstance(container, dict):
        return []
    value = container.get(name)
    return value if isinstance(value, list) else []


def _build_payload(raw: Any, products: List[ProductInventoryUpdate]) -> WebhookPayload:
    raw = raw if isinstance(raw, dict) else {}
    return WebhookPayload(
        products=products,
        timestamp=_parse_timestamp(raw.get("timestamp")),
        batch_id=_as_optional_str(raw.get("batchId")),
    )


# ----------------------------------------------------------------------
# Supplier formats
# ----------------------------------------------------------------------
def parse_ssactivewear_webhook(raw_payload: Any) -> WebhookPayload:
    """
    Normalize an S&S Activewear body.

    Shape: ``{"products": [{"styleID", "styleName", "brandName", "colorID",
    "colorName", "colorCode", "priceUpdate", "discontinued",
    "sizes": [{"sizeID", "sizeName", "qty", "previousQty", "priceChange"}]}]}``
    """
    products: List[ProductInventoryUpdate] = []

    for item in _list_field(raw_payload, "products"):
        if not isinstance(item, dict):
            logger.warning("Skipping non-object S&S product entry")
            continue

        size_updates = [
            SizeInventoryUpdate(
                size_id=_as_str(size.get("sizeID")),
                size_name=_as_str(size.get("sizeName")),
                previous_quantity=_as_optional_int(size.get("previousQty")),
                current_quantity=_as_quantity(size.get("qty")),
                price_change=_as_optional_float(size.get("priceChange")),
                timestamp=utc_now(),
            )
            for size in _list_field(item, "sizes")
            if isinstance(size, dict)
        ]

        style_id = _as_str(item.get("styleID"))
        products.append(ProductInventoryUpdate(
            sku=style_id or _as_str(item.get("sku")),
            style_id=style_id,
            style_name=_as_str(item.get("styleName")),
            brand_name=_as_str(item.get("brandName")),
            color_id=_as_str(item.get("colorID")),
            color_name=_as_str(item.get("colorName")),
            color_code=_as_optional_str(item.get("colorCode")),
            size_updates=size_updates,
            price_update=_as_optional_float(item.get("priceUpdate")),
            discontinued=bool(item.get("discontinued") or False),
        ))

    return _build_payload(raw_payload, products)


def parse_sanmar_webhook(raw_payload: Any) -> WebhookPayload:
    """
    Normalize a SanMar body.

    Shape: ``{"items": [{"productKey", "productName", "brandName", "colorId",
    "colorName", "colorCode", "price", "status",
    "inventory": [{"sizeCode", "sizeDescription", "quantity",
    "previousQuantity"}]}]}``
    """
    products: List[ProductInventoryUpdate] = []

    for item in _list_field(raw_payload, "items"):
        if not isinstance(item, dict):
            logger.warning("Skipping non-object SanMar item entry")
            continue

        size_updates = [
            SizeInventoryUpdate(
                size_id=_as_str(inv.get("sizeCode")),
                size_name=_as_str(inv.get("sizeDescription")),
                previous_quantity=_as_optional_int(inv.get("previousQuantity")),
                current_quantity=_as_quantity(inv.get("quantity")),
                timestamp=utc_now(),
            )
            for inv in _list_field(item, "inventory")
            if isinstance(inv, dict)
        ]

        product_key = _as_str(item.get("productKey"))
        products.append(ProductInventoryUpdate(
            sku=product_key or _as_str(item.get("sku")),
            style_id=product_key,
            style_name=_as_str(item.get("productName")),
            brand_name=_as_str(item.get("brandName")) or "SanMar",
            color_id=_as_str(item.get("colorId")),
            color_name=_as_str(item.get("colorName")),
            color_code=_as_optional_str(item.get("colorCode")),
            size_updates=size_updates,
            price_update=_as_optional_float(item.get("price")),
            discontinued=item.get("status") == "discontinued",
        ))

    return _build_payload(raw_payload, products)


def parse_manual_webhook(raw_payload: Any) -> WebhookPayload:
    """Manual entries already use the canonical shape; invalid ones are dropped"""
    products: List[ProductInventoryUpdate] = []

    for item in _list_field(raw_payload, "products"):
        try:
            products.append(ProductInventoryUpdate.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping invalid manual product entry: {e.error_count()} error(s)")

    return _build_payload(raw_payload, products)


# ----------------------------------------------------------------------
# Dispatch
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class TaggedPayload:
    """A raw supplier body together with the supplier that sent it"""
    source: SupplierSource
    body: Any


NORMALIZERS: Dict[SupplierSource, Normalizer] = {
    SupplierSource.SSACTIVEWEAR: parse_ssactivewear_webhook,
    SupplierSource.SANMAR: parse_sanmar_webhook,
    SupplierSource.MANUAL: parse_manual_webhook,
}


def register_normalizer(source: SupplierSource, normalizer: Normalizer) -> None:
    NORMALIZERS[source] = normalizer


def normalize_payload(tagged: TaggedPayload) -> WebhookPayload:
    """Run the normalizer registered for ``tagged.source``"""
    try:
        source = SupplierSource(tagged.source)
    except ValueError:
        raise UnknownSupplierError(f"Unknown supplier source: {tagged.source!r}")

    normalizer = NORMALIZERS.get(source)
    if normalizer is None:
        raise UnknownSupplierError(f"No normalizer registered for {source.value}")

    payload = normalizer(tagged.body)
    logger.debug(f"Normalized {source.value} payload with {len(payload.products)} product(s)")
    return payload
