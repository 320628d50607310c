# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from supplier_webhooks.core.config import Settings
from supplier_webhooks.core.enums import SupplierSource, WebhookEventType
from supplier_webhooks.main import create_app
from supplier_webhooks.routes.dependencies import get_ingestion_service
from supplier_webhooks.schemas.webhook import (
    ProductInventoryUpdate,
    SizeInventoryUpdate,
    WebhookEvent,
    WebhookPayload,
)
from supplier_webhooks.services.ingestion import WebhookIngestionService
from supplier_webhooks.services.snapshot_store import InMemorySnapshotStore
from supplier_webhooks.services.webhook_processor import WebhookProcessor


@pytest.fixture(scope="session")
def settings():
    """Provide test settings"""
    return Settings(ENVIRONMENT="test", LOG_LEVEL="DEBUG")

@pytest.fixture
def store():
    """A fresh, empty snapshot store per test"""
    return InMemorySnapshotStore()

@pytest.fixture
def processor(store):
    return WebhookProcessor(store)

@pytest.fixture
def ingestion_service(processor):
    return WebhookIngestionService(processor)

@pytest.fixture
def test_client(ingestion_service):
    """Provide a test client wired to the per-test ingestion service"""
    app = create_app()
    app.state.ingestion_service = ingestion_service
    app.dependency_overrides[get_ingestion_service] = lambda: ingestion_service
    with TestClient(app) as client:
        yield client


def make_product(
    quantities,
    sku="G500-NAVY",
    style_id="G500",
    color_id="12",
    price_update=None,
    discontinued=False,
):
    """Product update with one size per (size_id, quantity) pair"""
    return ProductInventoryUpdate(
        sku=sku,
        style_id=style_id,
        style_name="Gildan 5000 Heavy Cotton T-Shirt",
        brand_name="Gildan",
        color_id=color_id,
        color_name="Navy",
        size_updates=[
            SizeInventoryUpdate(size_id=size_id, size_name=size_id, current_quantity=qty)
            for size_id, qty in quantities
        ],
        price_update=price_update,
        discontinued=discontinued,
    )

def make_event(*products, source=SupplierSource.SSACTIVEWEAR):
    return WebhookEvent(
        source=source,
        event_type=WebhookEventType.INVENTORY_UPDATED,
        payload=WebhookPayload(products=list(products)),
    )


@pytest.fixture
def product_factory():
    return make_product

@pytest.fixture
def event_factory():
    return make_event

@pytest.fixture
def ssactivewear_payload():
    """Raw body in the S&S Activewear shape"""
    return {
        "timestamp": "2024-03-01T12:00:00Z",
        "batchId": "batch_ss_1",
        "products": [
            {
                "styleID": "G500",
                "styleName": "Gildan 5000 Heavy Cotton T-Shirt",
                "brandName": "Gildan",
                "colorID": 12,
                "colorName": "Navy",
                "colorCode": "#000080",
                "sizes": [
                    {"sizeID": "L", "sizeName": "Large", "qty": 45, "previousQty": 150},
                    {"sizeID": "XL", "sizeName": "X-Large", "qty": 8, "previousQty": 200},
                ],
            }
        ],
    }

@pytest.fixture
def sanmar_payload():
    """Raw body in the SanMar shape"""
    return {
        "items": [
            {
                "productKey": "PC61",
                "productName": "Port & Company Essential T-Shirt",
                "colorId": 1,
                "colorName": "Black",
                "price": 4.5,
                "status": "active",
                "inventory": [
                    {"sizeCode": "M", "sizeDescription": "Medium", "quantity": 0, "previousQuantity": 100},
                ],
            }
        ],
    }
