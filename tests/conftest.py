# tests/conftest.py
from datetime import date
from decimal import Decimal
from unittest.mock import Mock

import pytest

from jewelerp.common.config.settings import settings
from jewelerp.inventory_domain.application.inventory_service import InventoryApplicationService
from jewelerp.inventory_domain.domain.entities.raw_material_lot import RawMaterialLot, UnitOfMeasure
from jewelerp.inventory_domain.domain.entities.stock_item import ItemStatus, ItemType, StockItem
from jewelerp.inventory_domain.infrastructure.persistence.in_memory_stock_repositories import (
    InMemoryRawMaterialRepository,
    InMemoryStockItemRepository,
)
from jewelerp.inventory_domain.infrastructure.persistence.mysql_stock_item_repository import (
    MySQLStockItemRepository,
)
from jewelerp.ledger_domain.infrastructure.persistence.in_memory_ledger_repository import InMemoryLedgerRepository
from jewelerp.ledger_domain.infrastructure.persistence.mysql_ledger_repository import MySQLLedgerRepository
from jewelerp.purchasing_domain.domain.entities.purchase_order import PurchaseOrder, PurchaseOrderStatus
from jewelerp.purchasing_domain.infrastructure.persistence.in_memory_purchase_order_repository import (
    InMemoryPurchaseOrderRepository,
)
from jewelerp.reporting_domain.application.reporting_service import ReportingApplicationService
from jewelerp.transaction_domain.application.transaction_service import TransactionApplicationService

ENTRY_DATE = date(2024, 5, 17)


@pytest.fixture(autouse=True)
def mock_settings_costing(mocker) -> None:
    """Pins the costing and calendar settings so a local .env cannot change results."""
    mocker.patch.object(settings, "MONEY_DECIMAL_PLACES", 2)
    mocker.patch.object(settings, "BUSINESS_TIMEZONE", "Asia/Yangon")
    mocker.patch.object(settings, "MANUFACTURING_MARKUP_FACTOR", Decimal("2.5"))
    mocker.patch.object(settings, "RECEIPT_MARKUP_FACTOR", Decimal("1.5"))
    mocker.patch.object(settings, "DEFAULT_REORDER_THRESHOLD", 0)
    mocker.patch.object(settings, "ALLOW_NEGATIVE_RAW_MATERIAL", False)


@pytest.fixture
def entry_date() -> date:
    return ENTRY_DATE


@pytest.fixture
def sample_stock_item() -> StockItem:
    """A gold ring with 5 pieces on hand."""
    return StockItem(
        id=1,
        sku="RING-001",
        name="Gold Ring",
        item_type=ItemType.FINISHED_GOOD,
        status=ItemStatus.IN_STOCK,
        location="Showcase A",
        quantity_available=5,
        unit_cost=Decimal("100.00"),
        unit_price=Decimal("250.00"),
        reorder_threshold=2,
    )


@pytest.fixture
def sample_raw_material() -> RawMaterialLot:
    return RawMaterialLot(
        id=1,
        name="24K Gold",
        unit_of_measure=UnitOfMeasure.GRAM,
        quantity_on_hand=Decimal("50"),
        unit_cost=Decimal("80.00"),
    )


@pytest.fixture
def sample_purchase_orders() -> list[PurchaseOrder]:
    return [
        PurchaseOrder(id=1, vendor_id=7, order_date=date(2024, 5, 1), total_amount=Decimal("1000.00")),
        PurchaseOrder(
            id=2,
            vendor_id=7,
            order_date=date(2024, 4, 1),
            total_amount=Decimal("300.00"),
            status=PurchaseOrderStatus.RECEIVED,
        ),
    ]


@pytest.fixture
def stock_item_repo(sample_stock_item) -> InMemoryStockItemRepository:
    return InMemoryStockItemRepository([sample_stock_item])


@pytest.fixture
def raw_material_repo(sample_raw_material) -> InMemoryRawMaterialRepository:
    return InMemoryRawMaterialRepository([sample_raw_material])


@pytest.fixture
def ledger_repo() -> InMemoryLedgerRepository:
    return InMemoryLedgerRepository()


@pytest.fixture
def purchase_order_repo(sample_purchase_orders) -> InMemoryPurchaseOrderRepository:
    return InMemoryPurchaseOrderRepository(sample_purchase_orders)


@pytest.fixture
def transaction_service(
    stock_item_repo, raw_material_repo, ledger_repo, purchase_order_repo
) -> TransactionApplicationService:
    """TransactionApplicationService over in-memory stores seeded with the sample records."""
    return TransactionApplicationService(
        stock_item_repo=stock_item_repo,
        raw_material_repo=raw_material_repo,
        ledger_repo=ledger_repo,
        purchase_order_repo=purchase_order_repo,
    )


@pytest.fixture
def inventory_service(stock_item_repo, raw_material_repo) -> InventoryApplicationService:
    return InventoryApplicationService(stock_item_repo=stock_item_repo, raw_material_repo=raw_material_repo)


@pytest.fixture
def reporting_service(
    stock_item_repo, raw_material_repo, ledger_repo, purchase_order_repo
) -> ReportingApplicationService:
    return ReportingApplicationService(
        stock_item_repo=stock_item_repo,
        raw_material_repo=raw_material_repo,
        ledger_repo=ledger_repo,
        purchase_order_repo=purchase_order_repo,
    )


@pytest.fixture
def mock_stock_item_repository() -> Mock:
    """Mock for MySQLStockItemRepository."""
    return Mock(spec=MySQLStockItemRepository)


@pytest.fixture
def mock_ledger_repository() -> Mock:
    """Mock for MySQLLedgerRepository."""
    return Mock(spec=MySQLLedgerRepository)
