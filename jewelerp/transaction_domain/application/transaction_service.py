# jewelerp/transaction_domain/application/transaction_service.py
"""Application service for the stock/ledger transactions: sale, manufacturing job, purchase receipt."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar, Union

from jewelerp.common.config.settings import settings
from jewelerp.common.dtos.transaction_dtos import (
    ManufacturingJobRequestDTO,
    PurchaseReceiptRequestDTO,
    ReceiptTarget,
    SaleRequestDTO,
    TransactionResultDTO,
    TransactionType,
)
from jewelerp.common.exceptions.custom_exceptions import (
    ApplicationError,
    InsufficientStockError,
    NotFoundError,
    PurchaseOrderAlreadyReceivedError,
    ValidationError,
)
from jewelerp.common.utils.date_utils import resolve_entry_date
from jewelerp.common.utils.money import to_decimal, to_money
from jewelerp.costing_domain.domain.services.costing_service import (
    cost_of_goods_sold,
    receipt_unit_cost,
    retail_price,
    sale_revenue,
    split_manufacturing_cost,
    weighted_average_unit_cost,
)
from jewelerp.inventory_domain.domain.entities.raw_material_lot import RawMaterialLot
from jewelerp.inventory_domain.domain.entities.stock_item import ItemStatus, StockItem
from jewelerp.inventory_domain.domain.repositories.raw_material_repository import IRawMaterialRepository
from jewelerp.inventory_domain.domain.repositories.stock_item_repository import IStockItemRepository
from jewelerp.inventory_domain.domain.services.stock_status_service import normalize_stock_status
from jewelerp.ledger_domain.domain.entities.ledger_entry import AccountCode, RelatedType
from jewelerp.ledger_domain.domain.repositories.ledger_repository import ILedgerRepository
from jewelerp.ledger_domain.domain.services.journal_builder import JournalEntryBuilder
from jewelerp.purchasing_domain.domain.entities.purchase_order import PurchaseOrder, PurchaseOrderStatus
from jewelerp.purchasing_domain.domain.repositories.purchase_order_repository import IPurchaseOrderRepository
from jewelerp.transaction_domain.domain.transaction_steps import TransactionStep, TransactionStepRunner

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionApplicationService:
    """
    Keeps finished-goods stock, raw-material stock and the general ledger consistent.

    Each workflow validates everything it can before the first write, then issues
    its writes strictly in sequence through a TransactionStepRunner. A failed
    write triggers compensating writes for the steps already done, so the caller
    receives either a committed result or a PersistenceError stating whether
    anything was left applied. The stores remain the only source of truth: the
    result carries records re-read after commit.
    """

    def __init__(
        self,
        stock_item_repo: IStockItemRepository,
        raw_material_repo: IRawMaterialRepository,
        ledger_repo: ILedgerRepository,
        purchase_order_repo: IPurchaseOrderRepository,
        manufacturing_markup_factor: Optional[Decimal] = None,
        receipt_markup_factor: Optional[Decimal] = None,
        default_reorder_threshold: Optional[int] = None,
        allow_negative_raw_material: Optional[bool] = None,
    ) -> None:
        """Initializes the TransactionApplicationService."""
        self.stock_item_repo = stock_item_repo
        self.raw_material_repo = raw_material_repo
        self.ledger_repo = ledger_repo
        self.purchase_order_repo = purchase_order_repo

        self.manufacturing_markup_factor = to_decimal(
            manufacturing_markup_factor
            if manufacturing_markup_factor is not None
            else settings.MANUFACTURING_MARKUP_FACTOR
        )
        self.receipt_markup_factor = to_decimal(
            receipt_markup_factor if receipt_markup_factor is not None else settings.RECEIPT_MARKUP_FACTOR
        )
        self.default_reorder_threshold = (
            default_reorder_threshold if default_reorder_threshold is not None else settings.DEFAULT_REORDER_THRESHOLD
        )
        self.allow_negative_raw_material = (
            allow_negative_raw_material
            if allow_negative_raw_material is not None
            else settings.ALLOW_NEGATIVE_RAW_MATERIAL
        )

    # ------------------------------------------------------------------ sale

    def record_sale(self, request: SaleRequestDTO) -> TransactionResultDTO:
        """
        Sells units of a stock item.

        Decrements stock (Sold once nothing is left) and posts
        Dr Cash / Cr Revenue for the sale value and Dr COGS / Cr Inventory for
        its cost.
        """
        quantity_sold = self._require_positive_whole(request.quantity_sold, "Quantity sold")
        unit_sale_price = self._require_non_negative_money(request.unit_sale_price, "Unit sale price")
        entry_date = self._resolve_entry_date(request.entry_date)
        item_id = request.stock_item_id

        logger.info(f"Recording sale of {quantity_sold} x stock item {item_id} at {unit_sale_price}")
        runner = TransactionStepRunner(
            TransactionType.SALE.value,
            reload=lambda: self._log_current_state("Stock item", item_id, self.stock_item_repo.get_stock_item),
        )

        item = runner.load(lambda: self.stock_item_repo.get_stock_item(item_id))
        if item is None:
            raise NotFoundError("Stock item", item_id)
        if quantity_sold > item.quantity_available:
            raise InsufficientStockError(item.name, quantity_sold, item.quantity_available)

        new_quantity = item.quantity_available - quantity_sold
        new_status = normalize_stock_status(new_quantity, item.status)
        revenue = sale_revenue(quantity_sold, unit_sale_price)
        cogs = cost_of_goods_sold(quantity_sold, item.unit_cost)

        entries = (
            JournalEntryBuilder(entry_date, related_id=item.id, related_type=RelatedType.INVENTORY_ITEM.value)
            .debit(AccountCode.CASH, revenue, f"Sale: {quantity_sold} x {item.name} ({item.sku})")
            .credit(AccountCode.SALES_REVENUE, revenue, f"Sales revenue: {quantity_sold} x {item.name}")
            .debit(AccountCode.COGS, cogs, f"COGS: {quantity_sold} x {item.name}")
            .credit(AccountCode.INVENTORY, cogs, f"Inventory relieved: {quantity_sold} x {item.name}")
            .build()
        )

        runner.run(
            TransactionStep.UPDATE_STOCK_ITEM,
            lambda: self.stock_item_repo.update_stock_item(
                item.id, {"quantity_available": new_quantity, "status": new_status}
            ),
            compensate=lambda _: self.stock_item_repo.update_stock_item(
                item.id, {"quantity_available": item.quantity_available, "status": item.status}
            ),
        )
        posted = runner.run(TransactionStep.APPEND_LEDGER, lambda: self.ledger_repo.append_many(entries))

        logger.info(
            f"Sale recorded: {item.sku} {item.quantity_available} -> {new_quantity} ({new_status.value}), "
            f"revenue {revenue}, COGS {cogs}"
        )
        return TransactionResultDTO(
            transaction_type=TransactionType.SALE,
            entry_date=entry_date,
            ledger_entries=posted,
            stock_item=self._reread(lambda: self.stock_item_repo.get_stock_item(item.id)),
        )

    # ----------------------------------------------------- manufacturing job

    def record_manufacturing_job(self, request: ManufacturingJobRequestDTO) -> TransactionResultDTO:
        """
        Turns raw material into one finished piece.

        Labor is whatever part of the landed cost the materials do not explain.
        Posts Cr Raw Material (materials), Cr Labor (remainder) and
        Dr Finished Goods (landed cost) against the new item.
        """
        quantity_used = self._require_positive_quantity(request.quantity_used, "Quantity used")
        total_output_cost = self._require_non_negative_money(request.total_output_cost, "Total output cost")
        if not request.output_sku:
            raise ValidationError("Output SKU is required")
        entry_date = self._resolve_entry_date(request.entry_date)
        material_id = request.raw_material_id
        created_ids: list[int] = []

        def reload_state() -> None:
            self._log_current_state("Raw material", material_id, self.raw_material_repo.get_raw_material)
            for created_id in created_ids:
                self._log_current_state("Stock item", created_id, self.stock_item_repo.get_stock_item)

        logger.info(f"Recording manufacturing job: {quantity_used} of raw material {material_id} -> {request.output_sku}")
        runner = TransactionStepRunner(TransactionType.MANUFACTURING_JOB.value, reload=reload_state)

        material = runner.load(lambda: self.raw_material_repo.get_raw_material(material_id))
        if material is None:
            raise NotFoundError("Raw material", material_id)
        if quantity_used > material.quantity_on_hand and not self.allow_negative_raw_material:
            raise InsufficientStockError(material.name, quantity_used, material.quantity_on_hand)

        cost = split_manufacturing_cost(quantity_used, material.unit_cost, total_output_cost)
        if cost.labor_cost < 0:
            logger.warning(
                f"Job {request.output_sku}: total cost {cost.total_cost} is below material cost "
                f"{cost.material_cost}; labor remainder {cost.labor_cost} is posted as a debit"
            )

        output_item = StockItem(
            sku=request.output_sku,
            name=request.output_name or "Custom Job",
            item_type=request.output_item_type,
            status=normalize_stock_status(1, ItemStatus.IN_STOCK),
            location=request.output_location,
            quantity_available=1,
            unit_cost=cost.total_cost,
            unit_price=retail_price(cost.total_cost, self.manufacturing_markup_factor),
            reorder_threshold=0,
        )

        runner.run(
            TransactionStep.UPDATE_RAW_MATERIAL,
            lambda: self.raw_material_repo.update_raw_material(
                material.id, {"quantity_on_hand": material.quantity_on_hand - quantity_used}
            ),
            compensate=lambda _: self.raw_material_repo.update_raw_material(
                material.id, {"quantity_on_hand": material.quantity_on_hand}
            ),
        )

        def create_output() -> StockItem:
            created_item = self.stock_item_repo.create_stock_item(output_item)
            created_ids.append(created_item.id)
            return created_item

        created = runner.run(
            TransactionStep.CREATE_STOCK_ITEM,
            create_output,
            compensate=lambda created_item: self.stock_item_repo.delete_stock_item(created_item.id),
        )

        def post_job() -> list:
            entries = (
                JournalEntryBuilder(entry_date, related_id=created.id, related_type=RelatedType.INVENTORY_ITEM.value)
                .credit(
                    AccountCode.RAW_MATERIAL,
                    cost.material_cost,
                    f"Materials used: {quantity_used} {material.unit_of_measure.value} {material.name}",
                    related_id=material.id,
                    related_type=RelatedType.RAW_MATERIAL.value,
                )
                .credit(AccountCode.LABOR_OVERHEAD, cost.labor_cost, f"Labor applied: {created.name} ({created.sku})")
                .debit(AccountCode.INVENTORY, cost.total_cost, f"Finished goods: {created.name} ({created.sku})")
                .build()
            )
            return self.ledger_repo.append_many(entries)

        posted = runner.run(TransactionStep.APPEND_LEDGER, post_job)

        logger.info(
            f"Manufacturing job recorded: {created.sku} (id {created.id}), material {cost.material_cost}, "
            f"labor {cost.labor_cost}, landed {cost.total_cost}"
        )
        return TransactionResultDTO(
            transaction_type=TransactionType.MANUFACTURING_JOB,
            entry_date=entry_date,
            ledger_entries=posted,
            stock_item=self._reread(lambda: self.stock_item_repo.get_stock_item(created.id)),
            raw_material=self._reread(lambda: self.raw_material_repo.get_raw_material(material.id)),
        )

    # ------------------------------------------------------ purchase receipt

    def receive_purchase_order(self, request: PurchaseReceiptRequestDTO) -> TransactionResultDTO:
        """
        Receives a pending purchase order into raw material or finished goods.

        The PO is marked Received, the destination record is created or
        re-costed by weighted average, and Dr Inventory / Cr Accounts Payable is
        posted for the PO total. A PO that is not Pending is rejected, so a
        second receipt never double-posts.
        """
        # Guards the unit-cost division as well
        quantity_received = self._require_positive_quantity(request.quantity_received, "Quantity received")
        try:
            target = ReceiptTarget(request.target)
        except ValueError:
            raise ValidationError(f"Unknown receipt target {request.target!r}")
        if target == ReceiptTarget.FINISHED_GOOD:
            quantity_received = Decimal(self._require_positive_whole(quantity_received, "Quantity received"))
        self._validate_receipt_destination(request, target)
        entry_date = self._resolve_entry_date(request.entry_date)
        po_id = request.purchase_order_id
        touched: dict[str, Any] = {}

        def reload_state() -> None:
            self._log_current_state("Purchase order", po_id, self.purchase_order_repo.get_purchase_order)
            if "stock_item" in touched:
                self._log_current_state("Stock item", touched["stock_item"], self.stock_item_repo.get_stock_item)
            if "raw_material" in touched:
                self._log_current_state("Raw material", touched["raw_material"], self.raw_material_repo.get_raw_material)

        logger.info(f"Receiving purchase order {po_id}: {quantity_received} into {target.value}")
        runner = TransactionStepRunner(TransactionType.PURCHASE_RECEIPT.value, reload=reload_state)

        purchase_order = runner.load(lambda: self.purchase_order_repo.get_purchase_order(po_id))
        if purchase_order is None:
            raise NotFoundError("Purchase order", po_id)
        if purchase_order.status != PurchaseOrderStatus.PENDING:
            raise PurchaseOrderAlreadyReceivedError(po_id, purchase_order.status.value)

        existing: Optional[Union[StockItem, RawMaterialLot]] = None
        if not request.creates_new_record:
            destination_id = request.destination_item_id
            if target == ReceiptTarget.FINISHED_GOOD:
                existing = runner.load(lambda: self.stock_item_repo.get_stock_item(destination_id))
                if existing is None:
                    raise NotFoundError("Stock item", destination_id)
            else:
                existing = runner.load(lambda: self.raw_material_repo.get_raw_material(destination_id))
                if existing is None:
                    raise NotFoundError("Raw material", destination_id)

        this_receipt_unit_cost = receipt_unit_cost(purchase_order.total_amount, quantity_received)

        runner.run(
            TransactionStep.MARK_PO_RECEIVED,
            lambda: self.purchase_order_repo.update_purchase_order_status(po_id, PurchaseOrderStatus.RECEIVED),
            compensate=lambda _: self.purchase_order_repo.update_purchase_order_status(
                po_id, PurchaseOrderStatus.PENDING
            ),
        )

        if target == ReceiptTarget.FINISHED_GOOD:
            destination_name, destination_id = self._receive_into_stock_item(
                runner, request, purchase_order, existing, int(quantity_received), this_receipt_unit_cost
            )
            touched["stock_item"] = destination_id
        else:
            destination_name, destination_id = self._receive_into_raw_material(
                runner, request, purchase_order, existing, quantity_received, this_receipt_unit_cost
            )
            touched["raw_material"] = destination_id

        entries = (
            JournalEntryBuilder(entry_date, related_id=po_id, related_type=RelatedType.PURCHASE_ORDER.value)
            .debit(
                AccountCode.INVENTORY,
                purchase_order.total_amount,
                f"PO #{po_id} received: {quantity_received} x {destination_name}",
            )
            .credit(AccountCode.ACCOUNTS_PAYABLE, purchase_order.total_amount, f"PO #{po_id} payable to vendor {purchase_order.vendor_id}")
            .build()
        )
        posted = runner.run(TransactionStep.APPEND_LEDGER, lambda: self.ledger_repo.append_many(entries))

        logger.info(
            f"Purchase order {po_id} received into {target.value} {destination_id} "
            f"({quantity_received} @ {this_receipt_unit_cost}, total {purchase_order.total_amount})"
        )
        result = TransactionResultDTO(
            transaction_type=TransactionType.PURCHASE_RECEIPT,
            entry_date=entry_date,
            ledger_entries=posted,
            purchase_order=self._reread(lambda: self.purchase_order_repo.get_purchase_order(po_id)),
        )
        if target == ReceiptTarget.FINISHED_GOOD:
            result.stock_item = self._reread(lambda: self.stock_item_repo.get_stock_item(destination_id))
        else:
            result.raw_material = self._reread(lambda: self.raw_material_repo.get_raw_material(destination_id))
        return result

    def _receive_into_stock_item(
        self,
        runner: TransactionStepRunner,
        request: PurchaseReceiptRequestDTO,
        purchase_order: PurchaseOrder,
        existing: Optional[StockItem],
        quantity: int,
        unit_cost: Decimal,
    ) -> tuple[str, int]:
        if existing is None:
            new_item = request.new_item
            threshold = (
                new_item.reorder_threshold if new_item.reorder_threshold is not None else self.default_reorder_threshold
            )
            item = StockItem(
                sku=new_item.sku,
                name=new_item.name,
                item_type=new_item.item_type,
                status=normalize_stock_status(quantity, ItemStatus.IN_STOCK),
                location=new_item.location,
                quantity_available=quantity,
                unit_cost=unit_cost,
                unit_price=retail_price(unit_cost, self.receipt_markup_factor),
                reorder_threshold=threshold,
            )
            created = runner.run(
                TransactionStep.CREATE_STOCK_ITEM,
                lambda: self.stock_item_repo.create_stock_item(item),
                compensate=lambda created_item: self.stock_item_repo.delete_stock_item(created_item.id),
            )
            return created.name, created.id

        new_quantity = existing.quantity_available + quantity
        new_unit_cost = weighted_average_unit_cost(
            existing.quantity_available, existing.unit_cost, purchase_order.total_amount, quantity
        )
        runner.run(
            TransactionStep.UPDATE_STOCK_ITEM,
            lambda: self.stock_item_repo.update_stock_item(
                existing.id,
                {
                    "quantity_available": new_quantity,
                    "unit_cost": new_unit_cost,
                    "status": normalize_stock_status(new_quantity, existing.status),
                },
            ),
            compensate=lambda _: self.stock_item_repo.update_stock_item(
                existing.id,
                {
                    "quantity_available": existing.quantity_available,
                    "unit_cost": existing.unit_cost,
                    "status": existing.status,
                },
            ),
        )
        return existing.name, existing.id

    def _receive_into_raw_material(
        self,
        runner: TransactionStepRunner,
        request: PurchaseReceiptRequestDTO,
        purchase_order: PurchaseOrder,
        existing: Optional[RawMaterialLot],
        quantity: Decimal,
        unit_cost: Decimal,
    ) -> tuple[str, int]:
        if existing is None:
            material = RawMaterialLot(
                name=request.new_item.name,
                unit_of_measure=request.new_item.unit_of_measure,
                quantity_on_hand=quantity,
                unit_cost=unit_cost,
            )
            created = runner.run(
                TransactionStep.CREATE_RAW_MATERIAL,
                lambda: self.raw_material_repo.create_raw_material(material),
                compensate=lambda created_material: self.raw_material_repo.delete_raw_material(created_material.id),
            )
            return created.name, created.id

        new_unit_cost = weighted_average_unit_cost(
            existing.quantity_on_hand, existing.unit_cost, purchase_order.total_amount, quantity
        )
        runner.run(
            TransactionStep.UPDATE_RAW_MATERIAL,
            lambda: self.raw_material_repo.update_raw_material(
                existing.id,
                {"quantity_on_hand": existing.quantity_on_hand + quantity, "unit_cost": new_unit_cost},
            ),
            compensate=lambda _: self.raw_material_repo.update_raw_material(
                existing.id,
                {"quantity_on_hand": existing.quantity_on_hand, "unit_cost": existing.unit_cost},
            ),
        )
        return existing.name, existing.id

    @staticmethod
    def _validate_receipt_destination(request: PurchaseReceiptRequestDTO, target: ReceiptTarget) -> None:
        if request.creates_new_record:
            if request.new_item is None or not request.new_item.name:
                raise ValidationError("A name is required to receive into a new record")
            if target == ReceiptTarget.FINISHED_GOOD and not request.new_item.sku:
                raise ValidationError("A SKU is required to receive into a new stock item")
        elif isinstance(request.destination_item_id, bool) or not isinstance(request.destination_item_id, int):
            raise ValidationError(f"Destination must be an item id or 'new', got {request.destination_item_id!r}")

    # --------------------------------------------------------------- helpers

    @staticmethod
    def _require_positive_quantity(value: Any, label: str) -> Decimal:
        try:
            quantity = to_decimal(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{label} must be a number, got {value!r}")
        if not quantity.is_finite() or quantity <= 0:
            raise ValidationError(f"{label} must be greater than zero")
        return quantity

    @classmethod
    def _require_positive_whole(cls, value: Any, label: str) -> int:
        quantity = cls._require_positive_quantity(value, label)
        if quantity != quantity.to_integral_value():
            raise ValidationError(f"{label} must be a whole number of pieces")
        return int(quantity)

    @staticmethod
    def _require_non_negative_money(value: Any, label: str) -> Decimal:
        try:
            amount = to_decimal(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{label} must be a number, got {value!r}")
        if not amount.is_finite():
            raise ValidationError(f"{label} must be a number, got {value!r}")
        amount = to_money(amount)
        if amount < 0:
            raise ValidationError(f"{label} cannot be negative")
        return amount

    @staticmethod
    def _resolve_entry_date(entry_date: Any) -> date:
        try:
            return resolve_entry_date(entry_date)
        except (TypeError, ValueError):
            raise ValidationError(f"Entry date must be a calendar date, got {entry_date!r}")

    @staticmethod
    def _reread(getter: Callable[[], Optional[T]]) -> Optional[T]:
        """Post-commit read; a failure here does not undo a committed transaction."""
        try:
            return getter()
        except ApplicationError as e:
            logger.warning(f"Transaction committed but re-reading its records failed: {e}")
            return None

    @staticmethod
    def _log_current_state(label: str, record_id: Any, getter: Callable[[Any], Any]) -> None:
        logger.warning(f"{label} {record_id} after failed transaction: {getter(record_id)}")
