# main.py
"""Main application entry point for the JewelERP inventory/ledger engine."""

import logging
import time

import pytz
import schedule
from rich.console import Console
from rich.table import Table

from jewelerp.common.config.settings import settings
from jewelerp.common.dtos.report_dtos import TrialBalanceDTO
from jewelerp.common.exceptions.custom_exceptions import (
    APIError,
    ApplicationError,
    DatabaseError,
)
from jewelerp.common.infrastructure.supabase_rest_client import SupabaseRestClient
from jewelerp.common.logger_config import setup_logging
from jewelerp.inventory_domain.infrastructure.persistence.in_memory_stock_repositories import (
    InMemoryRawMaterialRepository,
    InMemoryStockItemRepository,
)
from jewelerp.inventory_domain.infrastructure.persistence.mysql_raw_material_repository import (
    MySQLRawMaterialRepository,
)
from jewelerp.inventory_domain.infrastructure.persistence.mysql_stock_item_repository import (
    MySQLStockItemRepository,
)
from jewelerp.inventory_domain.infrastructure.persistence.supabase_stock_repositories import (
    SupabaseRawMaterialRepository,
    SupabaseStockItemRepository,
)
from jewelerp.ledger_domain.infrastructure.persistence.in_memory_ledger_repository import InMemoryLedgerRepository
from jewelerp.ledger_domain.infrastructure.persistence.mysql_ledger_repository import MySQLLedgerRepository
from jewelerp.ledger_domain.infrastructure.persistence.supabase_ledger_repository import SupabaseLedgerRepository
from jewelerp.purchasing_domain.infrastructure.persistence.in_memory_purchase_order_repository import (
    InMemoryPurchaseOrderRepository,
)
from jewelerp.purchasing_domain.infrastructure.persistence.mysql_purchase_order_repository import (
    MySQLPurchaseOrderRepository,
)
from jewelerp.purchasing_domain.infrastructure.persistence.supabase_purchase_order_repository import (
    SupabasePurchaseOrderRepository,
)
from jewelerp.reporting_domain.application.reporting_service import ReportingApplicationService

logger = logging.getLogger(__name__)
console = Console()


def build_repositories(backend: str) -> tuple:
    """Returns (stock items, raw materials, ledger, purchase orders) for the storage backend."""
    if backend == "mysql":
        return (
            MySQLStockItemRepository(),
            MySQLRawMaterialRepository(),
            MySQLLedgerRepository(),
            MySQLPurchaseOrderRepository(),
        )
    if backend == "supabase":
        client = SupabaseRestClient()
        return (
            SupabaseStockItemRepository(client),
            SupabaseRawMaterialRepository(client),
            SupabaseLedgerRepository(client),
            SupabasePurchaseOrderRepository(client),
        )
    if backend == "memory":
        return (
            InMemoryStockItemRepository(),
            InMemoryRawMaterialRepository(),
            InMemoryLedgerRepository(),
            InMemoryPurchaseOrderRepository(),
        )
    raise ApplicationError(f"Unknown STORAGE_BACKEND '{backend}' (expected mysql, supabase or memory)")


def create_db_tables(repositories: tuple) -> None:
    """Creates the MySQL tables for every store (idempotent)."""
    for repository in repositories:
        try:
            repository.create_tables()
        except DatabaseError as e:
            logger.error(f"Error creating table {repository.table_name}: {e}")
            raise
    logger.info("Database tables created/verified successfully")


def setup_reporting_dependencies() -> ReportingApplicationService:
    """Initializes and wires up the reporting service for the configured backend."""
    repositories = build_repositories(settings.STORAGE_BACKEND)
    if settings.STORAGE_BACKEND == "mysql":
        create_db_tables(repositories)
    stock_item_repo, raw_material_repo, ledger_repo, purchase_order_repo = repositories
    return ReportingApplicationService(
        stock_item_repo=stock_item_repo,
        raw_material_repo=raw_material_repo,
        ledger_repo=ledger_repo,
        purchase_order_repo=purchase_order_repo,
    )


def print_trial_balance(trial_balance: TrialBalanceDTO) -> None:
    table = Table(title=f"Trial Balance{f' as of {trial_balance.as_of}' if trial_balance.as_of else ''}")
    table.add_column("Code")
    table.add_column("Account")
    table.add_column("Type")
    table.add_column("Debit", justify="right")
    table.add_column("Credit", justify="right")
    table.add_column("Balance", justify="right")

    for line in trial_balance.lines:
        table.add_row(
            line.account_code,
            line.account_name,
            line.account_type.value,
            f"{line.total_debit:,}",
            f"{line.total_credit:,}",
            f"{line.balance:,}",
        )
    table.add_section()
    table.add_row(
        "",
        "Total",
        "",
        f"{trial_balance.total_debit:,}",
        f"{trial_balance.total_credit:,}",
        "balanced" if trial_balance.is_balanced else "OUT OF BALANCE",
    )
    console.print(table)


def run_integrity_audit_process() -> None:
    """Runs the integrity audit and prints the trial balance. Scheduled daily."""
    logger.info("--- Starting inventory/ledger integrity audit ---")
    try:
        reporting_service = setup_reporting_dependencies()
        audit = reporting_service.run_integrity_audit()
        print_trial_balance(reporting_service.get_trial_balance())

        metrics = reporting_service.get_dashboard_metrics()
        logger.info(
            f"Finished goods {metrics.finished_goods_value:,}, raw material {metrics.raw_material_value:,}, "
            f"open POs {metrics.open_purchase_order_value:,}, low stock items {metrics.low_stock_count}, "
            f"gross profit {metrics.gross_profit:,}"
        )
        if not audit.is_clean:
            logger.warning(f"Integrity audit found {len(audit.issues)} issue(s); see warnings above.")
    except (APIError, DatabaseError, ApplicationError) as e:
        logger.error(f"An error occurred during the integrity audit: {e}")

    logger.info("--- Integrity audit finished ---")


if __name__ == "__main__":
    setup_logging()
    logger.info(f"JewelERP inventory/ledger engine ({settings.STORAGE_BACKEND} backend)")

    run_integrity_audit_process()

    if settings.AUDIT_SCHEDULE_ENABLED:
        business_tz = pytz.timezone(settings.BUSINESS_TIMEZONE)
        schedule.every().day.at(settings.AUDIT_TIME, business_tz).do(run_integrity_audit_process)
        logger.info(f"Scheduler started. Audit runs daily at {settings.AUDIT_TIME} ({settings.BUSINESS_TIMEZONE}).")
        while True:
            schedule.run_pending()
            time.sleep(30)
