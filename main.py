import argparse
import logging
import time
from pathlib import Path

from config import Settings, get_settings
from database.init import create_tables, init_from_env
from services import export_service
from services.import_service import CsvImportError, import_clients_csv
from services.reminders import open_reminder
from services.reporting import expiring_soon, global_summary, seller_summaries
from services.store import load_store
from services.ticker import Ticker, log_expiring
from utils.money import format_eur
from utils.logging_config import setup_logging
from utils.time_utils import format_date, now

__all__ = ["main", "build_parser"]

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crm", description="CRM абонементов")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="создать таблицы")

    p_import = sub.add_parser("import", help="импорт клиентов из CSV")
    p_import.add_argument("file", type=Path)

    p_clients = sub.add_parser("export-clients", help="экспорт клиентов в CSV")
    p_clients.add_argument("file", type=Path)

    p_sales = sub.add_parser("export-sales", help="экспорт отчёта продаж в CSV")
    p_sales.add_argument("file", type=Path)

    p_products = sub.add_parser("export-products", help="экспорт отчёта по продуктам в CSV")
    p_products.add_argument("file", type=Path)

    p_sellers = sub.add_parser("export-sellers", help="экспорт отчёта по продавцам в CSV")
    p_sellers.add_argument("file", type=Path)

    sub.add_parser("report", help="сводка по продажам и комиссиям")

    p_remind = sub.add_parser("remind", help="открыть письмо-напоминание клиенту")
    p_remind.add_argument("client_id", type=int)

    p_watch = sub.add_parser("watch", help="следить за истекающими абонементами")
    p_watch.add_argument("--interval", type=float, default=None)
    return parser


def _cmd_import(args, settings: Settings) -> int:
    text = args.file.read_text(encoding="utf-8-sig")
    try:
        imported, errors = import_clients_csv(text)
    except CsvImportError as e:
        logger.error("❌ %s", e)
        return 1
    print(f"Importati {imported} clienti.")
    for err in errors:
        print(err)
    return 0 if not errors else 2


def _cmd_export(rows, path: Path) -> int:
    try:
        count = export_service.write_csv(path, rows)
    except export_service.ExportError as e:
        logger.error("❌ %s", e)
        return 1
    print(f"Esportate {count} righe in {path}")
    return 0


def _cmd_report(args, settings: Settings) -> int:
    store = load_store()
    moment = now()
    symbol = settings.currency_symbol
    summary = global_summary(store, moment)
    print(f"Fatturato totale: {format_eur(summary.total_revenue, symbol)}")
    print(f"Commissioni totali: {format_eur(summary.total_commission, symbol)}")
    print(f"Vendite: {summary.sales_count}")
    print(f"Vendita media: {format_eur(summary.average_sale, symbol)}")
    for seller in seller_summaries(store, moment):
        print(
            f"- {seller.name}: {seller.sales_count} vendite, "
            f"{format_eur(seller.total_revenue, symbol)}, "
            f"commissione {format_eur(seller.total_commission, symbol)}"
        )
    for client in expiring_soon(store, moment):
        print(f"! {client.full_name} scade il {format_date(client.subscription.end)}")
    return 0


def _cmd_remind(args, settings: Settings) -> int:
    store = load_store()
    client = store.get_client(args.client_id)
    if client is None:
        logger.error("❌ Клиент #%s не найден", args.client_id)
        return 1
    open_reminder(client, store.get_product(client.product_id))
    return 0


def _cmd_watch(args, settings: Settings) -> int:
    interval = args.interval or settings.tick_interval
    ticker = Ticker(interval, log_expiring(load_store))
    logger.info("👀 Наблюдение запущено (период %s с), Ctrl+C для выхода", interval)
    try:
        with ticker:
            while True:
                time.sleep(interval)
    except KeyboardInterrupt:
        logger.info("⏹ Наблюдение остановлено")
    return 0


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """Точка входа командной строки."""
    args = build_parser().parse_args(argv)

    settings = settings or get_settings()
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL не задан в .env")

    init_from_env(settings.database_url)
    setup_logging(settings)
    create_tables()

    if args.command == "init-db":
        return 0
    if args.command == "import":
        return _cmd_import(args, settings)
    if args.command == "export-clients":
        return _cmd_export(export_service.client_export_rows(load_store()), args.file)
    if args.command == "export-sales":
        return _cmd_export(export_service.sales_report_rows(load_store(), now()), args.file)
    if args.command == "export-products":
        return _cmd_export(export_service.product_report_rows(load_store(), now()), args.file)
    if args.command == "export-sellers":
        return _cmd_export(export_service.seller_report_rows(load_store(), now()), args.file)
    if args.command == "report":
        return _cmd_report(args, settings)
    if args.command == "remind":
        return _cmd_remind(args, settings)
    return _cmd_watch(args, settings)


if __name__ == "__main__":
    raise SystemExit(main())
