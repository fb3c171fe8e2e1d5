"""CLI entrypoint for salesdesk."""

import argparse
import json
import shutil
import sys
from pathlib import Path
from typing import Any, Dict

from salesdesk.api.export import export_page_csv
from salesdesk.api.sales_api import get_sale, list_sales
from salesdesk.api.stats_api import summarize_page
from salesdesk.config.loader import (
    DEFAULT_CONFIG_PATH,
    EXAMPLE_CONFIG_PATH,
    get_listing_settings,
    get_log_level,
    get_server_settings,
    get_sqlite_path,
    load_config,
)
from salesdesk.database.sqlite_client import get_session_factory, session_context
from salesdesk.errors import ParameterValidationError, RecordNotFoundError
from salesdesk.ingestion.csv_importer import DEFAULT_BATCH_SIZE, load_sales_from_csv
from salesdesk.query.builder import FilterSpec, build_filter_spec
from salesdesk.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

# argparse dest -> request parameter name
FILTER_ARGS = {
    "search": "search",
    "regions": "regions",
    "genders": "genders",
    "categories": "categories",
    "payment_methods": "paymentMethods",
    "tags": "tags",
    "min_age": "minAge",
    "max_age": "maxAge",
    "start_date": "startDate",
    "end_date": "endDate",
    "sort_by": "sortBy",
    "sort_order": "sortOrder",
    "page": "page",
    "limit": "limit",
}


def _load(args: argparse.Namespace) -> Dict[str, Any]:
    config = load_config(args.config)
    configure_logging(get_log_level(config))
    return config


def _filter_params(args: argparse.Namespace) -> Dict[str, str]:
    """Collect filter flags into the same parameter mapping the HTTP API receives."""
    params = {}
    for dest, name in FILTER_ARGS.items():
        value = getattr(args, dest, None)
        if value is not None:
            params[name] = value
    return params


def _build_spec(args: argparse.Namespace, config: Dict[str, Any]) -> FilterSpec:
    listing = get_listing_settings(config)
    return build_filter_spec(
        _filter_params(args),
        default_limit=listing["default_limit"],
        max_limit=listing["max_limit"],
    )


def _fetch_page(args: argparse.Namespace, config: Dict[str, Any]):
    spec = _build_spec(args, config)
    session_factory = get_session_factory(get_sqlite_path(config))
    timeout = get_listing_settings(config)["read_timeout_seconds"]
    return list_sales(session_factory, spec, timeout_seconds=timeout)


def cmd_init(args: argparse.Namespace) -> None:
    """Create the config file from the bundled example."""
    target = args.config or DEFAULT_CONFIG_PATH
    if not EXAMPLE_CONFIG_PATH.exists():
        logger.error(f"Example file not found: {EXAMPLE_CONFIG_PATH}")
        sys.exit(1)
    if target.exists() and not args.force:
        print(f"Config already exists: {target} (use --force to overwrite)")
        return
    shutil.copy(EXAMPLE_CONFIG_PATH, target)
    print(f"Created {target}")


def cmd_import(args: argparse.Namespace) -> None:
    config = _load(args)
    sqlite_path = get_sqlite_path(config)
    with session_context(sqlite_path) as session:
        counts = load_sales_from_csv(args.csv_path, session, batch_size=args.batch_size)
    print(f"Imported {counts['loaded']} sales ({counts['skipped']} skipped) into {sqlite_path}")


def cmd_list(args: argparse.Namespace) -> None:
    config = _load(args)
    envelope = _fetch_page(args, config)
    print(json.dumps(envelope.to_json_dict(), indent=2))


def cmd_stats(args: argparse.Namespace) -> None:
    config = _load(args)
    envelope = _fetch_page(args, config)
    print(json.dumps(summarize_page(envelope.data).to_json_dict(), indent=2))


def cmd_export(args: argparse.Namespace) -> None:
    config = _load(args)
    envelope = _fetch_page(args, config)
    print(export_page_csv(envelope.data, out=args.out))


def cmd_show(args: argparse.Namespace) -> None:
    config = _load(args)
    with session_context(get_sqlite_path(config)) as session:
        try:
            record = get_sale(session, args.sale_id)
        except RecordNotFoundError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)
    print(json.dumps(record.to_json_dict(), indent=2))


def cmd_serve(args: argparse.Namespace) -> None:
    from salesdesk.web.app import create_app

    config = _load(args)
    server = get_server_settings(config)
    app = create_app(config)
    app.run(host=args.host or server["host"], port=args.port or server["port"])


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", help="Case-insensitive match on customer name or phone number")
    parser.add_argument("--regions", help="Comma-separated customer regions")
    parser.add_argument("--genders", help="Comma-separated genders")
    parser.add_argument("--categories", help="Comma-separated product categories")
    parser.add_argument("--payment-methods", dest="payment_methods", help="Comma-separated payment methods")
    parser.add_argument("--tags", help="Comma-separated tags (matches any)")
    parser.add_argument("--min-age", dest="min_age", help="Minimum customer age (inclusive)")
    parser.add_argument("--max-age", dest="max_age", help="Maximum customer age (inclusive)")
    parser.add_argument("--start-date", dest="start_date", help="Earliest sale date, YYYY-MM-DD (inclusive)")
    parser.add_argument("--end-date", dest="end_date", help="Latest sale date, YYYY-MM-DD (inclusive)")
    parser.add_argument("--sort-by", dest="sort_by", help="Sort field (default: date)")
    parser.add_argument("--sort-order", dest="sort_order", help="asc or desc (default: desc)")
    parser.add_argument("--page", help="Page number (default: 1)")
    parser.add_argument("--limit", help="Page size (default: listing.default_limit)")


def main() -> None:
    parser = argparse.ArgumentParser(description="salesdesk sales records browser")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Config file path (default: {DEFAULT_CONFIG_PATH})",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    init_parser = subparsers.add_parser("init", help="Create the config file from the example")
    init_parser.add_argument("--force", action="store_true", help="Overwrite an existing config file")
    init_parser.set_defaults(func=cmd_init)

    import_parser = subparsers.add_parser("import", help="Load sales from a CSV file")
    import_parser.add_argument("csv_path", type=Path, help="Path to the sales CSV")
    import_parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help=f"Rows per commit (default: {DEFAULT_BATCH_SIZE})",
    )
    import_parser.set_defaults(func=cmd_import)

    list_parser = subparsers.add_parser("list", help="Print one page of matching sales as JSON")
    _add_filter_arguments(list_parser)
    list_parser.set_defaults(func=cmd_list)

    stats_parser = subparsers.add_parser("stats", help="Print stats for one page of matching sales")
    _add_filter_arguments(stats_parser)
    stats_parser.set_defaults(func=cmd_stats)

    export_parser = subparsers.add_parser("export", help="Export one page of matching sales as CSV")
    _add_filter_arguments(export_parser)
    export_parser.add_argument(
        "--out",
        type=Path,
        help="Output file path (if not provided, prints to stdout)",
    )
    export_parser.set_defaults(func=cmd_export)

    show_parser = subparsers.add_parser("show", help="Print a single sale by id")
    show_parser.add_argument("sale_id", type=int, help="Sale id")
    show_parser.set_defaults(func=cmd_show)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", type=str, help="Bind address (default: server.host)")
    serve_parser.add_argument("--port", type=int, help="Port (default: server.port)")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except ParameterValidationError as e:
        print(f"Invalid parameter {e.field}: {e.message}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:
        logger.error(f"Error running command '{args.command}': {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
