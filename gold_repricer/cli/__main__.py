from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from gold_repricer.config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    load_config,
    load_credentials,
    load_env_file,
)
from gold_repricer.excel.reader import (
    MissingColumnsError,
    SheetHeaderError,
    SheetReadError,
    read_product_records,
)
from gold_repricer.excel.writer import resolve_output_path, write_prices
from gold_repricer.logging.error_log import ErrorLogBuffer
from gold_repricer.logging.init import log_summary, set_debug, setup_logging
from gold_repricer.models.error_record import ErrorRecord
from gold_repricer.services.export_poller import ExportStateError, ExportTimeoutError, fetch_export
from gold_repricer.services.marketplace import MarketplaceClient, MarketplaceError
from gold_repricer.services.repricer import render_changes, reprice_records
from gold_repricer.services.spot_price import SpotPriceError, build_price_provider
from gold_repricer.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, config/repricer.yml and credentials
- Obtain the inventory export (--input, or request -> poll -> download)
- Resolve the spot price (override -> quote API -> stored default)
- Reprice every row, print the diff report
- Write the updated workbook and upload it (unless --dry-run / --no-upload)
- Print the SUMMARY line
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

FILE_ERROR_TYPES = {
    SheetReadError: "SHEET_READ_ERROR",
    SheetHeaderError: "SHEET_HEADER_NOT_FOUND",
    MissingColumnsError: "MISSING_COLUMNS",
}


def _record_file_error(logger: logging.Logger, error_log: ErrorLogBuffer, source: Path, e: Exception) -> None:
    """Log a file-level failure and record it with row=-1."""
    logger.error(f"spreadsheet: {e}")
    error_log.append(
        ErrorRecord.create(
            file=source.name,
            sheet="",
            row=-1,
            error_type=FILE_ERROR_TYPES.get(type(e), "UNEXPECTED_ERROR"),
            message=str(e),
        )
    )
    error_path = error_log.flush()
    if error_path is not None:
        logger.warning(f"details in {error_path}")


def _positive_int(text: str) -> int:
    try:
        value = int(text.replace(",", ""))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from e
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="gold-repricer",
        description="Recalculate gold product prices from the spot price and sync them to the marketplace",
    )
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--input", type=Path, help="Use this inventory export instead of requesting one")
    p.add_argument("--output", help="Output workbook name (.xlsx is appended when missing)")
    p.add_argument("--gold-price", type=_positive_int, help="Override the spot price per gram")
    p.add_argument("--no-upload", action="store_true", help="Write the workbook but do not upload it")
    p.add_argument("--dry-run", action="store_true", help="Only report new prices")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    load_env_file(Path(".env"))
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    credentials = load_credentials()

    client: MarketplaceClient | None = None
    if args.input is not None:
        source = args.input
        if not source.exists():
            logger.error(f"input file not found: {source}")
            return EXIT_FATAL
    else:
        if not credentials.snapp_token:
            logger.error("SNAPP_TOKEN is not set; pass --input to reprice a local export")
            return EXIT_FATAL
        client = MarketplaceClient.from_config(cfg.marketplace, credentials.snapp_token)
        try:
            source = fetch_export(client, cfg.marketplace, Path(cfg.spreadsheet.download_path))
        except (MarketplaceError, ExportTimeoutError, ExportStateError) as e:
            logger.error(f"export: {e}")
            return EXIT_FATAL

    provider = build_price_provider(cfg.spot_price, credentials, override=args.gold_price)
    try:
        spot_price = provider.get_price_per_gram()
    except SpotPriceError as e:
        logger.error(f"spot price: {e}; pass --gold-price to set it manually")
        return EXIT_FATAL

    columns = cfg.spreadsheet.columns
    error_log = ErrorLogBuffer()
    logger.info(f"reading inventory export: {source}")
    try:
        records = read_product_records(source, columns)
    except (SheetReadError, SheetHeaderError, MissingColumnsError) as e:
        _record_file_error(logger, error_log, source, e)
        return EXIT_FATAL

    result = reprice_records(
        records, spot_price, cfg.pricing, error_log=error_log, source_name=source.name
    )
    for line in render_changes(result):
        logger.info(line)

    error_path = error_log.flush()
    if error_path is not None:
        logger.warning(f"{result.invalid_rows} rows rejected, details in {error_path}")

    if args.dry_run:
        logger.info("dry run: workbook not written")
    elif not result.changes:
        logger.info("no prices changed: workbook not written")
    else:
        output = resolve_output_path(
            args.output or cfg.spreadsheet.output_name, Path(cfg.spreadsheet.output_directory)
        )
        try:
            updated = write_prices(source, output, result.new_prices, columns)
        except (SheetReadError, SheetHeaderError, MissingColumnsError) as e:
            _record_file_error(logger, error_log, source, e)
            return EXIT_FATAL
        logger.info(f"saved {updated} updated prices to {output}")

        if args.no_upload:
            logger.info("upload skipped (--no-upload)")
        else:
            if client is None:
                if not credentials.snapp_token:
                    logger.error("SNAPP_TOKEN is not set; use --no-upload to keep the file local")
                    return EXIT_FATAL
                client = MarketplaceClient.from_config(cfg.marketplace, credentials.snapp_token)
            try:
                client.upload_import(output)
            except MarketplaceError as e:
                logger.error(f"upload: {e}")
                return EXIT_FATAL

    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " prefix itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.invalid_rows > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
