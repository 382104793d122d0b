"""CLI entrypoint for crawling a javadoc site into JSON."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Any

from apidoc.crawler import (
    ConfigurationError,
    CrawlConfig,
    CrawlPipeline,
    CrawlResult,
    OutputWriter,
    load_config,
    save_config,
)
from apidoc.crawler.constants import OUTPUT_MODES


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Crawl a javadoc HTML site and export its types as JSON.",
    )

    parser.add_argument(
        "base_url",
        nargs="?",
        default=None,
        help="Root URL of the javadoc site. Overrides config base_url if provided.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to JSON/YAML crawl config.",
    )
    parser.add_argument("--output_dir", type=Path, default=None)
    parser.add_argument(
        "--output_mode",
        type=str,
        choices=list(OUTPUT_MODES),
        default=None,
        help="per_type writes one file per type, aggregate writes javadoc.json, both does both.",
    )

    parser.add_argument(
        "--package_filter",
        action="append",
        default=[],
        help=(
            "Regular expression matched against the whole package name (repeatable). "
            r"Use 'com\.acme\..*' to select a package subtree."
        ),
    )
    parser.add_argument(
        "--entry_point",
        action="append",
        default=[],
        help="Entry point page relative to base_url (repeatable). Replaces the built-in list.",
    )

    parser.add_argument("--concurrency", type=int, default=None)
    parser.add_argument("--timeout_seconds", type=float, default=None)
    parser.add_argument("--retries", type=int, default=None)
    parser.add_argument("--retry_backoff_seconds", type=float, default=None)
    parser.add_argument("--rate_limit_seconds", type=float, default=None)
    parser.add_argument("--user_agent", type=str, default=None)

    parser.add_argument("--proxy_host", type=str, default=None)
    parser.add_argument("--proxy_port", type=int, default=None)
    parser.add_argument("--proxy_username", type=str, default=None)
    parser.add_argument("--proxy_password", type=str, default=None)

    parser.add_argument(
        "--cache",
        dest="enable_cache",
        action="store_true",
        default=None,
        help="Reuse parsed types from the on-disk cache (default comes from config).",
    )
    parser.add_argument(
        "--no_cache",
        dest="enable_cache",
        action="store_false",
        help="Parse every page even if a cached record exists.",
    )
    parser.add_argument("--cache_dir", type=Path, default=None)

    parser.add_argument(
        "--save_config",
        type=Path,
        default=None,
        help="Write the effective config to this JSON/YAML path before crawling.",
    )
    parser.add_argument(
        "--log_file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    parser.add_argument(
        "--print_stats_json",
        action="store_true",
        help="Print full stats JSON in stdout after run.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging.",
    )

    return parser.parse_args(argv)


def _proxy_payload(args: argparse.Namespace, current: dict[str, Any] | None) -> dict[str, Any] | None:
    overrides = {
        "host": args.proxy_host,
        "port": args.proxy_port,
        "username": args.proxy_username,
        "password": args.proxy_password,
    }
    if all(value is None for value in overrides.values()):
        return current

    proxy = dict(current or {})
    proxy.update({key: value for key, value in overrides.items() if value is not None})
    if not proxy.get("host"):
        raise ConfigurationError("--proxy_host is required when other proxy options are set")
    return proxy


def build_config(args: argparse.Namespace) -> CrawlConfig:
    if args.config is not None:
        payload = load_config(args.config).to_dict()
    else:
        payload = {}

    if args.base_url:
        payload["base_url"] = args.base_url
    if not payload.get("base_url"):
        raise ConfigurationError("No base URL provided. Pass it as an argument or via --config.")

    if args.package_filter:
        payload["package_filters"] = list(args.package_filter)
    if args.entry_point:
        payload["entry_points"] = list(args.entry_point)

    if args.output_dir is not None:
        payload["output_dir"] = str(args.output_dir)
    if args.output_mode is not None:
        payload["output_mode"] = args.output_mode

    if args.concurrency is not None:
        payload["concurrency"] = args.concurrency
    if args.timeout_seconds is not None:
        payload["timeout_seconds"] = args.timeout_seconds
    if args.retries is not None:
        payload["retries"] = args.retries
    if args.retry_backoff_seconds is not None:
        payload["retry_backoff_seconds"] = args.retry_backoff_seconds
    if args.rate_limit_seconds is not None:
        payload["rate_limit_seconds"] = args.rate_limit_seconds
    if args.user_agent is not None:
        payload["user_agent"] = args.user_agent

    payload["proxy"] = _proxy_payload(args, payload.get("proxy"))

    if args.enable_cache is not None:
        payload["enable_cache"] = args.enable_cache
    if args.cache_dir is not None:
        payload["cache_dir"] = str(args.cache_dir)

    return CrawlConfig.from_dict(payload)


def setup_logging(log_file: Path | None, verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(log_level)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # urllib3 logs every connection at debug level.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_summary(result: CrawlResult, written: list[Path], *, print_stats_json: bool) -> None:
    stats = result.stats

    print("\n=== Crawl Complete ===")
    print(f"base_url: {result.base_url}")
    print(f"entry_point: {result.entry_point}")
    print(f"packages: {len(result.packages)}")
    print(f"types: {len(result.types)}")
    print(f"files_written: {len(written)}")

    print("\n--- Core Stats ---")
    for key in [
        "total",
        "processed",
        "skipped",
        "failed",
        "success_rate",
        "duration_seconds",
    ]:
        if key in stats:
            print(f"{key}: {stats[key]}")

    if print_stats_json:
        print("\n--- Full Stats JSON ---")
        print(json.dumps(stats, indent=2, sort_keys=True))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, verbose=args.verbose)

    try:
        config = build_config(args)
        if args.save_config is not None:
            save_config(config, args.save_config)
    except (ConfigurationError, OSError) as exc:
        logging.error("Failed to build config: %s", exc)
        return 2

    logging.info(
        "Starting crawl: base_url=%s, output_dir=%s, mode=%s, filters=%d",
        config.base_url,
        config.output_dir,
        config.output_mode,
        len(config.package_filters),
    )

    try:
        result = CrawlPipeline(config).crawl()
        written = OutputWriter(config.output_dir, mode=config.output_mode).write(result)
    except KeyboardInterrupt:
        logging.error("Interrupted by user")
        return 130
    except ConfigurationError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 2
    except Exception:
        logging.exception("Crawl failed")
        return 1

    print_summary(result, written, print_stats_json=args.print_stats_json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
