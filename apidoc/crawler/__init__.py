"""Crawler package: config, shared types, and pipeline components."""

from .cache import TypeDocCache
from .config import CrawlConfig, ProxyConfig, load_config, save_config
from .dialects import DialectRegistry, LegacyJavadocDialect, ModernJavadocDialect, ParsingDialect
from .discovery import EntryPointDiscovery, parse_package_list
from .errors import ConfigurationError, CrawlerError, PageFetchError, PageParseError
from .fetcher import Fetcher
from .grouping import ConcurrentSet, PackageGrouping
from .page_parser import TypePageParser
from .pipeline import CrawlPipeline
from .progress import ProgressTracker
from .text import clean_text
from .types import (
    ConstructorDoc,
    CrawlResult,
    EntryPointResult,
    FetchResult,
    FieldDoc,
    MemberCategory,
    MethodDoc,
    OutcomeStatus,
    PackageDoc,
    PageOutcome,
    ParameterDoc,
    TypeDoc,
    TypeKind,
    utc_now_iso,
)
from .url import TypeUrlExtractor, infer_package_name, infer_type_name, is_type_link, normalize_url
from .writer import OutputWriter, aggregate_record, type_record

__all__ = [
    "ConcurrentSet",
    "ConfigurationError",
    "ConstructorDoc",
    "CrawlConfig",
    "CrawlPipeline",
    "CrawlResult",
    "CrawlerError",
    "DialectRegistry",
    "EntryPointDiscovery",
    "EntryPointResult",
    "FetchResult",
    "Fetcher",
    "FieldDoc",
    "LegacyJavadocDialect",
    "MemberCategory",
    "MethodDoc",
    "ModernJavadocDialect",
    "OutcomeStatus",
    "OutputWriter",
    "PackageDoc",
    "PackageGrouping",
    "PageFetchError",
    "PageOutcome",
    "PageParseError",
    "ParameterDoc",
    "ParsingDialect",
    "ProgressTracker",
    "ProxyConfig",
    "TypeDoc",
    "TypeDocCache",
    "TypeKind",
    "TypePageParser",
    "TypeUrlExtractor",
    "aggregate_record",
    "clean_text",
    "infer_package_name",
    "infer_type_name",
    "is_type_link",
    "load_config",
    "normalize_url",
    "parse_package_list",
    "save_config",
    "type_record",
    "utc_now_iso",
]
