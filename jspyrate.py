#!/usr/bin/env python3
"""
===================================================================
JSPYRATE - JAVASCRIPT URL, ENDPOINT AND SECRET EXTRACTOR
===================================================================

PURPOSE:
    Bulk reconnaissance over client-side JavaScript. Takes a list of
    JavaScript sources (local paths or remote URLs), pulls out absolute
    URLs, root-relative API endpoints and, optionally, hardcoded secrets
    matching a user-supplied regex list, and writes one plain-text report
    per source.

FEATURES:
    ✓ Async I/O with a bounded number of sources in flight at once
    ✓ Local files and HTTP(S) sources in the same input list
    ✓ Literal endpoint scan plus a syntax-tree pass for template
      literals and string concatenation (esprima)
    ✓ Custom secret regexes; invalid patterns are skipped, not fatal
    ✓ Per-source failure isolation: one bad source never stops the batch
    ✓ Progress bar and text or JSON logging

REQUIREMENTS:
    pip install aiohttp aiofiles tqdm esprima

USAGE:
    # Scan a list of local files and URLs
    python jspyrate.py -i js_files.txt

    # Also look for secrets
    python jspyrate.py -i js_files.txt -r secrets.txt

    # Single remote file
    python jspyrate.py --url https://example.com/static/app.js -o out/

CONFIGURATION:
    Set via environment variables (CLI flags take precedence):
    - MAX_CONCURRENT_ITEMS: Sources processed in parallel (default: 10)
    - FETCH_TIMEOUT_SECONDS: Total HTTP timeout, 0 disables (default: 0)
    - USER_AGENT: User-Agent header for HTTP fetches
    - OUTPUT_DIR: Directory for reports (default: beside each source)
    - FAIL_ON_HTTP_ERROR: Treat non-2xx responses as failures (default: false)
    - LOG_FORMAT: text|json (default: text)

===================================================================
"""
import argparse
import asyncio
import json
import logging
import os
import re
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

import aiofiles
import aiohttp
import esprima
from tqdm import tqdm

__version__ = "1.0.0"

# ===================================================================
# CONFIGURATION & CONSTANTS
# ===================================================================

MAX_CONCURRENT_ITEMS = int(os.environ.get("MAX_CONCURRENT_ITEMS", "10"))
FETCH_TIMEOUT_SECONDS = float(os.environ.get("FETCH_TIMEOUT_SECONDS", "0"))  # 0 = no timeout
USER_AGENT = os.environ.get("USER_AGENT", f"Mozilla/5.0 (jspyrate/{__version__})")
OUTPUT_DIR = os.environ.get("OUTPUT_DIR", "")
FAIL_ON_HTTP_ERROR = os.environ.get("FAIL_ON_HTTP_ERROR", "false").lower() == "true"
LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")  # text|json

# Output naming
SOURCE_SUFFIX = ".js"
FILE_OUTPUT_SUFFIX = "_output.txt"
URL_OUTPUT_SUFFIX = ".txt"

HTTP_SCHEMES = ("http://", "https://")

# Extraction patterns
URL_PATTERN = re.compile(r"https?://[^/\s\"'`]+/[^\s\"'`]*")
ENDPOINT_PATTERN = re.compile(r"([\"'])/[\w-]+(?:/[\w-]+)*\1", re.ASCII)
UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.\-]")

# Placeholder for parts of a computed string that cannot be resolved statically
UNRESOLVED_PLACEHOLDER = "{var}"


# ===================================================================
# LOGGING SETUP
# ===================================================================

class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'identifier'):
            log_data["identifier"] = record.identifier
        if hasattr(record, 'stage'):
            log_data["stage"] = record.stage

        return json.dumps(log_data)


def setup_logging(log_format: str = "text") -> logging.Logger:
    """Setup logging with either text or JSON format."""
    logger = logging.getLogger(__name__)
    logger.setLevel(logging.INFO)

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)

    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))

    logger.addHandler(handler)
    return logger


logger = setup_logging(LOG_FORMAT)


# ===================================================================
# ERRORS
# ===================================================================

class ScannerError(Exception):
    """Base class for every error raised by the scanner."""

    def __init__(self, message: str, identifier: Optional[str] = None):
        super().__init__(message)
        self.identifier = identifier


class ConfigError(ScannerError):
    """Missing or invalid run configuration. Fatal, raised before any work starts."""


class ListLoadError(ScannerError):
    """The identifier list or pattern list could not be read."""


class FetchError(ScannerError):
    """A single source could not be read from disk or fetched over HTTP."""


class PatternCompileError(ScannerError):
    """A secret pattern is not a valid regular expression."""


class OutputWriteError(ScannerError):
    """A report could not be written."""


# ===================================================================
# DATA MODEL
# ===================================================================

class ItemStage(Enum):
    """Lifecycle of one source inside a batch."""
    QUEUED = "queued"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class PatternSet:
    """Compiled secret patterns, in list order. Immutable once loaded."""
    entries: Tuple[Tuple[str, re.Pattern], ...] = ()

    @property
    def sources(self) -> List[str]:
        return [source for source, _ in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class MatchSet:
    """Everything extracted from one source. Duplicates are kept as found."""
    urls: List[str] = field(default_factory=list)
    endpoints: List[str] = field(default_factory=list)
    secrets: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.urls or self.endpoints or self.secrets)


@dataclass
class ItemOutcome:
    """Terminal state of one source."""
    identifier: str
    stage: ItemStage = ItemStage.QUEUED
    output_path: Optional[Path] = None
    error: Optional[str] = None
    failed_stage: Optional[ItemStage] = None

    @property
    def succeeded(self) -> bool:
        return self.stage == ItemStage.DONE


@dataclass
class BatchSummary:
    """Aggregate result of a batch run."""
    outcomes: List[ItemOutcome] = field(default_factory=list)
    peak_in_flight: int = 0

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.stage == ItemStage.FAILED)

    @property
    def skipped_empty(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded and o.output_path is None)

    def exit_code(self, strict: bool = False) -> int:
        """
        Process exit code for this batch.

        Per-source failures only count when strict mode is on.
        """
        if strict and self.failed:
            return 2
        return 0


@dataclass
class ScanOptions:
    """Run configuration shared read-only by every worker."""
    concurrency: int = MAX_CONCURRENT_ITEMS
    output_dir: Optional[Path] = None
    timeout: Optional[float] = None
    user_agent: str = USER_AGENT
    fail_on_http_error: bool = FAIL_ON_HTTP_ERROR
    strict: bool = False
    show_progress: bool = True


# ===================================================================
# SOURCE LIST LOADING
# ===================================================================

def load_list(filepath: str) -> List[str]:
    """
    Load a newline-delimited list file.

    Lines are stripped of surrounding whitespace and blank lines are
    skipped. Order is preserved and duplicates are kept.

    Args:
        filepath: Path to the list file

    Returns:
        List of non-empty entries in file order

    Raises:
        ListLoadError: if the file cannot be opened, read or decoded
    """
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            return [line.strip() for line in f if line.strip()]
    except (OSError, UnicodeDecodeError) as e:
        raise ListLoadError(f"Cannot read list file {filepath}: {e}") from e


def load_identifiers(filepath: str) -> List[str]:
    """Load the list of JavaScript sources to scan."""
    identifiers = load_list(filepath)
    logger.info(f"Loaded {len(identifiers)} sources from {filepath}")
    return identifiers


def compile_pattern(source: str) -> re.Pattern:
    """Compile one secret pattern, raising PatternCompileError if it is invalid."""
    try:
        return re.compile(source)
    except re.error as e:
        raise PatternCompileError(f"Invalid regex {source!r}: {e}") from e


def load_patterns(filepath: str) -> PatternSet:
    """
    Load and compile secret patterns from a newline-delimited file.

    An unreadable file disables secret detection instead of aborting the
    run. Invalid patterns are logged and skipped one at a time.

    Args:
        filepath: Path to the pattern list

    Returns:
        PatternSet of the valid patterns, in file order
    """
    try:
        sources = load_list(filepath)
    except ListLoadError as e:
        logger.warning(f"{e}; secret detection disabled")
        return PatternSet()

    entries = []
    for source in sources:
        try:
            entries.append((source, compile_pattern(source)))
        except PatternCompileError as e:
            logger.error(f"Skipping pattern: {e}")

    logger.info(f"Loaded {len(entries)}/{len(sources)} secret patterns from {filepath}")
    return PatternSet(tuple(entries))


# ===================================================================
# CONTENT FETCHING
# ===================================================================

def is_remote(identifier: str) -> bool:
    return identifier.lower().startswith(HTTP_SCHEMES)


async def _fetch_remote(
    url: str,
    session: aiohttp.ClientSession,
    fail_on_http_error: bool
) -> str:
    try:
        async with session.get(url) as resp:
            if not 200 <= resp.status < 300:
                if fail_on_http_error:
                    raise FetchError(f"HTTP {resp.status} for {url}", url)
                logger.warning(f"HTTP {resp.status} for {url}; scanning response body anyway")
            return await resp.text(errors="ignore")
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise FetchError(f"Failed to fetch {url}: {e!r}", url) from e


async def _read_local(path: str) -> str:
    try:
        async with aiofiles.open(path, 'r', encoding='utf-8', errors='ignore') as f:
            return await f.read()
    except OSError as e:
        raise FetchError(f"Failed to read {path}: {e}", path) from e


async def fetch_content(
    identifier: str,
    session: Optional[aiohttp.ClientSession],
    options: ScanOptions
) -> str:
    """
    Return the text of one source.

    HTTP(S) identifiers are fetched with GET on the shared session; no
    timeout applies unless one was configured on that session. Anything
    else is read as a local file. Undecodable bytes are dropped.

    Args:
        identifier: File path or URL
        session: Shared HTTP session (may be None when no URLs are queued)
        options: Run configuration

    Returns:
        Decoded content

    Raises:
        FetchError: on any network or filesystem failure
    """
    if is_remote(identifier):
        if session is None:
            raise FetchError(f"No HTTP session available for {identifier}", identifier)
        return await _fetch_remote(identifier, session, options.fail_on_http_error)
    return await _read_local(identifier)


# ===================================================================
# EXTRACTION
# ===================================================================

def extract_urls(content: str) -> List[str]:
    """Absolute http(s) URLs with at least one '/' after the host."""
    return URL_PATTERN.findall(content)


def extract_endpoints(content: str) -> List[str]:
    """Quoted root-relative paths such as "/api/v1/users", quotes stripped."""
    return [m.group(0)[1:-1] for m in ENDPOINT_PATTERN.finditer(content)]


def _is_node(value) -> bool:
    return isinstance(getattr(value, 'type', None), str)


def _children(node) -> List:
    children = []
    for value in vars(node).values():
        if isinstance(value, list):
            children.extend(item for item in value if _is_node(item))
        elif _is_node(value):
            children.append(value)
    return children


def _walk(root, visit) -> None:
    """
    Pre-order walk over an esprima tree without recursion.

    visit(node) returns the nodes to descend into next, or None to
    descend into all of the node's children.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        children = visit(node)
        if children is None:
            children = _children(node)
        stack.extend(reversed(children))


def _is_concat(node) -> bool:
    return _is_node(node) and node.type == 'BinaryExpression' and node.operator == '+'


def _concat_operands(node) -> List:
    """Leaves of a '+' chain, left to right, flattened with an explicit stack."""
    operands = []
    stack = [node]
    while stack:
        current = stack.pop()
        if _is_concat(current):
            stack.append(current.right)
            stack.append(current.left)
        else:
            operands.append(current)
    return operands


def _cooked(quasi) -> str:
    value = quasi.value
    if isinstance(value, dict):
        return value.get('cooked') or ''
    return getattr(value, 'cooked', None) or ''


class _StringResolver:
    """Statically evaluates string-valued expressions where it can."""

    def __init__(self, bindings: Dict[str, str]):
        self.bindings = bindings

    def evaluate(self, node) -> Tuple[Optional[str], List]:
        """
        Resolve node to a string.

        Returns the value (None if nothing string-like was found) and the
        sub-expressions that were rendered as '{var}', which may still hold
        endpoints of their own.
        """
        unresolved = []
        return self._resolve(node, unresolved), unresolved

    def _resolve(self, node, unresolved: List) -> Optional[str]:
        if not _is_node(node):
            return None
        if node.type == 'Literal':
            if isinstance(node.value, str):
                return node.value
            if isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
                return node.raw or str(node.value)
            return None
        if node.type == 'Identifier':
            return self.bindings.get(node.name)
        if node.type == 'TemplateLiteral':
            parts = []
            for i, quasi in enumerate(node.quasis):
                parts.append(_cooked(quasi))
                if i < len(node.expressions):
                    expr = node.expressions[i]
                    value = self._resolve(expr, unresolved)
                    if value is None:
                        unresolved.append(expr)
                        value = UNRESOLVED_PLACEHOLDER
                    parts.append(value)
            return ''.join(parts)
        if _is_concat(node):
            parts = []
            missing = []
            for operand in _concat_operands(node):
                value = self._resolve(operand, missing)
                if value is None:
                    missing.append(operand)
                    if parts and parts[-1] == UNRESOLVED_PLACEHOLDER:
                        continue
                    value = UNRESOLVED_PLACEHOLDER
                parts.append(value)
            if all(part == UNRESOLVED_PLACEHOLDER for part in parts):
                return None
            unresolved.extend(missing)
            return ''.join(parts)
        return None


def _collect_bindings(tree) -> Dict[str, str]:
    """Names bound to plain string literals anywhere in the program."""
    bindings = {}

    def visit(node):
        if (node.type == 'VariableDeclarator'
                and _is_node(node.id) and node.id.type == 'Identifier'
                and _is_node(node.init) and node.init.type == 'Literal'
                and isinstance(node.init.value, str)):
            bindings.setdefault(node.id.name, node.init.value)

    _walk(tree, visit)
    return bindings


def _looks_like_endpoint(value: str) -> bool:
    return len(value) > 1 and value.startswith('/') and not any(c.isspace() for c in value)


def _parse_tree(content: str):
    try:
        return esprima.parseScript(content, tolerant=True)
    except Exception:
        return esprima.parseModule(content, tolerant=True)


def parse_endpoints(content: str) -> List[str]:
    """
    Recover endpoints built at runtime from template literals and '+' concatenation.

    Plain quoted literals are left to extract_endpoints. Parts that cannot
    be resolved statically are rendered as '{var}' and then searched in
    turn, so a callback inside `${...}` is still scanned. This pass is best
    effort: a parse failure yields an empty list, and an expression too
    deeply nested to resolve only loses itself.
    """
    try:
        tree = _parse_tree(content)
    except Exception as e:
        logger.debug(f"Syntax-tree endpoint pass skipped: {e}")
        return []

    endpoints = []

    def visit(node):
        if not (node.type == 'TemplateLiteral' or _is_concat(node)):
            return None
        try:
            value, unresolved = resolver.evaluate(node)
        except RecursionError:
            logger.debug(f"Expression too deeply nested at {node.type}; skipped")
            return []
        if value is None:
            return None
        if _looks_like_endpoint(value):
            endpoints.append(value)
        # folded string parts are already in value
        return unresolved

    try:
        resolver = _StringResolver(_collect_bindings(tree))
        _walk(tree, visit)
    except Exception as e:
        logger.debug(f"Syntax-tree endpoint pass aborted: {e}")
        return []

    return endpoints


def extract_secrets(content: str, patterns: PatternSet) -> List[str]:
    """All non-overlapping matches of every pattern, concatenated in pattern order."""
    secrets = []
    for _, compiled in patterns.entries:
        secrets.extend(m.group(0) for m in compiled.finditer(content))
    return secrets


def extract_all(content: str, patterns: PatternSet) -> MatchSet:
    """Run every extraction pass over one source."""
    endpoints = extract_endpoints(content)
    endpoints.extend(parse_endpoints(content))
    return MatchSet(
        urls=extract_urls(content),
        endpoints=endpoints,
        secrets=extract_secrets(content, patterns),
    )


# ===================================================================
# REPORT WRITING
# ===================================================================

def derive_output_path(identifier: str, output_dir: Optional[Path] = None) -> Path:
    """
    Work out where the report for a source goes.

    Local files: trailing '.js' replaced by '_output.txt', written beside
    the source, or under output_dir when one is set.
    URLs: last path segment plus '.txt' under output_dir (current
    directory if unset). A URL with no last segment uses its host name.

    Args:
        identifier: File path or URL
        output_dir: Optional directory for reports

    Returns:
        Report path
    """
    if is_remote(identifier):
        parsed = urlparse(identifier)
        name = parsed.path.rsplit('/', 1)[-1] or parsed.netloc or "index"
        name = UNSAFE_FILENAME_CHARS.sub('_', name)
        return Path(output_dir or ".") / f"{name}{URL_OUTPUT_SUFFIX}"

    stem = identifier[:-len(SOURCE_SUFFIX)] if identifier.endswith(SOURCE_SUFFIX) else identifier
    report = Path(f"{stem}{FILE_OUTPUT_SUFFIX}")
    if output_dir is not None:
        return Path(output_dir) / report.name
    return report


def format_report(matches: MatchSet, include_secrets: bool) -> str:
    """Render a MatchSet as the plain-text report."""
    lines = ["URLs:", *matches.urls, "", "Endpoints:", *matches.endpoints]
    if include_secrets:
        lines += ["", "Secrets:", *matches.secrets]
    return "\n".join(lines) + "\n"


async def write_report(output_path: Path, text: str) -> None:
    """Write one report, creating parent directories. Raises OutputWriteError."""
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(output_path, 'w', encoding='utf-8') as f:
            await f.write(text)
    except OSError as e:
        raise OutputWriteError(f"Cannot write report {output_path}: {e}") from e


# ===================================================================
# BATCH SCHEDULING
# ===================================================================

class _InFlight:
    """Counts sources currently holding a permit."""

    def __init__(self):
        self.current = 0
        self.peak = 0

    def __enter__(self):
        self.current += 1
        self.peak = max(self.peak, self.current)
        return self

    def __exit__(self, *exc):
        self.current -= 1
        return False


async def process_identifier(
    identifier: str,
    patterns: PatternSet,
    options: ScanOptions,
    session: Optional[aiohttp.ClientSession],
    semaphore: asyncio.Semaphore,
    in_flight: Optional[_InFlight] = None
) -> ItemOutcome:
    """
    Fetch, extract and write one source under a concurrency permit.

    The permit is held from the start of the fetch until the report is
    written or the pipeline fails. Errors never escape: they are logged
    and recorded on the returned outcome.

    Args:
        identifier: File path or URL
        patterns: Shared secret patterns
        options: Run configuration
        session: Shared HTTP session
        semaphore: Admission gate for the batch
        in_flight: Optional in-flight counter

    Returns:
        Terminal ItemOutcome (DONE or FAILED)
    """
    outcome = ItemOutcome(identifier)
    in_flight = in_flight or _InFlight()

    async with semaphore:
        with in_flight:
            try:
                outcome.stage = ItemStage.FETCHING
                content = await fetch_content(identifier, session, options)

                outcome.stage = ItemStage.EXTRACTING
                loop = asyncio.get_running_loop()
                matches = await loop.run_in_executor(None, extract_all, content, patterns)

                if is_remote(identifier) and matches.is_empty():
                    logger.info(f"Nothing found in {identifier}; no report written")
                    outcome.stage = ItemStage.DONE
                    return outcome

                outcome.stage = ItemStage.WRITING
                output_path = derive_output_path(identifier, options.output_dir)
                await write_report(output_path, format_report(matches, include_secrets=len(patterns) > 0))

                outcome.output_path = output_path
                outcome.stage = ItemStage.DONE
                logger.info(
                    f"✓ {identifier}: {len(matches.urls)} URLs, {len(matches.endpoints)} endpoints, "
                    f"{len(matches.secrets)} secrets -> {output_path}"
                )

            except ScannerError as e:
                _mark_failed(outcome, str(e))
            except Exception as e:
                _mark_failed(outcome, f"Unexpected error: {e!r}")

    return outcome


def _mark_failed(outcome: ItemOutcome, message: str) -> None:
    outcome.failed_stage = outcome.stage
    outcome.stage = ItemStage.FAILED
    outcome.error = message
    logger.error(
        f"✗ {outcome.identifier} failed while {outcome.failed_stage.value}: {message}",
        extra={"identifier": outcome.identifier, "stage": outcome.failed_stage.value}
    )


def _open_session(options: ScanOptions) -> aiohttp.ClientSession:
    timeout = aiohttp.ClientTimeout(total=options.timeout or None)
    return aiohttp.ClientSession(timeout=timeout, headers={"User-Agent": options.user_agent})


async def run_batch(
    identifiers: List[str],
    patterns: PatternSet,
    options: ScanOptions
) -> BatchSummary:
    """
    Process every source with at most options.concurrency in flight.

    Returns only once every source has reached DONE or FAILED. Completion
    order is unspecified.

    Args:
        identifiers: Sources to scan, admitted in list order
        patterns: Shared secret patterns (may be empty)
        options: Run configuration

    Returns:
        BatchSummary with one outcome per identifier
    """
    summary = BatchSummary()
    if not identifiers:
        logger.warning("No sources to scan")
        return summary

    semaphore = asyncio.Semaphore(options.concurrency)
    in_flight = _InFlight()
    session = _open_session(options) if any(is_remote(i) for i in identifiers) else None

    logger.info(f"Scanning {len(identifiers)} sources with concurrency {options.concurrency}...")

    try:
        tasks = [
            asyncio.ensure_future(
                process_identifier(identifier, patterns, options, session, semaphore, in_flight)
            )
            for identifier in identifiers
        ]

        with tqdm(total=len(tasks), desc="Scanning sources", unit="file",
                  disable=not options.show_progress) as pbar:
            for coro in asyncio.as_completed(tasks):
                try:
                    summary.outcomes.append(await coro)
                except Exception as e:
                    logger.error(f"Scan task failed: {e}")
                pbar.update(1)
    finally:
        if session is not None:
            await session.close()

    summary.peak_in_flight = in_flight.peak
    logger.info(
        f"Batch complete: {summary.succeeded}/{summary.total} succeeded, "
        f"{summary.failed} failed, {summary.skipped_empty} without findings"
    )
    return summary


# ===================================================================
# COMMAND LINE INTERFACE
# ===================================================================

def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments and display help information."""
    parser = argparse.ArgumentParser(
        prog='jspyrate',
        description='Extract URLs, endpoints and hardcoded secrets from JavaScript files',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
ENVIRONMENT VARIABLES (Optional):
  MAX_CONCURRENT_ITEMS   Sources processed in parallel (default: 10)
  FETCH_TIMEOUT_SECONDS  Total HTTP timeout in seconds, 0 disables (default: 0)
  USER_AGENT             User-Agent header for HTTP fetches
  OUTPUT_DIR             Directory for reports
  FAIL_ON_HTTP_ERROR     Treat non-2xx responses as failures (default: false)
  LOG_FORMAT             text|json (default: text)

USAGE EXAMPLES:
  python jspyrate.py -i js_files.txt
  python jspyrate.py -i js_files.txt -r secrets.txt -t 20
  python jspyrate.py --url https://example.com/static/app.js -o out/

EXIT CODES:
  0   Success (per-source failures are logged, not fatal)
  1   Error (missing arguments, unreadable input list)
  2   At least one source failed and --strict was given
  130 Interrupted by user (Ctrl+C)
        '''
    )

    parser.add_argument(
        '-i', '--input',
        type=str,
        metavar='PATH',
        help='File listing one JavaScript path or URL per line'
    )

    parser.add_argument(
        '-r', '--regex', '--wordlist',
        dest='regex',
        type=str,
        metavar='PATH',
        help='File listing one secret regex per line'
    )

    parser.add_argument(
        '--url',
        type=str,
        help='Scan a single JavaScript URL instead of a list'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        metavar='DIR',
        default=OUTPUT_DIR or None,
        help='Output directory for reports (required with --url)'
    )

    parser.add_argument(
        '-t', '--threads',
        type=int,
        default=MAX_CONCURRENT_ITEMS,
        help=f'Maximum sources processed at once (default: {MAX_CONCURRENT_ITEMS})'
    )

    parser.add_argument(
        '--timeout',
        type=float,
        default=FETCH_TIMEOUT_SECONDS,
        help='Total HTTP timeout in seconds, 0 for none (default: %(default)s)'
    )

    parser.add_argument(
        '--fail-on-http-error',
        action='store_true',
        default=FAIL_ON_HTTP_ERROR,
        help='Treat non-2xx HTTP responses as failed sources'
    )

    parser.add_argument(
        '--strict',
        action='store_true',
        help='Exit with status 2 if any source failed'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable the progress bar'
    )

    parser.add_argument(
        '--log-format',
        type=str,
        choices=['text', 'json'],
        default=LOG_FORMAT,
        help=f'Logging format (default: {LOG_FORMAT})'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose debug logging'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser.parse_args(argv)


def build_options(args: argparse.Namespace) -> ScanOptions:
    """Validate parsed arguments into ScanOptions. Raises ConfigError."""
    if not args.input and not args.url:
        raise ConfigError("One of --input or --url is required")
    if args.input and args.url:
        raise ConfigError("--input and --url are mutually exclusive")
    if args.url and not args.output:
        raise ConfigError("--output is required with --url")
    if args.url and not is_remote(args.url):
        raise ConfigError(f"--url must be an http(s) URL: {args.url}")
    if args.threads < 1:
        raise ConfigError(f"--threads must be at least 1, got {args.threads}")
    if args.timeout < 0:
        raise ConfigError(f"--timeout cannot be negative, got {args.timeout}")

    return ScanOptions(
        concurrency=args.threads,
        output_dir=Path(args.output).expanduser() if args.output else None,
        timeout=args.timeout or None,
        fail_on_http_error=args.fail_on_http_error,
        strict=args.strict,
        show_progress=not args.no_progress,
    )


# ===================================================================
# MAIN ENTRY POINT
# ===================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with validation and error handling."""
    args = parse_arguments(argv)

    setup_logging(args.log_format)
    if args.verbose:
        logger.setLevel(logging.DEBUG)

    try:
        options = build_options(args)
    except ConfigError as e:
        logger.error(f"ERROR: {e}")
        logger.error("For help: python jspyrate.py --help")
        return 1

    if args.url:
        identifiers = [args.url]
    else:
        try:
            identifiers = load_identifiers(args.input)
        except ListLoadError as e:
            logger.error(f"ERROR: {e}")
            return 1

    patterns = load_patterns(args.regex) if args.regex else PatternSet()

    logger.info("=" * 70)
    logger.info("JSPYRATE JAVASCRIPT EXTRACTOR")
    logger.info("=" * 70)
    logger.info(f"Sources: {len(identifiers)}")
    logger.info(f"Secret patterns: {len(patterns) if patterns else 'disabled'}")
    logger.info(f"Concurrency: {options.concurrency}")
    logger.info(f"Output directory: {options.output_dir or 'beside each source'}")
    logger.info(f"HTTP timeout: {options.timeout or 'none'}")
    logger.info("=" * 70)

    try:
        summary = asyncio.run(run_batch(identifiers, patterns, options))
    except KeyboardInterrupt:
        logger.warning("Scan interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1

    if summary.failed:
        logger.warning(f"{summary.failed} source(s) failed; see errors above")

    return summary.exit_code(options.strict)


if __name__ == "__main__":
    sys.exit(main())
