"""
core/pipeline.py — Pure query dispatch for one interactive cycle.

No side effects. No print statements. Routes a raw input line to the date
decoder or the search/correlate path and returns a typed outcome that the
caller (main.py) renders.

Input classes:
  ""          -> Blank
  "q" / "Q"   -> Quit
  "#..."      -> FilterUnsupported (filtering previous results is a stub)
  "$<int>"    -> DateDecoded, or InvalidDate for anything not an integer
  other       -> Ambiguous | NoResults | Report
"""

import logging
import re

from .correlator import PrintedKeys, expand
from .dates import decode_legacy_date
from .models import (
    MAX_RESULTS,
    Ambiguous,
    Blank,
    Dataset,
    DateDecoded,
    FilterUnsupported,
    InvalidDate,
    NoResults,
    Outcome,
    Quit,
    Report,
)
from .search import AmbiguousQueryError, search_all

logger = logging.getLogger("glyph.pipeline")

QUIT_COMMAND = "Q"
FILTER_PREFIX = "#"
DATE_PREFIX = "$"

# Same accepted syntax as a signed 64-bit parse: optional sign, ASCII digits.
_INT_RE = re.compile(r"^[+-]?[0-9]+$")
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def parse_date_input(text: str) -> Outcome:
    """Decode the text following the date prefix. Whitespace is not allowed."""
    if not _INT_RE.match(text):
        return InvalidDate(text=text)
    raw = int(text)
    if not _I64_MIN <= raw <= _I64_MAX:
        return InvalidDate(text=text)
    return DateDecoded(raw=raw, value=decode_legacy_date(raw))


def run_search(term: str, dataset: Dataset, limit: int = MAX_RESULTS) -> Outcome:
    """Search all three sets and expand the hits into a report.

    Correlation never runs when any entity kind overflows limit.
    """
    logger.info("Searching all databases for: %s", term)
    try:
        hits = search_all(dataset, term, limit=limit)
    except AmbiguousQueryError as e:
        logger.info("Ambiguous query %r: %s", term, e)
        return Ambiguous(kind=e.kind, count=e.count)

    if hits.is_empty():
        return NoResults(term=term)

    # Fresh dedup sets every cycle.
    lines = expand(hits, dataset, PrintedKeys())
    return Report(term=term, lines=lines)


def process_query(raw: str, dataset: Dataset, limit: int = MAX_RESULTS) -> Outcome:
    """Classify and evaluate a single line of user input."""
    text = raw.strip()
    logger.debug("User input: %s", text)

    if not text:
        return Blank()
    if text.upper() == QUIT_COMMAND:
        return Quit()
    if text.startswith(FILTER_PREFIX):
        return FilterUnsupported(text=text[len(FILTER_PREFIX) :])
    if text.startswith(DATE_PREFIX):
        return parse_date_input(text[len(DATE_PREFIX) :])
    return run_search(text, dataset, limit=limit)
