from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

LOG_DIR = PROJECT_ROOT / "logs"


# ---------------------------
# Spectrum geometry
# ---------------------------

TIER_COUNT = 10           # percentile buckets per side
STOP_COUNT = 10           # discrete slider stops
POSITION_MIDPOINT = 0.5   # opposite | concept boundary on a dual axis

# stops 1..5 belong to the opposite side, 6..10 to the concept side
FIRST_CONCEPT_STOP = int(STOP_COUNT * POSITION_MIDPOINT) + 1

DEFAULT_AXIS_POSITION = 1.0  # new axes start fully on the concept end


# ---------------------------
# Upstream services
# ---------------------------

RETRIEVAL_BASE_URL = os.getenv("RETRIEVAL_BASE_URL", "http://localhost:3000")
RETRIEVAL_SEARCH_PATH = "/api/search"

CONCEPTS_BASE_URL = os.getenv("CONCEPTS_BASE_URL", RETRIEVAL_BASE_URL)
CONCEPTS_LOOKUP_PATH = "/api/concepts"

# serve opposites from the built-in table instead of the concept service
USE_STATIC_OPPOSITES = os.getenv("USE_STATIC_OPPOSITES", "0") == "1"

DEFAULT_CATEGORY = "all"

SEARCH_PAGE_SIZE = 60
DEFAULT_SEARCH_MAX_PAGES = 5
SEARCH_MAX_PAGES = int(os.getenv("SEARCH_MAX_PAGES", str(DEFAULT_SEARCH_MAX_PAGES)))


# ---------------------------
# HTTP hardening
# ---------------------------

HTTP_CONNECT_TIMEOUT = 3.0
HTTP_READ_TIMEOUT = 10.0
HTTP_MAX_REDIRECTS = 2

HTTP_USER_AGENT = "vibe-rank/1.0 (+https://example.com)"


# ---------------------------
# Search result cache
# ---------------------------

SEARCH_RESULT_TTL_SECONDS = 5 * 60   # results change as new images land
SEARCH_CACHE_MAX_ENTRIES = 500


# ---------------------------
# Lazy reveal
# ---------------------------

REVEAL_PAGE_SIZE = 40


# ---------------------------
# Logging / observability
# ---------------------------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "0") == "1"


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

class Candidate(BaseModel):
    """
    One scored gallery item as returned by the retrieval service.
    ``payload`` carries display data (urls, site info, ...) through untouched.
    """

    id: str
    score: float
    payload: Dict[str, Any] = Field(default_factory=dict)


class SearchPage(BaseModel):
    """One page of retrieval results."""

    items: List[Candidate] = Field(default_factory=list)
    has_more: bool = False


class QueryRequest(BaseModel):
    query: str = ""
    category: str = DEFAULT_CATEGORY


class AddAxisRequest(BaseModel):
    concept: str = Field(..., min_length=1)


class AxisPositionRequest(BaseModel):
    position: float


class AxisView(BaseModel):
    """
    Public snapshot of one axis for the UI.
    """

    axis_id: str
    concept_label: str
    opposite_label: Optional[str] = None
    position: float
    polarity: str
    phase: str
    side: str
    stop: int = Field(ge=1, le=STOP_COUNT)
    concept_count: int = 0
    opposite_count: int = 0


class GalleryView(BaseModel):
    """
    Response body for GET /items: the visible prefix of the fused ordering.
    """

    query: str
    category: str
    axes: List[AxisView]
    items: List[Candidate]
    total: int
    revealed: int


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
