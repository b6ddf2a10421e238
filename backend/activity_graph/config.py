import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# Decisions used when an edge is added without them (one-shot add_edge only)
DEFAULT_RELATION = os.getenv("DEFAULT_RELATION", "one_from_one")
DEFAULT_EDGE_LOGIC = os.getenv("DEFAULT_EDGE_LOGIC", "AND")
DEFAULT_GROUP_LOGIC = os.getenv("DEFAULT_GROUP_LOGIC", "AND")

# Validate every mutation against the graph invariants
GRAPH_STRICT_INVARIANTS = _as_bool(os.getenv("GRAPH_STRICT_INVARIANTS", "true"))

# Unconfirmed edge proposals are dropped after this many seconds (0 keeps them)
PROPOSAL_TTL_SECONDS = float(os.getenv("PROPOSAL_TTL_SECONDS", "900"))

# Empty -> in-memory activity source
ACTIVITY_SOURCE_URL = os.getenv("ACTIVITY_SOURCE_URL", "")
ACTIVITY_SOURCE_TIMEOUT = float(os.getenv("ACTIVITY_SOURCE_TIMEOUT", "10"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
