import hashlib
import logging
from collections.abc import Mapping
from typing import Any

# Create the library logger
logger = logging.getLogger("cursorstream")

# Add NullHandler to prevent "No handlers could be found" warnings
# if the application doesn't configure logging.
logger.addHandler(logging.NullHandler())


def redact_query(query: Mapping[str, Any] | str | None) -> str:
    """
    Redacts caller query values for logging.
    Keeps the keys and hashes the values to allow correlation without revealing
    what the user searched for.
    """
    if query is None:
        return "{}"
    try:
        if isinstance(query, Mapping):
            redacted = {}
            for k in sorted(query, key=str):
                val_str = str(query[k]).encode("utf-8")
                redacted[k] = hashlib.sha256(val_str).hexdigest()[:8]
            return str(redacted)
        else:
            return hashlib.sha256(str(query).encode("utf-8")).hexdigest()[:8]
    except Exception:
        return "<redaction_failed>"
