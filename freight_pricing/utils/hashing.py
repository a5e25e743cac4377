import hashlib
import json

# Part of every key; bump when the cached result shape changes.
CACHE_KEY_VERSION = "v1"


def payload_hash(payload: dict) -> str:
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def cache_key(prefix: str, payload: dict) -> str:
    """``<prefix>:<version>:<sha256>``; the prefix doubles as the metrics label."""
    return f"{prefix}:{CACHE_KEY_VERSION}:{payload_hash(payload)}"
