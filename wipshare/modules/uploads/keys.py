import re
import uuid
from datetime import datetime, timezone

PUBLIC_PREFIX = "public"
PRIVATE_PREFIX = "private"
MAX_FILENAME_LENGTH = 200

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")

def sanitize_filename(filename: str) -> str:
    """Reduce a client filename to a key-safe basename.

    Directory parts are dropped, anything outside ``[A-Za-z0-9._-]`` becomes
    ``_`` and leading dots are removed so a name can never be ``..``.
    """
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_CHARS.sub("_", name).lstrip(".")
    return name[:MAX_FILENAME_LENGTH] or "upload"

def derive_key(principal_id: str, filename: str, is_public: bool, now: datetime | None = None) -> str:
    # {public|private}/{principal}/{YYYYMM}/{uuid4}-{filename}; a fresh uuid per call
    now = now or datetime.now(timezone.utc)
    prefix = PUBLIC_PREFIX if is_public else PRIVATE_PREFIX
    return f"{prefix}/{principal_id}/{now:%Y%m}/{uuid.uuid4()}-{sanitize_filename(filename)}"

def key_owner(key: str) -> str | None:
    parts = key.split("/")
    if len(parts) < 4 or parts[0] not in (PUBLIC_PREFIX, PRIVATE_PREFIX):
        return None
    return parts[1]

def is_public_key(key: str) -> bool:
    return key.startswith(PUBLIC_PREFIX + "/")
