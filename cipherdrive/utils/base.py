import re
import secrets
import time

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def now_ms() -> int:
    """Current time as epoch milliseconds"""
    return int(time.time() * 1000)


def random_suffix(num_bytes: int = 8) -> str:
    """Random hex string used to make storage keys unique"""
    return secrets.token_hex(num_bytes)


def sanitize_file_name(name: str) -> str:
    return _UNSAFE_NAME_CHARS.sub("_", name)
