from cipherdrive.utils.logging import get_logger, setup_logging, log_with_context
from cipherdrive.utils.api_response import ok, created
from cipherdrive.utils.base import now_ms, random_suffix, sanitize_file_name


__all__= [
    "get_logger",
    "setup_logging",
    "log_with_context",
    "ok",
    "created",
    "now_ms",
    "random_suffix",
    "sanitize_file_name",
]
