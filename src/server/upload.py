"""
Upload handler for ORCA logs.

Framework-neutral: the caller hands over the uploaded bytes and the API key
sent with the form and gets back a status code with a JSON-ready body.

    response = handle_upload(content, api_key, settings)
    # response.status -> 200 / 400 / 403 / 413 / 500
    # response.body   -> {"success": True, **record} or {"success": False, "msg": ...}

The upload is stored in a temporary file under ``settings.upload_dir``, read
back, and removed before the response is returned.
"""

import os
import secrets
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from src.orca.parser import parse_orca_output
from src.utils.config import ServerSettings
from src.utils.logger import get_logger

logger = get_logger(__name__)

MSG_UNAUTHORIZED = "Unauthorized access"
MSG_NO_FILE = "No file received"
MSG_TOO_LARGE = "File exceeds the maximum upload size"
MSG_INTERNAL = "Internal error"


@dataclass
class UploadResponse:
    status: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))


def _failure(status: int, msg: str) -> UploadResponse:
    return UploadResponse(status=status, body={"success": False, "msg": msg})


def is_authorized(provided: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time key check; no configured key refuses everything."""
    if not expected or not provided:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def _store_temporary(content: bytes, upload_dir: str, suffix: str) -> str:
    os.makedirs(upload_dir, exist_ok=True)
    fd, path = tempfile.mkstemp(dir=upload_dir, suffix=suffix)
    with os.fdopen(fd, "wb") as f:
        f.write(content)
    return path


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def _remove_quietly(path: Optional[str]):
    if path and os.path.exists(path):
        try:
            os.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove temporary upload {path}: {e}")


def handle_upload(
    content: Optional[bytes],
    api_key: Optional[str],
    settings: ServerSettings,
    filename: str = "",
    check_key: bool = True,
) -> UploadResponse:
    """
    Validate an upload, parse it, and build the response.

    Args:
        content: Raw bytes of the uploaded file, or None when missing
        api_key: Key sent by the client alongside the file
        settings: Expected key, size limit and temp directory
        filename: Original file name, used for the temp suffix and logs
        check_key: False for trusted local front ends that hold no client key

    Returns:
        UploadResponse with the parse record on success.
    """
    if check_key and not is_authorized(api_key, settings.api_key):
        logger.warning(f"Rejected upload {filename!r}: bad or missing API key")
        return _failure(403, MSG_UNAUTHORIZED)

    if content is None:
        return _failure(400, MSG_NO_FILE)

    if len(content) > settings.max_upload_bytes:
        logger.warning(f"Rejected upload {filename!r}: {len(content)} bytes")
        return _failure(413, MSG_TOO_LARGE)

    tmp_path = None
    try:
        suffix = os.path.splitext(filename)[1] if filename else ".out"
        tmp_path = _store_temporary(content, settings.upload_dir, suffix)
        text = _read_text(tmp_path)
        _remove_quietly(tmp_path)
        tmp_path = None
        result = parse_orca_output(text)
    except Exception as e:
        logger.exception(f"Failed to process upload {filename!r}")
        return _failure(500, str(e) or MSG_INTERNAL)
    finally:
        _remove_quietly(tmp_path)

    logger.info(
        f"Parsed {filename or 'upload'}: {len(result.geometries)} frames, "
        f"energy={result.energy}"
    )
    return UploadResponse(status=200, body={"success": True, **result.to_dict()})
