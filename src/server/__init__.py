"""
Upload boundary around the ORCA parser.

Usage:
    from src.server import handle_upload
    from src.utils.config import load_server_settings

    response = handle_upload(content, api_key, load_server_settings(), filename="opt.out")
"""

from src.server.upload import UploadResponse, handle_upload, is_authorized

__all__ = [
    "UploadResponse",
    "handle_upload",
    "is_authorized",
]
