"""Operations (scan, upload, delete)"""
from .scanner import scan, scan_local
from .transfer import upload, make_remote_dir
from .delete import remove_remote

__all__ = [
    "scan", "scan_local",
    "upload", "make_remote_dir",
    "remove_remote",
]
