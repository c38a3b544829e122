"""Temporary public hosting for rendered reels."""

from .models import HostedAsset
from .uploader import (
    AssetPublisher,
    FileIoHost,
    HostingTarget,
    HostUploadError,
    TmpFilesHost,
    normalize_tmpfiles_url,
)

__all__ = [
    "HostedAsset",
    "AssetPublisher",
    "HostingTarget",
    "FileIoHost",
    "TmpFilesHost",
    "HostUploadError",
    "normalize_tmpfiles_url",
]
