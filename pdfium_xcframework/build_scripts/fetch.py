#
# Copyright 2026 pdfium-xcframework Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
Download and extraction of pdfium-binaries release archives.

Downloads are not retried: a failed download fails the configuration
that asked for it, and through the orchestrator the whole build.
"""

import os
import tarfile
from pathlib import Path
from typing import Optional

import requests

from pdfium_xcframework.utils.log.log_util import log_info

from .build_config import DEFAULT_UPSTREAM_REPO
from .build_errors import FetchError

GITHUB_API_URL = "https://api.github.com"

# 1MB
DOWNLOAD_CHUNK_SIZE = 1024 * 1024


def fetch_latest_release_tag(
    upstream_repo: str = DEFAULT_UPSTREAM_REPO,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Get the tag of the latest upstream release, e.g. chromium/7506.

    Raises:
        FetchError: the API could not be reached or returned no tag
    """
    log_info(f"Fetching latest release from {upstream_repo}...")
    session = session or requests.Session()
    url = f"{GITHUB_API_URL}/repos/{upstream_repo}/releases/latest"
    try:
        response = session.get(url, headers={"Accept": "application/vnd.github+json"})
        response.raise_for_status()
        tag = response.json().get("tag_name", "")
    except (requests.RequestException, ValueError) as e:
        raise FetchError(f"Failed to fetch latest release tag: {e}") from e

    if not tag:
        raise FetchError("Failed to fetch latest release tag")
    log_info(f"Latest release tag: {tag}")
    return tag


class ArchiveFetcher:
    """Download release archives into a work directory and unpack them."""

    def __init__(self, base_url: str, download_dir, session: Optional[requests.Session] = None):
        """
        Args:
            base_url: Release download URL, archive names are appended
            download_dir: Directory the archives are saved to
            session: Optional shared HTTP session
        """
        self.base_url = base_url.rstrip("/")
        self.download_dir = Path(download_dir)
        self.session = session or requests.Session()

    def download(self, file_name: str) -> Path:
        """
        Download one archive.

        Returns:
            Path to the downloaded file

        Raises:
            FetchError: transport error or non-2xx status
        """
        url = f"{self.base_url}/{file_name}"
        dest_path = self.download_dir / file_name
        os.makedirs(self.download_dir, exist_ok=True)

        log_info(f"Downloading {file_name}...")
        try:
            with self.session.get(url, stream=True, allow_redirects=True) as response:
                response.raise_for_status()
                with open(dest_path, "wb") as f:
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except (requests.RequestException, OSError) as e:
            if dest_path.exists():
                dest_path.unlink()
            raise FetchError(f"Failed to download {file_name}: {e}") from e

        return dest_path

    def extract(self, archive_path, target_dir) -> Path:
        """
        Extract a .tgz archive into target_dir.

        Raises:
            FetchError: the archive is corrupt or cannot be written out
        """
        archive_path = Path(archive_path)
        target_dir = Path(target_dir)
        log_info(f"Extracting {archive_path.name}...")
        try:
            os.makedirs(target_dir, exist_ok=True)
            with tarfile.open(archive_path, "r:gz") as tar_ref:
                if hasattr(tarfile, "data_filter"):
                    tar_ref.extractall(target_dir, filter="data")
                else:
                    tar_ref.extractall(target_dir)
        except (tarfile.TarError, OSError) as e:
            raise FetchError(f"Failed to extract {archive_path.name}: {e}") from e
        return target_dir

    def fetch(self, file_name: str, target_dir) -> Path:
        """Download file_name and extract it into target_dir."""
        archive_path = self.download(file_name)
        return self.extract(archive_path, target_dir)
