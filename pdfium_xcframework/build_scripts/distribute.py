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
Distribution packaging of a finished XCFramework.

Output directory after packaging:
    PDFium.xcframework/
    PDFium-chromium-<ver>-<build id>.xcframework.zip
    PDFium-chromium-<ver>-<build id>.xcframework.zip.sha256
    PDFium.xcframework.zip -> PDFium-chromium-<ver>-<build id>.xcframework.zip
    PDFium.xcframework.zip.sha256 -> ....sha256
    .version_info
"""

import hashlib
import os
import stat
import zipfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pdfium_xcframework.utils.log.log_util import log_info

from .build_config import BuildSettings
from .build_utils import force_symlink, remove_path

VERSION_INFO_FILE_NAME = ".version_info"


@dataclass(frozen=True)
class VersionRecord:
    """What a build produced, read later by the package manifest generator."""
    version: str
    upstream_release_tag: str
    build_id: str
    zip_name: str

    KEYS = ("VERSION", "UPSTREAM_RELEASE_TAG", "BUILD_ID", "ZIP_NAME")

    def to_text(self) -> str:
        values = (self.version, self.upstream_release_tag, self.build_id, self.zip_name)
        return "".join(f"{key}={value}\n" for key, value in zip(self.KEYS, values))

    def write(self, output_dir) -> Path:
        path = Path(output_dir) / VERSION_INFO_FILE_NAME
        path.write_text(self.to_text())
        return path

    @classmethod
    def read(cls, output_dir) -> Optional["VersionRecord"]:
        """Read .version_info from output_dir, None when there is none."""
        path = Path(output_dir) / VERSION_INFO_FILE_NAME
        if not path.is_file():
            return None
        values = {}
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            values[key.strip()] = value.strip().strip('"')
        return cls(
            version=values.get("VERSION", ""),
            upstream_release_tag=values.get("UPSTREAM_RELEASE_TAG", ""),
            build_id=values.get("BUILD_ID", ""),
            zip_name=values.get("ZIP_NAME", ""),
        )


def make_build_id(now: Optional[datetime] = None) -> str:
    """UTC timestamp build id, e.g. 20250209-143052."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y%m%d-%H%M%S")


def zip_file_name(framework_name: str, chromium_version: str, build_id: str) -> str:
    """PDFium-chromium-7506-20250209-143052.xcframework.zip"""
    return f"{framework_name}-chromium-{chromium_version}-{build_id}.xcframework.zip"


def calculate_checksum(file_path) -> str:
    """
    Calculate SHA256 checksum of a file.

    Returns:
        SHA256 checksum as hex string
    """
    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as f:
        for byte_block in iter(lambda: f.read(4096), b""):
            sha256_hash.update(byte_block)
    return sha256_hash.hexdigest()


def zip_xcframework(xcframework_path, zip_path) -> Path:
    """
    Zip an XCFramework, storing symlinks as symlinks.

    Entries are rooted at the XCFramework directory name, the same layout
    `zip -r --symlinks` produces.
    """
    xcframework_path = Path(xcframework_path)
    zip_path = Path(zip_path)
    base_dir = xcframework_path.parent

    remove_path(zip_path)
    with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zipf:
        zipf.write(xcframework_path, xcframework_path.relative_to(base_dir).as_posix() + "/")
        for root, dirs, files in os.walk(xcframework_path):
            dirs.sort()
            root_path = Path(root)
            # symlinked directories are stored as links, not walked into
            for name in list(dirs):
                if (root_path / name).is_symlink():
                    dirs.remove(name)
                    files.append(name)
            for name in sorted(files):
                file_path = root_path / name
                arcname = file_path.relative_to(base_dir).as_posix()
                if file_path.is_symlink():
                    info = zipfile.ZipInfo(arcname)
                    info.create_system = 3
                    info.external_attr = (stat.S_IFLNK | 0o755) << 16
                    zipf.writestr(info, os.readlink(file_path))
                else:
                    zipf.write(file_path, arcname)
            for name in dirs:
                dir_path = root_path / name
                zipf.write(dir_path, dir_path.relative_to(base_dir).as_posix() + "/")
    return zip_path


def package_xcframework(settings: BuildSettings) -> VersionRecord:
    """
    Zip the XCFramework, write its checksum, aliases and version record.

    Returns:
        VersionRecord: The record written to the output directory
    """
    log_info("Creating distribution package...")
    output_dir = settings.output_dir
    build_id = settings.build_id or make_build_id()
    zip_name = zip_file_name(settings.framework_name, settings.chromium_version, build_id)
    zip_path = output_dir / zip_name

    zip_xcframework(settings.xcframework_path, zip_path)
    checksum = calculate_checksum(zip_path)
    checksum_name = f"{zip_name}.sha256"
    (output_dir / checksum_name).write_text(f"{checksum}  {zip_name}\n")

    alias_name = f"{settings.xcframework_name}.zip"
    force_symlink(zip_name, output_dir / alias_name)
    force_symlink(checksum_name, output_dir / f"{alias_name}.sha256")

    log_info(f"Build ID: {build_id}")
    log_info(f"Checksum: {checksum}")

    record = VersionRecord(
        version=settings.version,
        upstream_release_tag=settings.release_tag,
        build_id=build_id,
        zip_name=zip_name,
    )
    record.write(output_dir)
    return record


def cleanup(work_dir) -> None:
    work_dir = Path(work_dir)
    if work_dir.is_dir():
        log_info("Cleaning up work directory...")
        remove_path(work_dir)
