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
Parallel download and framework creation for every build configuration.

Each configuration runs in its own worker and only touches its own
extracted/ and frameworks/ subdirectories. The orchestrator waits for all
of them, running jobs are never cancelled, and fails the build if any
job failed.
"""

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Sequence

from pdfium_xcframework.utils.log.log_util import log_error, log_info

from .build_config import BuildConfig, BuildSettings
from .build_errors import BuildError
from .fetch import ArchiveFetcher
from .framework import create_framework, find_library


def process_configuration(
    config: BuildConfig,
    settings: BuildSettings,
    fetcher: ArchiveFetcher,
) -> Path:
    """
    Fetch one archive and turn it into a framework.

    Returns:
        Path of the created framework, also recorded in the
        configuration's marker file
    """
    extract_dir = settings.extract_dir(config)
    framework_path = settings.framework_path(config)

    fetcher.fetch(config.archive_name, extract_dir)
    library = find_library(extract_dir)
    create_framework(library, framework_path, config, settings, extract_dir)

    marker_path = settings.marker_path(config)
    os.makedirs(marker_path.parent, exist_ok=True)
    marker_path.write_text(f"{framework_path}\n")
    return framework_path


def build_all_frameworks(
    configs: Sequence[BuildConfig],
    settings: BuildSettings,
    fetcher: ArchiveFetcher,
) -> Dict[str, Path]:
    """
    Run process_configuration for every configuration in parallel.

    Returns:
        dict: configuration name -> framework path

    Raises:
        BuildError: at least one configuration failed
    """
    log_info("Processing architectures in parallel...")
    results = {}
    failures = {}

    with ThreadPoolExecutor(max_workers=max(1, len(configs))) as executor:
        futures = {
            executor.submit(process_configuration, config, settings, fetcher): config
            for config in configs
        }

        log_info("Waiting for parallel processing to complete...")
        for future in as_completed(futures):
            config = futures[future]
            try:
                results[config.name] = future.result()
            except Exception as e:
                log_error(f"{config.name} failed: {e}")
                failures[config.name] = e

    if failures:
        names = ", ".join(sorted(failures))
        raise BuildError(f"{len(failures)} of {len(configs)} configuration(s) failed: {names}")

    return results
