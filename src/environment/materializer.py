"""Environment materialization: download and extract a resolved environment.

The working directory is created per call and removed on every exit path by
``working_directory``. Components already extracted into the destination are
not rolled back when a later one fails.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import tempfile
from typing import Callable, Iterator, Optional, Sequence

from constants import Constants
from common.logging_utils import extra_context, Timer
from errors import DestinationNotEmpty
from versioning.models import ResolvedComponent, ResolvedEnvironment
from .archive import download_file, extract_archive

Downloader = Callable[[str, str], None]
Extractor = Callable[[str, str], None]

_module_logger = logging.getLogger(__name__)


@contextlib.contextmanager
def working_directory(
    parent: Optional[str] = None,
    prefix: str = Constants.WORKDIR_PREFIX,
    logger: Optional[logging.Logger] = None,
) -> Iterator[str]:
    """Yield a fresh temporary directory and remove it recursively on exit."""
    log = logger or _module_logger
    if parent:
        os.makedirs(parent, exist_ok=True)
    path = tempfile.mkdtemp(prefix=prefix, dir=parent)
    log.debug("Created temp dir: %s", path, extra=extra_context(event="workdir", action="create"))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        log.debug("Removed temp dir: %s", path, extra=extra_context(event="workdir", action="remove"))


class EnvironmentMaterializer:
    """Lay a resolved environment out on disk.

    Args:
        downloader: ``(url, dest_path)`` callable; raises DownloadFailed.
        extractor: ``(archive_path, dest_dir)`` callable; raises ExtractFailed.
        workdir_parent: Where to create the working directory (system temp by default).
        logger: Event sink; defaults to this module's logger.
    """

    def __init__(
        self,
        downloader: Downloader = download_file,
        extractor: Extractor = extract_archive,
        workdir_parent: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.downloader = downloader
        self.extractor = extractor
        self.workdir_parent = workdir_parent
        self.logger = logger or _module_logger

    def materialize(self, resolved: ResolvedEnvironment, destination: str) -> str:
        """Download and extract everything in ``resolved`` under ``destination``.

        Returns:
            Path of the extracted core root (``destination/wordpress``).

        Raises:
            DownloadFailed, ExtractFailed, DestinationNotEmpty
        """
        parent = self.workdir_parent if self.workdir_parent is not None else Constants.WORKDIR_PARENT
        with Timer() as t, working_directory(parent, logger=self.logger) as workdir:
            core_zip = os.path.join(workdir, f"{Constants.CORE_NAME}-{resolved.core_version}.zip")
            self.downloader(resolved.core_source_url, core_zip)
            os.makedirs(destination, exist_ok=True)
            self.extractor(core_zip, destination)

            core_root = os.path.join(destination, Constants.CORE_NAME)
            plugins_dir, themes_dir = self._create_content_dirs(core_root)

            self._install(resolved.plugins, workdir, plugins_dir, "plugin")
            self._install(resolved.themes, workdir, themes_dir, "theme")

        self.logger.info(
            "Scaffolded wordpress %s into %s",
            resolved.core_version,
            core_root,
            extra=extra_context(
                event="function_exit",
                component="materializer",
                outcome="success",
                plugins=len(resolved.plugins),
                themes=len(resolved.themes),
                duration_ms=t.duration_ms(),
            )
        )
        return core_root

    def _create_content_dirs(self, core_root: str):
        content_dir = os.path.join(core_root, Constants.CONTENT_DIR)
        os.makedirs(content_dir, exist_ok=True)
        created = []
        for name in (Constants.PLUGINS_DIR, Constants.THEMES_DIR, Constants.UPLOADS_DIR):
            path = os.path.join(content_dir, name)
            try:
                os.mkdir(path)
            except FileExistsError as exc:
                raise DestinationNotEmpty(path) from exc
            created.append(path)
        return created[0], created[1]

    def _install(
        self,
        components: Sequence[ResolvedComponent],
        workdir: str,
        container: str,
        kind: str,
    ) -> None:
        for component in components:
            archive = os.path.join(workdir, f"{component.slug}-{component.version}.zip")
            self.downloader(component.source_url, archive)
            self.extractor(archive, container)
            self.logger.info(
                "Installed %s %s %s",
                kind,
                component.slug,
                component.version,
                extra=extra_context(
                    event="install",
                    component="materializer",
                    kind=kind,
                    slug=component.slug,
                    version=component.version,
                )
            )
