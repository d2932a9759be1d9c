"""
Font Storage
============

Filesystem side of the registry: YAML index files, font file copies from
remote URLs or local paths, and file permissions.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests
import yaml

from fontsdb.core.exceptions import FileCopyError, InvalidYamlError, StorageError
from fontsdb.core.http import create_session

logger = logging.getLogger(__name__)


class FontStorage:
    """
    Reads and writes registry files.

    All writes go through a temporary sibling file that replaces the target
    in one step, so a failed write never leaves a truncated file behind.
    """

    def __init__(
        self,
        file_mode: int = 0o755,
        session: requests.Session | None = None,
        timeout: int = 30,
        chunk_size: int = 8192,
    ):
        """
        Initialize storage.

        Args:
            file_mode: Permissions applied to every written file
            session: HTTP session used for remote copies
            timeout: Request timeout in seconds
            chunk_size: Download chunk size in bytes
        """
        self.file_mode = file_mode
        self.session = session or create_session()
        self.timeout = timeout
        self.chunk_size = chunk_size

    def read_yaml(self, path: Path) -> Any:
        """
        Parse a YAML file.

        Returns:
            Parsed content, or None if the file is missing or empty

        Raises:
            InvalidYamlError: If the file cannot be parsed
        """
        path = Path(path)
        if not path.is_file():
            return None

        try:
            with path.open(encoding="utf-8") as f:
                return yaml.safe_load(f)
        except (yaml.YAMLError, OSError) as e:
            raise InvalidYamlError(str(path), str(e)) from e

    def dump_yaml(self, path: Path, data: Any) -> None:
        """
        Write data as YAML.

        Raises:
            StorageError: If the file cannot be written
        """
        path = Path(path)
        try:
            content = yaml.safe_dump(
                data, sort_keys=False, allow_unicode=True, default_flow_style=False
            )
            self._write_atomic(path, content.encode("utf-8"))
        except (yaml.YAMLError, OSError) as e:
            raise StorageError(f"Error dumping the YAML file {path} .. {e}") from e

        logger.debug(f"Wrote {path}")

    def copy(self, source: str, target: Path) -> None:
        """
        Copy a font file from a URL or a local path.

        Raises:
            FileCopyError: If the file cannot be fetched or written
        """
        target = Path(target)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if urlparse(source).scheme in ("http", "https"):
                self._download(source, target)
            else:
                shutil.copyfile(source, target)
            self.chmod(target)
        except (requests.RequestException, OSError) as e:
            raise FileCopyError(source, str(target), str(e)) from e

        logger.debug(f"Copied {source} to {target}")

    def chmod(self, path: Path) -> None:
        os.chmod(path, self.file_mode)

    def _download(self, url: str, target: Path) -> None:
        with self.session.get(url, stream=True, timeout=self.timeout) as response:
            response.raise_for_status()
            fd, temp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
            try:
                with os.fdopen(fd, "wb") as f:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            f.write(chunk)
                os.replace(temp_name, target)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise

    def _write_atomic(self, path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.replace(temp_name, path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
        self.chmod(path)
