"""
WOFF Converter
==============

Generates WOFF/WOFF2 renditions of a TTF file with fontTools' ``pyftsubset``.
"""

import logging
import os
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

SUPPORTED_FLAVORS = ("woff", "woff2")


class WoffConverter:
    """Runs the subsetter binary to produce web font files."""

    def __init__(self, command: str = "pyftsubset", timeout: int = 120, file_mode: int = 0o755):
        self.command = command
        self.timeout = timeout
        self.file_mode = file_mode

    def build_command(self, ttf_path: Path, target_path: Path, unicodes: str, flavor: str) -> list[str]:
        cmd = [
            self.command,
            str(ttf_path),
            f"--output-file={target_path}",
            f"--flavor={flavor}",
            "--layout-features=*",
        ]
        if flavor == "woff":
            cmd.append("--with-zopfli")
        cmd.append(f"--unicodes={unicodes}")
        return cmd

    def convert(self, ttf_path: Path, target_path: Path, unicodes: str, flavor: str) -> bool:
        """
        Convert a TTF file to a web font flavor.

        The subsetter exit code is not trusted; success means the target
        file exists afterwards.

        Args:
            ttf_path: Source TTF file
            target_path: File to produce
            unicodes: Unicode ranges to keep ("*" for all)
            flavor: "woff" or "woff2"

        Returns:
            True if the target file was produced
        """
        if flavor not in SUPPORTED_FLAVORS:
            raise ValueError(f"Unsupported flavor: {flavor}")

        target_path = Path(target_path)
        cmd = self.build_command(Path(ttf_path), target_path, unicodes, flavor)
        logger.info(f"Generating {target_path.name}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.warning(f"{self.command} not found, install fonttools to generate {flavor} files")
            return False
        except subprocess.TimeoutExpired:
            logger.warning(f"{self.command} timed out after {self.timeout}s for {target_path.name}")
            return False

        if result.returncode != 0:
            logger.debug(f"{self.command} exited with {result.returncode}: {result.stderr.strip()}")

        if not target_path.exists():
            return False

        os.chmod(target_path, self.file_mode)
        return True
