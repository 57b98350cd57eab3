"""Stub loading from package data, with an optional override directory."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path

from ..errors import NotFoundError

logger = logging.getLogger(__name__)

STUB_DIRECTORY = "stubs"


def _bundled(filename: str):
    return resources.files(__package__).joinpath(STUB_DIRECTORY).joinpath(filename)


class StubLoader:
    """
    Load `<name>.stub` templates.

    A file in `custom_path` wins over the bundled stub of the same name.
    """

    def __init__(self, custom_path: Path | None = None):
        self.custom_path = custom_path
        self._cache: dict[str, str] = {}

    def exists(self, name: str) -> bool:
        if self.custom_path and (self.custom_path / f"{name}.stub").is_file():
            return True
        return _bundled(f"{name}.stub").is_file()

    def load(self, name: str) -> str:
        """
        Return the stub text.

        Raises:
            NotFoundError: If no stub of that name exists
        """
        if name in self._cache:
            return self._cache[name]

        filename = f"{name}.stub"
        if self.custom_path:
            custom = self.custom_path / filename
            if custom.is_file():
                logger.debug(f"Using custom stub {custom}")
                self._cache[name] = custom.read_text(encoding="utf-8")
                return self._cache[name]

        bundled = _bundled(filename)
        if not bundled.is_file():
            raise NotFoundError(filename, "no such stub")
        self._cache[name] = bundled.read_text(encoding="utf-8")
        return self._cache[name]
