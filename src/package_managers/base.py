"""Common adapter behaviour for reading installed packages from disk."""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from common.errors import MetadataNotFoundError, MetadataParseError
from inventory.models import PackageInventory

logger = logging.getLogger(__name__)


class PackageManagerAdapter:
    """Reads one package manager's metadata in a project directory.

    Subclasses set ``name`` and ``project_file`` and implement
    ``get_installed_packages``.
    """

    name: str = ""
    project_file: str = ""

    def is_present(self, directory: str) -> bool:
        """True when the project declares this manager (its project file exists)."""
        return os.path.isfile(os.path.join(directory, self.project_file))

    def get_installed_packages(self, directory: str) -> PackageInventory:
        raise NotImplementedError

    def _load_json(self, path: str) -> Any:
        """Load a JSON metadata file, raising adapter errors on failure."""
        if not os.path.isfile(path):
            raise MetadataNotFoundError(f"{self.name}: missing {path}", self.name, path)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, UnicodeDecodeError) as e:
            raise MetadataParseError(f"{self.name}: cannot read {path}: {e}", self.name, path) from e
        except json.JSONDecodeError as e:
            raise MetadataParseError(f"{self.name}: invalid JSON in {path}: {e}", self.name, path) from e
