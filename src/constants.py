"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    PACKAGE_MANAGER_ERROR = 2
    VALIDATION_FAILED = 3
    CONFIG_ERROR = 4


class PackageManagers(Enum):
    """Package managers supported by the program.

    Declaration order is the canonical manager order used for output.

    Args:
        Enum (string): Package managers supported by the program.
    """

    COMPOSER = "composer"
    NODE = "node"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    SUPPORTED_PACKAGES = [
        PackageManagers.COMPOSER.value,
        PackageManagers.NODE.value,
    ]
    COMMANDS = ["validate", "update"]
    DEPENDENCIES_FILE = "DEPENDENCIES.md"
    COMPOSER_JSON_FILE = "composer.json"
    COMPOSER_LOCK_FILE = "composer.lock"
    PACKAGE_JSON_FILE = "package.json"
    PACKAGE_LOCK_FILE = "package-lock.json"
    NODE_MODULES_DIR = "node_modules"
    CONFIG_FILES = [".depdoc.yml", ".depdoc.yaml", ".depdoc.json"]
    DEV_GROUP = "dev"
    NEWLINES = {"\n": "lf", "\r\n": "crlf"}
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "DEPDOC_LOG_LEVEL"
    DEFAULT_LOG_LEVEL = "WARNING"
