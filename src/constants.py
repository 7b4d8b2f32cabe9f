"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    VALIDATION_ERROR = 3
    RESOLUTION_ERROR = 4


class ExpressionTags(Enum):
    """Form tags accepted in the ``g`` field of a G-expression.

    Args:
        Enum (string): Wire tag of each expression form.
    """

    LITERAL = "lit"
    REFERENCE = "ref"
    APPLICATION = "app"
    VECTOR = "vec"
    LAMBDA = "lam"
    FIXPOINT = "fix"
    MATCH = "match"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    VALID_TAGS = [tag.value for tag in ExpressionTags]
    REFERENCE_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*[?]?$"
    PARAM_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"
    PACKAGE_NAME_PATTERN = r"^[a-z][a-z0-9_]*$"
    PACKAGE_NAME_MIN_LENGTH = 2
    PACKAGE_NAME_MAX_LENGTH = 100
    VERSION_PATTERN = r"^\d+\.\d+\.\d+(-[0-9A-Za-z\-\.]+)?(\+[0-9A-Za-z\-\.]+)?$"
    ELSE_PATTERNS = ["else", "else_pattern"]
    SENTINEL_VERSION = "0.0.0"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    OUTPUT_FORMATS = ["json", "text"]
    EXPRESSION_STYLES = ["pretty", "json", "compact"]

    # Registry API / package index
    API_BASE_URL = "http://localhost:4000/api/v1"
    INDEX_FILE = None
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300

    ENV_API_URL = "GEXREG_API_URL"
    ENV_INDEX_FILE = "GEXREG_INDEX"
    ENV_REQUEST_TIMEOUT = "GEXREG_REQUEST_TIMEOUT"
    CONFIG_SECTION = "gexreg"
