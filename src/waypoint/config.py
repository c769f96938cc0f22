"""Server configuration.

ServerConfig is a frozen dataclass, immutable after creation, with no
string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(path_variables_attribute="path_vars")
    """

    # Routing: when set, matched path variables are stored as a single
    # request attribute under this name instead of one attribute each.
    path_variables_attribute: str | None = None

    # Errors: re-raise middleware exceptions instead of answering 500
    propagate_errors: bool = False

    # Status of the response handed to the first middleware
    default_status: int = 200
