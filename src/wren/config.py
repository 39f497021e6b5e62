"""Application configuration.

AppConfig is a frozen dataclass, immutable after creation. Pass one to
``App(config)``; every field has a default.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(title="News API", version="2.1.0", debug=True)
    """

    # Schema document (OpenAPI info block)
    title: str = "API"
    version: str = "1.0.0"

    # Path the generated schema is served on. None disables serving it.
    schema_path: str | None = "/swagger.json"

    # Responses
    json_indent: int | None = None

    # Limits
    max_content_length: int = 1024 * 1024  # 1 MB

    # Development
    debug: bool = False
    log_level: str = "info"
