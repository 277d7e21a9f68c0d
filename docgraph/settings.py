"""Core configuration settings for docgraph.

Settings are loaded from environment variables with .env file support via
pydantic-settings.

Environment variables:
    DOCGRAPH_STORE_PATH: Directory for the filesystem document store.
        Empty selects the in-memory store.
    DOCGRAPH_DEFAULT_SCOPE: Scope used when callers do not name one.

Example:
    >>> from docgraph.settings import settings
    >>> print(settings.docgraph_default_scope)

Note:
    Settings are loaded once at module import and frozen. The process must be
    restarted to pick up changes to environment variables or the .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for document store selection and scoping.

    Attributes:
        docgraph_store_path: Root directory of the filesystem store. When empty,
            ``create_document_store`` returns an in-memory store.
        docgraph_default_scope: Namespace within which ids and addresses are unique
            when no explicit scope is given.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    docgraph_store_path: str = ""
    docgraph_default_scope: str = "docgraph"


settings = Settings()
"""Global settings instance. Access this rather than creating new Settings objects."""
