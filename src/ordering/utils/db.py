"""Schema management for SQL-backed providers.

The default configuration keeps everything in memory; these helpers only act on
providers configured for SQLite or PostgreSQL.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield name, provider


def _register_models(domain: Domain, provider) -> None:
    # Touching a repository's DAO builds and registers its SQLAlchemy model
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create tables for every aggregate and entity."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            _register_models(domain, provider)
            provider._metadata.create_all(engine)
            logger.info("Database schema created", provider=name)


def drop_db(domain: Domain) -> None:
    """Drop every table created by ``setup_db``."""
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            logger.info("Database schema dropped", provider=name)
