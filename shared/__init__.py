"""
Shared utilities for the anime render scraper.

This package is intentionally small. It provides:

- `shared.config` for environment-based configuration
- `shared.logging` for structlog-based structured logging

The API, the CLI and the engine treat `shared/` as read-only
infrastructure code and avoid introducing service-specific coupling here.
"""
