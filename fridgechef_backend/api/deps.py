"""Shared API dependencies and helpers."""

from flask import current_app

from fridgechef_backend.services.analysis import DependenciesFactory


def get_dependencies_factory() -> DependenciesFactory:
    """Return the factory that builds per-request analysis dependencies."""

    factory: DependenciesFactory | None = current_app.extensions.get(
        "analysis_dependencies_factory"
    )
    if factory is None:
        raise RuntimeError("analysis dependencies factory is not configured")
    return factory
