"""HTTP layer: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def _join(*segments: str) -> str:
    parts = [s.strip("/") for s in segments if s and s.strip("/")]
    return "/" + "/".join(parts)


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Mount each ``(blueprint, relative_prefix)`` beneath ``base_prefix``.

    ``("/api/v1", [(posts_bp, "/posts"), (auth_bp, "")])`` mounts posts at
    ``/api/v1/posts`` and auth at ``/api/v1``.
    """
    for blueprint, rel_prefix in entries:
        app.register_blueprint(blueprint, url_prefix=_join(base_prefix, rel_prefix))


def init_app(app: Flask) -> None:
    """Register every API version (only ``v1`` today)."""
    from blogapi.api import v1

    base = app.config.get("API_BASE_PREFIX", "/api")
    register_blueprint_group(app, base_prefix=_join(base, v1.API_VERSION), entries=v1.REGISTRY)


__all__ = ["init_app", "register_blueprint_group"]
