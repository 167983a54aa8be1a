"""Version 1 of the blog API.

=========  ===================================================
Prefix     Routes
=========  ===================================================
``""``     ``/health``, ``/register``, ``/login``, ``/refresh``, ``/user``
``/posts`` ``""``, ``/<id>``, ``/find/<id>``
=========  ===================================================
"""

from __future__ import annotations

from flask import Blueprint

from .auth import bp as auth_bp
from .health import bp as health_bp
from .posts import bp as posts_bp

API_VERSION = "v1"

REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),
    (auth_bp, ""),
    (posts_bp, "/posts"),
]
