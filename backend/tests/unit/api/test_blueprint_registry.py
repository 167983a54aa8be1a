# tests/unit/api/test_blueprint_registry.py
from __future__ import annotations

from blogapi.api import register_blueprint_group
from flask import Blueprint, Flask


def test_group_prefixes_are_joined_without_double_slashes():
    app = Flask(__name__)
    root_bp = Blueprint("root", __name__)
    items_bp = Blueprint("items", __name__)
    root_bp.add_url_rule("/ping", "ping", lambda: "pong")
    items_bp.add_url_rule("", "index", lambda: "items")

    register_blueprint_group(
        app, base_prefix="/api/v1/", entries=[(root_bp, ""), (items_bp, "/items/")]
    )

    rules = {rule.rule for rule in app.url_map.iter_rules()}
    assert "/api/v1/ping" in rules
    assert "/api/v1/items" in rules


def test_v1_routes_are_mounted(app):
    methods: dict[str, set[str]] = {}
    for rule in app.url_map.iter_rules():
        methods.setdefault(rule.rule, set()).update(rule.methods - {"HEAD", "OPTIONS"})
    rules = {(path, tuple(sorted(verbs))) for path, verbs in methods.items()}

    assert ("/api/v1/register", ("POST",)) in rules
    assert ("/api/v1/login", ("POST",)) in rules
    assert ("/api/v1/refresh", ("POST",)) in rules
    assert ("/api/v1/user", ("GET",)) in rules
    assert ("/api/v1/posts", ("GET", "POST")) in rules
    assert ("/api/v1/posts/<int:post_id>", ("DELETE", "GET", "PUT")) in rules
    assert ("/api/v1/posts/find/<int:post_id>", ("GET",)) in rules
