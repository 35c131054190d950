"""Example HTTP server wiring the flow drivers (Starlette)."""

from __future__ import annotations

from .demo import create_demo_app, create_demo_app_from_env  # noqa: F401

__all__ = ["create_demo_app", "create_demo_app_from_env"]
