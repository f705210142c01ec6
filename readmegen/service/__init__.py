"""HTTP service exposing README generation with streamed progress."""

from .app import ProgressChannel, ProgressChannelRegistry, create_app, run_service

__all__ = ["ProgressChannel", "ProgressChannelRegistry", "create_app", "run_service"]
