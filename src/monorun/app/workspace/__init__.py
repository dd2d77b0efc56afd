"""Workspace package workflows."""

from .service import GroupRunner, Runner, WorkspaceService  # noqa: F401

__all__ = ["GroupRunner", "Runner", "WorkspaceService"]
