"""Prisma workflow package."""

from .service import PrismaService  # noqa: F401

__all__ = ["PrismaService"]
