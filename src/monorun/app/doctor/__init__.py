"""Environment doctor."""

from .service import DoctorCheck, DoctorReport, DoctorService  # noqa: F401

__all__ = ["DoctorCheck", "DoctorReport", "DoctorService"]
