"""Scheduled tasks."""

from psg.tasks.refresh_job import RefreshJob, RefreshStats

__all__ = ["RefreshJob", "RefreshStats"]
