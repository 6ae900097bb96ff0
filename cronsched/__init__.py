"""Cron expression parsing, next-run calculation and a tick-driven task scheduler."""

__version__ = "1.0.0"
__all__ = ["clock", "cron", "cron_data", "cron_schedule", "randomization", "task", "time_types"]