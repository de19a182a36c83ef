from .schedule_client import ScheduleClient

__all__ = ["ScheduleClient"]
