"""
Adapters layer - Schedule data sources.
"""

from .yaml_schedule_source import YamlScheduleSource

__all__ = ["YamlScheduleSource"]
