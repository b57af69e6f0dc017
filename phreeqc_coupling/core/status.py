"""
Phases of a coupling step
"""

from enum import Enum


class Status(Enum):
    """Where a coupling step currently is"""
    IDLE = "idle"
    SETTING_STATE = "setting_state"
    READING_STATE = "reading_state"
    UPDATING_STATE = "updating_state"
