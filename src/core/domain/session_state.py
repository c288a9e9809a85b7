from enum import Enum


class SessionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ACTIVE = "active"
