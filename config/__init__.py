import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module, development by default.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def attendance_policy_from_env() -> dict:
    """Time policy minutes shared by every settings module."""

    return {
        "CHECKIN_OPENS_MINUTES_BEFORE_START": int(os.getenv("CHECKIN_OPENS_MINUTES_BEFORE_START", "30")),
        "LATE_GRACE_MINUTES": int(os.getenv("LATE_GRACE_MINUTES", "15")),
        "EARLY_LEAVE_MINUTES_BEFORE_END": int(os.getenv("EARLY_LEAVE_MINUTES_BEFORE_END", "30")),
    }
