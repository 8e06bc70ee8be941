"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the attendance rules live in the services.
"""

import importlib
import json

from config import get_settings_module

from src.volunteer_attendance.volunteer_attendance.container import build_container
from src.volunteer_attendance.volunteer_attendance.frequency.schemas import FrequencyFilters


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, policy_config=settings.ATTENDANCE_POLICY)

    eligibility = container.attendance_service.can_check_in("activity-1", "volunteer-1")
    frequency = container.frequency_service.user_frequency("volunteer-1", FrequencyFilters())
    print(json.dumps({"eligibility": eligibility, "frequency": frequency}, indent=2))


if __name__ == "__main__":
    main()
