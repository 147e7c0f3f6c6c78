"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

import importlib
from datetime import date

from dotenv import load_dotenv

from dayflow.config import get_settings_module
from dayflow.container import build_container


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    admin = container.auth_service.login("admin@dayflow.com", "admin123")
    overview = container.dashboard_service.for_admin(today=date.today())
    print(f"{admin.full_name}: {overview.present_today}/{overview.total_employees} present today")
    for row in overview.pending_leaves:
        print(f"  pending: {row.full_name} {row.leave_type_name} ({row.request.total_days} days)")


if __name__ == "__main__":
    main()
