from __future__ import annotations

import importlib

from dotenv import load_dotenv

from dayflow.config import get_settings_module
from dayflow.database.bootstrap import DEMO_ACCOUNTS, apply_seed_sql, ensure_demo_users


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config)
    ensure_demo_users(db_config)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    for _, email, password, role, *_ in DEMO_ACCOUNTS:
        print(f"  {role:<8} {email} / {password}")


if __name__ == "__main__":
    main()
