from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_admin.hr_admin.database.bootstrap import ensure_demo_data
from src.hr_admin.hr_admin.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_mapping(settings.DB_CONFIG)

    ensure_demo_data(config)

    print(f"OK: Seeded database -> {config.user}@{config.host}:{config.port}/{config.database}")
    print("Demo logins: superadmin/admin123, hrd/hrd12345, msantos/manager123, acruz/employee123")


if __name__ == "__main__":
    main()
