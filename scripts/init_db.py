from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module
from geofence_attendance.database.bootstrap import apply_schema, list_tables
from geofence_attendance.database.connection import DatabaseConnection, DBConfig

logger = logging.getLogger("init_db")


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    apply_schema(conn)
    tables = list_tables(conn)
    logger.info(
        "applied packaged schema -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )


if __name__ == "__main__":
    main()
