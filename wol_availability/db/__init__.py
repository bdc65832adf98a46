from wol_availability.db.base import Base
from wol_availability.db.session import SessionLocal, engine, get_db, transaction
from wol_availability.db.tables import ALL_TABLE_NAMES, AVAILABILITY_TABLE_NAMES

__all__ = [
    "get_db",
    "engine",
    "SessionLocal",
    "transaction",
    "Base",
    "ALL_TABLE_NAMES",
    "AVAILABILITY_TABLE_NAMES",
]
