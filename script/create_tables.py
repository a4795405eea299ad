# create_tables.py
from sqlalchemy import inspect

from achievement_api.database.base_class import Base
from achievement_api.database.session import SQLALCHEMY_DATABASE_URL, get_engine
from achievement_api import model  # noqa: F401  registers the tables on Base.metadata

engine = get_engine(SQLALCHEMY_DATABASE_URL)

Base.metadata.create_all(bind=engine)
print("✅ Tables created.")

inspector = inspect(engine)
print("📋 Existing tables:", inspector.get_table_names())
