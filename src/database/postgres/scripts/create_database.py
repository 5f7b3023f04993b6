from alembic import command
from alembic.config import Config

from src.database.postgres.core import Base, engine
from src.database.postgres import models # noqa: F401 registers the tables on Base

# Create database from the current model set-up, then stamp the alembic version table
# with the latest revision so later upgrades start from here
# From the cookbook: https://alembic.sqlalchemy.org/en/latest/cookbook.html#building-an-up-to-date-database-from-scratch
def create_database(alembic_ini: str = "alembic.ini") -> None:
    Base.metadata.create_all(engine)
    command.stamp(Config(alembic_ini), "head")

if __name__ == "__main__":
    create_database()
