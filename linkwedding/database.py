from sqlmodel import SQLModel, create_engine, Session
from linkwedding.config import settings

connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,      # checks dead connections
    pool_recycle=1800,       # refresh every 30 min
    connect_args=connect_args,
)


def create_db_and_tables():
  from linkwedding.models import user, product, bank_account, discount, order
  from linkwedding.services.pricing import seed_discount_codes
  SQLModel.metadata.create_all(engine)

  with Session(engine) as session:
    seed_discount_codes(session)


def get_session():
    with Session(engine) as session:
        yield session
