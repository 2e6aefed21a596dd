from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from idlink.settings import DATABASE_URL


# SQLite needs cross-thread access since FastAPI runs sync routes in a threadpool
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for our models
Base = declarative_base()


# Dependency to get a new session for each request
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
