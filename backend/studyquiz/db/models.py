from sqlalchemy import Column, String, JSON, DateTime, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class StoredRecord(Base):
    __tablename__ = "records"
    collection   = Column(String, primary_key=True)     # "quizzes", "users", ...
    id           = Column(String, primary_key=True)
    data         = Column(JSON, nullable=False, default=dict)
    created_at   = Column(DateTime, server_default=func.now())
    updated_at   = Column(DateTime, server_default=func.now(), onupdate=func.now())
