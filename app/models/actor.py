from sqlalchemy import Column, Integer, String, Date
from app.database import Base


class Actor(Base):
    __tablename__ = "actors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    birth_date = Column(Date, nullable=True)
    photo = Column(String, nullable=True)  # Asset reference (URL)

    def __repr__(self):
        return f"<Actor(id={self.id}, name={self.name})>"
