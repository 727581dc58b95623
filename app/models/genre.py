from sqlalchemy import Column, Integer, String
from app.database import Base


class Genre(Base):
    __tablename__ = "genres"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(40), nullable=False)

    def __repr__(self):
        return f"<Genre(id={self.id}, name={self.name})>"
