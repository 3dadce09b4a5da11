from sqlalchemy import Column, Integer, String

from files_manager.models.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "email": self.email}
