from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base


class Subscriber(Base):
    __tablename__ = 'subscribers'

    id = Column(Integer, primary_key=True, index=True)
    # Opaque chat/destination identifier, e.g. a Telegram chat id
    destination = Column(String(64), nullable=False, unique=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f'<Subscriber {self.id} -> {self.destination}>'
