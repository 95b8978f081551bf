from sqlalchemy import Column, Integer, String, Float
from address6d.database import Base, TimestampMixin


class Address(Base, TimestampMixin):
    __tablename__ = "address"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    mobile = Column(String, unique=True, index=True, nullable=False)
    code = Column(String, unique=True, index=True, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    sublocality = Column(String, nullable=True)
    locality = Column(String, nullable=True)
    firebase_uid = Column(String, index=True, nullable=False)
