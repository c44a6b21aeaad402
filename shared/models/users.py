import uuid
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy import TIMESTAMP, Boolean, Column, Enum, Float, Integer, String, func
from passlib.context import CryptContext

from ..core.database import Base
from ..utils.enums import UserRole

bcrypt_context = CryptContext(schemes=['bcrypt'], deprecated='auto')


class Users(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    email = Column(String(200), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    role = Column(
        Enum(
            UserRole,
            name="user_role_enum",
            native_enum=False,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=UserRole.VENDOR,
        nullable=False,
        index=True,
    )
    phone = Column(String(15), nullable=True)
    address = Column(String(500), nullable=True)

    # running mean, always recomputed from rating_sum / total_ratings
    rating = Column(Float, nullable=False, default=0)
    rating_sum = Column(Integer, nullable=False, default=0)
    total_ratings = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    def set_password(self, password: str):
        self.password = bcrypt_context.hash(password)

    def verify_password(self, password: str) -> bool:
        return bcrypt_context.verify(password, self.password)
