from sqlalchemy import Column , Integer , String , ForeignKey , Boolean , DateTime
from database_models import Base , utcnow

# creating the users table and columns 

class User(Base):

    __tablename__ = "users"

    id = Column(Integer , primary_key=True , index=True)
    email = Column(String , unique=True , index=True , nullable=False)
    hashed_password = Column(String,nullable=False)
    role = Column(String , nullable=True)      # writer / designer / developer / marketer
    plan = Column(String , default="free" , nullable=False)
    prompts_used_today = Column(Integer , default=0 , nullable=False)
    last_prompt_date = Column(DateTime , nullable=True)
    created_at = Column(DateTime , default=utcnow , nullable=False)
    failed_login_attempts = Column(Integer , default=0)
    lock_until = Column(DateTime , nullable=True)
    last_failed_login = Column(DateTime , nullable=True)


# creating the table to store refresh tokens


class RefreshToken(Base):

    __tablename__ = "refresh_tokens"

    id = Column(Integer , primary_key=True , index=True)
    user_id = Column(Integer,ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    token_hash = Column(String , nullable=False , unique=True)
    expires_at = Column(DateTime , nullable=False)
    revoked = Column(Boolean , default=False)

    created_at = Column(DateTime , default=utcnow)


# model schema for 'forgot password' functionality

class PasswordResetToken(Base):

    __tablename__ = "password_reset_tokens"

    id = Column(Integer , primary_key=True , index=True)
    user_id = Column(Integer , ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token_hash = Column(String , nullable=False , index=True)
    expires_at = Column(DateTime ,  nullable=False)
    used = Column(Boolean , default=False , nullable=False)

    created_at = Column(DateTime, default=utcnow , nullable=False)
