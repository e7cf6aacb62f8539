from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from movie_catalog.models.user import User
from movie_catalog.schemas.auth import UserRegister, UserLogin
from movie_catalog.utils.roles import ROLES, USER
from movie_catalog.utils.security import hash_password, verify_password, create_access_token, ACCESS_TOKEN_EXPIRE_MINUTES
from fastapi import HTTPException, status
from datetime import timedelta
import logging

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    def register_user(db: Session, user_data: UserRegister, role: str = USER) -> User:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")

        if db.query(User).filter(User.email == user_data.email).first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
        if db.query(User).filter(User.user_name == user_data.user_name).first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User name already taken")

        new_user = User(
            email=user_data.email,
            user_name=user_data.user_name,
            password_hash=hash_password(user_data.password),
            role=role
        )
        db.add(new_user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            db.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email or user name already registered")
        db.refresh(new_user)
        logger.info(f"Registered {role} account {new_user.user_name} (id={new_user.id})")
        return new_user

    @staticmethod
    def login_user(db: Session, credentials: UserLogin) -> dict:
        user = db.query(User).filter(User.email == credentials.email).first()

        if not user:
            logger.warning(f"Login failed: User not found with email {credentials.email}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")

        if not verify_password(credentials.password, str(user.password_hash)):
            logger.warning(f"Login failed: Incorrect password for email {credentials.email}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")

        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

        access_token = create_access_token(
            data={"sub": user.email, "user_id": user.id},
            expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        )

        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            "user": user
        }
