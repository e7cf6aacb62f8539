from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from movie_catalog.database import get_db
from movie_catalog.schemas.auth import UserRegister, UserLogin, UserResponse, TokenResponse
from movie_catalog.services.auth_service import AuthService
from movie_catalog.utils.dependencies import get_current_user
from movie_catalog.models.user import User

router = APIRouter(prefix="/v1/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """Register a new account with the user role"""
    return AuthService.register_user(db, user_data)


@router.post("/login", response_model=TokenResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Login with email and password"""
    return AuthService.login_user(db, credentials)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user"""
    return current_user
