import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status

from spendwise.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from spendwise.db import repository
from spendwise.db.store import KeyValueStore, get_store
from spendwise.models.user import UserCreate, UserInDB, UserLogin, UserPublic

router = APIRouter()
logger = logging.getLogger(__name__)


def get_current_session(
    authorization: Optional[str] = Header(None),
    store: KeyValueStore = Depends(get_store),
) -> Dict:
    """Resolve the bearer token to its live server-side session."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token required")

    token = authorization.replace("Bearer ", "", 1)
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    session_id = payload.get("sid")
    if not user_id or not session_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    session = repository.get_session(store, session_id)
    if not session or session.get("user_id") != user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired")
    return session


def get_current_user_id(session: Dict = Depends(get_current_session)) -> str:
    return session["user_id"]


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, store: KeyValueStore = Depends(get_store)):
    name = user.name.strip()
    if repository.get_user_by_name(store, name):
        raise HTTPException(
            status_code=400,
            detail="Name already registered. Please sign in or use a different name.",
        )

    user_db = UserInDB(name=name, password_hash=get_password_hash(user.password))

    success = repository.put_user(store, user_db.model_dump())
    if not success:
        raise HTTPException(status_code=500, detail="Error saving user")

    logger.info(f"Registered user: {name}")
    return UserPublic(**user_db.model_dump())


@router.post("/login")
def login(login_data: UserLogin, store: KeyValueStore = Depends(get_store)):
    name = login_data.name.strip()
    try:
        logger.info(f"Login attempt for user: {name}")
        user = repository.get_user_by_name(store, name)

        if not user:
            logger.warning(f"User not found: {name}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found. Please sign up first.",
            )

        if not verify_password(login_data.password, user["password_hash"]):
            logger.warning(f"Invalid password for user: {name}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid password. Please try again.",
            )

        session_id = repository.create_session(store, user["user_id"], name)
        if not session_id:
            raise HTTPException(status_code=500, detail="Error creating session")

        access_token = create_access_token(data={"sub": user["user_id"], "sid": session_id})
        logger.info(f"Login successful for user: {name}")

        return {
            "access_token": access_token,
            "token_type": "bearer",
            "user": UserPublic(**user).model_dump(),
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Login failed: {str(e)}")


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(session: Dict = Depends(get_current_session), store: KeyValueStore = Depends(get_store)):
    repository.delete_session(store, session["session_id"])
    logger.info(f"Logged out user: {session['name']}")
    return None


@router.get("/me", response_model=UserPublic)
def get_current_user(session: Dict = Depends(get_current_session), store: KeyValueStore = Depends(get_store)):
    """Get current user profile"""
    user = repository.get_user_by_name(store, session["name"])
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserPublic(**user)
