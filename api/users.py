from fastapi import APIRouter, HTTPException, status
import logging

from api.dependencies import internal_error
from schemas.requests import UserRequest
from schemas.responses import RegisterResponse, TokenResponse
from services.auth_service import AuthService

router = APIRouter()
logger = logging.getLogger(__name__)

CONTROLLER = "Users"


@router.post("/users/register", response_model=RegisterResponse)
async def register(user: UserRequest):
    """Register a new customer account"""
    location = f"{CONTROLLER} - register"
    try:
        logger.info(f"{location}: Registration Attempt for {user.email_address}")
        user_id = await AuthService.register(user.email_address, user.password)
        if user_id is None:
            logger.warning(f"{location}: {user.email_address} User Registration Attempt Failed")
            raise HTTPException(status_code=400, detail="User Registration Attempt Failed")

        logger.info(f"{location}: {user.email_address} registered with id: {user_id}")
        return RegisterResponse(succeeded=True)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")


@router.post("/users/login", response_model=TokenResponse)
async def login(user: UserRequest):
    """Authenticate and return a bearer token"""
    location = f"{CONTROLLER} - login"
    try:
        logger.info(f"{location}: Login Attempt from user {user.email_address}")
        current_user = await AuthService.authenticate(user.email_address, user.password)
        if current_user is None:
            logger.warning(f"{location}: {user.email_address} Not Authenticated")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect username or password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        token = AuthService.create_access_token(current_user)
        logger.info(f"{location}: {user.email_address} Successfully Authenticated")
        return TokenResponse(token=token)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error(f"{location}: {e}")
