from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from islandhr import db
from islandhr.config import settings
from islandhr.schemas.admin import CreateAdmin
from islandhr.utils.app_utils import (Token, authenticate_user, create_access_token, get_current_user,
                                      display_name, hash_password)

UTC = timezone.utc

router = APIRouter()


@router.post("/register-admin", status_code=status.HTTP_201_CREATED)
async def register_admin(admin: CreateAdmin):
    """
    Create the first HR admin account.
    Registration is open only while no admin exists.
    Returns:
        dict: success message and the admin's name and email
    Raises:
        HTTPException:
            - 403: If an admin account already exists
            - 400: If the email belongs to a registered employee
    """
    if await db.admins_collection.count_documents({}) > 0:
        raise HTTPException(status_code=403, detail="Admin registration is closed")

    if await db.employees_collection.find_one({"email": admin.email}):
        raise HTTPException(status_code=400, detail="Email already registered")

    admin_dict = admin.model_dump()
    admin_dict["password"] = hash_password(admin.password)
    admin_dict["role"] = "admin"
    admin_dict["date_created"] = datetime.now(UTC)
    await db.admins_collection.insert_one(admin_dict)

    data = {"name": f"{admin.first_name} {admin.last_name}", "email": admin.email}
    return {"message": "Admin registered successfully", "data": data}


@router.post("/login", response_model=Token)
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    """
    Handles user authentication and generates JWT access token.
    Args:
        form_data (OAuth2PasswordRequestForm): Form containing username (email) and password
    Returns:
        dict: Contains the generated access token and token type
            {
                "access_token": str,
                "token_type": "bearer"
            }
    Raises:
        HTTPException: 401 Unauthorized if login credentials are invalid
    """
    user = await authenticate_user(pk=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid login details",
            headers={"WWW-Authenticate": "Bearer"},
        )

    expiry_time = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    token = create_access_token(payload={"sub": user["email"]}, expiry=expiry_time)

    return {"access_token": token, "token_type": "bearer"}


@router.get("/me")
async def read_current_user(user_and_type: tuple = Depends(get_current_user)):
    user, user_type = user_and_type
    return {"email": user.get("email"), "name": display_name(user), "user_type": user_type}
