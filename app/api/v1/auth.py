from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_current_user, get_user_repository
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.services.auth_service import auth_service
from app.schemas.auth import UserLogin, UserRegister, AuthResponse, RefreshTokenRequest
from app.schemas.user import UserRead, UserProfileUpdate
from app.services.nutrition_calculator import NutritionCalculator

router = APIRouter(tags=["auth"])


async def _issue(repo: UserRepository, user: User) -> AuthResponse:
    tokens = auth_service.issue_tokens(user)
    await auth_service.store_refresh_token(repo, user, tokens["refresh_token"])
    return AuthResponse(**tokens)


@router.post("/login", response_model=AuthResponse)
async def login(user: UserLogin, repo: UserRepository = Depends(get_user_repository)):
    """Аутентификация пользователя и выдача JWT токенов"""
    authenticated_user = await auth_service.authenticate_user(repo, user)
    if not authenticated_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверный email или пароль",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return await _issue(repo, authenticated_user)


@router.post("/register", response_model=AuthResponse)
async def register(user: UserRegister, repo: UserRepository = Depends(get_user_repository)):
    """Регистрация нового пользователя и выдача JWT токенов"""
    new_user = await auth_service.register_user(repo, user)
    return await _issue(repo, new_user)


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(request: RefreshTokenRequest, repo: UserRepository = Depends(get_user_repository)):
    """Ротация refresh-токена: старый становится недействительным"""
    user = await auth_service.rotate_refresh_token(repo, request.refresh_token)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Невалидный или просроченный refresh-токен"
        )
    return await _issue(repo, user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(request: RefreshTokenRequest, repo: UserRepository = Depends(get_user_repository)):
    """Аннулировать refresh-токен. Невалидный токен не считается ошибкой."""
    await auth_service.logout_user(repo, request.refresh_token)


@router.get("/me", response_model=UserRead)
async def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=UserRead)
async def update_me(
    profile: UserProfileUpdate,
    current_user: User = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    """Обновить профиль (рост, вес, возраст, активность используются для нормы калорий)"""
    return await repo.update_profile(current_user, profile.model_dump(exclude_unset=True))


@router.get("/me/physical")
async def physical_stats(current_user: User = Depends(get_current_user)):
    """Физические показатели: BMR, суточная норма, идеальный вес"""
    result = {
        "daily_calories": NutritionCalculator.get_user_calorie_needs(current_user),
        "water_goal_ml": NutritionCalculator.get_water_goal(current_user),
        "bmr": None,
        "ideal_weight_range": None,
    }
    if current_user.weight and current_user.height and current_user.age:
        result["bmr"] = round(NutritionCalculator.calculate_bmr(
            current_user.weight, current_user.height, current_user.age, current_user.gender
        ))
    if current_user.height:
        low, high = NutritionCalculator.ideal_weight_range(current_user.height)
        result["ideal_weight_range"] = {"min": low, "max": high}
    return result
