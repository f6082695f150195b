"""REST API routes for accounts, streaks and daily lessons."""

from datetime import date

import structlog
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, EmailStr, Field, ValidationError

from study_streak.gamification.motto import daily_motto
from study_streak.gamification.streak import streak_badge
from study_streak.lesson.composer import LessonCompositionError
from study_streak.lesson.progress import completion_marker
from study_streak.services import accounts
from study_streak.storage.user_store import UserExistsError

logger = structlog.get_logger()
router = APIRouter(prefix="/api")


class Credentials(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ProgressRequest(BaseModel):
    email: EmailStr
    data: dict = Field(default_factory=dict)


class EmailRequest(BaseModel):
    email: EmailStr


@router.post("/signup", status_code=201)
def signup(body: Credentials) -> dict:
    """Register a new account with default study settings."""
    try:
        accounts.signup(body.email, body.password)
    except UserExistsError:
        raise HTTPException(status_code=409, detail="Cet utilisateur existe déjà.")
    return {
        "success": True,
        "message": "Inscription réussie. Vous pouvez maintenant vous connecter.",
    }


@router.post("/login")
def login(body: Credentials) -> dict:
    """Log in and apply the daily streak update."""
    try:
        result = accounts.login(body.email, body.password)
    except accounts.UserNotFoundError:
        raise HTTPException(status_code=404, detail="Email ou mot de passe incorrect.")
    except accounts.InvalidCredentialsError:
        raise HTTPException(status_code=401, detail="Email ou mot de passe incorrect.")
    return {
        "success": True,
        "message": "Connexion réussie.",
        "user": result.user.public(),
        "streak_outcome": result.outcome.value,
        "streak_message": result.message,
        "badge": streak_badge(result.user.streak).value,
    }


@router.post("/save-progress")
def save_progress(body: ProgressRequest) -> dict:
    """Save study settings or the lesson completion date."""
    if not body.data:
        raise HTTPException(
            status_code=400,
            detail="Email et données à mettre à jour sont requis.",
        )
    try:
        changes = accounts.ProgressUpdate.model_validate(body.data)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail="Données de progression invalides.",
        ) from e
    try:
        user = accounts.save_progress(body.email, changes)
    except accounts.UserNotFoundError:
        raise HTTPException(status_code=404, detail="Utilisateur non trouvé.")
    return {
        "success": True,
        "message": "Progression et paramètres sauvegardés avec succès.",
        "user": user.public(),
    }


@router.post("/lesson/start")
def start_lesson(body: EmailRequest) -> dict:
    """Compose today's lesson for the user."""
    try:
        steps = accounts.start_lesson(body.email)
    except accounts.UserNotFoundError:
        raise HTTPException(status_code=404, detail="Utilisateur non trouvé.")
    except accounts.LessonAlreadyCompletedError:
        raise HTTPException(status_code=409, detail="Session quotidienne déjà terminée.")
    except (LessonCompositionError, FileNotFoundError) as e:
        logger.error("lesson_composition_failed", email=body.email, error=str(e))
        raise HTTPException(status_code=500, detail="Contenu de leçon indisponible.")
    return {
        "success": True,
        "steps": [step.model_dump(mode="json") for step in steps],
    }


@router.post("/lesson/complete")
def complete_lesson(body: EmailRequest) -> dict:
    """Mark today's lesson as done."""
    today = date.today()
    try:
        accounts.complete_lesson(body.email, today)
    except accounts.UserNotFoundError:
        raise HTTPException(status_code=404, detail="Utilisateur non trouvé.")
    return {
        "success": True,
        "message": "Session quotidienne terminée.",
        "completed_on": completion_marker(today),
    }


@router.get("/motto")
async def get_motto() -> dict:
    """Motivational motto of the day."""
    return {"motto": daily_motto(date.today())}


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
