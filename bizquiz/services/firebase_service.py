import asyncio
import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Optional

import firebase_admin
from fastapi import HTTPException, status
from firebase_admin import credentials, firestore
from google.api_core.exceptions import NotFound

from ..config import settings
from ..models.company import Company
from ..models.question import Question

logger = logging.getLogger(__name__)

COMPANY_COLLECTION = "company"
QUESTION_COLLECTION = "questions"

_db: Any = None
_init_lock = threading.Lock()


# ── Initialise Firebase app once ─────────────────────────────────────────────

def _get_db():
    global _db
    if _db is not None:
        return _db

    # Callers run in to_thread workers; only one may initialise the app
    with _init_lock:
        if _db is not None:
            return _db

        if not firebase_admin._apps:
            cred_value = settings.firebase_credentials_path
            try:
                cred = credentials.Certificate(json.loads(cred_value))
            except (json.JSONDecodeError, ValueError):
                cred = credentials.Certificate(cred_value)
            options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
            firebase_admin.initialize_app(cred, options)

        _db = firestore.client()
        return _db


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ── Companies ─────────────────────────────────────────────────────────────────

def _do_list_companies() -> list[Company]:
    docs = _get_db().collection(COMPANY_COLLECTION).stream()
    return [Company.from_document(doc.id, doc.to_dict() or {}) for doc in docs]


async def list_companies() -> list[Company]:
    return await asyncio.to_thread(_do_list_companies)


async def get_company(company_id: str) -> Company:
    ref = _get_db().collection(COMPANY_COLLECTION).document(company_id)
    doc = await asyncio.to_thread(ref.get)
    if not doc.exists:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Company '{company_id}' not found.",
        )
    return Company.from_document(doc.id, doc.to_dict() or {})


async def update_company_profile(company_id: str, name: str, website: str, description: str) -> dict:
    fields = {
        "companyName": name,
        "companyWebsite": website,
        "companyDescription": description,
        "onboardingCompleted": True,
        "onboardingCompletedAt": _now_iso(),
    }
    ref = _get_db().collection(COMPANY_COLLECTION).document(company_id)
    try:
        await asyncio.to_thread(ref.update, fields)
    except NotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Company '{company_id}' not found.",
        )
    except Exception as exc:
        logger.error("Firebase profile update failed for %s: %s", company_id, exc, exc_info=True)
        raise

    logger.info("Updated company profile %s.", company_id)
    return fields


def _do_save_package(company_id: str, fields: dict, user_email: Optional[str]) -> None:
    ref = _get_db().collection(COMPANY_COLLECTION).document(company_id)
    try:
        ref.update(fields)
    except NotFound:
        # First configuration for this company: create the document instead
        ref.set({"userEmail": user_email, **fields}, merge=True)


async def save_package(
    company_id: str,
    number_of_questions: int,
    difficulty_level: str,
    calculated_price: float,
    user_email: Optional[str] = None,
) -> dict:
    fields = {
        "numberOfQuestions": number_of_questions,
        "difficultyLevel": difficulty_level,
        "calculatedPrice": calculated_price,
        "configuredAt": _now_iso(),
        "status": "configured",
    }
    try:
        await asyncio.to_thread(_do_save_package, company_id, fields, user_email)
        logger.info("Saved quiz package for company %s.", company_id)
    except Exception as exc:
        logger.error("Firebase save_package failed for %s: %s", company_id, exc, exc_info=True)
        raise
    return fields


# ── Questions ─────────────────────────────────────────────────────────────────

def _do_save_questions(company_id: str, company_name: str, questions: list[Question]) -> list[str]:
    db = _get_db()
    collection = db.collection(QUESTION_COLLECTION)
    batch = db.batch()
    ids = []
    for question in questions:
        ref = collection.document()
        batch.set(ref, {
            **question.model_dump(by_alias=True),
            "companyId": company_id,
            "companyName": company_name,
            "createdAt": firestore.SERVER_TIMESTAMP,
            "isActive": True,
        })
        ids.append(ref.id)
    batch.commit()
    return ids


async def save_questions(company_id: str, company_name: str, questions: list[Question]) -> list[str]:
    try:
        ids = await asyncio.to_thread(_do_save_questions, company_id, company_name, questions)
        logger.info("Saved %d question(s) for company %s to Firebase.", len(ids), company_id)
    except Exception as exc:
        logger.error("Firebase save_questions failed for %s: %s", company_id, exc, exc_info=True)
        raise
    return ids
