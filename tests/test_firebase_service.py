"""Tests for the Firestore store, run against an in-memory fake client."""
import asyncio
import threading
import time

import pytest
from fastapi import HTTPException
from google.api_core.exceptions import NotFound

from bizquiz.models.question import Question
from bizquiz.services import firebase_service


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self.exists = data is not None
        self._data = data

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, store, doc_id):
        self.store = store
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self.store.get(self.id))

    def update(self, fields):
        if self.id not in self.store:
            raise NotFound(f"No document to update: {self.id}")
        self.store[self.id].update(fields)

    def set(self, data, merge=False):
        if merge and self.id in self.store:
            self.store[self.id].update(data)
        else:
            self.store[self.id] = dict(data)


class FakeCollection:
    def __init__(self):
        self.docs = {}
        self._counter = 0

    def document(self, doc_id=None):
        if doc_id is None:
            self._counter += 1
            doc_id = f"auto-{self._counter}"
        return FakeDocument(self.docs, doc_id)

    def stream(self):
        return [FakeSnapshot(doc_id, data) for doc_id, data in self.docs.items()]


class FakeBatch:
    def __init__(self, db):
        self.db = db
        self.pending = []

    def set(self, ref, data):
        self.pending.append((ref, data))

    def commit(self):
        self.db.commits += 1
        for ref, data in self.pending:
            ref.set(data)


class FakeDb:
    def __init__(self):
        self.collections = {}
        self.commits = 0

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection())

    def batch(self):
        return FakeBatch(self)


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeDb()
    monkeypatch.setattr(firebase_service, "_get_db", lambda: db)
    return db


@pytest.fixture
def question():
    return Question(
        question="What does Acme make?",
        options=["Widgets", "Cars", "Boats", "Planes"],
        correctAnswer=2,
        explanation="Acme is a widget company.",
    )


class TestCompanies:
    @pytest.mark.asyncio
    async def test_list_maps_camel_case_fields(self, fake_db):
        fake_db.collection("company").docs["acme"] = {
            "companyName": "Acme",
            "companyWebsite": "https://acme.example",
            "numberOfQuestions": 20,
            "difficultyLevel": "hard",
        }
        companies = await firebase_service.list_companies()
        assert len(companies) == 1
        assert companies[0].id == "acme"
        assert companies[0].company_name == "Acme"
        assert companies[0].number_of_questions == 20
        assert companies[0].difficulty_level == "hard"

    @pytest.mark.asyncio
    async def test_get_missing_company_is_404(self, fake_db):
        with pytest.raises(HTTPException) as info:
            await firebase_service.get_company("ghost")
        assert info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_profile_update_marks_onboarding_complete(self, fake_db):
        fake_db.collection("company").docs["acme"] = {"userEmail": "ops@acme.example"}
        await firebase_service.update_company_profile("acme", "Acme", "https://acme.example", "Widgets")

        stored = fake_db.collection("company").docs["acme"]
        assert stored["companyName"] == "Acme"
        assert stored["companyWebsite"] == "https://acme.example"
        assert stored["companyDescription"] == "Widgets"
        assert stored["onboardingCompleted"] is True
        assert stored["onboardingCompletedAt"]
        assert stored["userEmail"] == "ops@acme.example"

    @pytest.mark.asyncio
    async def test_profile_update_on_missing_company_is_404(self, fake_db):
        with pytest.raises(HTTPException) as info:
            await firebase_service.update_company_profile("ghost", "Ghost", "", "")
        assert info.value.status_code == 404
        assert "ghost" not in fake_db.collection("company").docs


class TestPackages:
    @pytest.mark.asyncio
    async def test_updates_existing_company(self, fake_db):
        fake_db.collection("company").docs["acme"] = {"companyName": "Acme"}
        await firebase_service.save_package("acme", 10, "easy", 12.34)

        stored = fake_db.collection("company").docs["acme"]
        assert stored["companyName"] == "Acme"
        assert stored["numberOfQuestions"] == 10
        assert stored["difficultyLevel"] == "easy"
        assert stored["calculatedPrice"] == 12.34
        assert stored["status"] == "configured"
        assert stored["configuredAt"]
        assert "userEmail" not in stored

    @pytest.mark.asyncio
    async def test_creates_missing_company_with_email(self, fake_db):
        await firebase_service.save_package("new", 30, "hard", 60.0, user_email="founder@new.example")

        stored = fake_db.collection("company").docs["new"]
        assert stored["userEmail"] == "founder@new.example"
        assert stored["numberOfQuestions"] == 30
        assert stored["status"] == "configured"


class TestQuestions:
    @pytest.mark.asyncio
    async def test_saves_all_questions_in_one_batch(self, fake_db, question):
        ids = await firebase_service.save_questions("acme", "Acme", [question, question])

        docs = fake_db.collection("questions").docs
        assert ids == ["auto-1", "auto-2"]
        assert sorted(docs) == ids
        assert fake_db.commits == 1
        for doc in docs.values():
            assert doc["question"] == "What does Acme make?"
            assert doc["correctAnswer"] == 2
            assert doc["companyId"] == "acme"
            assert doc["companyName"] == "Acme"
            assert doc["isActive"] is True
            assert doc["createdAt"] is firebase_service.firestore.SERVER_TIMESTAMP


class TestInitialisation:
    @pytest.mark.asyncio
    async def test_concurrent_first_use_initialises_once(self, monkeypatch):
        apps = {}
        init_calls = []
        db = FakeDb()
        entered = threading.Event()

        def slow_initialize_app(cred, options=None):
            entered.set()
            time.sleep(0.05)
            if "[DEFAULT]" in apps:
                raise ValueError("The default Firebase app already exists.")
            apps["[DEFAULT]"] = object()
            init_calls.append(cred)

        monkeypatch.setattr(firebase_service, "_db", None)
        monkeypatch.setattr(firebase_service.firebase_admin, "_apps", apps)
        monkeypatch.setattr(firebase_service.firebase_admin, "initialize_app", slow_initialize_app)
        monkeypatch.setattr(firebase_service.credentials, "Certificate", lambda value: "cert")
        monkeypatch.setattr(firebase_service.firestore, "client", lambda: db)

        results = await asyncio.gather(
            firebase_service.list_companies(),
            firebase_service.list_companies(),
            return_exceptions=True,
        )

        assert results == [[], []]
        assert entered.is_set()
        assert len(init_calls) == 1
        assert firebase_service._db is db
