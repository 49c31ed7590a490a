"""
Pytest configuration and fixtures for testing the LinguaWise backend.

The Supabase client and the generative-language client are replaced with
in-memory fakes, so no test touches the network.
"""

import asyncio
import itertools
import os
import sys
import time
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

# Add the backend directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from linguawise.config import Settings
from linguawise.db.repository import SupabaseStore


class FakeAuthApiError(Exception):
    """Shaped like the provider's error: carries a .message."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class FakeResult:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Subset of the postgrest query builder used by SupabaseStore."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.conflict = None
        self.filters = []
        self.order_by = None
        self.max_rows = None

    def select(self, *columns):
        self.op = "select"
        return self

    def insert(self, row):
        self.op, self.payload = "insert", row
        return self

    def upsert(self, row, on_conflict=None):
        self.op, self.payload, self.conflict = "upsert", row, on_conflict
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def _matches(self, row):
        return all(str(row.get(column)) == str(value) for column, value in self.filters)

    def execute(self):
        if self.table in self.db.failing_tables:
            raise RuntimeError(f"{self.table} unavailable")
        if self.table in self.db.delays:
            time.sleep(self.db.delays[self.table])
        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            row = {"id": next(self.db.ids), **self.payload}
            rows.append(row)
            return FakeResult([dict(row)])

        if self.op == "upsert":
            key = self.conflict or "id"
            for row in rows:
                if row.get(key) == self.payload.get(key):
                    row.update(self.payload)
                    return FakeResult([dict(row)])
            rows.append(dict(self.payload))
            return FakeResult([dict(self.payload)])

        matched = [row for row in rows if self._matches(row)]
        if self.op == "delete":
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResult([dict(row) for row in matched])

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda row: row.get(column) or "", reverse=desc)
        if self.max_rows is not None:
            matched = matched[:self.max_rows]
        return FakeResult([dict(row) for row in matched])


class FakeAuth:
    def __init__(self):
        self.tokens = {
            "token-alice": SimpleNamespace(id="alice"),
            "token-bob": SimpleNamespace(id="bob"),
        }
        self.reset_emails = []
        self.display_names = {}
        self.admin = SimpleNamespace(update_user_by_id=self._update_user_by_id)

    def get_user(self, token):
        if token not in self.tokens:
            raise FakeAuthApiError("invalid JWT")
        return SimpleNamespace(user=self.tokens[token])

    def _session(self, user_id):
        return SimpleNamespace(
            user=SimpleNamespace(id=user_id),
            session=SimpleNamespace(access_token=f"access-{user_id}", refresh_token=f"refresh-{user_id}"),
        )

    def sign_up(self, credentials):
        if credentials["email"] == "taken@linguawise.io":
            raise FakeAuthApiError("User already registered")
        return self._session("new-user")

    def sign_in_with_password(self, credentials):
        if credentials["password"] != "correct-password":
            raise FakeAuthApiError("Invalid login credentials")
        return self._session("alice")

    def sign_in_with_id_token(self, credentials):
        return self._session("google-user")

    def reset_password_for_email(self, email, options):
        self.reset_emails.append((email, options))

    def _update_user_by_id(self, user_id, attributes):
        self.display_names[user_id] = attributes["user_metadata"]["full_name"]


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failing_tables = set()
        # table name -> seconds each query blocks, like a slow network round trip
        self.delays = {}
        self.ids = (str(n) for n in itertools.count(1))
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)


class FakeGenai:
    """
    Generative backend double. Responses and errors are set per operation;
    every call is recorded in .calls.
    """

    def __init__(self):
        self.translation = {"translatedText": "Hola, ¿cómo estás?"}
        self.suggestions = {
            "suggestions": ["Use 'usted' in formal settings"],
            "alternatives": ["¿Qué tal?", "¿Cómo te va?"],
            "culturalNotes": "Spanish speakers often greet with a kiss on the cheek.",
        }
        self.grammar = {"correctedText": "Hola, ¿cómo estás?", "suggestions": ["Add opening question mark"]}
        self.speech = {"media": "data:audio/wav;base64,UklGRg=="}
        self.errors = {}
        self.calls = []

    async def _answer(self, name, value):
        self.calls.append(name)
        await asyncio.sleep(0)
        if name in self.errors:
            raise self.errors[name]
        return value

    async def translate(self, text, source_lang, target_lang, tone, tone_preference="neutral"):
        return await self._answer("translate", self.translation)

    async def suggest(self, text, source_lang, target_lang, tone):
        return await self._answer("suggest", self.suggestions)

    async def check_grammar(self, text, source_lang, target_lang):
        return await self._answer("check_grammar", self.grammar)

    async def synthesize_speech(self, text):
        return await self._answer("synthesize_speech", self.speech)


@pytest.fixture
def settings():
    return Settings(gemini_api_key="test-key", cors_origins=["http://testserver"])


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def store(supabase):
    return SupabaseStore(supabase)


@pytest.fixture
def genai():
    return FakeGenai()


@pytest.fixture
def client(settings, supabase, genai):
    """Test client with the fakes injected; runs the app lifespan."""
    from main import create_app

    app = create_app(settings, supabase=supabase, genai=genai)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def alice_headers():
    return {"Authorization": "Bearer token-alice"}


@pytest.fixture
def bob_headers():
    return {"Authorization": "Bearer token-bob"}
