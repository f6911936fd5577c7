"""
Shared fixtures for the API tests.

Each test gets a fresh application bound to an in-memory SQLite database and
a throwaway upload folder. Requests run through Flask test clients, one per
signed-in user.
"""

import shutil
import tempfile
import unittest

from mangaverse import create_app, db
from mangaverse.config import TestingConfig
from mangaverse.models.user import User
from mangaverse.services.coin_service import CoinService
from mangaverse.services.setup_status import clear_setup_status_cache


DEFAULT_PASSWORD = "password123"


class ApiTestCase(unittest.TestCase):
    config = TestingConfig

    def setUp(self):
        clear_setup_status_cache()
        self.upload_dir = tempfile.mkdtemp()
        config = type("TestConfig", (self.config,), {"UPLOAD_FOLDER": self.upload_dir})
        self.app = create_app(config)
        with self.app.app_context():
            db.create_all()
        self.client = self.app.test_client()

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()
        shutil.rmtree(self.upload_dir, ignore_errors=True)
        clear_setup_status_cache()

    def register(self, client, username, password=DEFAULT_PASSWORD, email=None):
        resp = client.post(
            "/api/register",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        self.assertEqual(resp.status_code, 201, resp.get_json())
        return resp.get_json()

    def new_client(self, username):
        client = self.app.test_client()
        return client, self.register(client, username)

    def make_creator(self, client):
        resp = client.post(
            "/api/creator/apply",
            json={"displayName": "Studio", "bio": "We draw things", "contentTypes": ["manga"]},
        )
        self.assertEqual(resp.status_code, 200, resp.get_json())
        return resp.get_json()

    def new_creator(self, username):
        client, user = self.new_client(username)
        self.make_creator(client)
        return client, user

    def update_user(self, user_id, **fields):
        with self.app.app_context():
            user = db.session.get(User, user_id)
            for key, value in fields.items():
                setattr(user, key, value)
            db.session.commit()

    def get_user(self, user_id):
        with self.app.app_context():
            user = db.session.get(User, user_id)
            db.session.expunge(user)
            return user

    def grant_coins(self, user_id, amount):
        with self.app.app_context():
            user = db.session.get(User, user_id)
            CoinService().record_transaction(user, "reward", amount, description="Test grant")
            db.session.commit()

    def create_series(self, client, **fields):
        payload = {"title": "Blue Lantern", "type": "manga", "description": "A lantern story"}
        payload.update(fields)
        resp = client.post("/api/series", json=payload)
        self.assertEqual(resp.status_code, 201, resp.get_json())
        return resp.get_json()

    def create_chapter(self, client, series_id, number, **fields):
        payload = {"chapterNumber": number, "content": f"Text of chapter {number}"}
        payload.update(fields)
        resp = client.post(f"/api/series/{series_id}/chapters", json=payload)
        self.assertEqual(resp.status_code, 201, resp.get_json())
        return resp.get_json()
