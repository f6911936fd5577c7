"""Installer steps, the install endpoints and the setup gate."""

import os
import shutil
import tempfile
import unittest

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from mangaverse.config import TestingConfig
from mangaverse.models.site_config import MAIN_CONFIG_ID, SiteConfig
from mangaverse.models.transaction import Transaction
from mangaverse.models.user import User
from mangaverse.services.install_manager import InstallManager
from tests.base import ApiTestCase


class TestInstallManager(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.database_url = "sqlite:///" + os.path.join(self.tmpdir, "install.db")
        self.manager = InstallManager(starting_coins=10000, default_site_name="MangaVerse")

    def tearDown(self):
        self.manager.close()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_rejects_bad_urls(self):
        for url in (None, "", "   ", "not a url", "mysql://user:pw@localhost/db"):
            with self.subTest(url=url):
                self.assertFalse(self.manager.validate_database_connection(url))

    def test_full_installation(self):
        result = self.manager.perform_full_installation(
            {
                "databaseUrl": self.database_url,
                "adminUsername": "admin",
                "adminPassword": "supersecret",
                "siteName": "Lantern",
                "stripeSecretKey": "sk_test_site",
            }
        )
        self.assertTrue(result["success"], result)
        self.assertTrue(self.manager.check_setup_status()["isSetup"])

        engine = create_engine(self.database_url)
        try:
            with Session(engine) as session:
                admin = session.execute(select(User).where(User.username == "admin")).scalar_one()
                self.assertEqual(admin.id, result["adminUserId"])
                self.assertTrue(admin.is_admin)
                self.assertTrue(admin.is_creator)
                self.assertEqual(admin.email, "admin@admin.local")
                self.assertEqual(admin.coin_balance, 10000)
                rewards = session.execute(
                    select(Transaction).where(Transaction.user_id == admin.id)
                ).scalars().all()
                self.assertEqual([(t.type, t.amount) for t in rewards], [("reward", 10000)])

                site = session.get(SiteConfig, MAIN_CONFIG_ID)
                self.assertTrue(site.setup_complete)
                self.assertEqual(site.site_name, "Lantern")
                self.assertEqual(site.admin_user_id, admin.id)
                self.assertNotIn("stripeSecretKey", site.to_dict())
                self.assertTrue(site.to_dict()["hasStripe"])
        finally:
            engine.dispose()

    def test_reinstall_promotes_existing_admin_without_double_grant(self):
        setup = {"databaseUrl": self.database_url, "adminUsername": "admin", "adminPassword": "supersecret"}
        first = self.manager.perform_full_installation(setup)
        self.manager.close()
        rerun = InstallManager()
        try:
            second = rerun.perform_full_installation(dict(setup, adminPassword="changedpass"))
        finally:
            rerun.close()
        self.assertEqual(first["adminUserId"], second["adminUserId"])

        engine = create_engine(self.database_url)
        try:
            with Session(engine) as session:
                admin = session.get(User, first["adminUserId"])
                self.assertEqual(admin.coin_balance, 10000)
                self.assertTrue(admin.check_password("changedpass"))
        finally:
            engine.dispose()

    def test_stops_at_first_failure(self):
        result = self.manager.perform_full_installation(
            {"databaseUrl": "oracle://nowhere", "adminUsername": "admin", "adminPassword": "x" * 8}
        )
        self.assertFalse(result["success"])
        self.assertEqual(result["error"], "Invalid database URL or connection failed")


class TestInstallEndpoints(ApiTestCase):

    def _install(self, **fields):
        payload = {"adminUsername": "admin", "adminPassword": "supersecret", "siteName": "Lantern"}
        payload.update(fields)
        return self.client.post("/api/setup/install", json=payload)

    def test_status_before_install(self):
        resp = self.client.get("/api/setup/status")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.get_json()["isSetup"])

    def test_install_into_app_database(self):
        resp = self._install()
        self.assertEqual(resp.status_code, 200, resp.get_json())
        self.assertTrue(resp.get_json()["success"])

        status = self.client.get("/api/setup/status").get_json()
        self.assertTrue(status["isSetup"])
        self.assertEqual(status["config"]["siteName"], "Lantern")

        login = self.client.post("/api/login", json={"username": "admin", "password": "supersecret"})
        self.assertEqual(login.status_code, 200)
        self.assertEqual(login.get_json()["coinBalance"], 10000)
        self.assertTrue(login.get_json()["isAdmin"])

        again = self._install()
        self.assertEqual(again.status_code, 400)

    def test_install_requires_admin_credentials(self):
        self.assertEqual(self._install(adminPassword="").status_code, 400)

    def test_install_with_unreachable_database(self):
        resp = self._install(databaseUrl="mysql://user:pw@localhost/db")
        self.assertEqual(resp.status_code, 500)
        self.assertFalse(resp.get_json()["success"])

    def test_install_is_post_only(self):
        self.assertEqual(self.client.get("/api/setup/install").status_code, 405)

    def test_validate_db(self):
        resp = self.client.post("/api/setup/validate-db", json={"databaseUrl": "sqlite://"})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.get_json()["valid"])

        resp = self.client.post("/api/setup/validate-db", json={"databaseUrl": ""})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["message"], "Database URL is required")

    def test_validate_db_reports_connection_failure(self):
        resp = self.client.post(
            "/api/setup/validate-db", json={"databaseUrl": "mysql://user:pw@localhost/db"}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.get_json()["valid"])
        self.assertIn("error", resp.get_json())

    def test_validate_db_closed_after_install(self):
        self.assertEqual(self._install().status_code, 200)
        target = os.path.join(self.upload_dir, "stray.db")
        resp = self.client.post(
            "/api/setup/validate-db", json={"databaseUrl": "sqlite:///" + target}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(os.path.exists(target))


class GatedConfig(TestingConfig):
    SETUP_REQUIRED = True


class TestSetupGate(ApiTestCase):
    config = GatedConfig

    def test_api_requests_blocked_until_setup(self):
        resp = self.client.get("/api/series")
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.get_json()["error"], "Setup required")
        self.assertTrue(resp.get_json()["setupRequired"])

    def test_browser_requests_redirected(self):
        resp = self.client.get("/library")
        self.assertEqual(resp.status_code, 302)
        self.assertTrue(resp.headers["Location"].endswith("/setup"))

    def test_setup_routes_exempt(self):
        self.assertEqual(self.client.get("/api/setup/status").status_code, 200)
        self.assertEqual(self.client.get("/assets/app.js").status_code, 404)

    def test_gate_lifts_after_install(self):
        resp = self.client.post(
            "/api/setup/install", json={"adminUsername": "admin", "adminPassword": "supersecret"}
        )
        self.assertEqual(resp.status_code, 200, resp.get_json())
        self.assertEqual(self.client.get("/api/series").status_code, 200)
