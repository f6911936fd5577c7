"""Coin packages, Stripe checkout and chapter unlocks."""

import unittest
from unittest.mock import MagicMock, patch

import stripe

from mangaverse import db
from mangaverse.models.transaction import Transaction
from mangaverse.models.user import User
from mangaverse.services.coin_service import CoinService
from tests.base import ApiTestCase


class TestPackages(ApiTestCase):

    def test_package_table(self):
        packages = self.client.get("/api/coins/packages").get_json()
        self.assertEqual(len(packages), 6)
        basic = next(p for p in packages if p["id"] == "basic")
        self.assertEqual(basic["totalCoins"], 550)
        self.assertEqual(basic["price"], 4.99)
        self.assertTrue(basic["popular"])


class TestCheckout(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.reader, self.reader_user = self.new_client("reader")

    @patch("mangaverse.services.payment_service.stripe.checkout.Session.create")
    def test_create_session_uses_server_price(self, mock_create):
        mock_create.return_value = MagicMock(id="cs_test_1", url="https://checkout.example/cs_test_1")
        resp = self.reader.post(
            "/api/coins/create-checkout-session", json={"packageId": "basic", "price": 1}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {"sessionId": "cs_test_1", "url": "https://checkout.example/cs_test_1"})

        kwargs = mock_create.call_args.kwargs
        self.assertEqual(kwargs["line_items"][0]["price_data"]["unit_amount"], 499)
        self.assertEqual(kwargs["metadata"]["user_id"], self.reader_user["id"])
        self.assertEqual(kwargs["metadata"]["package_id"], "basic")

    def test_unknown_package(self):
        resp = self.reader.post("/api/coins/create-checkout-session", json={"packageId": "gold"})
        self.assertEqual(resp.status_code, 400)

    @patch("mangaverse.services.payment_service.stripe.checkout.Session.create")
    def test_stripe_failure(self, mock_create):
        mock_create.side_effect = stripe.StripeError("card network down")
        resp = self.reader.post("/api/coins/create-checkout-session", json={"packageId": "basic"})
        self.assertEqual(resp.status_code, 400)

    def test_missing_stripe_key(self):
        self.app.config["STRIPE_SECRET_KEY"] = None
        resp = self.reader.post("/api/coins/create-checkout-session", json={"packageId": "basic"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["message"], "Payments are not configured")

    def _paid_session(self, user_id=None, status="paid"):
        return MagicMock(
            metadata={"user_id": user_id or self.reader_user["id"], "package_id": "basic"},
            payment_status=status,
        )

    @patch("mangaverse.services.payment_service.stripe.checkout.Session.retrieve")
    def test_confirm_payment_is_idempotent(self, mock_retrieve):
        mock_retrieve.return_value = self._paid_session()

        first = self.reader.post("/api/coins/confirm-payment", json={"sessionId": "cs_test_1"})
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.get_json()["coinBalance"], 550)
        self.assertFalse(first.get_json()["alreadyProcessed"])

        second = self.reader.post("/api/coins/confirm-payment", json={"sessionId": "cs_test_1"})
        self.assertEqual(second.status_code, 200)
        self.assertTrue(second.get_json()["alreadyProcessed"])
        self.assertEqual(second.get_json()["coinBalance"], 550)
        self.assertEqual(mock_retrieve.call_count, 1)

        history = self.reader.get("/api/user/transactions").get_json()
        self.assertEqual([(t["type"], t["amount"]) for t in history], [("purchase", 550)])

    @patch("mangaverse.services.payment_service.stripe.checkout.Session.retrieve")
    def test_unpaid_session_rejected(self, mock_retrieve):
        mock_retrieve.return_value = self._paid_session(status="unpaid")
        resp = self.reader.post("/api/coins/confirm-payment", json={"sessionId": "cs_test_2"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.get_user(self.reader_user["id"]).coin_balance, 0)

    @patch("mangaverse.services.payment_service.stripe.checkout.Session.retrieve")
    def test_session_of_another_user_rejected(self, mock_retrieve):
        mock_retrieve.return_value = self._paid_session(user_id="someone-else")
        resp = self.reader.post("/api/coins/confirm-payment", json={"sessionId": "cs_test_3"})
        self.assertEqual(resp.status_code, 403)


class TestUnlock(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.creator, self.creator_user = self.new_creator("mangaka")
        self.update_user(self.creator_user["id"], followers_count=500)
        series = self.create_series(self.creator)
        self.free = self.create_chapter(self.creator, series["id"], 1)
        self.premium = self.create_chapter(
            self.creator, series["id"], 2, status="premium", coinPrice=5, content="paid text"
        )
        self.reader, self.reader_user = self.new_client("reader")
        self.url = f"/api/chapters/{self.premium['id']}/unlock"

    def _assert_ledger_matches(self, user_id):
        with self.app.app_context():
            user = db.session.get(User, user_id)
            self.assertEqual(CoinService().ledger_balance(user), user.coin_balance)

    def test_insufficient_coins(self):
        resp = self.reader.post(self.url)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["required"], 5)
        self.assertEqual(resp.get_json()["coinBalance"], 0)

    def test_unlock_moves_coins_to_author(self):
        self.grant_coins(self.reader_user["id"], 20)
        resp = self.reader.post(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {"unlocked": True, "alreadyUnlocked": False, "coinBalance": 15})

        self.assertEqual(self.get_user(self.creator_user["id"]).coin_balance, 5)
        self._assert_ledger_matches(self.reader_user["id"])
        self._assert_ledger_matches(self.creator_user["id"])

        body = self.reader.get(f"/api/chapters/{self.premium['id']}").get_json()
        self.assertFalse(body["isLocked"])
        self.assertEqual(body["content"], "paid text")

        again = self.reader.post(self.url).get_json()
        self.assertTrue(again["alreadyUnlocked"])
        self.assertEqual(again["coinBalance"], 15)

        analytics = self.creator.get("/api/creator/analytics").get_json()
        self.assertEqual(analytics["coinsEarned"], 5)

    def test_author_never_pays(self):
        resp = self.creator.post(self.url)
        self.assertTrue(resp.get_json()["alreadyUnlocked"])
        with self.app.app_context():
            self.assertEqual(Transaction.query.count(), 0)

    def test_free_chapter_cannot_be_unlocked(self):
        resp = self.reader.post(f"/api/chapters/{self.free['id']}/unlock")
        self.assertEqual(resp.status_code, 400)


if __name__ == "__main__":
    unittest.main()
