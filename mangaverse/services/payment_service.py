import stripe
from flask import current_app
from sqlalchemy.exc import IntegrityError

from mangaverse import db
from mangaverse.errors import PaymentError, PermissionDenied, ValidationError
from mangaverse.logger import get_logger
from mangaverse.models.site_config import MAIN_CONFIG_ID, SiteConfig
from mangaverse.repositories.transaction_repository import TransactionRepository
from mangaverse.services.coin_service import CoinService, get_package


logger = get_logger(__name__)


def stripe_secret_key():
    key = current_app.config.get("STRIPE_SECRET_KEY")
    if key:
        return key
    site = SiteConfig.query.get(MAIN_CONFIG_ID)
    if site is not None and site.stripe_secret_key:
        return site.stripe_secret_key
    return None


def _metadata_value(metadata, key):
    if metadata is None:
        return None
    try:
        return metadata[key]
    except (KeyError, TypeError):
        return None


class PaymentService:
    def __init__(self, coin_service=None, transaction_repository=None):
        self.coin_service = coin_service or CoinService()
        self.transaction_repository = transaction_repository or TransactionRepository()

    def _api_key(self):
        key = stripe_secret_key()
        if not key:
            raise PaymentError("Payments are not configured")
        return key

    def create_checkout_session(self, user, package_id):
        package = get_package(package_id)
        if package is None:
            raise ValidationError("Package not found")
        api_key = self._api_key()
        base_url = current_app.config["PUBLIC_BASE_URL"].rstrip("/")
        coins = package["amount"] + package["bonus"]
        try:
            session = stripe.checkout.Session.create(
                api_key=api_key,
                mode="payment",
                payment_method_types=["card"],
                line_items=[
                    {
                        "price_data": {
                            "currency": current_app.config["STRIPE_CURRENCY"],
                            "product_data": {"name": f"{coins} Coins ({package['id']})"},
                            "unit_amount": package["price_cents"],
                        },
                        "quantity": 1,
                    }
                ],
                client_reference_id=user.id,
                metadata={
                    "user_id": user.id,
                    "package_id": package["id"],
                    "coin_amount": str(coins),
                },
                success_url=f"{base_url}/coins?success=true&session_id={{CHECKOUT_SESSION_ID}}",
                cancel_url=f"{base_url}/coins?canceled=true",
            )
        except stripe.StripeError as exc:
            logger.error("Stripe checkout creation failed for user %s: %s", user.id, exc)
            raise PaymentError("Failed to create checkout session")
        logger.info("Created checkout session %s for user %s (%s)", session.id, user.id, package["id"])
        return {"sessionId": session.id, "url": session.url}

    def confirm_payment(self, user, session_id):
        if not session_id:
            raise ValidationError("Session ID is required")

        existing = self.transaction_repository.get_by_reference(session_id)
        if existing is not None:
            if existing.user_id != user.id:
                raise PermissionDenied("Payment belongs to another user")
            return self._result(user, existing.amount, already_processed=True)

        api_key = self._api_key()
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=api_key)
        except stripe.StripeError as exc:
            logger.error("Stripe session lookup failed for %s: %s", session_id, exc)
            raise PaymentError("Failed to verify payment")

        metadata = session.metadata
        if _metadata_value(metadata, "user_id") != user.id:
            raise PermissionDenied("Payment belongs to another user")
        if session.payment_status != "paid":
            raise PaymentError("Payment not completed", paymentStatus=session.payment_status)
        package = get_package(_metadata_value(metadata, "package_id"))
        if package is None:
            raise PaymentError("Unknown coin package on payment")

        coins = package["amount"] + package["bonus"]
        self.coin_service.record_transaction(
            user,
            "purchase",
            coins,
            description=f"Purchased {coins} coins ({package['id']})",
            reference=session_id,
        )
        try:
            db.session.commit()
        except IntegrityError:
            # A concurrent confirmation already credited this session.
            db.session.rollback()
            db.session.refresh(user)
            return self._result(user, coins, already_processed=True)
        logger.info("Credited %s coins to user %s from %s", coins, user.id, session_id)
        return self._result(user, coins, already_processed=False)

    @staticmethod
    def _result(user, coins, already_processed):
        return {
            "success": True,
            "coinAmount": coins,
            "coinBalance": user.coin_balance,
            "alreadyProcessed": already_processed,
        }
