from flask import jsonify

from mangaverse.auth import current_user, login_required
from mangaverse.blueprints.coins import coins_bp
from mangaverse.blueprints.helpers import get_payload
from mangaverse.services.coin_service import CoinService, list_packages
from mangaverse.services.payment_service import PaymentService


coin_service = CoinService()
payment_service = PaymentService(coin_service=coin_service)


@coins_bp.route("/coins/packages", methods=["GET"])
def packages():
    return jsonify(list_packages()), 200


@coins_bp.route("/coins/create-checkout-session", methods=["POST"])
@login_required
def create_checkout_session():
    data = get_payload()
    return jsonify(payment_service.create_checkout_session(current_user(), data.get("packageId"))), 200


@coins_bp.route("/coins/confirm-payment", methods=["POST"])
@login_required
def confirm_payment():
    data = get_payload()
    return jsonify(payment_service.confirm_payment(current_user(), data.get("sessionId"))), 200


@coins_bp.route("/user/transactions", methods=["GET"])
@login_required
def transactions():
    items = coin_service.list_transactions(current_user())
    return jsonify([t.to_dict() for t in items]), 200
