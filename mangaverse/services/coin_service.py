from flask import current_app

from mangaverse import db
from mangaverse.errors import NotFoundError, ValidationError
from mangaverse.logger import get_logger
from mangaverse.models.transaction import TRANSACTION_TYPES, Transaction
from mangaverse.repositories.chapter_repository import ChapterRepository
from mangaverse.repositories.transaction_repository import TransactionRepository
from mangaverse.repositories.user_repository import UserRepository


logger = get_logger(__name__)


def list_packages():
    packages = []
    for pkg in current_app.config["COIN_PACKAGES"]:
        packages.append(
            {
                "id": pkg["id"],
                "amount": pkg["amount"],
                "bonus": pkg["bonus"],
                "totalCoins": pkg["amount"] + pkg["bonus"],
                "price": round(pkg["price_cents"] / 100.0, 2),
                "popular": bool(pkg.get("popular")),
                "bestValue": bool(pkg.get("best_value")),
            }
        )
    return packages


def get_package(package_id):
    for pkg in current_app.config["COIN_PACKAGES"]:
        if pkg["id"] == package_id:
            return pkg
    return None


class CoinService:
    """Every coin balance change goes through ``record_transaction``."""

    def __init__(self, transaction_repository=None, chapter_repository=None, user_repository=None):
        self.transaction_repository = transaction_repository or TransactionRepository()
        self.chapter_repository = chapter_repository or ChapterRepository()
        self.user_repository = user_repository or UserRepository()

    def record_transaction(self, user, tx_type, amount, chapter_id=None, description=None, reference=None):
        if tx_type not in TRANSACTION_TYPES:
            raise ValueError(f"Unknown transaction type: {tx_type}")
        transaction = Transaction(
            user_id=user.id,
            type=tx_type,
            amount=amount,
            chapter_id=chapter_id,
            description=description,
            reference=reference,
        )
        self.transaction_repository.add(transaction)
        user.coin_balance = (user.coin_balance or 0) + amount
        return transaction

    def list_transactions(self, user):
        return self.transaction_repository.get_for_user(user.id)

    def ledger_balance(self, user):
        return self.transaction_repository.balance_for_user(user.id)

    def unlock_chapter(self, user, chapter_id):
        chapter = self.chapter_repository.get_by_id(chapter_id)
        if chapter is None:
            raise NotFoundError("Chapter not found")
        if not chapter.is_premium:
            raise ValidationError("Chapter is free to read")
        series = chapter.series
        if user.id == series.author_id or self.chapter_repository.is_unlocked(user.id, chapter.id):
            return {"unlocked": True, "alreadyUnlocked": True, "coinBalance": user.coin_balance}

        price = chapter.coin_price or 0
        if (user.coin_balance or 0) < price:
            raise ValidationError(
                "Insufficient coins",
                required=price,
                coinBalance=user.coin_balance or 0,
            )

        label = f"{series.title} - Chapter {chapter.chapter_number}"
        self.record_transaction(user, "unlock", -price, chapter_id=chapter.id,
                                description=f"Unlocked {label}")
        author = self.user_repository.get_by_id(series.author_id)
        if author is not None and price > 0:
            self.record_transaction(author, "unlock", price, chapter_id=chapter.id,
                                    description=f"Earned from {label}")
        self.chapter_repository.add_unlock(user.id, chapter.id)
        db.session.commit()
        logger.info("User %s unlocked chapter %s for %s coins", user.id, chapter.id, price)
        return {"unlocked": True, "alreadyUnlocked": False, "coinBalance": user.coin_balance}
