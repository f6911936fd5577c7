from sqlalchemy import func

from mangaverse import db
from mangaverse.models.transaction import Transaction


class TransactionRepository:
    def get_for_user(self, user_id):
        return (
            Transaction.query.filter_by(user_id=user_id)
            .order_by(Transaction.created_at.desc())
            .all()
        )

    def get_by_reference(self, reference):
        return Transaction.query.filter_by(reference=reference).first()

    def add(self, transaction):
        db.session.add(transaction)
        db.session.flush()
        return transaction

    def balance_for_user(self, user_id):
        total = (
            db.session.query(func.coalesce(func.sum(Transaction.amount), 0))
            .filter(Transaction.user_id == user_id)
            .scalar()
        )
        return int(total or 0)

    def earned_from_unlocks(self, user_id):
        total = (
            db.session.query(func.coalesce(func.sum(Transaction.amount), 0))
            .filter(
                Transaction.user_id == user_id,
                Transaction.type == "unlock",
                Transaction.amount > 0,
            )
            .scalar()
        )
        return int(total or 0)
