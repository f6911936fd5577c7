from flask import jsonify

from mangaverse.auth import current_user, login_required
from mangaverse.blueprints.helpers import get_payload
from mangaverse.blueprints.social import social_bp
from mangaverse.services.comment_service import CommentService
from mangaverse.services.review_service import ReviewService


comment_service = CommentService()
review_service = ReviewService()


@social_bp.route("/chapters/<chapter_id>/comments", methods=["GET"])
def comment_list(chapter_id):
    comments = comment_service.list_comments(chapter_id)
    return jsonify([c.to_dict(include_replies=True) for c in comments]), 200


@social_bp.route("/chapters/<chapter_id>/comments", methods=["POST"])
@login_required
def comment_create(chapter_id):
    data = get_payload()
    comment = comment_service.add_comment(
        current_user(), chapter_id, data.get("content"), parent_id=data.get("parentId")
    )
    return jsonify(comment.to_dict()), 201


@social_bp.route("/comments/<comment_id>", methods=["DELETE"])
@login_required
def comment_delete(comment_id):
    comment_service.delete_comment(current_user(), comment_id)
    return "", 204


@social_bp.route("/series/<series_id>/reviews", methods=["GET"])
def review_list(series_id):
    reviews = review_service.list_reviews(series_id)
    return jsonify([r.to_dict() for r in reviews]), 200


@social_bp.route("/series/<series_id>/reviews", methods=["POST"])
@login_required
def review_create(series_id):
    data = get_payload()
    review = review_service.add_review(
        current_user(), series_id, data.get("rating"), content=data.get("content")
    )
    return jsonify(review.to_dict()), 201
