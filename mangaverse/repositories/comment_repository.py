from mangaverse import db
from mangaverse.models.comment import Comment


class CommentRepository:
    def get_by_id(self, comment_id):
        return Comment.query.get(comment_id)

    def get_top_level_for_chapter(self, chapter_id):
        return (
            Comment.query.filter_by(chapter_id=chapter_id, parent_id=None)
            .order_by(Comment.created_at.desc())
            .all()
        )

    def add(self, comment):
        db.session.add(comment)
        db.session.flush()
        return comment

    def delete(self, comment):
        for reply in list(comment.replies):
            self.delete(reply)
        db.session.delete(comment)
