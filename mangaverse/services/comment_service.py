from mangaverse import db
from mangaverse.errors import NotFoundError, PermissionDenied, ValidationError
from mangaverse.models.comment import Comment
from mangaverse.repositories.chapter_repository import ChapterRepository
from mangaverse.repositories.comment_repository import CommentRepository


MAX_COMMENT_LENGTH = 5000


class CommentService:
    def __init__(self, comment_repository=None, chapter_repository=None):
        self.comment_repository = comment_repository or CommentRepository()
        self.chapter_repository = chapter_repository or ChapterRepository()

    def _get_chapter(self, chapter_id):
        chapter = self.chapter_repository.get_by_id(chapter_id)
        if chapter is None:
            raise NotFoundError("Chapter not found")
        return chapter

    def list_comments(self, chapter_id):
        chapter = self._get_chapter(chapter_id)
        return self.comment_repository.get_top_level_for_chapter(chapter.id)

    def add_comment(self, user, chapter_id, content, parent_id=None):
        content = (content or "").strip()
        if not content:
            raise ValidationError("Comment content is required")
        if len(content) > MAX_COMMENT_LENGTH:
            raise ValidationError(f"Comment must be at most {MAX_COMMENT_LENGTH} characters")
        chapter = self._get_chapter(chapter_id)
        if parent_id:
            parent = self.comment_repository.get_by_id(parent_id)
            if parent is None or parent.chapter_id != chapter.id:
                raise ValidationError("Parent comment does not belong to this chapter")
        comment = Comment(
            user_id=user.id,
            chapter_id=chapter.id,
            content=content,
            parent_id=parent_id or None,
        )
        self.comment_repository.add(comment)
        db.session.commit()
        return comment

    def delete_comment(self, user, comment_id):
        comment = self.comment_repository.get_by_id(comment_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        if comment.user_id != user.id and not user.is_admin:
            raise PermissionDenied("forbidden")
        self.comment_repository.delete(comment)
        db.session.commit()
