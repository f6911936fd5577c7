from mangaverse.models.user import User
from mangaverse.models.group import Group, GroupMember
from mangaverse.models.series import Series
from mangaverse.models.chapter import Chapter
from mangaverse.models.chapter_interaction import ChapterLike, ChapterUnlock, ChapterView
from mangaverse.models.comment import Comment
from mangaverse.models.review import Review
from mangaverse.models.follow import Follow
from mangaverse.models.bookmark import Bookmark, BookmarkFolder
from mangaverse.models.reading_progress import ReadingHistory, ReadingProgress
from mangaverse.models.transaction import Transaction
from mangaverse.models.site_config import SiteConfig

__all__ = [
    "User",
    "Group",
    "GroupMember",
    "Series",
    "Chapter",
    "ChapterLike",
    "ChapterUnlock",
    "ChapterView",
    "Comment",
    "Review",
    "Follow",
    "Bookmark",
    "BookmarkFolder",
    "ReadingHistory",
    "ReadingProgress",
    "Transaction",
    "SiteConfig",
]
