from tocr.models.article import Article, ArticleGame, ArticleTag
from tocr.models.base import Base
from tocr.models.game import Game
from tocr.models.issue import Issue
from tocr.models.magazine import Magazine
from tocr.models.ocr_record import OcrRecord
from tocr.models.tag import Tag, TagType
from tocr.models.user import User


__all__ = [
    "Base",
    "User",
    "Magazine",
    "Issue",
    "Article",
    "ArticleTag",
    "ArticleGame",
    "Tag",
    "TagType",
    "Game",
    "OcrRecord",
]
