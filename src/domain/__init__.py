"""领域层（Domain）。"""

from .content_string import ContentString, ContentStringError

__all__ = [
    "ContentString",
    "ContentStringError",
]
