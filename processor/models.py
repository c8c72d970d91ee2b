"""
Data models for the ranking pipeline.

Entities are immutable snapshots taken at fetch time. Derived values such as
comment counts are attached by building a new instance, never by mutation.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Union

EntityId = Union[int, str]


def id_sort_key(value: EntityId) -> tuple:
    """
    Ordering key for upstream identifiers.

    Numeric identifiers (ints or digit strings) compare numerically;
    anything else compares lexically and sorts after all numeric ids.
    """
    if isinstance(value, bool):
        return (1, 0, str(value))
    if isinstance(value, int):
        return (0, value, "")
    text = str(value)
    if text.isdecimal():
        return (0, int(text), "")
    return (1, 0, text)


@dataclass(frozen=True)
class UserActivity:
    """A user with the number of posts found for them in one fetch cycle."""
    id: EntityId
    name: str
    post_count: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "postCount": self.post_count,
        }


@dataclass(frozen=True)
class Post:
    """A post tagged with its owner's username."""
    id: EntityId
    user_id: Optional[EntityId]
    content: str
    username: str
    comment_count: Optional[int] = None
    attributes: dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], username: str) -> "Post":
        """
        Build a Post from an upstream post object.

        Fields other than id/userid/content are kept in `attributes` so they
        are served back unchanged.
        """
        known = {"id", "userid", "content", "username", "commentCount"}
        return cls(
            id=payload["id"],
            user_id=payload.get("userid"),
            content=payload.get("content", ""),
            username=username,
            attributes={k: v for k, v in payload.items() if k not in known},
        )

    def with_comment_count(self, count: int) -> "Post":
        return replace(self, comment_count=count)

    def to_dict(self) -> dict:
        data = dict(self.attributes)
        data.update({
            "id": self.id,
            "userid": self.user_id,
            "content": self.content,
            "username": self.username,
        })
        if self.comment_count is not None:
            data["commentCount"] = self.comment_count
        return data
