from __future__ import annotations

from pydantic import BaseModel, field_validator

DEFAULT_PLACEHOLDER = "/placeholder.png"


def unique_entries(items: list[str]) -> list[str]:
    """Drop blank entries and repeats, keeping first-seen order."""
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if not item.strip() or item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


class PreferenceSet(BaseModel):
    """Committed profile state: identity, image and the two food lists."""

    name: str
    email: str
    likes: list[str] = []
    dislikes: list[str] = []
    profile_picture: str | None = None   # completed image reference

    @field_validator("likes", "dislikes")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return unique_entries(value)

    def image_or(self, placeholder: str = DEFAULT_PLACEHOLDER) -> str:
        return self.profile_picture or placeholder

    def with_image(self, reference: str | None) -> PreferenceSet:
        return self.model_copy(update={"profile_picture": reference}, deep=True)
