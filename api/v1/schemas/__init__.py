"""Re-export individual schema modules for easy imports."""

from .profile import DraftOut, EditResult, ImageIn, ListKind, ProfileOut, TextIn

__all__ = [
    "DraftOut",
    "EditResult",
    "ImageIn",
    "ListKind",
    "ProfileOut",
    "TextIn",
]
