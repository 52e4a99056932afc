from .base import Entity
from .note import Note
from .blog_post import BlogPost, BlogStatus
from .file_details import FileDetails, sanitize_filename
from .vice_bank import (
    Deposit,
    Frequency,
    Purchase,
    PurchasePrice,
    Task,
    TaskDeposit,
    ViceBankUser,
)

__all__ = [
    "Entity",
    "Note",
    "BlogPost",
    "BlogStatus",
    "FileDetails",
    "sanitize_filename",
    "Deposit",
    "Frequency",
    "Purchase",
    "PurchasePrice",
    "Task",
    "TaskDeposit",
    "ViceBankUser",
]
