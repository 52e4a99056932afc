from .note_service import NoteService
from .blog_service import BlogService
from .file_data_service import FileDataService, FileDeleteResult
from .vice_bank_service import ViceBankService
from .backup_scheduler import BackupScheduler

__all__ = [
    "NoteService",
    "BlogService",
    "FileDataService",
    "FileDeleteResult",
    "ViceBankService",
    "BackupScheduler",
]
