"""Migration engine and runner."""

from .backup_codes import generate_backup_code_list, generate_backup_codes
from .engine import MigrationEngine
from .runner import MigrationRunner

__all__ = [
    'generate_backup_code_list',
    'generate_backup_codes',
    'MigrationEngine',
    'MigrationRunner',
]
