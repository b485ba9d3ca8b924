"""GitHub label sync.

Reconciles a repository's labels against a declarative JSON manifest:
- configuration loaded from the environment and `.env`
- structured logging
- add / update / delete reconciliation through the GitHub REST API
"""

__version__ = "0.1.0"

from github_label_sync.config import LabelSyncSettings
from github_label_sync.labels import SyncMode

__all__ = ["__version__", "LabelSyncSettings", "SyncMode"]
