# Namespace for pipeline steps
from .load_candidates import LoadSyncCandidates  # noqa: F401
from .sync_profiles import SyncProfileBatches  # noqa: F401
