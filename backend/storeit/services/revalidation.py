# storeit/services/revalidation.py
import datetime
import logging
from collections import OrderedDict
from typing import Optional

from .. import config
from ..models import utcnow

logger = logging.getLogger(__name__)


class Revalidator:
    """Tracks which page paths have stale cached renderings.

    Paths come from callers, so only the most recently revalidated
    ``config.REVALIDATION_MAX_PATHS`` are kept; older ones are forgotten.
    """

    def __init__(self, max_paths: Optional[int] = None):
        self.max_paths = max_paths or config.REVALIDATION_MAX_PATHS
        self._stale: "OrderedDict[str, datetime.datetime]" = OrderedDict()

    def revalidate_path(self, path: str) -> None:
        if not path:
            return
        self._stale[path] = utcnow()
        self._stale.move_to_end(path)
        while len(self._stale) > self.max_paths:
            evicted, _ = self._stale.popitem(last=False)
            logger.debug("Forgot stale path %s", evicted)
        logger.info("Revalidated path %s", path)

    def is_stale(self, path: str) -> bool:
        return path in self._stale

    def __len__(self) -> int:
        return len(self._stale)
