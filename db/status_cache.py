import json
import os
import tempfile
from datetime import datetime

import pytz

from config import TIMEZONE
from utils.errors import ConfigurationError
from utils.logger import logger


class StatusStore:
    """
    Local mirror of an account's statuses, keyed by status id, plus the
    oldest id seen so far (the max_id cursor for the next page).
    """

    def __init__(self, statuses=None, last_id=None):
        self.statuses = statuses if statuses is not None else {}
        self.last_id = last_id

    def __len__(self):
        return len(self.statuses)

    def __contains__(self, status_id):
        return status_id in self.statuses

    def to_dict(self):
        return {
            "last_id": self.last_id,
            "statuses": self.statuses,
        }


def _fetched_at():
    return datetime.now(pytz.timezone(TIMEZONE)).isoformat()


class StatusCache:
    def __init__(self, path):
        self.path = path

    def load(self, use_cache=True):
        """
        Returns the persisted store, or an empty one when there is no cache
        file or caching is disabled for this run.
        """
        if not use_cache:
            logger.log("Cache disabled, starting from an empty store")
            return StatusStore()
        if not os.path.isfile(self.path):
            logger.debug(f"No cache file at {self.path}")
            return StatusStore()

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f'Cache file "{self.path}" is not valid JSON') from e

        statuses = payload.get('statuses') if isinstance(payload, dict) else None
        if statuses is None and isinstance(payload, dict):
            statuses = {}
        if not isinstance(statuses, dict):
            raise ConfigurationError(f'Cache file "{self.path}" does not hold a statuses mapping')

        store = StatusStore(
            statuses=statuses,
            last_id=payload.get('last_id'),
        )
        logger.log(f"Loaded {len(store)} cached status(es) from {self.path} (last id: {store.last_id})")
        return store

    def save(self, store):
        """
        Overwrites the cache file with the store. Written to a temporary file
        first and renamed so an interrupted write leaves the old cache intact.
        """
        payload = store.to_dict()
        payload["fetched_at"] = _fetched_at()

        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(prefix='.cached_data.', suffix='.tmp', dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        logger.debug(f"Saved {len(store)} status(es) to {self.path} (last id: {store.last_id})")
