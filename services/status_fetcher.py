from api.status_parser import normalize_status
from config import PAGE_SIZE
from utils.errors import RateLimitExceeded
from utils.logger import logger


def _noop(message):
    return None


class StatusFetcher:
    """
    Pages backwards through an account's statuses with max_id and merges
    them into a StatusStore that survives across runs.

    The store is saved on every way out of fetch_all: pagination complete,
    no cursor progress, rate limit, or a fatal transport error (which is
    re-raised after the save).
    """

    def __init__(self, client, cache, page_size=PAGE_SIZE, on_progress=None, on_finish=None):
        self.client = client
        self.cache = cache
        self.page_size = page_size
        self.on_progress = on_progress or _noop
        self.on_finish = on_finish or _noop

    async def fetch_all(self, account_id, store):
        statuses = store.statuses
        last_id = store.last_id
        previous_id = None
        pages = 0

        try:
            while True:
                self.on_progress(f"Statuses found: {len(statuses)}")
                if last_id and previous_id == last_id:
                    self.on_finish("Apparently found enough posts")
                    break
                previous_id = last_id

                try:
                    page = await self.client.list_statuses(account_id, max_id=last_id, limit=self.page_size)
                except RateLimitExceeded:
                    self.on_finish(f'Too many requests after id "{last_id}".')
                    break

                pages += 1
                if not page:
                    self.on_finish("No more statuses to check")
                    break

                added = 0
                for raw_status in page:
                    status_id = str(raw_status['id'])
                    last_id = status_id
                    if status_id not in statuses:
                        statuses[status_id] = normalize_status(raw_status)
                        added += 1
                    self.on_progress(f"Statuses found: {len(statuses)}")

                logger.debug(f"Page {pages}: {len(page)} status(es), {added} new, cursor now {last_id}")
        finally:
            store.last_id = last_id
            self.cache.save(store)

        logger.log(f"Fetched {pages} page(s); {len(statuses)} status(es) in store")
        return store
