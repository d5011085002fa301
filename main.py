import argparse
import asyncio
import sys

import config
from api.mastodon_client import MastodonClient
from db.status_cache import StatusCache
from services.status_fetcher import StatusFetcher
from services.thread_builder import build_threads
from services.thread_writer import clear_output, materialize
from utils.errors import describe_error_chain
from utils.logger import logger


class ProgressReporter:
    """
    Logs fetch progress. Status-level updates are frequent, so only every
    `every`-th one reaches the log.
    """

    def __init__(self, every=40):
        self.every = every
        self.calls = 0

    def advance(self, message):
        self.calls += 1
        if self.calls % self.every == 0:
            logger.log(message)

    def finish(self, message):
        if message:
            logger.log(message.strip())


async def run(account_name, use_cache=True, minimum_thread_size=config.DEFAULT_MINIMUM_THREAD_SIZE,
              include_source_link=False, client=None):
    """
    Loads the cache, fetches new statuses, rebuilds threads and writes them out.
    Returns the {root_id: chain} mapping that was materialized.
    """
    config.ensure_directories(config.CACHE_DIR, config.OUTPUT_DIR)

    cache = StatusCache(config.CACHE_FILE)
    store = cache.load(use_cache=use_cache)
    clear_output(config.OUTPUT_DIR, config.OUTPUT_EXTENSION)

    if client is None:
        instance, access_token = config.require_credentials()
        client = MastodonClient(instance, access_token, requests_per_second=config.REQUESTS_PER_SECOND)

    logger.log("Running Threads")
    account_id = await client.lookup_account(account_name)

    progress = ProgressReporter()
    logger.log("Fetching statuses from Mastodon...")
    fetcher = StatusFetcher(
        client,
        cache,
        page_size=config.PAGE_SIZE,
        on_progress=progress.advance,
        on_finish=progress.finish,
    )
    store = await fetcher.fetch_all(account_id, store)
    logger.log(f"Number of statuses: {len(store)}")

    threads = build_threads(store.statuses, minimum_thread_size)
    logger.log(f"Found {len(threads)} threads.")

    materialize(
        threads,
        store.statuses,
        config.OUTPUT_DIR,
        extension=config.OUTPUT_EXTENSION,
        include_source_link=include_source_link,
    )
    return threads


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Fetch a Mastodon account's statuses and extract its longest reply threads.")
    parser.add_argument('account_name', help="Account name, e.g. user or user@instance (leading @ optional).")
    parser.add_argument('--no-cache', action='store_true', help="Ignore the cached statuses (a fresh cache is still written).")
    parser.add_argument('-m', '--minimum-thread-size', type=int, default=config.DEFAULT_MINIMUM_THREAD_SIZE,
                        help="A status is kept as a thread leaf only if it has more than this many ancestors.")
    parser.add_argument('--include-source-link', action='store_true',
                        help="Prepend a link to the root status and its date to each thread file.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    try:
        asyncio.run(run(
            args.account_name,
            use_cache=not args.no_cache,
            minimum_thread_size=args.minimum_thread_size,
            include_source_link=args.include_source_link,
        ))
    except Exception as e:
        for error in describe_error_chain(e):
            logger.error(f"{type(error).__name__}: {error}")
        logger.debug("Traceback of the outermost error:", exc_info=e)
        return 1

    logger.log("Done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
