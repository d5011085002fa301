import asyncio
import json
import time

import requests

from config import PAGE_SIZE, REQUEST_TIMEOUT, REQUESTS_PER_SECOND
from utils.errors import RateLimitExceeded, TransportError
from utils.logger import logger


class RequestThrottle:
    """
    Keeps at least 1/requests_per_second seconds between two requests.
    """
    def __init__(self, requests_per_second):
        self.interval_s = 1.0 / requests_per_second
        self.last_request_time = None

    async def acquire(self):
        if self.last_request_time is not None:
            wait_s = self.interval_s - (time.monotonic() - self.last_request_time)
            if wait_s > 0:
                logger.debug(f"Throttling: waiting {wait_s:.2f}s before next request")
                await asyncio.sleep(wait_s)
        self.last_request_time = time.monotonic()


async def make_http_request(options):
    """
    Helper function to make HTTP requests using requests library.
    """
    method = options.get('method', 'GET')
    url = options.get('url')
    params = options.get('params')
    headers = options.get('headers')
    timeout = options.get('timeout', REQUEST_TIMEOUT)

    # Run the blocking request in an executor so the event loop stays free
    loop = asyncio.get_running_loop()
    response = await loop.run_in_executor(
        None,
        lambda: requests.request(method, url, params=params, headers=headers, timeout=timeout)
    )
    response.raise_for_status()

    try:
        parsed_data = response.json()
    except ValueError:
        logger.error(f"Error parsing JSON response from {url}: {response.text[:500]}...")
        raise

    return {
        "status": response.status_code,
        "statusText": response.reason,
        "headers": dict(response.headers),
        "data": parsed_data
    }


class MastodonClient:
    """
    Read-only client for the two Mastodon endpoints the fetcher needs.

    429 responses surface as RateLimitExceeded so the caller can stop
    paginating and keep its progress; every other requests failure
    surfaces as TransportError.
    """

    def __init__(self, instance, access_token, requests_per_second=REQUESTS_PER_SECOND):
        if not instance or not access_token:
            raise ValueError("instance and access_token must be set.")

        instance = instance.strip().rstrip('/')
        if not instance.startswith(('http://', 'https://')):
            instance = f"https://{instance}"
        self.base_url = instance
        self.headers = {
            'Authorization': f"Bearer {access_token}",
            'User-Agent': 'mastodon-threads/1.0',
        }
        self.throttle = RequestThrottle(requests_per_second)

    async def _get(self, path, params=None):
        options = {
            'method': 'GET',
            'url': f"{self.base_url}{path}",
            'params': params,
            'headers': self.headers,
        }

        await self.throttle.acquire()
        try:
            return await make_http_request(options)
        except requests.exceptions.HTTPError as error:
            status = error.response.status_code if error.response is not None else None
            if status == 429:
                reset_at = error.response.headers.get('X-RateLimit-Reset')
                logger.warn(f"Rate limit exceeded (429) on {path}" + (f", resets at {reset_at}" if reset_at else ""))
                raise RateLimitExceeded(f"Too many requests on {path}") from error
            logger.error(f"API Error: Status {status} on {path}")
            if error.response is not None:
                logger.error(f"Error headers: {json.dumps(dict(error.response.headers))}")
            raise TransportError(f"GET {path} failed with status {status}") from error
        except requests.exceptions.RequestException as error:
            logger.error(f"Request error on {path}: {error}")
            raise TransportError(f"GET {path} failed: {error}") from error
        except ValueError as error:
            raise TransportError(f"GET {path} returned a non-JSON body") from error

    async def lookup_account(self, handle):
        """
        Resolves an account handle (with or without @) to its id.
        """
        acct = handle.strip().lstrip('@')
        logger.log(f"Resolving @{acct} to account id...")
        response = await self._get('/api/v1/accounts/lookup', params={'acct': acct})
        data = response.get('data') or {}

        account_id = data.get('id') if isinstance(data, dict) else None
        if not account_id:
            raise TransportError(f"Could not find account id for @{acct}")

        logger.log(f"Found account id {account_id} for @{acct}")
        return str(account_id)

    async def list_statuses(self, account_id, max_id=None, limit=PAGE_SIZE):
        """
        Returns up to `limit` statuses of the account strictly older than max_id,
        newest first.
        """
        params = {'limit': limit}
        if max_id:
            params['max_id'] = max_id

        response = await self._get(f"/api/v1/accounts/{account_id}/statuses", params=params)
        data = response.get('data')
        if not isinstance(data, list):
            raise TransportError(f"Unexpected statuses payload for account {account_id}")
        return data
