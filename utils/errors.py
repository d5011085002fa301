class ThreadsError(Exception):
    """Base class for every error raised by this tool."""


class ConfigurationError(ThreadsError):
    """
    Missing settings or storage locations that could not be created.
    Always raised before any network activity.
    """


class RateLimitExceeded(ThreadsError):
    """
    The instance answered 429. Recoverable: the fetch loop stops and
    keeps everything retrieved so far.
    """


class TransportError(ThreadsError):
    """Any other failure talking to the instance. Fatal to the run."""


def describe_error_chain(error):
    """
    Returns `error` and the exceptions it wraps, innermost first.
    Implicit context hidden with `raise ... from None` is left out.
    """
    chain = []
    seen = set()
    while error is not None and id(error) not in seen:
        seen.add(id(error))
        chain.append(error)
        if error.__cause__ is not None:
            error = error.__cause__
        elif not error.__suppress_context__:
            error = error.__context__
        else:
            error = None
    chain.reverse()
    return chain
