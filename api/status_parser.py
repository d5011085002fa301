STATUS_KEYS = (
    'id',
    'uri',
    'created_at',
    'content',
    'visibility',
    'spoiler_text',
    'tags',
    'in_reply_to_id',
    'in_reply_to_account_id',
)

ID_KEYS = ('id', 'in_reply_to_id', 'in_reply_to_account_id')


def normalize_status(raw_status):
    """
    Projects a raw Mastodon status onto the fields kept in the cache.
    Ids are stored as strings so cache keys and reply pointers compare equal.
    """
    normalized = {}
    for key in STATUS_KEYS:
        value = raw_status.get(key)
        if key in ID_KEYS and value is not None:
            value = str(value)
        normalized[key] = value

    if normalized['tags'] is None:
        normalized['tags'] = []

    return normalized
