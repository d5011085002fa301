from utils.logger import logger


def walk_ancestors(status_id, statuses):
    """
    Follows in_reply_to_id upwards from a status and returns the ancestor
    ids root-first, excluding the status itself.

    The walk stops at a status without parent, at a parent missing from
    the store (deleted, or written by another account), or when a parent
    was already visited (malformed reply cycle).
    """
    ancestors = []
    visited = {status_id}
    current = statuses[status_id]

    while True:
        parent_id = current.get('in_reply_to_id')
        if parent_id is None or parent_id not in statuses:
            break
        if parent_id in visited:
            logger.warn(f"Reply cycle detected at status {parent_id} while walking up from {status_id}")
            break
        visited.add(parent_id)
        ancestors.append(parent_id)
        current = statuses[parent_id]

    ancestors.reverse()
    return ancestors


def build_threads(statuses, minimum_thread_size):
    """
    Returns {root_id: [root_id, ..., leaf_id]} keeping, for each root, the
    longest reply chain found in the store.

    A chain is only considered when its leaf has strictly more than
    `minimum_thread_size` ancestors. Among chains of equal length the first
    one in store order wins.
    """
    threads = {}

    for status_id in statuses:
        ancestors = walk_ancestors(status_id, statuses)
        if len(ancestors) <= minimum_thread_size:
            continue

        chain = ancestors + [status_id]
        root_id = chain[0]
        current = threads.get(root_id)
        if current is None or len(chain) > len(current):
            threads[root_id] = chain

    return threads
