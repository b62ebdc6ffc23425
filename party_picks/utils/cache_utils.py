"""
Cache utilities for Party Picks

The results map and each user's predictions are read through the cache and
rebuilt from the datastore on a miss. Entries are invalidated when a write
is confirmed and again when the change feed reports a committed change, so
a stale entry never outlives the next committed write.
"""

import functools

from flask import current_app

from party_picks import cache


def query_key(model_name, func_name, *args):
    """Cache key for a cached query and its arguments"""
    args_str = "_".join(str(arg) for arg in args)
    return f"query_{model_name}_{func_name}_{args_str}"


def cached_query(model_name, timeout=300):
    """
    Decorator for caching database query results

    Args:
        model_name: Name of the model for cache key generation
        timeout: Cache timeout in seconds
    """

    def decorator(f):
        @functools.wraps(f)
        def wrapped(*args):
            cache_key = query_key(model_name, f.__name__, *args)

            result = cache.get(cache_key)
            if result is not None:
                current_app.logger.debug(f"Query cache hit: {cache_key}")
                return result

            result = f(*args)
            cache.set(cache_key, result, timeout=timeout)
            current_app.logger.debug(f"Query cache set: {cache_key}")

            return result

        wrapped.cache_key = lambda *args: query_key(model_name, f.__name__, *args)
        return wrapped

    return decorator


def invalidate_query(cached_func, *args):
    """Drop the cached value of a cached_query function for the given arguments"""
    cache_key = cached_func.cache_key(*args)
    cache.delete(cache_key)
    current_app.logger.debug(f"Query cache invalidated: {cache_key}")


def prime_query(cached_func, value, *args, timeout=300):
    """Store a freshly loaded value for a cached_query function"""
    cache.set(cached_func.cache_key(*args), value, timeout=timeout)


def init_invalidation(change_feed):
    """Invalidate cached reads whenever the change feed reports a commit"""
    from party_picks.services import predictions, results

    def on_results_change(change):
        invalidate_query(results.load_results_map)

    def on_prediction_change(change):
        invalidate_query(predictions.load_prediction_map, change.row["user_id"])

    change_feed.subscribe("results", on_results_change, name="cache")
    change_feed.subscribe("predictions", on_prediction_change, name="cache")
