MIN_PREFIX_LENGTH = 4


def collapse_id(target, pool):
    """Shortest prefix of `target` (at least 4 chars) that no other id in `pool` starts with.

    Falls back to the whole id when every prefix is shared.
    """
    others = [other for other in pool if other != target]
    for i in range(MIN_PREFIX_LENGTH, len(target) + 1):
        prefix = target[:i]
        if not any(other.startswith(prefix) for other in others):
            return prefix
    return target


class IdCollapser:
    """Collapses ids against the keys of several id-keyed collections.

    The pool is gathered on every call so the collections can keep changing.
    A source may also be a zero-argument callable returning the collection,
    for owners that replace their mapping instead of mutating it.
    """

    def __init__(self, *sources):
        self._sources = sources

    def pool(self):
        ids = []
        for source in self._sources:
            collection = source() if callable(source) else source
            ids.extend(collection.keys() if hasattr(collection, 'keys') else collection)
        return ids

    def __call__(self, target):
        return collapse_id(target, self.pool())
