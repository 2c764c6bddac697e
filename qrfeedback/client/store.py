"""Page state.

A ``Store`` is the single source of truth for one page. Slices are replaced
wholesale through ``update`` with one of the pure reducers below; observers
are notified after every change.
"""


def item_id(item):
    return item.get("id") if isinstance(item, dict) else getattr(item, "id", None)


def add_item(items, item, at_start=False):
    items = list(items)
    return [item] + items if at_start else items + [item]


def remove_item(items, key):
    return [i for i in items if item_id(i) != key]


def replace_item(items, item):
    return [item if item_id(i) == item_id(item) else i for i in items]


def restore_item(items, item, sort_key=None, newest_first=True, index=0):
    """
    Put a removed item back. With ``sort_key`` the result is re-sorted,
    otherwise the item goes back at ``index``.
    """
    if any(item_id(i) == item_id(item) for i in items):
        return list(items)
    restored = list(items)
    if sort_key is None:
        restored.insert(min(index, len(restored)), item)
        return restored
    restored.insert(0, item)
    restored.sort(key=sort_key, reverse=newest_first)
    return restored


def by_created_at(item):
    return item.get("created_at") or ""


class Store:
    def __init__(self, **initial):
        self._state = dict(initial)
        self._subscribers = []

    def get(self, name, default=None):
        return self._state.get(name, default)

    @property
    def state(self) -> dict:
        return dict(self._state)

    def subscribe(self, callback):
        """callback(name, value) on every change. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set(self, name, value):
        self._state[name] = value
        for callback in list(self._subscribers):
            callback(name, value)

    def update(self, name, reducer, *args, **kwargs):
        value = reducer(self._state.get(name, []), *args, **kwargs)
        self.set(name, value)
        return value
