"""Optimistic list mutations.

A mutation changes the local list first, then runs the remote write. If the
write fails the change is undone and the error is reported through
``on_error``; a failed write never propagates out of the controller.

Each mutation keeps the snapshot taken right before it was applied and undoes
only its own change, so two interleaved mutations roll back independently.
When two deletions race, a restored item can land out of its old place
in an unsorted list.
"""
import enum
import logging

from .store import add_item, item_id, remove_item, replace_item, restore_item

logger = logging.getLogger(__name__)


class MutationState(enum.Enum):
    IDLE = "idle"
    APPLIED = "optimistically-applied"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled-back"


class Mutation:
    def __init__(self, controller, kind, item, snapshot, previous=None, index=0):
        self.controller = controller
        self.kind = kind
        self.item = item
        self.snapshot = snapshot
        self.previous = previous
        self.index = index
        self.state = MutationState.IDLE
        self.outcome = None
        self.error = None
        self.result = None
        self.history = [MutationState.IDLE]

    def _move(self, state):
        self.state = state
        self.history.append(state)

    def _finish(self, outcome):
        self.outcome = outcome
        self._move(outcome)
        self._move(MutationState.IDLE)

    def confirm(self, result=None):
        if self.state is not MutationState.APPLIED:
            raise RuntimeError(f"Cannot confirm a mutation in state {self.state.value}")
        self.result = result
        self._finish(MutationState.CONFIRMED)

    def rollback(self, error=None):
        if self.state is not MutationState.APPLIED:
            raise RuntimeError(f"Cannot roll back a mutation in state {self.state.value}")
        self.error = error
        self.controller._undo(self)
        self._finish(MutationState.ROLLED_BACK)

    @property
    def confirmed(self) -> bool:
        return self.outcome is MutationState.CONFIRMED

    @property
    def rolled_back(self) -> bool:
        return self.outcome is MutationState.ROLLED_BACK


class OptimisticController:
    """
    Optimistic add/remove/replace on one list slice of a ``Store``.

    ``sort_key`` keeps the slice ordered (newest first) when removed items are
    put back; without it they return to their old index.
    """

    def __init__(self, store, slice_name, sort_key=None, on_error=None):
        self.store = store
        self.slice_name = slice_name
        self.sort_key = sort_key
        self.on_error = on_error

    @property
    def items(self) -> list:
        return list(self.store.get(self.slice_name) or [])

    # -- two-step API ---------------------------------------------------

    def begin_add(self, item, at_start=False) -> Mutation:
        snapshot = self.items
        mutation = Mutation(self, "add", item, snapshot)
        self.store.update(self.slice_name, add_item, item, at_start=at_start)
        mutation._move(MutationState.APPLIED)
        return mutation

    def begin_remove(self, key) -> Mutation | None:
        snapshot = self.items
        for index, existing in enumerate(snapshot):
            if item_id(existing) == key:
                break
        else:
            logger.warning("Item %s not found in %s", key, self.slice_name)
            return None

        mutation = Mutation(self, "remove", existing, snapshot, index=index)
        self.store.update(self.slice_name, remove_item, key)
        mutation._move(MutationState.APPLIED)
        return mutation

    def begin_replace(self, item) -> Mutation | None:
        snapshot = self.items
        previous = next((i for i in snapshot if item_id(i) == item_id(item)), None)
        if previous is None:
            logger.warning("Item %s not found in %s", item_id(item), self.slice_name)
            return None

        mutation = Mutation(self, "replace", item, snapshot, previous=previous)
        self.store.update(self.slice_name, replace_item, item)
        mutation._move(MutationState.APPLIED)
        return mutation

    def _undo(self, mutation):
        if mutation.kind == "add":
            self.store.update(self.slice_name, remove_item, item_id(mutation.item))
        elif mutation.kind == "remove":
            self.store.update(
                self.slice_name,
                restore_item,
                mutation.item,
                sort_key=self.sort_key,
                index=mutation.index,
            )
        elif mutation.kind == "replace":
            self.store.update(self.slice_name, replace_item, mutation.previous)

    # -- one-call API ---------------------------------------------------

    def add(self, item, remote, at_start=False, reconcile=None) -> Mutation:
        return self._run(self.begin_add(item, at_start=at_start), remote, reconcile)

    def remove(self, key, remote, reconcile=None) -> Mutation | None:
        mutation = self.begin_remove(key)
        if mutation is None:
            return None
        return self._run(mutation, remote, reconcile)

    def replace(self, item, remote, reconcile=None) -> Mutation | None:
        mutation = self.begin_replace(item)
        if mutation is None:
            return None
        return self._run(mutation, remote, reconcile)

    def _run(self, mutation, remote, reconcile):
        try:
            result = remote()
        except Exception as e:
            logger.warning("Remote %s on %s failed, rolling back: %s", mutation.kind, self.slice_name, e)
            mutation.rollback(e)
            if self.on_error:
                self.on_error(mutation, e)
            return mutation

        mutation.confirm(result)

        if reconcile is not None:
            try:
                self.store.set(self.slice_name, list(reconcile()))
            except Exception as e:
                # The optimistic state stays authoritative
                logger.warning("Reconcile of %s failed: %s", self.slice_name, e)
        return mutation

