import pytest

from qrfeedback.client.api import RemoteError
from qrfeedback.client.optimistic import MutationState, OptimisticController
from qrfeedback.client.store import Store, by_created_at, restore_item
from qrfeedback.utils.errors import NotFoundError

A = {"id": "a", "created_at": "2026-03-03T00:00:00"}
B = {"id": "b", "created_at": "2026-03-02T00:00:00"}
C = {"id": "c", "created_at": "2026-03-01T00:00:00"}


@pytest.fixture
def store():
    return Store(forms=[A, B, C])


def _fail():
    raise RemoteError("network down")


def ids(store):
    return [f["id"] for f in store.get("forms")]


def test_successful_delete(store):
    errors = []
    ctl = OptimisticController(store, "forms", sort_key=by_created_at, on_error=lambda m, e: errors.append(e))
    mutation = ctl.remove("b", lambda: None)

    assert ids(store) == ["a", "c"]
    assert mutation.confirmed
    assert errors == []
    assert mutation.history == [
        MutationState.IDLE, MutationState.APPLIED, MutationState.CONFIRMED, MutationState.IDLE,
    ]


def test_failed_delete_restores_the_item(store):
    errors = []
    ctl = OptimisticController(store, "forms", sort_key=by_created_at, on_error=lambda m, e: errors.append(e))
    seen = []
    store.subscribe(lambda name, value: seen.append([f["id"] for f in value]))

    mutation = ctl.remove("b", _fail)

    assert seen[0] == ["a", "c"]
    assert ids(store) == ["a", "b", "c"]
    assert mutation.rolled_back
    assert str(errors[0]) == "network down"
    assert mutation.history[-2:] == [MutationState.ROLLED_BACK, MutationState.IDLE]


def test_failed_add_removes_only_the_added_item(store):
    ctl = OptimisticController(store, "forms")
    new = {"id": "d", "created_at": "2026-03-04T00:00:00"}
    mutation = ctl.add(new, _fail, at_start=True)
    assert mutation.rolled_back
    assert ids(store) == ["a", "b", "c"]


def test_failed_replace_puts_back_the_previous_value(store):
    ctl = OptimisticController(store, "forms")
    ctl.replace(dict(B, title="renamed"), _fail)
    assert store.get("forms")[1] is B


def test_interleaved_mutations_roll_back_independently(store):
    ctl = OptimisticController(store, "forms", sort_key=by_created_at)
    first = ctl.begin_remove("a")
    second = ctl.begin_remove("c")
    assert ids(store) == ["b"]

    first.rollback(RemoteError("x"))
    second.confirm()

    assert ids(store) == ["a", "b"]


def test_removing_an_unknown_item_is_a_no_op(store):
    ctl = OptimisticController(store, "forms")
    assert ctl.remove("zzz", lambda: pytest.fail("remote must not run")) is None
    assert ids(store) == ["a", "b", "c"]


def test_confirm_twice_is_an_error(store):
    ctl = OptimisticController(store, "forms")
    mutation = ctl.begin_remove("a")
    mutation.confirm()
    with pytest.raises(RuntimeError):
        mutation.confirm()


def test_reconcile_replaces_the_slice(store):
    ctl = OptimisticController(store, "forms")
    ctl.remove("a", lambda: None, reconcile=lambda: [C])
    assert ids(store) == ["c"]


def test_failed_reconcile_keeps_the_optimistic_state(store):
    def reconcile():
        raise NotFoundError("gone")

    ctl = OptimisticController(store, "forms")
    mutation = ctl.remove("a", lambda: None, reconcile=reconcile)
    assert mutation.confirmed
    assert ids(store) == ["b", "c"]


def test_restore_without_sort_key_uses_the_old_index():
    assert restore_item([A, C], B, index=1) == [A, B, C]
    assert restore_item([A, B, C], B, index=0) == [A, B, C]


def test_unsubscribe(store):
    calls = []
    unsubscribe = store.subscribe(lambda *args: calls.append(args))
    store.set("forms", [])
    unsubscribe()
    store.set("forms", [A])
    assert len(calls) == 1


def test_added_question_is_visible_before_confirmation():
    store = Store(questions=[])
    ctl = OptimisticController(store, "questions")
    question = {"id": "q", "type": "text", "text": "abc"}
    during = []

    def remote():
        during.append(list(store.get("questions")))

    mutation = ctl.add(question, remote)
    assert during == [[question]]
    assert mutation.confirmed
    assert store.get("questions") == [question]
