import pytest

from cognistore.namespaces import (
    NamespaceBatchService,
    NamespaceNotFoundError,
    NamespaceQuerier,
    NamespaceResolver,
)
from cognistore.storage import Namespace, Storage
from cognistore.triples import Node

AXONE = "http://axone.space/"
OTHER = "http://other.example.com/"


@pytest.fixture
def storage():
    st = Storage(namespace_key_increment=1)
    st.save_namespace(Namespace(value=AXONE, key=0, counter=1))
    return st


# NamespaceQuerier


def test_querier_resolves_from_storage(storage):
    querier = NamespaceQuerier()
    expected = Namespace(value=AXONE, key=0, counter=1)
    assert querier.resolve_from_val(storage, AXONE) == expected
    assert querier.resolve_from_key(storage, 0) == expected


def test_querier_unknown_is_none(storage):
    querier = NamespaceQuerier()
    assert querier.resolve_from_val(storage, OTHER) is None
    assert querier.resolve_from_key(storage, 99) is None
    assert querier.cached_namespaces() == []


def test_querier_cache_takes_priority(storage):
    querier = NamespaceQuerier()
    querier.resolve_from_val(storage, AXONE)
    storage.remove_namespace(AXONE)

    assert querier.resolve_from_key(storage, 0).value == AXONE

    querier.clear_cache()
    assert querier.resolve_from_key(storage, 0) is None


def test_querier_prefilled_cache_sorted_by_key():
    first = Namespace(value=OTHER, key=5, counter=1)
    second = Namespace(value=AXONE, key=2, counter=3)
    querier = NamespaceQuerier([first, second])

    assert querier.cached_namespaces() == [second, first]
    assert querier.resolve_from_val(Storage(), OTHER) == first


def test_querier_returns_copies(storage):
    querier = NamespaceQuerier()
    ns = querier.resolve_from_val(storage, AXONE)
    ns.counter = 100
    assert querier.resolve_from_val(storage, AXONE).counter == 1


# NamespaceResolver


def test_resolver_resolves_and_caches(storage):
    resolver = NamespaceResolver(storage)
    assert resolver.resolve_from_val(AXONE).key == 0
    assert resolver.cached_namespaces() == [Namespace(value=AXONE, key=0, counter=1)]

    resolver.clear_cache()
    assert resolver.cached_namespaces() == []


def test_resolver_raises_not_found(storage):
    resolver = NamespaceResolver(storage)
    with pytest.raises(NamespaceNotFoundError):
        resolver.resolve_from_key(12)
    with pytest.raises(NamespaceNotFoundError):
        resolver.resolve_from_val(OTHER)


def test_resolver_uses_initial_cache():
    cached = Namespace(value=OTHER, key=4, counter=1)
    resolver = NamespaceResolver(Storage(), [cached])
    assert resolver.resolve_from_key(4) == cached


def test_resolver_rebuilds_node_iri(storage):
    resolver = NamespaceResolver(storage)
    assert Node(namespace=0, value="hasTitle").as_iri(resolver) == "http://axone.space/hasTitle"


# NamespaceBatchService


def test_batch_requires_key_increment():
    with pytest.raises(LookupError):
        NamespaceBatchService(Storage())


def test_batch_resolves_existing(storage):
    svc = NamespaceBatchService(storage)
    assert svc.resolve_or_allocate(storage, AXONE) == Namespace(value=AXONE, key=0, counter=1)
    assert svc.resolve_from_key(storage, 0).value == AXONE


def test_batch_allocates_sequential_keys(storage):
    svc = NamespaceBatchService(storage)
    first = svc.resolve_or_allocate(storage, OTHER)
    second = svc.resolve_or_allocate(storage, "http://third.example.com/")

    assert first.key == storage.namespace_key_increment
    assert second.key == first.key + 1
    assert first.counter == 0
    assert svc.resolve_or_allocate(storage, OTHER) == first


def test_batch_count_ref_and_flush(storage):
    svc = NamespaceBatchService(storage)
    allocated = svc.resolve_or_allocate(storage, OTHER)
    counted = svc.count_ref(storage, allocated.key)
    assert counted.counter == allocated.counter + 1

    diff = svc.flush(storage)
    assert diff == len([OTHER])
    assert storage.namespace_by_value(OTHER) == counted
    assert storage.namespace_key_increment == allocated.key + 1


def test_batch_flush_drops_unreferenced_allocation(storage):
    svc = NamespaceBatchService(storage)
    svc.resolve_or_allocate(storage, OTHER)
    svc.flush(storage)
    assert storage.namespace_by_value(OTHER) is None


def test_batch_free_ref_deletes_namespace(storage):
    svc = NamespaceBatchService(storage)
    freed = svc.free_ref(storage, 0)
    assert freed.counter == 0

    diff = svc.flush(storage)
    assert diff == -len([AXONE])
    assert storage.namespace_by_key(0) is None


def test_batch_free_ref_unreferenced_raises(storage):
    svc = NamespaceBatchService(storage)
    svc.free_ref(storage, 0)
    with pytest.raises(ValueError, match="Trying to delete a non existing namespace"):
        svc.free_ref(storage, 0)
    with pytest.raises(ValueError):
        svc.free_ref(storage, 99)


def test_batch_count_ref_unknown_raises(storage):
    svc = NamespaceBatchService(storage)
    with pytest.raises(NamespaceNotFoundError):
        svc.count_ref(storage, 99)


def test_batch_flush_resets_diff_and_cache(storage):
    svc = NamespaceBatchService(storage)
    ns = svc.resolve_or_allocate(storage, OTHER)
    svc.count_ref(storage, ns.key)
    svc.flush(storage)

    storage.remove_namespace(OTHER)
    assert svc.resolve_from_key(storage, ns.key) is None
    assert svc.flush(storage) == 0


def test_batch_changes_stay_in_memory_until_flush(storage):
    svc = NamespaceBatchService(storage)
    svc.count_ref(storage, 0)
    assert storage.namespace_by_key(0).counter == 1
    svc.flush(storage)
    assert storage.namespace_by_key(0).counter == 2