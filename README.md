# cognistore

`cognistore` is the storage core of a small RDF triple store. IRIs are split
into a namespace and a local value. Each namespace is stored once under a
numeric key and carries a reference count. Triples are kept in an in-memory
`Storage`. Store-wide limits on triple count and byte size are checked on every
insertion.

## Modules

- `cognistore.atom`: string-level RDF atoms (`Subject`, `Property`, `Value`,
  `Atom`, with the `NodeKind` and `ValueKind` enums) and their textual forms,
  e.g. `<subject> <predicate> 'object@en'`. `expand_uri` expands a prefixed
  name such as `owl:Thing` and raises `ValueError` for an unknown prefix;
  `prefix_map` builds a prefix table from `(prefix, namespace)` pairs, a later
  pair overriding an earlier one.
- `cognistore.triples`: the stored form of a triple: `Node`, `SimpleLiteral`,
  `I18NString`, `TypedLiteral` and `Triple` (blank nodes are plain integers).
  `Node.key`, `subject_key`, `object_hash` and `Triple.primary_key` build the
  storage keys; `Triple.namespaces` lists the namespace keys a triple uses.
- `cognistore.store`: the store description: `Store`, `StoreLimits` and
  `StoreStat`.
- `cognistore.storage`: the in-memory `Storage`, holding the store, the
  triples, the namespace key increment, the blank node counter and a table of
  `Namespace` records indexed by value and by unique key.
- `cognistore.namespaces`: namespace resolution and batched writes:
  - `NamespaceQuerier`, a two-way cached lookup by value or key;
  - `NamespaceResolver`, which raises `NamespaceNotFoundError` for an unknown
    namespace;
  - `NamespaceBatchService`, which allocates namespaces, counts and frees
    references, and writes the changes with `flush`.
- `cognistore.variable`: query-time bindings. `ResolvedVariable` holds a value
  with its `VariableRole` and converts it with `as_subject`, `as_predicate`,
  `as_object` and `as_term`; `ResolvedVariables` is a row of bindings with
  `merge_with` and `merge_index`.
- `cognistore.engine`: `StoreEngine`, which stores atoms and deletes triples.
  When a limit is exceeded it raises a `StoreError` subclass
  (`TripleCountError`, `InsertDataTripleCountError`, `TripleByteSizeError`,
  `ByteSizeError`, `InsertDataByteSizeError`).

## Example

```python
from cognistore.atom import Atom, NodeKind, Property, Subject, Value, ValueKind
from cognistore.engine import StoreEngine
from cognistore.storage import Storage
from cognistore.store import Store, StoreLimits

limits = StoreLimits(
    max_triple_count=1000,
    max_byte_size=100_000,
    max_triple_byte_size=1000,
    max_query_limit=30,
    max_query_variable_count=30,
    max_insert_data_byte_size=100_000,
    max_insert_data_triple_count=1000,
)
storage = Storage(
    namespace_key_increment=0,
    blank_node_counter=0,
    store=Store.new("owner", limits),
)
engine = StoreEngine(storage)

added = engine.store_all([
    Atom(
        subject=Subject(NodeKind.NAMED, "http://example.com/thing/1"),
        property=Property("http://example.com/vocab#title"),
        value=Value(ValueKind.LITERAL_SIMPLE, "A title"),
    ),
])
print(added)                          # 1
print(storage.store.stat.triple_count)  # 1
```

## What it does not do

- It parses no RDF documents: atoms must be built by the caller.
- It plans and runs no queries; `cognistore.variable` only provides the
  bindings a query evaluator would work with.
- `Storage` lives in memory only; nothing is written to disk.
- There is no command-line tool or server.

## Running the tests

```
pip install -e .[test]
pytest
```