# wirekit

wirekit is a library for compile-time dependency injection over Go-style
types. You describe *providers*, which are functions or named struct types
that build a value from other values. You group them into *provider sets*
and ask for an output type. wirekit then works out the order in which the
providers must be called.

Before it returns a plan, wirekit checks the graph. It reports the following
problems, with source positions where they are known:

- A type has no provider. This covers both the requested output and a
  dependency of another provider.
- Two entries bind the same type. This includes an injector input that
  collides with a provider or a value.
- The providers form a dependency cycle. The report gives the full chain of
  providers involved.
- A provider, value, interface binding or imported set is listed but never
  used.
- A provider has a bad signature. Examples are a missing result, the wrong
  second or third result, or two parameters of the same type.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Example

```python
from wirekit.analyze import solve
from wirekit.directives import build
from wirekit.model import func_provider
from wirekit.types import BasicType, NamedType

Foo = NamedType("app", "Foo", BasicType("int"))
FooBar = NamedType("app", "FooBar", BasicType("int"))

provide_foo = func_provider("app", "provideFoo", [], [Foo])
provide_foobar = func_provider("app", "provideFooBar", [Foo], [FooBar])

pset = build(provide_foo, provide_foobar, pkg_path="app")
calls = solve(FooBar, [], pset)
print([c.name for c in calls])  # ['provideFoo', 'provideFooBar']
```

## Modules

- `wirekit.types` models Go types. It provides `BasicType`, `NamedType`,
  `PointerType`, `SliceType`, `ArrayType`, `MapType`, `ChanType`,
  `InterfaceType`, `StructType` with `StructField`, and `Signature`. It also
  provides these functions:
  - `underlying` returns the underlying type.
  - `type_string` renders a type, with an optional qualifier for package
    paths.
  - `identical` compares two types.
  - `implements` checks a type's method set against an interface.
- `wirekit.errors` provides the error types and helpers.
  - `Position` is a source location.
  - `WireError` is an error whose valid position prefixes its message.
  - `WireErrors` carries every problem found, not only the first.
  - `note_position`, `note_position_all` and `map_errors` wrap error lists.
- `wirekit.model` describes the graph.
  - `Provider`, `ProviderInput`, `Value`, `IfaceBinding` and `ProviderSet`
    are its parts. `ProviderSet` has `outputs()` and `for_type()`, and
    `for_type()` returns a `ProviderOrValue`.
  - `ProviderSetID`, `Injector` and `Info` identify named sets and injector
    functions.
  - `func_output` validates result types into an `OutputSignature`.
  - `func_provider` and `struct_provider` build providers from signatures
    and struct types.
  - `is_wire_import` recognises the directive package path, including
    vendored paths.
- `wirekit.directives` declares provider sets and their contents.
  - `new_set` and `build` create analysed provider sets. A named struct type
    passed to either contributes providers for both the struct and a pointer
    to it.
  - `bind` declares that a concrete type satisfies an interface.
  - `value` declares an expression of a given type.
- `wirekit.analyze` does the graph analysis.
  - `solve` turns an output type, the given inputs and a provider set into
    an ordered list of `Call` steps, each of a `CallKind`.
  - `build_provider_map`, `verify_acyclic`, `verify_args_used` and
    `binding_conflict_error` perform the individual checks.
- `wirekit.naming` provides helpers for naming variables in generated code:
  `unexport`, `export`, `disambiguate`, `type_variable_name` and
  `zero_value`.
- `wirekit.show` summarises loaded provider sets.
  - `gather` flattens a set into `OutGroup`s of outputs keyed by the inputs
    they need. It also returns the named sets the set imports.
  - `format_show` renders an `Info` as ANSI-colored text, listing each set
    and then the injectors.
  - `format_provider_set_name` formats a set name as `"path".Name`.

## What wirekit does not do

wirekit has no command-line tool. It does not read or parse source files, so
provider sets and types must be built in Python with the classes above. It
plans injector calls and checks them, but it does not write out injector
source code.