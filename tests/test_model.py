import pytest

from wirekit.errors import Position, WireError
from wirekit.model import (
    WIRE_IMPORT_PATH,
    Info,
    Injector,
    OutputSignature,
    Provider,
    ProviderInput,
    ProviderOrValue,
    ProviderSet,
    ProviderSetID,
    Value,
    func_output,
    func_provider,
    is_wire_import,
    struct_provider,
)
from wirekit.types import (
    CLEANUP_TYPE,
    ERROR_TYPE,
    BasicType,
    NamedType,
    PointerType,
    StructField,
    StructType,
)

INT = BasicType("int")
FOO = NamedType("example/foo", "Foo", INT)
BAR = NamedType("example/foo", "Bar", INT)


def test_func_output_single():
    assert func_output([FOO]) == OutputSignature(FOO)


def test_func_output_error_and_cleanup():
    assert func_output([FOO, ERROR_TYPE]) == OutputSignature(FOO, err=True)
    assert func_output([FOO, CLEANUP_TYPE]) == OutputSignature(FOO, cleanup=True)
    assert func_output([FOO, CLEANUP_TYPE, ERROR_TYPE]) == OutputSignature(
        FOO, cleanup=True, err=True
    )


def test_func_output_errors():
    with pytest.raises(ValueError, match="no return values"):
        func_output([])
    with pytest.raises(ValueError, match="second return type is int; must be error or func()"):
        func_output([FOO, INT])
    with pytest.raises(ValueError, match="second return type is int; must be func"):
        func_output([FOO, INT, ERROR_TYPE])
    with pytest.raises(ValueError, match="third return type is int; must be error"):
        func_output([FOO, CLEANUP_TYPE, INT])
    with pytest.raises(ValueError, match="too many return values"):
        func_output([FOO, CLEANUP_TYPE, ERROR_TYPE, INT])


def test_func_provider_builds_args():
    p = func_provider("example/foo", "provideBar", [FOO], [BAR, CLEANUP_TYPE, ERROR_TYPE])
    assert p.out == BAR
    assert p.args == (ProviderInput(FOO),)
    assert p.has_cleanup and p.has_err
    assert not p.is_struct


def test_func_provider_duplicate_params():
    pos = Position("foo.go", 3, 1)
    with pytest.raises(WireError) as info:
        func_provider("example/foo", "p", [FOO, FOO], [BAR], pos)
    assert "provider has multiple parameters of type example/foo.Foo" in str(info.value)
    assert info.value.position == pos


def test_func_provider_bad_signature():
    with pytest.raises(WireError, match="wrong signature for provider p: no return values"):
        func_provider("example/foo", "p", [], [])


def test_struct_provider():
    fb = NamedType(
        "example/foo",
        "FooBar",
        StructType((StructField("Foo", FOO), StructField("Bar", BAR))),
    )
    p = struct_provider("example/foo", "FooBar", fb)
    assert p.is_struct
    assert p.fields == ("Foo", "Bar")
    assert [a.type for a in p.args] == [FOO, BAR]
    assert p.out == fb


def test_struct_provider_errors():
    dup = NamedType(
        "example/foo", "Dup", StructType((StructField("A", FOO), StructField("B", FOO)))
    )
    with pytest.raises(WireError, match="provider struct has multiple fields of type"):
        struct_provider("example/foo", "Dup", dup)
    with pytest.raises(WireError, match="does not name a struct"):
        struct_provider("example/foo", "Foo", FOO)


def test_provider_or_value():
    p = Provider("example/foo", "provideFoo", FOO)
    v = Value(BAR, "Bar(1)")
    pv = ProviderOrValue(p)
    assert pv.is_provider() and not pv.is_value() and not pv.is_nil()
    assert pv.provider() is p
    with pytest.raises(TypeError):
        pv.value()
    vv = ProviderOrValue(v)
    assert vv.value() is v
    with pytest.raises(TypeError):
        vv.provider()
    assert ProviderOrValue().is_nil()
    with pytest.raises(TypeError):
        ProviderOrValue("nope")


def test_provider_set_lookup():
    p = Provider("example/foo", "provideFoo", FOO)
    s = ProviderSet(providers=[p], provider_map={FOO: p})
    assert s.outputs() == [FOO]
    assert s.for_type(FOO).provider() is p
    assert s.for_type(BAR).is_nil()
    assert ProviderSet().outputs() == []


def test_provider_identity_semantics():
    a = Provider("example/foo", "p", FOO)
    b = Provider("example/foo", "p", FOO)
    assert a != b
    assert a == a


def test_ids_and_injector_strings():
    assert str(ProviderSetID("example/foo", "Set")) == '"example/foo".Set'
    assert str(Injector("example/foo", "inject")) == '"example/foo".inject'
    ids = sorted([ProviderSetID("b", "A"), ProviderSetID("a", "Z"), ProviderSetID("a", "B")])
    assert ids == [ProviderSetID("a", "B"), ProviderSetID("a", "Z"), ProviderSetID("b", "A")]


def test_info_defaults_are_independent():
    a, b = Info(), Info()
    a.injectors.append(Injector("x", "y"))
    assert b.injectors == []


def test_is_wire_import():
    assert is_wire_import(WIRE_IMPORT_PATH)
    assert is_wire_import("vendor/" + WIRE_IMPORT_PATH)
    assert is_wire_import("example/app/vendor/" + WIRE_IMPORT_PATH)
    assert not is_wire_import("example/appvendor/" + WIRE_IMPORT_PATH)
    assert not is_wire_import("example/other")


def test_pointer_type_as_map_key():
    p = Provider("example/foo", "p", PointerType(FOO))
    s = ProviderSet(provider_map={PointerType(FOO): p})
    assert s.for_type(PointerType(FOO)).provider() is p