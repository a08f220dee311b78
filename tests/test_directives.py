import pytest

from wirekit.directives import bind, build, new_set, value
from wirekit.errors import Position, WireError, WireErrors
from wirekit.model import func_provider
from wirekit.types import (
    BasicType,
    InterfaceType,
    NamedType,
    PointerType,
    Signature,
    StructField,
    StructType,
)

INT = BasicType("int")
STRING = BasicType("string")
FOO = NamedType("main", "Foo", INT)
BAR = NamedType("main", "Bar", INT)
FOOER = NamedType("main", "Fooer", InterfaceType({"Foo": Signature((), (STRING,))}))
SBAR = NamedType("main", "Bar", STRING, pointer_methods={"Foo": Signature((), (STRING,))})


def prov(name, out, *params):
    return func_provider("main", name, params, (out,))


def test_new_set_records_names_and_outputs():
    foo = prov("provideFoo", FOO)
    pset = new_set(foo, prov("provideBar", BAR, FOO), pkg_path="main", var_name="Set")
    assert pset.var_name == "Set"
    assert pset.pkg_path == "main"
    assert set(pset.outputs()) == {FOO, BAR}
    assert pset.for_type(FOO).provider() is foo


def test_new_set_struct_gives_value_and_pointer():
    st = NamedType("main", "FooBar", StructType((StructField("Foo", FOO), StructField("Bar", BAR))))
    pset = new_set(st, prov("provideFoo", FOO), prov("provideBar", BAR))
    assert {st, PointerType(st)} <= set(pset.outputs())
    plain = pset.for_type(st).provider()
    pointer = pset.for_type(PointerType(st)).provider()
    assert plain.is_struct and pointer.is_struct
    assert plain.fields == pointer.fields == ("Foo", "Bar")


def test_new_set_struct_duplicate_field_types():
    st = NamedType("main", "Pair", StructType((StructField("A", FOO), StructField("B", FOO))))
    with pytest.raises(WireErrors) as excinfo:
        new_set(st)
    assert any("provider struct has multiple fields of type main.Foo" in str(e) for e in excinfo.value)


def test_new_set_unknown_pattern():
    with pytest.raises(WireErrors) as excinfo:
        new_set("not a provider", FOO)
    assert [str(e) for e in excinfo.value] == ["unknown pattern", "unknown pattern"]


def test_new_set_conflict():
    with pytest.raises(WireErrors) as excinfo:
        new_set(prov("a", FOO), prov("b", FOO))
    assert "multiple bindings for main.Foo" in str(excinfo.value)


def test_new_set_cycle():
    with pytest.raises(WireErrors) as excinfo:
        new_set(prov("provideFoo", FOO, BAR), prov("provideBar", BAR, FOO))
    assert str(excinfo.value).startswith("cycle for")


def test_new_set_imports():
    inner = new_set(prov("provideFoo", FOO), var_name="Inner")
    outer = new_set(inner, prov("provideBar", BAR, FOO))
    assert outer.imports == [inner]
    assert set(outer.outputs()) == {FOO, BAR}


def test_build_is_unnamed_set():
    pos = Position("wire.go", 5)
    pset = build(value(STRING, '"Hello, World!"'), pkg_path="main", pos=pos)
    assert pset.var_name == ""
    assert pset.pos == pos
    assert pset.for_type(STRING).is_value()


def test_bind_success():
    b = bind(PointerType(FOOER), PointerType(SBAR))
    assert b.iface == FOOER
    assert b.provided == PointerType(SBAR)
    pset = new_set(prov("provideBar", PointerType(SBAR)), b)
    assert pset.for_type(FOOER).provider().name == "provideBar"


def test_bind_requires_pointer_to_interface():
    with pytest.raises(WireError) as excinfo:
        bind(FOOER, PointerType(SBAR))
    assert "first argument to bind must be a pointer to an interface type; found main.Fooer" in str(excinfo.value)
    with pytest.raises(WireError):
        bind(PointerType(FOO), PointerType(SBAR))


def test_bind_to_itself():
    with pytest.raises(WireError) as excinfo:
        bind(PointerType(FOOER), FOOER)
    assert excinfo.value.message == "cannot bind interface to itself"


def test_bind_not_implemented():
    with pytest.raises(WireError) as excinfo:
        bind(PointerType(FOOER), SBAR)
    assert excinfo.value.message == "main.Bar does not implement *main.Fooer"


def test_value_fields():
    pos = Position("bar.go", 4)
    v = value(STRING, "PublicMsg", pos, [("bar", "PublicMsg")])
    assert v.out == STRING
    assert v.expr == "PublicMsg"
    assert v.pos == pos
    assert v.refs == (("bar", "PublicMsg"),)


def test_value_errors():
    with pytest.raises(WireError) as excinfo:
        value(STRING, "   ")
    assert excinfo.value.message == "call to Value takes exactly one argument"
    with pytest.raises(TypeError):
        value("string", '"x"')