from goextract.bindings import local_bindings
from goextract.go_parser import parse_source, top_level_declarations


def _decl(source: str, name: str):
    unit = parse_source(source, "bindings.go")
    for decl in top_level_declarations(unit):
        if decl.name == name:
            return decl
    raise AssertionError(f"{name} not declared")


def test_parameters_and_named_results() -> None:
    source = """package p

func Split(path string, sep byte, rest ...string) (head, tail string, ok bool) {
	return
}
"""
    bound = local_bindings(_decl(source, "Split"))

    assert bound == {"path", "sep", "rest", "head", "tail", "ok"}


def test_receiver_and_type_parameters() -> None:
    source = """package p

type Stack[T any] struct {
	items []T
}

func (s *Stack[T]) Push(item T) {
	s.items = append(s.items, item)
}

func Map[In, Out any](xs []In, f func(In) Out) []Out {
	return nil
}
"""
    assert local_bindings(_decl(source, "Stack.Push")) == {"s", "T", "item"}
    assert local_bindings(_decl(source, "Map")) == {"In", "Out", "xs", "f"}


def test_short_var_and_local_declarations() -> None:
    source = """package p

func Body() {
	a, b := 1, 2
	var c, d int
	const e = 3
	type local struct{}
	x = a
	_, _, _, _ = b, c, d, e
}
"""
    bound = local_bindings(_decl(source, "Body"))

    assert {"a", "b", "c", "d", "e", "local"} <= bound
    # plain assignment binds nothing
    assert "x" not in bound
    assert "_" not in bound


def test_range_switch_select_and_closures() -> None:
    source = """package p

func Loop(xs []int, ch chan int, v interface{}) {
	for i, x := range xs {
		_ = i + x
	}
	for j = range xs {
	}
	switch t := v.(type) {
	case int:
		_ = t
	}
	select {
	case got := <-ch:
		_ = got
	}
	fn := func(arg int) (res int) {
		inner := arg
		return inner
	}
	_ = fn
}
"""
    bound = local_bindings(_decl(source, "Loop"))

    assert {"i", "x", "t", "got", "fn", "arg", "res", "inner"} <= bound
    # range with '=' assigns to an existing name
    assert "j" not in bound


def test_non_function_binds_nothing() -> None:
    source = "package p\n\nvar answer = 42\n"

    assert local_bindings(_decl(source, "answer")) == set()


def test_multi_name_const_binds_only_identifiers() -> None:
    source = """package p

func Limits() int {
	const lo, hi = 1, 9
	var w, h int
	return lo + hi + w + h
}
"""
    assert local_bindings(_decl(source, "Limits")) == {"lo", "hi", "w", "h"}
