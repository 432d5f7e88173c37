from __future__ import annotations

import dataclasses
import pickle

import numpy as np
import pandas as pd
import polars as pl
import pytest

from pydiverse.beamtest.eq import (
    DispatchingEq,
    Eq,
    MappingEq,
    NdarrayEq,
    PandasEq,
    PolarsEq,
    SequenceEq,
    UniversalEq,
    default_eq,
    eq_for,
    register_eq,
)


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y


class PointEq(Eq):
    def eqv(self, a, b) -> bool:
        return isinstance(b, Point) and (a.x, a.y) == (b.x, b.y)


@pytest.fixture
def eq():
    return default_eq()


class TestResolution:
    def test_builtin_instances(self):
        assert eq_for(list) == SequenceEq()
        assert eq_for(tuple) == SequenceEq()
        assert eq_for(dict) == MappingEq()
        assert eq_for(np.ndarray) == NdarrayEq()
        assert eq_for(pl.Series) == PolarsEq()
        assert eq_for(pl.DataFrame) == PolarsEq()
        assert eq_for(pd.DataFrame) == PandasEq()

    def test_fallback_is_total(self):
        assert eq_for(int) == UniversalEq()
        assert eq_for(str) == UniversalEq()
        assert eq_for(Point) == UniversalEq()
        assert eq_for(type(None)) == UniversalEq()

    def test_subclass_uses_base_instance(self):
        class MyList(list): ...

        assert eq_for(MyList) == SequenceEq()
        assert eq_for(pd.RangeIndex) == PandasEq()

    def test_register(self):
        class Point3(Point): ...

        assert not default_eq().eqv(Point3(1, 2), Point3(1, 2))
        register_eq(Point3, PointEq())
        assert eq_for(Point3) == PointEq()
        assert default_eq().eqv(Point3(1, 2), Point3(1, 2))
        assert not default_eq().eqv(Point3(1, 2), Point3(2, 1))
        assert eq_for(Point) == UniversalEq()

    def test_register_type_check(self):
        with pytest.raises(TypeError, match="eq"):
            register_eq(Point, lambda a, b: True)


class TestArrays:
    def test_distinct_ndarrays_with_same_content(self, eq):
        x = np.array([1, 2, 3])
        y = np.array([1, 2, 3])
        assert x is not y
        assert eq.eqv(x, y)
        assert not eq.eqv(x, np.array([1, 2, 4]))
        assert not eq.eqv(x, np.array([1, 2]))
        assert not eq.eqv(x, np.array([[1, 2, 3]]))

    def test_object_ndarray_recurses(self, eq):
        x = np.empty(2, dtype=object)
        x[0], x[1] = np.array([1]), [np.array([2, 3])]
        y = np.empty(2, dtype=object)
        y[0], y[1] = np.array([1]), [np.array([2, 3])]
        assert eq.eqv(x, y)

    def test_nested_arrays_in_containers(self, eq):
        assert eq.eqv(
            [np.array([1, 2]), (np.array([3]), "a")],
            [np.array([1, 2]), (np.array([3]), "a")],
        )
        assert not eq.eqv(
            [np.array([1, 2]), (np.array([3]), "a")],
            [np.array([1, 2]), (np.array([4]), "a")],
        )
        assert eq.eqv({"k": np.array([1.5])}, {"k": np.array([1.5])})
        assert not eq.eqv({"k": np.array([1.5])}, {"j": np.array([1.5])})

    def test_list_is_not_tuple(self, eq):
        assert not eq.eqv([1, 2], (1, 2))
        assert not eq.eqv((1, 2), [1, 2])
        assert not eq.eqv([1, 2], [1, 2, 3])

    def test_array_against_scalar(self, eq):
        assert not eq.eqv(1, np.array([1, 2]))
        assert not eq.eqv(np.array([1, 2]), 1)

    def test_polars(self, eq):
        assert eq.eqv(pl.Series("a", [1, 2]), pl.Series("a", [1, 2]))
        assert not eq.eqv(pl.Series("a", [1, 2]), pl.Series("a", [2, 1]))
        df = pl.DataFrame({"a": [1, 2], "b": ["x", None]})
        assert eq.eqv(df, df.clone())
        assert not eq.eqv(df, df.reverse())
        assert not eq.eqv(df, df.get_column("a"))

    def test_pandas(self, eq):
        df = pd.DataFrame({"a": [1, 2], "b": ["x", "y"]})
        assert eq.eqv(df, df.copy())
        assert not eq.eqv(df, df.iloc[::-1])
        assert eq.eqv(pd.Series([1.0, None]), pd.Series([1.0, None]))


class TestUniversalEq:
    def test_native_equality(self, eq):
        assert eq.eqv(1, 1)
        assert eq.eqv("a", "a")
        assert eq.eqv(None, None)
        assert not eq.eqv(1, None)
        assert eq.eqv(1, 1.0)

    def test_instances_pickle_by_reference(self):
        for instance in [DispatchingEq(), SequenceEq(), NdarrayEq(), PolarsEq()]:
            assert pickle.loads(pickle.dumps(instance)) == instance


@dataclasses.dataclass
class Measurement:
    name: str
    values: np.ndarray
    note: str = dataclasses.field(default="", compare=False)


@dataclasses.dataclass
class OtherMeasurement:
    name: str
    values: np.ndarray


class ArrayHolder:
    def __init__(self, values):
        self.values = values

    def __eq__(self, rhs):
        return self.values == rhs.values


class TestValuesHoldingArrays:
    def test_dataclass_fields_compare_by_content(self, eq):
        a = Measurement("m", np.array([1, 2]), note="first")
        b = Measurement("m", np.array([1, 2]), note="second")
        assert eq.eqv(a, b)
        assert not eq.eqv(a, Measurement("m", np.array([2, 1])))
        assert not eq.eqv(a, Measurement("n", np.array([1, 2])))

    def test_dataclass_of_other_type(self, eq):
        assert not eq.eqv(
            Measurement("m", np.array([1])), OtherMeasurement("m", np.array([1]))
        )

    def test_nested_in_containers(self, eq):
        assert eq.eqv(
            [Measurement("m", np.array([1, 2]))],
            [Measurement("m", np.array([1, 2]))],
        )

    def test_ambiguous_truth_value_is_unequal(self, eq):
        assert not eq.eqv(ArrayHolder(np.array([1, 2])), ArrayHolder(np.array([1, 2])))
        assert eq.eqv(ArrayHolder(1), ArrayHolder(1))
