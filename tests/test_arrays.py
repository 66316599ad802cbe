from decimal import Decimal as BigDecimal
from itertools import count

import pytest

from pgsqltypes.arrays import (
    BoolArray,
    BytesArray,
    DecimalArray,
    Float64Array,
    GenericArray,
    Int64Array,
    StringArray,
    array,
    random_bool_array,
    random_decimal_array,
    random_float64_array,
    random_int64_array,
    scan_bool_array,
    scan_bytes_array,
    scan_decimal_array,
    scan_float64_array,
    scan_generic_array,
    scan_int64_array,
    scan_string_array,
)
from pgsqltypes.arraytext import ArrayError
from pgsqltypes.decimal import Decimal


def _seq(*values):
    it = iter(values)
    return lambda: next(it)


def null_string(raw):
    return None if raw is None else raw.decode("utf-8")


class TildeNullInt64:
    array_delimiter = staticmethod(lambda: "~")

    def __init__(self, raw):
        self.int64 = None if raw is None else int(raw)

    def __eq__(self, other):
        return isinstance(other, TildeNullInt64) and other.int64 == self.int64


class ByteArrayValuer(tuple):
    def value(self):
        return bytes(self)


class ByteSliceValuer(bytes):
    def value(self):
        return bytes(self)


class Tilde:
    def __init__(self, v):
        self.v = v

    def array_delimiter(self):
        return "~"

    def value(self):
        return self.v


# --- array() ---


@pytest.mark.parametrize(
    "value, cls",
    [
        ([True, False], BoolArray),
        ([1.5, 2.0], Float64Array),
        ([1, 2], Int64Array),
        (["a", "b"], StringArray),
    ],
)
def test_array_typed(value, cls):
    result = array(value)
    assert type(result) is cls
    assert list(result) == value


@pytest.mark.parametrize("value", [None, [], [[True]], [[1.0]], [[1]], [["a"]], [1, "a"]])
def test_array_generic(value):
    result = array(value)
    assert isinstance(result, GenericArray)
    assert result.a is value


def test_array_keeps_typed_array():
    arr = Int64Array([1])
    assert array(arr) is arr


# --- BoolArray ---


def test_bool_array_scan_unsupported():
    with pytest.raises(TypeError, match="int to BoolArray"):
        scan_bool_array(1)


def test_bool_array_scan_empty():
    result = scan_bool_array("{}")
    assert result == []
    assert isinstance(result, BoolArray)


def test_bool_array_scan_nil():
    assert scan_bool_array(None) is None


BOOL_CASES = [
    ("{}", []),
    ("{t}", [True]),
    ("{f,t}", [False, True]),
    ("{F,T}", [False, True]),
    ("{false,true}", [False, True]),
    ("{FALSE,TRUE}", [False, True]),
]


@pytest.mark.parametrize("text, expected", BOOL_CASES)
def test_bool_array_scan_string_and_bytes(text, expected):
    assert scan_bool_array(text) == expected
    assert scan_bool_array(text.encode()) == expected


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "unable to parse array"),
        ("{", "unable to parse array"),
        ("{{t},{f}}", "cannot convert ARRAY[2][1] to BoolArray"),
        ("{NULL}", 'could not parse boolean array index 0: invalid boolean ""'),
        ("{a}", 'could not parse boolean array index 0: invalid boolean "a"'),
        ("{t,b}", 'could not parse boolean array index 1: invalid boolean "b"'),
        ("{t,f,cd}", 'could not parse boolean array index 2: invalid boolean "cd"'),
    ],
)
def test_bool_array_scan_error(text, message):
    with pytest.raises(ArrayError) as info:
        scan_bool_array(text)
    assert message in str(info.value)


def test_bool_array_value():
    assert BoolArray().value() == "{}"
    assert BoolArray([False, True, False]).value() == "{f,t,f}"


# --- BytesArray ---


def test_bytes_array_scan_unsupported():
    with pytest.raises(TypeError, match="int to BytesArray"):
        scan_bytes_array(1)


def test_bytes_array_scan_empty_and_nil():
    assert scan_bytes_array("{}") == []
    assert scan_bytes_array(None) is None


BYTES_CASES = [
    ("{}", []),
    ("{NULL}", [None]),
    (r'{"\\xfeff"}', [b"\xfe\xff"]),
    (r'{"\\xdead","\\xbeef"}', [b"\xde\xad", b"\xbe\xef"]),
]


@pytest.mark.parametrize("text, expected", BYTES_CASES)
def test_bytes_array_scan(text, expected):
    assert scan_bytes_array(text) == expected
    assert scan_bytes_array(text.encode()) == expected


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "unable to parse array"),
        ("{", "unable to parse array"),
        (r'{{"\\xfeff"},{"\\xbeef"}}', "cannot convert ARRAY[2][1] to BytesArray"),
        (r'{"\\abc"}', "could not parse bytea array index 0: could not parse bytea value"),
    ],
)
def test_bytes_array_scan_error(text, message):
    with pytest.raises(ArrayError) as info:
        scan_bytes_array(text)
    assert message in str(info.value)


def test_bytes_array_value():
    assert BytesArray().value() == "{}"
    arr = BytesArray([b"\xde\xad\xbe\xef", b"\xfe\xff", b""])
    assert arr.value() == r'{"\\xdeadbeef","\\xfeff","\\x"}'


def test_bytes_array_round_trip():
    arr = BytesArray([b"\x00\x01", b"abc"])
    assert scan_bytes_array(arr.value()) == arr


# --- Float64Array ---


def test_float64_array_scan_unsupported():
    with pytest.raises(TypeError, match="bool to Float64Array"):
        scan_float64_array(True)


def test_float64_array_scan_empty_and_nil():
    assert scan_float64_array("{}") == []
    assert scan_float64_array(None) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("{}", []),
        ("{1.2}", [1.2]),
        ("{3.456,7.89}", [3.456, 7.89]),
        ("{3,1,2}", [3.0, 1.0, 2.0]),
    ],
)
def test_float64_array_scan(text, expected):
    assert scan_float64_array(text) == expected
    assert scan_float64_array(text.encode()) == expected


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "unable to parse array"),
        ("{", "unable to parse array"),
        ("{{5.6},{7.8}}", "cannot convert ARRAY[2][1] to Float64Array"),
        ("{NULL}", "parsing array element index 0:"),
        ("{a}", "parsing array element index 0:"),
        ("{5.6,a}", "parsing array element index 1:"),
        ("{5.6,7.8,a}", "parsing array element index 2:"),
    ],
)
def test_float64_array_scan_error(text, message):
    with pytest.raises(ArrayError) as info:
        scan_float64_array(text)
    assert message in str(info.value)


def test_float64_array_value():
    assert Float64Array().value() == "{}"
    assert Float64Array([1.2, 3.4, 5.6]).value() == "{1.2,3.4,5.6}"


# --- Int64Array ---


def test_int64_array_scan_unsupported():
    with pytest.raises(TypeError, match="bool to Int64Array"):
        scan_int64_array(True)


def test_int64_array_scan_empty_and_nil():
    assert scan_int64_array("{}") == []
    assert scan_int64_array(None) is None


@pytest.mark.parametrize(
    "text, expected", [("{}", []), ("{12}", [12]), ("{345,678}", [345, 678])]
)
def test_int64_array_scan(text, expected):
    assert scan_int64_array(text) == expected
    assert scan_int64_array(text.encode()) == expected


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "unable to parse array"),
        ("{", "unable to parse array"),
        ("{{5},{6}}", "cannot convert ARRAY[2][1] to Int64Array"),
        ("{NULL}", "parsing array element index 0:"),
        ("{a}", "parsing array element index 0:"),
        ("{5,a}", "parsing array element index 1:"),
        ("{5,6,a}", "parsing array element index 2:"),
    ],
)
def test_int64_array_scan_error(text, message):
    with pytest.raises(ArrayError) as info:
        scan_int64_array(text)
    assert message in str(info.value)


def test_int64_array_value():
    assert Int64Array().value() == "{}"
    assert Int64Array([1, 2, 3]).value() == "{1,2,3}"


# --- StringArray ---


def test_string_array_scan_unsupported():
    with pytest.raises(TypeError, match="bool to StringArray"):
        scan_string_array(True)


def test_string_array_scan_empty_and_nil():
    assert scan_string_array("{}") == []
    assert scan_string_array(None) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("{}", []),
        ("{t}", ["t"]),
        ("{f,1}", ["f", "1"]),
        (r'{"a\\b","c d",","}', ["a\\b", "c d", ","]),
    ],
)
def test_string_array_scan(text, expected):
    assert scan_string_array(text) == expected
    assert scan_string_array(text.encode()) == expected


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "unable to parse array"),
        ("{", "unable to parse array"),
        ("{{a},{b}}", "cannot convert ARRAY[2][1] to StringArray"),
        ("{NULL}", "parsing array element index 0: cannot convert nil to string"),
        ("{a,NULL}", "parsing array element index 1: cannot convert nil to string"),
        ("{a,b,NULL}", "parsing array element index 2: cannot convert nil to string"),
    ],
)
def test_string_array_scan_error(text, message):
    with pytest.raises(ArrayError) as info:
        scan_string_array(text)
    assert message in str(info.value)


def test_string_array_value():
    assert StringArray().value() == "{}"
    assert StringArray(["a", "\\b", 'c"', "d,e"]).value() == r'{"a","\\b","c\"","d,e"}'


# --- DecimalArray ---


def test_decimal_array_scan():
    result = scan_decimal_array("{1.5,2}")
    assert result == [Decimal(BigDecimal("1.5")), Decimal(BigDecimal("2"))]
    assert isinstance(result, DecimalArray)
    assert scan_decimal_array(None) is None
    assert scan_decimal_array("{}") == []


def test_decimal_array_scan_error():
    with pytest.raises(ArrayError, match="parsing decimal element index as decimal 0"):
        scan_decimal_array("{a}")
    with pytest.raises(TypeError, match="bool to DecimalArray"):
        scan_decimal_array(True)


def test_decimal_array_value():
    assert DecimalArray().value() == "{}"
    arr = DecimalArray([Decimal(BigDecimal("3.14")), Decimal(BigDecimal("0"))])
    assert arr.value() == "{3.14,0}"


# --- generic scan ---


@pytest.mark.parametrize(
    "src, length, error, message",
    [
        (None, 1, TypeError, "None to array of length 1"),
        (True, None, TypeError, "bool to list"),
        ("{{x}}", None, ArrayError, "multidimensional ARRAY[1][1] is not implemented"),
        ("{{x},{x}}", None, ArrayError, "multidimensional ARRAY[2][1] is not implemented"),
        ("{", 1, ArrayError, "unable to parse"),
        ("{}", 1, ArrayError, "cannot convert ARRAY[0] to array of length 1"),
        ("{x,x}", 1, ArrayError, "cannot convert ARRAY[2] to array of length 1"),
    ],
)
def test_generic_array_scan_errors(src, length, error, message):
    with pytest.raises(error) as info:
        scan_generic_array(src, null_string, length)
    assert message in str(info.value)


def test_generic_array_scan_element_error():
    with pytest.raises(ArrayError, match="parsing array element index 0:"):
        scan_generic_array("{x}", int)


def test_generic_array_scan_not_callable():
    with pytest.raises(ArrayError, match="is not implemented"):
        scan_generic_array("{x}", "text")


@pytest.mark.parametrize(
    "src, expected",
    [
        (rb'{NULL,abc,"\""}', [None, "abc", '"']),
        (r'{NULL,"\"",xyz}', [None, '"', "xyz"]),
    ],
)
def test_generic_array_scan_fixed_and_list(src, expected):
    assert scan_generic_array(src, null_string, 3) == expected
    assert scan_generic_array(src, null_string) == expected


def test_generic_array_scan_empty_and_nil():
    assert scan_generic_array("{}", null_string) == []
    assert scan_generic_array(None, null_string) is None


def test_generic_array_scan_delimiter():
    result = scan_generic_array("{12~NULL~76}", TildeNullInt64)
    assert [e.int64 for e in result] == [12, None, 76]


# --- generic value ---


def test_generic_array_value_none():
    assert GenericArray(None).value() is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ([], "{}"),
        ([True], "{true}"),
        ([True, False], "{true,false}"),
        ((True, False), "{true,false}"),
        ([[]], "{}"),
        ([[], []], "{}"),
        ([[1]], "{{1}}"),
        ([[1], [2]], "{{1},{2}}"),
        ([[1, 2], [3, 4]], "{{1,2},{3,4}}"),
        (((1, 2), (3, 4)), "{{1,2},{3,4}}"),
        (["a", "\\b", 'c"', "d,e"], r'{"a","\\b","c\"","d,e"}'),
        ([b"a", b"\\b", b'c"', b"d,e"], r'{"a","\\b","c\"","d,e"}'),
        ([None], "{NULL}"),
        ([0, None], "{0,NULL}"),
        ([ByteArrayValuer((97,)), ByteArrayValuer((98,))], '{"a","b"}'),
        (
            [[ByteArrayValuer((97,)), ByteArrayValuer((98,))],
             [ByteArrayValuer((99,)), ByteArrayValuer((100,))]],
            '{{"a","b"},{"c","d"}}',
        ),
        ([ByteSliceValuer(b"e"), ByteSliceValuer(b"f")], '{"e","f"}'),
        (
            [[ByteSliceValuer(b"e"), ByteSliceValuer(b"f")],
             [ByteSliceValuer(b"g"), ByteSliceValuer(b"h")]],
            '{{"e","f"},{"g","h"}}',
        ),
    ],
)
def test_generic_array_value(value, expected):
    assert GenericArray(value).value() == expected


def test_generic_array_value_delimiter():
    assert GenericArray([Tilde(1), Tilde(2)]).value() == "{1~2}"
    nested = [[Tilde(1), Tilde(2)], [Tilde(3), Tilde(4)]]
    assert GenericArray(nested).value() == "{{1~2}~{3~4}}"


def test_generic_array_value_unsupported():
    with pytest.raises(ArrayError, match="bool to array"):
        GenericArray(True).value()


@pytest.mark.parametrize("value", [[lambda: None], [None, lambda: None]])
def test_generic_array_value_errors(value):
    with pytest.raises(ArrayError):
        GenericArray(value).value()


# --- random ---


def test_random_bool_array():
    assert random_bool_array(_seq(1, 2, 3)) == [False, True, False]


def test_random_float64_array():
    result = random_float64_array(_seq(7, 9))
    assert result == [7.0, 9.0]
    assert isinstance(result, Float64Array)


def test_random_int64_array():
    result = random_int64_array(count(5).__next__)
    assert result == [5, 6]
    assert isinstance(result, Int64Array)


def test_random_decimal_array():
    result = random_decimal_array(_seq(13, 4, 5, 26))
    assert result.value() == "{3.4,5.6}"
    assert isinstance(result, DecimalArray)