import datetime
import pytest
import xrpc

from xrpc.value import Array, Base64, Bool, DateTime, Double, Int, Int64, Nil, String, Struct


def test_integer_ranges():

    assert Int(-5).value == -5
    assert Int(2 ** 31 - 1).value == 2 ** 31 - 1
    assert Int(-2 ** 31).value == -2 ** 31

    with pytest.raises(xrpc.EncodingError):
        Int(2 ** 31)

    with pytest.raises(xrpc.EncodingError):
        Int(True)

    with pytest.raises(xrpc.EncodingError):
        Int('5')

    assert Int64(2 ** 31).value == 2 ** 31

    with pytest.raises(xrpc.EncodingError):
        Int64(2 ** 63)


def test_equality():

    assert Int(1) == Int(1)
    assert Int(1) != Int64(1)
    assert Int(1) != 1
    assert Int(1) != Double(1.0)
    assert Nil() == Nil()

    # A string supplied as UTF-8 bytes is the same value as its text.

    assert String(b'caf\xc3\xa9') == String('café')
    assert hash(String(b'abc')) == hash(String('abc'))

    first = Struct((('a', Int(1)), ('b', Int(2))))
    second = Struct((('b', Int(2)), ('a', Int(1))))
    assert first == second
    assert hash(first) == hash(second)

    assert Array([Int(1), Int(2)]) != Array([Int(2), Int(1)])


def test_scalar_types():

    assert Double(1).value == 1.0
    assert isinstance(Double(1).value, float)
    assert Base64(bytearray(b'xyz')).value == b'xyz'

    for bad in (1, 'true', None):
        with pytest.raises(xrpc.EncodingError):
            Bool(bad)

    with pytest.raises(xrpc.EncodingError):
        Double(True)

    with pytest.raises(xrpc.EncodingError):
        String(5)

    with pytest.raises(xrpc.EncodingError):
        Base64('text')


def test_string_text():

    assert String('plain').text == 'plain'
    assert String(b'plain').text == 'plain'

    broken = String(b'\xff\xfe')

    with pytest.raises(xrpc.EncodingError):
        broken.text


def test_datetime():

    plain = DateTime(1998, 7, 17, 14, 8, 55)
    assert plain.offset is None
    assert plain.microsecond == 0

    # An absent offset and an offset of zero are the same value.

    assert plain == DateTime(1998, 7, 17, 14, 8, 55, 0, 0)
    assert plain != DateTime(1998, 7, 17, 14, 8, 55, 0, 60)

    with pytest.raises(xrpc.EncodingError):
        DateTime(1998, 13, 17)

    with pytest.raises(xrpc.EncodingError):
        DateTime(1998, 4, 31)

    with pytest.raises(xrpc.EncodingError):
        DateTime(1998, 7, 17, offset=24 * 60)


def test_datetime_conversion():

    zone = datetime.timezone(datetime.timedelta(hours=-5))
    aware = datetime.datetime(2021, 5, 6, 7, 8, 9, 250000, tzinfo=zone)

    converted = DateTime.from_datetime(aware)
    assert converted.offset == -300
    assert converted.microsecond == 250000
    assert converted.to_datetime() == aware

    naive = DateTime.from_datetime(datetime.datetime(2021, 5, 6))
    assert naive.offset is None
    assert naive.to_datetime().tzinfo is None

    day = DateTime.from_datetime(datetime.date(2021, 5, 6))
    assert day == DateTime(2021, 5, 6)


def test_containers():

    array = Array([Int(1), String('two'), Bool(False)])
    assert len(array) == 3
    assert array[1] == String('two')
    assert list(array) == [Int(1), String('two'), Bool(False)]

    with pytest.raises(xrpc.EncodingError):
        Array([1, 2])

    struct = Struct({'name': String('x'), 'size': Int(3)})
    assert len(struct) == 2
    assert 'name' in struct
    assert struct['size'] == Int(3)
    assert struct.get('missing') is None
    assert list(struct) == ['name', 'size']

    # Members are read-only once the struct exists.

    with pytest.raises(TypeError):
        struct.value['name'] = String('y')

    with pytest.raises(xrpc.EncodingError):
        Struct((('a', Int(1)), ('a', Int(2))))

    with pytest.raises(xrpc.EncodingError):
        Struct({1: Int(1)})

    with pytest.raises(xrpc.EncodingError):
        Struct({'a': 1})


def test_to_value():

    when = datetime.datetime(2020, 2, 29, 12, 0, 0)

    converted = xrpc.to_value({'list': [1, 2.5, 'three', True], 'blob': b'\x00\x01', 'when': when})

    expected = Struct({
        'list': Array([Int(1), Double(2.5), String('three'), Bool(True)]),
        'blob': Base64(b'\x00\x01'),
        'when': DateTime(2020, 2, 29, 12, 0, 0),
    })

    assert converted == expected

    # Explicit variants pass through untouched.

    assert xrpc.to_value([Int64(1)]) == Array([Int64(1)])
    assert xrpc.to_value((1, 2)) == Array([Int(1), Int(2)])


def test_to_value_integers():

    assert xrpc.to_value(2 ** 40, allow_int64=True) == Int64(2 ** 40)

    with pytest.raises(xrpc.EncodingError):
        xrpc.to_value(2 ** 40, allow_int64=False)

    with pytest.raises(xrpc.EncodingError):
        xrpc.to_value(2 ** 70, allow_int64=True)


def test_to_value_nil():

    with pytest.raises(xrpc.EncodingError):
        xrpc.to_value(None, allow_nil=False)

    assert xrpc.to_value(None, allow_nil=True) == Nil()
    assert xrpc.to_value([None], allow_nil=True) == Array([Nil()])


def test_to_value_rejects():

    looped = [1, 2]
    looped.append(looped)

    with pytest.raises(xrpc.EncodingError):
        xrpc.to_value(looped)

    with pytest.raises(xrpc.EncodingError):
        xrpc.to_value({1: 'one'})

    with pytest.raises(xrpc.EncodingError):
        xrpc.to_value({1, 2})

    # The same list appearing twice is not a cycle.

    shared = [1]
    assert xrpc.to_value([shared, shared]) == Array([Array([Int(1)]), Array([Int(1)])])


def test_to_python():

    zone = datetime.timezone.utc
    original = {
        'count': 3,
        'items': ['a', 'b'],
        'blob': b'raw',
        'when': datetime.datetime(2001, 1, 1, tzinfo=zone),
        'ratio': 0.25,
        'ok': False,
    }

    assert xrpc.to_value(original).to_python() == original
    assert Nil().to_python() is None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
