import pickle
import pytest
import xrpc

from xrpc.errors import DepthExceeded, DuplicateMember, InvalidValue, UnexpectedXml, XmlError
from xrpc.protocol import codec
from xrpc.protocol.parser import decode
from xrpc.value import Array, Base64, Bool, DateTime, Double, Int, Int64, Nil, String, Struct


def test_scalars():

    assert decode(b'<value><string>hi</string></value>') == String('hi')
    assert decode('<value><int>4</int></value>') == Int(4)
    assert decode('<value><i4>-5</i4></value>') == Int(-5)
    assert decode('<value><i8>5000000000</i8></value>') == Int64(5000000000)
    assert decode('<value><boolean>1</boolean></value>') == Bool(True)
    assert decode('<value><double>-2.5e2</double></value>') == Double(-250.0)
    assert decode('<value><base64>dGVzdA==</base64></value>') == Base64(b'test')

    when = decode('<value><dateTime.iso8601>19980717T14:08:55</dateTime.iso8601></value>')
    assert when == DateTime(1998, 7, 17, 14, 8, 55)


def test_untyped_strings():

    assert decode('<value>hi</value>') == String('hi')
    assert decode('<value>  padded  </value>') == String('  padded  ')
    assert decode('<value></value>') == String('')
    assert decode('<value/>') == String('')
    assert decode('<value><string/></value>') == String('')


def test_text_handling():

    assert decode('<value><string>a &amp; b &lt;c&gt;</string></value>') == String('a & b <c>')
    assert decode('<value><string>a&#13;b</string></value>') == String('a\rb')
    assert decode('<value><string><![CDATA[<x>]]> and more</string></value>') == String('<x> and more')
    assert decode('<value><string><!-- note -->kept</string></value>') == String('kept')
    assert decode('<value><string>café</string></value>'.encode('utf-8')) == String('café')


def test_whitespace_between_elements():

    document = '''
        <value>
          <struct>
            <member>
              <name>list</name>
              <value>
                <array>
                  <data>
                    <value><i4>1</i4></value>
                    <value><i4>2</i4></value>
                  </data>
                </array>
              </value>
            </member>
          </struct>
        </value>
    '''

    assert decode(document) == Struct({'list': Array([Int(1), Int(2)])})


def test_array_order():

    items = ''.join('<value><i4>%d</i4></value>' % (number) for number in (3, 1, 2))
    decoded = decode('<value><array><data>' + items + '</data></array></value>')

    assert decoded == Array([Int(3), Int(1), Int(2)])
    assert decode('<value><array><data></data></array></value>') == Array()


def test_nested_containers():

    original = Struct({
        'name': String('x'),
        'matrix': Array([Array([Int(1), Int(2)]), Array([]), Array([Struct()])]),
        'inner': Struct({'deep': Array([Struct({'flag': Bool(False)})])}),
        'after': Double(1.5),
    })

    assert decode(codec.encode(original)) == original


def test_round_trip():

    original = Array([
        Int(-2 ** 31),
        Int64(-2 ** 63),
        Bool(False),
        Double(0.1),
        Double(1e300),
        String('multi\nline\r\ntext & <tags>'),
        String(b'bytes'),
        Base64(bytes(range(256))),
        DateTime(2024, 2, 29, 23, 59, 59, 1000, -90),
        DateTime(2024, 2, 29, 23, 59, 59, 123457),
        Nil(),
        Struct(),
    ])

    decoded = decode(codec.encode(original, allow_nil=True), allow_nil=True)
    assert decoded == original

    # An explicit zero offset reads back as no offset at all, which is
    # the same value.

    zero = DateTime(2000, 1, 1, 0, 0, 0, 0, 0)
    assert decode(codec.encode(zero)) == zero


def test_duplicate_member():

    member = '<member><name>a</name><value><i4>1</i4></value></member>'

    with pytest.raises(DuplicateMember) as error:
        decode('<value><struct>' + member + member + '</struct></value>')

    assert error.value.name == 'a'
    assert isinstance(error.value, xrpc.DocumentError)


def test_invalid_scalars():

    bad = (
        '<value><int>AAA</int></value>',
        '<value><int> 4</int></value>',
        '<value><i4>2147483648</i4></value>',
        '<value><boolean>true</boolean></value>',
        '<value><double>NaN</double></value>',
        '<value><dateTime.iso8601>19981317T14:08:55</dateTime.iso8601></value>',
        '<value><base64>dGVzd</base64></value>',
        '<value><int></int></value>',
    )

    for document in bad:
        with pytest.raises(InvalidValue):
            decode(document)


def test_invalid_value_position():

    with pytest.raises(InvalidValue) as error:
        decode('<value>\n<int>AAA</int>\n</value>')

    assert error.value.for_type == 'int'
    assert error.value.found == 'AAA'
    assert error.value.position == (2, 0)
    assert 'line 2' in str(error.value)


def test_base64_whitespace():

    wrapped = '<value><base64>\n  dGVz\n  dA8=\n</base64></value>'
    compact = '<value><base64>dGVzdA8=</base64></value>'

    assert decode(wrapped) == decode(compact)

    with pytest.raises(InvalidValue):
        decode('<value><base64>\n  dGVz\n  dA\n</base64></value>')


def test_nil():

    with pytest.raises(InvalidValue):
        decode('<value><nil/></value>', allow_nil=False)

    assert decode('<value><nil/></value>', allow_nil=True) == Nil()
    assert decode('<value><nil></nil></value>', allow_nil=True) == Nil()


def test_grammar_violations():

    bad = (
        '<value><i4>1</i4><i4>2</i4></value>',
        '<value>text<i4>1</i4></value>',
        '<value><float>1.0</float></value>',
        '<value><array><value><i4>1</i4></value></array></value>',
        '<value><array><data><i4>1</i4></data></array></value>',
        '<value><struct><member><value><i4>1</i4></value></member></struct></value>',
        '<value><struct><member><name>a</name></member></struct></value>',
        '<value><struct><name>a</name></struct></value>',
        '<value><string><b>bold</b></string></value>',
        '<params/>',
    )

    for document in bad:
        with pytest.raises(UnexpectedXml):
            decode(document)


def test_attributes():

    with pytest.raises(UnexpectedXml):
        decode('<value><i4 base="16">10</i4></value>')

    with pytest.raises(UnexpectedXml):
        decode('<value xmlns="urn:example"><i4>10</i4></value>')


def test_malformed_xml():

    bad = (
        '<value><i4>1</i4>',
        '<value><i4>1</value>',
        '<value><i4>1</i4></value><value/>',
        '<value>&undefined;</value>',
        '',
        b'<value><string>\xff</string></value>',
    )

    for document in bad:
        with pytest.raises(XmlError):
            decode(document)


def test_doctype_rejected():

    document = '<?xml version="1.0"?>' \
               '<!DOCTYPE value [<!ENTITY a "aaaaaaaaaa"><!ENTITY b "&a;&a;&a;&a;">]>' \
               '<value>&b;</value>'

    with pytest.raises(XmlError):
        decode(document)


def test_depth_limit():

    depth = 100
    document = '<value><array><data>' * depth + '<value><i4>1</i4></value>' + '</data></array></value>' * depth

    with pytest.raises(DepthExceeded) as error:
        decode(document, max_depth=64)

    assert error.value.limit == 64

    decoded = decode(document, max_depth=depth)

    levels = 0
    while isinstance(decoded, Array):
        decoded = decoded[0]
        levels += 1

    assert levels == depth
    assert decoded == Int(1)


def test_errors_survive_pickling():

    member = '<member><name>a</name><value><i4>1</i4></value></member>'

    documents = (
        '<value><foo/></value>',
        '<value>\n<int>AAA</int>\n</value>',
        '<value><struct>' + member + member + '</struct></value>',
        '<value><array><data><value><array><data></data></array></value></data></array></value>',
        '<value>',
    )

    errors = list()
    for document in documents:
        with pytest.raises(xrpc.DocumentError) as error:
            decode(document, max_depth=1)
        errors.append(error.value)

    with pytest.raises(xrpc.errors.MalformedResponse) as error:
        xrpc.protocol.response.loads('<methodResponse></methodResponse>')
    errors.append(error.value)

    expected = (UnexpectedXml, InvalidValue, DuplicateMember, DepthExceeded, XmlError, xrpc.errors.MalformedResponse)
    assert [type(error) for error in errors] == list(expected)

    for error in errors:
        copy = pickle.loads(pickle.dumps(error))

        assert type(copy) is type(error)
        assert str(copy) == str(error)
        assert copy.args == error.args
        assert copy.position == error.position

    unexpected, invalid, duplicate, depth = (pickle.loads(pickle.dumps(error)) for error in errors[:4])

    assert (unexpected.expected, unexpected.found) == (errors[0].expected, errors[0].found)
    assert (invalid.for_type, invalid.found, invalid.position) == ('int', 'AAA', (2, 0))
    assert duplicate.name == 'a'
    assert depth.limit == 1


def test_depth_far_beyond_recursion_limit():

    depth = 20000
    document = '<value><struct><member><name>m</name>' * depth + '<value/>' + '</member></struct></value>' * depth

    with pytest.raises(DepthExceeded):
        decode(document)


def test_large_document():

    # Larger than one chunk handed to expat.

    text = 'x' * 200000
    assert decode('<value><string>' + text + '</string></value>') == String(text)

    items = [Int(number) for number in range(20000)]
    assert decode(codec.encode(Array(items))) == Array(items)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
