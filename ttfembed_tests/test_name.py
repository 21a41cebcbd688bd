import pytest

from ttfembed.font.name import parse_name, sanitise_postscript_name
from ttfembed.misc import FontReadErrorKind, PostScriptNameNotFoundError

from .samples import context_for, name_table, ps_name_table


@pytest.mark.parametrize('raw, expected', [
    (b'Helvetica-Bold', 'Helvetica-Bold'),
    (b'A/B C', 'ABC'),
    (b'[x](y){z}<w>', 'xyzw'),
    (b'100%Sans', '100Sans'),
    ('DejaVuSans'.encode('utf-16be'), 'DejaVuSans'),
    (b'\x00A\x00 \x00B', 'AB'),
])
def test_sanitise(raw, expected):
    assert sanitise_postscript_name(raw) == expected


def test_parse_windows_record():
    ctx = context_for({'name': ps_name_table('Sample-Regular')})
    assert parse_name(ctx) == 'Sample-Regular'


def test_first_record_wins():
    ctx = context_for({
        'name': name_table([
            (1, 0, 0, 6, b'Mac Name'),
            (3, 1, 0x409, 6, 'WinName'.encode('utf-16be')),
        ])
    })
    assert parse_name(ctx) == 'MacName'


def test_forbidden_characters_removed():
    ctx = context_for({
        'name': ps_name_table('Odd (Font) [Name]/%')
    })
    assert parse_name(ctx) == 'OddFontName'


def test_no_postscript_name():
    ctx = context_for({
        'name': name_table([
            (3, 1, 0x409, 1, 'Family'.encode('utf-16be')),
            (3, 1, 0x409, 4, 'Family Regular'.encode('utf-16be')),
        ])
    })
    with pytest.raises(PostScriptNameNotFoundError) as exc_info:
        parse_name(ctx)
    assert exc_info.value.kind == FontReadErrorKind.POSTSCRIPT_NAME_NOT_FOUND


def test_empty_name_table():
    ctx = context_for({'name': name_table([])})
    with pytest.raises(PostScriptNameNotFoundError):
        parse_name(ctx)


@pytest.mark.parametrize('raw', [b'', b'\x00\x00', b'( )'])
def test_empty_after_sanitising(raw):
    ctx = context_for({'name': name_table([(3, 1, 0x409, 6, raw)])})
    with pytest.raises(PostScriptNameNotFoundError):
        parse_name(ctx)
