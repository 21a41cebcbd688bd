import pytest

from ttfembed.font import tables
from ttfembed.misc import (
    BadMagicNumberError,
    FontReadErrorKind,
    MalformedTableError,
    ShortReadError,
    TableNotFoundError,
)

from .samples import (
    context_for,
    head_table,
    hhea_table,
    hmtx_table,
    loca_table,
    maxp_table,
    os2_table,
    post_table,
)


def test_parse_head():
    ctx = context_for({
        'head': head_table(
            units_per_em=2048, bbox=(-1020, -462, 2800, 1700),
            index_to_loc_format=1
        )
    })
    head = tables.parse_head(ctx)
    assert head.units_per_em == 2048
    assert head.bbox == (-1020, -462, 2800, 1700)
    assert head.index_to_loc_format == 1
    assert not head.short_loca_index


@pytest.mark.parametrize('magic', [0, 0x5F0F3CF4, 0xF53C0F5F, 0xFFFFFFFF])
def test_head_bad_magic(magic):
    ctx = context_for({'head': head_table(magic=magic)})
    with pytest.raises(BadMagicNumberError) as exc_info:
        tables.parse_head(ctx)
    assert exc_info.value.kind == FontReadErrorKind.BAD_MAGIC_NUMBER


def test_head_missing():
    ctx = context_for({'hhea': hhea_table()})
    with pytest.raises(TableNotFoundError):
        tables.parse_head(ctx)


def test_head_truncated():
    ctx = context_for({'head': head_table()[:40]})
    with pytest.raises(ShortReadError):
        tables.parse_head(ctx)


def test_parse_hhea():
    ctx = context_for({
        'hhea': hhea_table(ascender=1854, descender=-434, number_of_hmetrics=3)
    })
    hhea = tables.parse_hhea(ctx)
    assert hhea.ascender == 1854
    assert hhea.descender == -434
    assert hhea.number_of_hmetrics == 3


def test_parse_maxp():
    ctx = context_for({'maxp': maxp_table(num_glyphs=65535)})
    assert tables.parse_maxp(ctx).num_glyphs == 65535


def _parse_hmtx(metrics, num_glyphs, extra_lsbs=0):
    ctx = context_for({'hmtx': hmtx_table(metrics, extra_lsbs=extra_lsbs)})
    hhea = tables.HheaTable(
        ascender=800, descender=-200, number_of_hmetrics=len(metrics)
    )
    maxp = tables.MaxpTable(num_glyphs=num_glyphs)
    return tables.parse_hmtx(ctx, hhea, maxp)


def test_hmtx_all_explicit():
    widths = _parse_hmtx([(500, 10), (600, -20), (700, 0)], num_glyphs=3)
    assert widths == [500, 600, 700]


@pytest.mark.parametrize('num_metrics, num_glyphs', [(1, 5), (2, 3), (3, 10)])
def test_hmtx_padding(num_metrics, num_glyphs):
    metrics = [(100 * (ix + 1), 0) for ix in range(num_metrics)]
    widths = _parse_hmtx(
        metrics, num_glyphs=num_glyphs, extra_lsbs=num_glyphs - num_metrics
    )
    assert len(widths) == num_glyphs
    last_width = widths[num_metrics - 1]
    assert last_width == 100 * num_metrics
    assert all(w == last_width for w in widths[num_metrics:])


def test_hmtx_no_metrics():
    with pytest.raises(MalformedTableError) as exc_info:
        _parse_hmtx([], num_glyphs=2)
    assert exc_info.value.kind == FontReadErrorKind.MALFORMED_TABLE


def test_hmtx_empty_font():
    assert _parse_hmtx([], num_glyphs=0) == []


def test_hmtx_truncated():
    ctx = context_for({'hmtx': hmtx_table([(500, 0)])})
    hhea = tables.HheaTable(ascender=0, descender=0, number_of_hmetrics=2)
    maxp = tables.MaxpTable(num_glyphs=2)
    with pytest.raises(ShortReadError):
        tables.parse_hmtx(ctx, hhea, maxp)


HHEA = tables.HheaTable(ascender=800, descender=-200, number_of_hmetrics=1)


def test_parse_os2_v4():
    ctx = context_for({
        'OS/2': os2_table(
            version=4, fs_type=8, fs_selection=0x20, typo_ascender=760,
            typo_descender=-240, typo_line_gap=90, win_ascent=950,
            win_descent=310, x_height=510, cap_height=710
        )
    })
    os2 = tables.parse_os2(ctx, HHEA)
    assert os2.version == 4
    assert os2.fs_type == 8
    assert os2.embeddable
    assert os2.bold
    assert os2.typo_ascender == 760
    assert os2.typo_descender == -240
    assert os2.typo_line_gap == 90
    assert os2.win_ascent == 950
    assert os2.win_descent == 310
    assert os2.x_height == 510
    assert os2.cap_height == 710


@pytest.mark.parametrize('version', [0, 1])
def test_parse_os2_old_version(version):
    ctx = context_for({'OS/2': os2_table(version=version, fs_selection=0x40)})
    os2 = tables.parse_os2(ctx, HHEA)
    assert not os2.bold
    assert os2.x_height == 0
    # falls back to the hhea ascender
    assert os2.cap_height == 800
    assert os2.win_ascent == 900


@pytest.mark.parametrize('fs_type, embeddable', [
    (0, True),
    (2, False),
    (0x200, False),
    (0x204, False),
    (0x208, False),
    (4, True),
    (8, True),
    (0x100, True),
    # only exactly 2 counts as restricted
    (6, True),
])
def test_embeddable(fs_type, embeddable):
    ctx = context_for({'OS/2': os2_table(fs_type=fs_type)})
    assert tables.parse_os2(ctx, HHEA).embeddable == embeddable


def test_os2_v2_truncated():
    # a version 2 table that stops right after usWinDescent
    ctx = context_for({'OS/2': os2_table(version=2)[:78]})
    with pytest.raises(ShortReadError):
        tables.parse_os2(ctx, HHEA)


def test_parse_post():
    ctx = context_for({
        'post': post_table(
            italic_angle=-12, underline_position=-150,
            underline_thickness=75, is_fixed_pitch=1
        )
    })
    post = tables.parse_post(ctx)
    # only the integer part is retained
    assert post.italic_angle == -12
    assert post.underline_position == -150
    assert post.underline_thickness == 75
    assert post.is_fixed_pitch


def test_parse_post_proportional():
    ctx = context_for({'post': post_table(is_fixed_pitch=0)})
    assert not tables.parse_post(ctx).is_fixed_pitch


def _head(index_to_loc_format):
    return tables.HeadTable(
        units_per_em=1000, x_min=0, y_min=0, x_max=0, y_max=0,
        index_to_loc_format=index_to_loc_format
    )


def test_loca_short():
    raw = [0, 0, 6, 100, 0x7fff, 0xffff]
    ctx = context_for({'loca': loca_table([x * 2 for x in raw], short=True)})
    assert tables.parse_loca(ctx, _head(0)) == [2 * x for x in raw]


@pytest.mark.parametrize('index_to_loc_format', [1, -1, 2])
def test_loca_long(index_to_loc_format):
    raw = [0, 0, 6, 100, 0x1ffff, 0xfffffffe]
    ctx = context_for({'loca': loca_table(raw, short=False)})
    assert tables.parse_loca(ctx, _head(index_to_loc_format)) == raw


def test_loca_odd_length():
    # trailing bytes that don't form a complete entry are ignored
    ctx = context_for({'loca': loca_table([0, 4, 8], short=False) + b'\x00'})
    assert tables.parse_loca(ctx, _head(1)) == [0, 4, 8]
