import logging

import pytest

from ttfembed.font import FontProgramType, TrueTypeFont, build_font_descriptor
from ttfembed.font.descriptor import descriptor_entries, font_file_stream_dict

from .samples import os2_table, ps_name_table, sample_font


@pytest.fixture
def sample():
    return TrueTypeFont.parse(sample_font())


def test_font_descriptor(sample):
    result = build_font_descriptor(sample, b'12 0 R')
    assert result == (
        b'<</Type /FontDescriptor /FontName /Sample-Regular /Ascent 900 '
        b'/Descent 300 /CapHeight 700 /Flags 32 '
        b'/FontBBox [-50 -200 1050 900] /ItalicAngle -12 /StemV 80 '
        b'/XHeight 500 /MissingWidth 500 /FontFile2 12 0 R>>\n'
    )


def test_font_descriptor_type1_key(sample):
    result = build_font_descriptor(
        sample, b'7 0 R', program_type=FontProgramType.TYPE1
    )
    assert result.endswith(b'/FontFile 7 0 R>>\n')
    assert b'/FontFile2' not in result


def test_descriptor_entries(sample):
    entries = dict(descriptor_entries(sample))
    assert entries == {
        '/Ascent': '900',
        '/Descent': '300',
        '/CapHeight': '700',
        '/Flags': '32',
        '/FontBBox': '[-50 -200 1050 900]',
        '/ItalicAngle': '-12',
        '/StemV': '80',
        '/XHeight': '500',
        '/MissingWidth': '500',
    }


def test_descriptor_name_escaping():
    font = TrueTypeFont.parse(
        sample_font(name=ps_name_table('Café#1'))
    )
    result = build_font_descriptor(font, b'1 0 R')
    assert b'/FontName /Caf#E9#231 ' in result


def test_descriptor_follows_settings():
    from ttfembed.font import FontParseSettings

    font = TrueTypeFont.parse(
        sample_font(),
        settings=FontParseSettings(descender_follows_hhea_sign=True)
    )
    assert dict(descriptor_entries(font))['/Descent'] == '-300'


def test_not_embeddable_warning(caplog):
    font = TrueTypeFont.parse(sample_font(**{'OS/2': os2_table(fs_type=2)}))
    with caplog.at_level(logging.WARNING, logger='ttfembed.font.descriptor'):
        result = build_font_descriptor(font, b'3 0 R')
    assert result.startswith(b'<</Type /FontDescriptor')
    assert any(
        'does not permit embedding' in record.getMessage()
        for record in caplog.records
    )


def test_embeddable_no_warning(sample, caplog):
    with caplog.at_level(logging.WARNING, logger='ttfembed.font.descriptor'):
        build_font_descriptor(sample, b'3 0 R')
    assert not caplog.records


def test_font_file_stream_dict(sample):
    length = len(sample.font_bytes)
    assert font_file_stream_dict(sample) \
        == b'<</Length %d /Length1 %d>>' % (length, length)
    assert font_file_stream_dict(sample, FontProgramType.TYPE1) \
        == b'<</Length %d>>' % length
