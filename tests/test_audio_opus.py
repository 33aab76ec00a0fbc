import struct

import pytest

from asset_fixtures import FakePartition, audio_asset, partitions
from lotusdump.audio import (
    AudioSubHeader,
    AudioCompression,
    OggPage,
    build_audio,
    build_ogg_opus,
    ogg_crc32,
    opus_page_size,
    segment_table,
)
from lotusdump.errors import MissingPartitionError, UnknownFormatError
from lotusdump.header import decode_header
from lotusdump.options import ExtractOptions

PATH = "/Lotus/Sounds/Music.wav"


def _sub(block_align=300, sample_rate=48000, size=0, channels=2):
    return AudioSubHeader(
        compression=AudioCompression.OPUS,
        sample_rate=sample_rate,
        bits_per_sample=16,
        channels=channels,
        average_byte_rate=0,
        block_align=block_align,
        samples_per_block=0,
        uncompressed_size=size,
    )


def _split_pages(stream: bytes):
    pages = []
    pos = 0
    while pos < len(stream):
        assert stream[pos : pos + 4] == b"OggS"
        (
            version,
            header_type,
            granule,
            serial,
            sequence,
            checksum,
            nsegs,
        ) = struct.unpack_from("<BBQIIIB", stream, pos + 4)
        lacing = stream[pos + 27 : pos + 27 + nsegs]
        body_len = sum(lacing)
        end = pos + 27 + nsegs + body_len
        pages.append(
            {
                "version": version,
                "header_type": header_type,
                "granule": granule,
                "serial": serial,
                "sequence": sequence,
                "checksum": checksum,
                "lacing": lacing,
                "payload": stream[pos + 27 + nsegs : end],
                "raw": stream[pos:end],
            }
        )
        pos = end
    return pages


def _crc_reference(data: bytes) -> int:
    crc = 0
    for byte in data:
        crc ^= byte << 24
        for _ in range(8):
            if crc & 0x80000000:
                crc = ((crc << 1) ^ 0x04C11DB7) & 0xFFFFFFFF
            else:
                crc = (crc << 1) & 0xFFFFFFFF
    return crc


def test_crc_check_value():
    assert ogg_crc32(b"123456789") == 0x89A1897F
    assert ogg_crc32(b"") == 0


@pytest.mark.parametrize(
    "data", [b"\x00", b"OggS", bytes(range(256)), b"\xff" * 1000]
)
def test_crc_matches_bitwise_reference(data):
    assert ogg_crc32(data) == _crc_reference(data)


def test_single_byte_flip_changes_checksum():
    payload = bytes(range(200))
    page = OggPage(
        header_type=0,
        granule_position=48000,
        stream_serial=7,
        page_sequence=2,
        segment_table=segment_table(payload, 100),
        payload=payload,
    )
    for index in (0, 57, 199):
        for bit in (0x01, 0x80):
            flipped = bytearray(payload)
            flipped[index] ^= bit
            other = OggPage(
                header_type=0,
                granule_position=48000,
                stream_serial=7,
                page_sequence=2,
                segment_table=page.segment_table,
                payload=bytes(flipped),
            )
            assert other.checksum != page.checksum


def test_page_checksum_verifies():
    page = OggPage(0x02, 0, 1, 0, segment_table(b"abc", 255), b"abc")
    raw = bytearray(page.to_bytes())
    stored = struct.unpack_from("<I", raw, 22)[0]
    raw[22:26] = b"\x00" * 4
    assert stored == ogg_crc32(bytes(raw)) == page.checksum


def test_segment_table_splits_packets():
    assert segment_table(b"\x00" * 300, 300) == bytes([255, 45])
    assert segment_table(b"\x00" * 250, 100) == bytes([100, 100, 50])
    assert segment_table(b"", 100) == b""


def test_segment_table_terminates_full_packets():
    assert segment_table(b"\x00" * 510, 255) == bytes([255, 0, 255, 0])
    assert segment_table(b"\x00" * 510, 510) == bytes([255, 255, 0])
    assert segment_table(b"\x00" * 300, 255) == bytes([255, 0, 45])


@pytest.mark.parametrize("block_align", [255, 510])
def test_data_page_lacing_keeps_packets_apart(block_align):
    data = bytes(range(255)) * 4
    stream = build_ogg_opus(
        _sub(block_align), data, stream_serial=3, vendor="v", comments=[]
    )
    (page,) = _split_pages(stream)[2:]
    packets = len(data) // block_align
    assert list(page["lacing"]) == ([255] * (block_align // 255) + [0]) * packets
    assert page["payload"] == data
    assert page["header_type"] == 0x04


def test_too_many_segments_rejected():
    payload = b"\x00" * 256
    page = OggPage(0, 0, 0, 2, segment_table(payload, 1), payload)
    with pytest.raises(UnknownFormatError):
        page.to_bytes()


@pytest.mark.parametrize(
    "block_align,expected", [(100, 10000), (254, 25400), (255, 12750), (300, 15000)]
)
def test_page_size(block_align, expected):
    assert opus_page_size(block_align) == expected


def test_two_header_pages_and_two_data_pages():
    block_align = 300
    data = bytes(i & 0xFF for i in range(block_align * 50 + 1))
    stream = build_ogg_opus(
        _sub(block_align, 48000),
        data,
        stream_serial=0x1234,
        vendor="Warframe",
        comments=["ARTIST=Warframe"],
    )
    pages = _split_pages(stream)
    assert len(pages) == 4

    head, tags, first, last = pages
    assert head["header_type"] == 0x02
    assert head["sequence"] == 0
    assert head["granule"] == 0
    assert head["payload"].startswith(b"OpusHead")
    assert tags["header_type"] == 0x00
    assert tags["sequence"] == 1
    assert tags["payload"].startswith(b"OpusTags")
    assert b"Warframe" in tags["payload"]
    assert b"ARTIST=Warframe" in tags["payload"]

    assert first["header_type"] == 0x00
    assert last["header_type"] & 0x04
    for i, page in enumerate((first, last)):
        assert page["sequence"] == i + 2
        assert page["granule"] == (i + 1) * 48000
    assert first["payload"] + last["payload"] == data
    assert len(last["payload"]) == 1

    for page in pages:
        assert page["serial"] == 0x1234
        assert page["version"] == 0
        unsigned = bytearray(page["raw"])
        unsigned[22:26] = b"\x00" * 4
        assert page["checksum"] == ogg_crc32(bytes(unsigned))


def test_opus_head_fields():
    stream = build_ogg_opus(
        _sub(channels=1, sample_rate=24000),
        b"",
        stream_serial=1,
        vendor="v",
        comments=[],
    )
    head = _split_pages(stream)[0]["payload"]
    version, channels, pre_skip, rate, gain, family = struct.unpack_from(
        "<BBHIHB", head, 8
    )
    assert (version, channels, pre_skip, rate, gain, family) == (
        1,
        1,
        312,
        24000,
        0,
        0,
    )


def test_zero_block_align_rejected():
    with pytest.raises(UnknownFormatError):
        build_ogg_opus(
            _sub(block_align=0), b"abc", stream_serial=0, vendor="", comments=[]
        )


def _opus_set(size, f=None, b=None):
    h = FakePartition()
    node = h.add(
        PATH,
        audio_asset(
            PATH, compression=7, block_align=100, uncompressed_size=size
        ),
    )
    f_part = b_part = None
    if f is not None:
        f_part = FakePartition()
        f_part.add(PATH, f)
    if b is not None:
        b_part = FakePartition()
        b_part.add(PATH, b)
    return partitions(h, f=f_part, b=b_part), node


def _opus_data(parts, node, serial=99):
    payload = parts.h.decompress(node)
    built = build_audio(
        decode_header(payload),
        payload,
        parts,
        node,
        ExtractOptions(stream_serial=serial),
    )
    assert built.extension == ".opus"
    return b"".join(p["payload"] for p in _split_pages(built.data)[2:])


def test_opus_prefers_f_partition():
    parts, node = _opus_set(4, f=b"FFFF", b=b"BBBBBB")
    assert _opus_data(parts, node) == b"FFFF"


def test_opus_falls_back_to_b_tail_on_length_mismatch():
    parts, node = _opus_set(4, f=b"FFF", b=b"oldBBBB")
    assert _opus_data(parts, node) == b"BBBB"


def test_opus_falls_back_to_b_without_f():
    parts, node = _opus_set(4, b=b"xxBBBB")
    assert _opus_data(parts, node) == b"BBBB"


def test_opus_missing_samples():
    parts, node = _opus_set(4, f=b"FF", b=b"BB")
    with pytest.raises(MissingPartitionError):
        _opus_data(parts, node)


def test_injected_serial_is_reproducible():
    parts, node = _opus_set(4, f=b"FFFF")
    payload = parts.h.decompress(node)
    header = decode_header(payload)
    options = ExtractOptions(stream_serial=0xCAFE)
    one = build_audio(header, payload, parts, node, options).data
    two = build_audio(header, payload, parts, node, options).data
    assert one == two
    assert all(p["serial"] == 0xCAFE for p in _split_pages(one))


def test_empty_stream_still_ends_with_eos_page():
    stream = build_ogg_opus(_sub(), b"", stream_serial=5, vendor="v", comments=[])
    pages = _split_pages(stream)
    assert len(pages) == 3
    last = pages[-1]
    assert last["header_type"] == 0x04
    assert last["sequence"] == 2
    assert last["granule"] == 0
    assert last["lacing"] == b"" and last["payload"] == b""
