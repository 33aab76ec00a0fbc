import struct

import pytest

from asset_fixtures import (
    FakePartition,
    block_stream,
    partitions,
    texture_asset,
)
from lotusdump.errors import MissingPartitionError, UnknownFormatError
from lotusdump.header import decode_header
from lotusdump.texture import (
    TextureFormat,
    build_texture,
    decode_texture_subheader,
    pack_dds_header,
    texture_byte_size,
)

PATH = "/Lotus/Textures/Rock.png"


def _sub(**kwargs):
    payload = texture_asset(PATH, **kwargs)
    return decode_texture_subheader(payload, decode_header(payload).consumed_length)


def test_subheader_fields():
    sub = _sub(
        format_code=0x23,
        mip_fragment_count=2,
        sub_offsets=[0, 100, 400],
        width_ratio=2,
        height_ratio=1,
        max_side_length=512,
    )
    assert sub.format is TextureFormat.BC7
    assert sub.mip_fragment_count == 2
    assert sub.sub_offsets == (0, 100, 400)
    assert (sub.width, sub.height) == (512, 256)


@pytest.mark.parametrize(
    "ratio,side,expected",
    [
        ((1, 1), 64, (64, 64)),
        ((2, 1), 64, (64, 32)),
        ((1, 2), 64, (32, 64)),
        ((3, 2), 100, (100, 66)),
        ((2, 3), 100, (66, 100)),
    ],
)
def test_dimensions(ratio, side, expected):
    sub = _sub(width_ratio=ratio[0], height_ratio=ratio[1], max_side_length=side)
    assert (sub.width, sub.height) == expected


def test_zero_aspect_ratio_rejected():
    with pytest.raises(UnknownFormatError):
        _sub(width_ratio=0, height_ratio=0)


def test_unknown_format_code_rejected():
    with pytest.raises(UnknownFormatError):
        _sub(format_code=0x55)


@pytest.mark.parametrize(
    "fmt,width,height,size",
    [
        (TextureFormat.BC1, 4, 4, 8),
        (TextureFormat.BC1, 5, 5, 32),
        (TextureFormat.BC4, 8, 4, 16),
        (TextureFormat.BC3, 4, 4, 16),
        (TextureFormat.BC7, 16, 8, 128),
        (TextureFormat.BC6H, 1, 1, 16),
        (TextureFormat.RGBA8, 3, 2, 24),
    ],
)
def test_byte_size(fmt, width, height, size):
    assert texture_byte_size(fmt, width, height) == size


def _dds_fields(dds: bytes):
    assert dds[:4] == b"DDS "
    size, flags, height, width, pitch = struct.unpack_from("<IIIII", dds, 4)
    pf_flags, fourcc, bits, r, g, b, a = struct.unpack_from(
        "<I4sIIIII", dds, 4 + 72 + 4
    )
    return {
        "size": size,
        "flags": flags,
        "height": height,
        "width": width,
        "pitch": pitch,
        "pf_flags": pf_flags,
        "fourcc": fourcc,
        "bits": bits,
        "masks": (r, g, b, a),
    }


@pytest.mark.parametrize(
    "code,fourcc",
    [(0x00, b"DXT1"), (0x01, b"DXT1"), (0x02, b"DXT3"), (0x03, b"DXT5"),
     (0x06, b"ATI1"), (0x07, b"ATI2")],
)
def test_dds_fourcc_formats(code, fourcc):
    sub = _sub(format_code=code, max_side_length=16)
    dds = pack_dds_header(sub)
    fields = _dds_fields(dds)
    assert len(dds) == 128
    assert fields["size"] == 124
    assert (fields["width"], fields["height"]) == (16, 16)
    assert fields["flags"] & 0x80000
    assert fields["pitch"] == sub.byte_size
    assert fields["pf_flags"] == 0x4
    assert fields["fourcc"] == fourcc


@pytest.mark.parametrize("code,dxgi", [(0x22, 95), (0x23, 98)])
def test_dds_dx10_header(code, dxgi):
    dds = pack_dds_header(_sub(format_code=code, max_side_length=8))
    assert len(dds) == 148
    assert _dds_fields(dds)["fourcc"] == b"DX10"
    assert struct.unpack_from("<IIIII", dds, 128) == (dxgi, 3, 0, 1, 0)


def test_dds_uncompressed_masks():
    sub = _sub(format_code=0x0A, width_ratio=2, height_ratio=1, max_side_length=8)
    fields = _dds_fields(pack_dds_header(sub))
    assert fields["flags"] & 0x8
    assert not fields["flags"] & 0x80000
    assert fields["pitch"] == 8 * 4
    assert fields["pf_flags"] == 0x41
    assert fields["fourcc"] == b"\x00" * 4
    assert fields["bits"] == 32
    assert fields["masks"] == (0x00FF0000, 0x0000FF00, 0x000000FF, 0xFF000000)


def _texture_set(sub_kwargs, b=None, f=None, f_offset=0):
    h = FakePartition()
    node = h.add(PATH, texture_asset(PATH, **sub_kwargs))
    b_part = f_part = None
    if b is not None:
        b_part = FakePartition()
        b_part.add(PATH, b)
    if f is not None:
        f_part = f
        f_part.add(PATH, b"", cache_offset=f_offset)
    return partitions(h, f=f_part, b=b_part), node


def _build(parts, node):
    payload = parts.h.decompress(node)
    return build_texture(decode_header(payload), payload, parts, node)


def test_b_partition_trailing_bytes():
    # 8x8 BC1 = 32 bytes
    pixels = bytes(range(32))
    parts, node = _texture_set({"max_side_length": 8}, b=b"\xaa" * 50 + pixels)
    built = _build(parts, node)
    assert built.extension == ".dds"
    assert built.data[:4] == b"DDS "
    assert built.data[128:] == pixels


def test_b_partition_missing():
    parts, node = _texture_set({"max_side_length": 8})
    with pytest.raises(MissingPartitionError):
        _build(parts, node)


def test_b_partition_too_short():
    parts, node = _texture_set({"max_side_length": 8}, b=b"\x00" * 10)
    with pytest.raises(MissingPartitionError):
        _build(parts, node)


def test_mip_fragments_read_from_located_f_offset():
    # blocks of 10, 20, 30 compressed bytes: boundaries 0, 18, 46, 84
    f = FakePartition(raw=b"\x00" * 1000 + block_stream([10, 20, 30]))
    pixels = bytes(range(32))
    f.ranges[1000 + 46] = b"\xff" * 8 + pixels
    parts, node = _texture_set(
        {
            "mip_fragment_count": 1,
            "sub_offsets": [0, 40],
            "max_side_length": 8,
        },
        f=f,
        f_offset=1000,
    )
    built = _build(parts, node)
    assert f.range_calls == [(1046, 32)]
    assert built.data[128:] == pixels


def test_mip_fragments_without_f_partition():
    parts, node = _texture_set(
        {"mip_fragment_count": 1, "sub_offsets": [0], "max_side_length": 8},
        b=b"\x00" * 64,
    )
    with pytest.raises(MissingPartitionError):
        _build(parts, node)
