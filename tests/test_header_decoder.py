import pytest

from asset_fixtures import pack_header
from lotusdump.errors import E_TRUNCATED, TruncatedError
from lotusdump.header import AssetKind, TagTables, decode_header


def test_decode_reads_every_field():
    payload = pack_header(
        0x8B, ["/Lotus/Sounds/a.wav", "/Lotus/Sounds/b.wav"], "Volume=0.5"
    )
    header = decode_header(payload + b"trailing sub-header")
    assert header.file_paths == ("/Lotus/Sounds/a.wav", "/Lotus/Sounds/b.wav")
    assert header.arguments.to_python() == {"Volume": 0.5}
    assert header.raw_type_tag == 0x8B
    assert header.raw_type == "0x8B"
    assert header.kind is AssetKind.AUDIO
    assert header.consumed_length == len(payload)


@pytest.mark.parametrize(
    "paths",
    [[], ["x"], ["a" * 300, "", "ü/ß"], ["p"] * 10],
)
def test_consumed_length_matches_declared_sizes(paths):
    payload = pack_header(0xA3, paths, "")
    expected = 16 + 4 + sum(4 + len(p.encode()) for p in paths) + 4 + 4
    assert len(payload) == expected
    assert decode_header(payload).consumed_length == expected


def test_arguments_nul_is_skipped_only_when_present():
    with_args = pack_header(0xA3, [], "a=1")
    assert decode_header(with_args).consumed_length == 16 + 4 + 4 + 3 + 1 + 4
    without = pack_header(0xA3, [], "")
    assert decode_header(without).consumed_length == 16 + 4 + 4 + 4


@pytest.mark.parametrize(
    "tag,kind",
    [
        (0x8B, AssetKind.AUDIO),
        (0xA3, AssetKind.TEXTURE),
        (0xB8, AssetKind.TEXTURE),
        (0xC3, AssetKind.TEXTURE),
        (0x12, AssetKind.UNKNOWN),
    ],
)
def test_kind_from_tag(tag, kind):
    header = decode_header(pack_header(tag))
    assert header.kind is kind
    assert header.is_supported is (kind is not AssetKind.UNKNOWN)


def test_custom_tag_tables():
    tables = TagTables(audio=frozenset({0x01}), texture=frozenset({0x02}))
    assert decode_header(pack_header(0x01), tables).kind is AssetKind.AUDIO
    assert decode_header(pack_header(0x8B), tables).kind is AssetKind.UNKNOWN


def test_overlapping_tag_tables_rejected():
    with pytest.raises(ValueError):
        TagTables(audio=frozenset({0x8B}), texture=frozenset({0x8B}))


@pytest.mark.parametrize("cut", [0, 15, 17, 20, 25, 30])
def test_truncated_payload(cut):
    payload = pack_header(0x8B, ["/Lotus/a"], "k=v")
    with pytest.raises(TruncatedError) as info:
        decode_header(payload[:cut])
    assert info.value.code == E_TRUNCATED


def test_path_length_past_end_is_truncated():
    payload = bytearray(pack_header(0x8B, ["abc"]))
    payload[20:24] = (1000).to_bytes(4, "little")
    with pytest.raises(TruncatedError):
        decode_header(bytes(payload))


def test_invalid_utf8_is_replaced():
    payload = bytearray(pack_header(0xA3, ["ab"]))
    payload[24] = 0xFF
    header = decode_header(bytes(payload))
    assert header.file_paths == ("�b",)
