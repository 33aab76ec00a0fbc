"""Rebuild playable audio files from an asset header and its partitions.

ADPCM assets become RIFF/WAVE files. Opus assets become an Ogg/Opus stream:
an OpusHead page, an OpusTags page and one data page per chunk of packets.
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence

from ..errors import missing_partition, unknown_format
from ..header.decoder import AssetHeader
from ..logging import get_logger
from ..models import BuiltAsset
from ..options import ExtractOptions
from ..partition.store import Node, PartitionSet, tail
from .ogg import HEADER_TYPE_BOS, HEADER_TYPE_EOS, OggPage, segment_table
from .opus import pack_opus_head, pack_opus_tags
from .subheader import AudioCompression, AudioSubHeader, decode_audio_subheader
from .wav import pack_wav_adpcm_header

__all__ = [
    "build_audio",
    "build_wav_adpcm",
    "build_ogg_opus",
    "opus_page_size",
]


def opus_page_size(block_align: int) -> int:
    return block_align * (50 if block_align >= 255 else 100)


def build_wav_adpcm(sub: AudioSubHeader, samples: bytes) -> bytes:
    return pack_wav_adpcm_header(sub) + samples


def _opus_pages(
    sub: AudioSubHeader,
    data: bytes,
    stream_serial: int,
    vendor: str,
    comments: Sequence[str],
) -> Iterator[OggPage]:
    head = pack_opus_head(sub.channels, sub.sample_rate)
    yield OggPage(
        header_type=HEADER_TYPE_BOS,
        granule_position=0,
        stream_serial=stream_serial,
        page_sequence=0,
        segment_table=segment_table(head, 255),
        payload=head,
    )
    tags = pack_opus_tags(vendor, comments)
    yield OggPage(
        header_type=0x00,
        granule_position=0,
        stream_serial=stream_serial,
        page_sequence=1,
        segment_table=segment_table(tags, 255),
        payload=tags,
    )

    chunk_size = opus_page_size(sub.block_align)
    starts = range(0, len(data), chunk_size)
    if not starts:
        yield OggPage(
            header_type=HEADER_TYPE_EOS,
            granule_position=0,
            stream_serial=stream_serial,
            page_sequence=2,
            segment_table=b"",
            payload=b"",
        )
        return
    for index, start in enumerate(starts):
        chunk = data[start : start + chunk_size]
        is_last = index == len(starts) - 1
        yield OggPage(
            header_type=HEADER_TYPE_EOS if is_last else 0x00,
            granule_position=(index + 1) * sub.sample_rate,
            stream_serial=stream_serial,
            page_sequence=index + 2,
            segment_table=segment_table(chunk, sub.block_align),
            payload=chunk,
        )


def build_ogg_opus(
    sub: AudioSubHeader,
    data: bytes,
    *,
    stream_serial: int,
    vendor: str,
    comments: Sequence[str],
) -> bytes:
    if sub.block_align == 0:
        raise unknown_format("Opus asset declares a zero block_align")
    return b"".join(
        page.to_bytes()
        for page in _opus_pages(sub, data, stream_serial, vendor, comments)
    )


def _adpcm_samples(
    sub: AudioSubHeader, partitions: PartitionSet, path: str
) -> bytes:
    b_data = partitions.payload("b", path)
    f_data = partitions.payload("f", path)
    if b_data is None and f_data is None:
        raise missing_partition(
            "ADPCM samples not found in the B or F partition", {"path": path}
        )
    joined = (b_data or b"") + (f_data or b"")
    if len(joined) < sub.uncompressed_size:
        raise missing_partition(
            f"ADPCM samples too short: {len(joined)} < {sub.uncompressed_size}",
            {"path": path},
        )
    return tail(joined, sub.uncompressed_size)


def _opus_samples(
    sub: AudioSubHeader, partitions: PartitionSet, path: str
) -> bytes:
    f_data = partitions.payload("f", path)
    if f_data is not None and len(f_data) == sub.uncompressed_size:
        return f_data
    b_data = partitions.payload("b", path)
    if b_data is not None and len(b_data) >= sub.uncompressed_size:
        return tail(b_data, sub.uncompressed_size)
    raise missing_partition(
        "Opus samples not found in the F or B partition",
        {
            "path": path,
            "expected": sub.uncompressed_size,
            "f_len": None if f_data is None else len(f_data),
            "b_len": None if b_data is None else len(b_data),
        },
    )


def build_audio(
    header: AssetHeader,
    payload: bytes,
    partitions: PartitionSet,
    node: Node,
    options: Optional[ExtractOptions] = None,
) -> BuiltAsset:
    options = options or ExtractOptions()
    logger = get_logger()
    sub = decode_audio_subheader(payload, header.consumed_length)
    logger.debug("Audio sub-header: %s", sub)

    if sub.compression is AudioCompression.ADPCM:
        samples = _adpcm_samples(sub, partitions, node.path)
        return BuiltAsset(build_wav_adpcm(sub, samples), ".wav")
    if sub.compression is AudioCompression.OPUS:
        samples = _opus_samples(sub, partitions, node.path)
        data = build_ogg_opus(
            sub,
            samples,
            stream_serial=options.next_stream_serial(),
            vendor=options.opus_vendor,
            comments=options.opus_comments,
        )
        return BuiltAsset(data, ".opus")
    raise unknown_format(
        f"Standalone {sub.compression.name} audio output is not supported",
        {"path": node.path},
    )
