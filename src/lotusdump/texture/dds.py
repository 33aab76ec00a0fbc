"""DirectDraw Surface header packing."""

from __future__ import annotations

import struct

from .subheader import TextureFormat, TextureSubHeader

__all__ = ["pack_dds_header", "DDS_MAGIC", "DDS_HEADER_SIZE"]

DDS_MAGIC = b"DDS "
DDS_HEADER_SIZE = 124
DDS_PIXELFORMAT_SIZE = 32

DDSD_CAPS = 0x1
DDSD_HEIGHT = 0x2
DDSD_WIDTH = 0x4
DDSD_PITCH = 0x8
DDSD_PIXELFORMAT = 0x1000
DDSD_LINEARSIZE = 0x80000

DDPF_ALPHAPIXELS = 0x1
DDPF_FOURCC = 0x4
DDPF_RGB = 0x40

DDSCAPS_TEXTURE = 0x1000

DXGI_FORMAT_BC6H_UF16 = 95
DXGI_FORMAT_BC7_UNORM = 98
D3D10_RESOURCE_DIMENSION_TEXTURE2D = 3

_FOURCC = {
    TextureFormat.BC1: b"DXT1",
    TextureFormat.BC2: b"DXT3",
    TextureFormat.BC3: b"DXT5",
    TextureFormat.BC4: b"ATI1",
    TextureFormat.BC5: b"ATI2",
    TextureFormat.BC6H: b"DX10",
    TextureFormat.BC7: b"DX10",
}

_DXGI = {
    TextureFormat.BC6H: DXGI_FORMAT_BC6H_UF16,
    TextureFormat.BC7: DXGI_FORMAT_BC7_UNORM,
}


def _pack_pixel_format(fmt: TextureFormat) -> bytes:
    if fmt is TextureFormat.RGBA8:
        pf = struct.pack(
            "<II4sIIIII",
            DDS_PIXELFORMAT_SIZE,
            DDPF_RGB | DDPF_ALPHAPIXELS,
            b"\x00" * 4,
            32,
            0x00FF0000,
            0x0000FF00,
            0x000000FF,
            0xFF000000,
        )
    else:
        pf = struct.pack(
            "<II4sIIIII",
            DDS_PIXELFORMAT_SIZE,
            DDPF_FOURCC,
            _FOURCC[fmt],
            0,
            0,
            0,
            0,
            0,
        )
    if len(pf) != DDS_PIXELFORMAT_SIZE:
        raise ValueError(f"DDS pixel format size mismatch: {len(pf)}")
    return pf


def pack_dds_header(sub: TextureSubHeader) -> bytes:
    """``"DDS "`` magic, the 124-byte header and a DX10 header if needed."""
    flags = DDSD_CAPS | DDSD_HEIGHT | DDSD_WIDTH | DDSD_PIXELFORMAT
    if sub.format.is_block_compressed:
        flags |= DDSD_LINEARSIZE
        pitch_or_linear_size = sub.byte_size
    else:
        flags |= DDSD_PITCH
        pitch_or_linear_size = sub.width * 4

    header = (
        struct.pack(
            "<IIIIIII",
            DDS_HEADER_SIZE,
            flags,
            sub.height,
            sub.width,
            pitch_or_linear_size,
            0,  # depth
            0,  # mip map count
        )
        + b"\x00" * 44  # reserved1[11]
        + _pack_pixel_format(sub.format)
        + struct.pack("<IIIII", DDSCAPS_TEXTURE, 0, 0, 0, 0)
    )
    if len(header) != DDS_HEADER_SIZE:
        raise ValueError(f"DDS header size mismatch: {len(header)}")

    out = DDS_MAGIC + header
    dxgi = _DXGI.get(sub.format)
    if dxgi is not None:
        out += struct.pack(
            "<IIIII", dxgi, D3D10_RESOURCE_DIMENSION_TEXTURE2D, 0, 1, 0
        )
    return out
