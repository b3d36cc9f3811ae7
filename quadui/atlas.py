"""Quadtree rectangle packer used to place glyph bitmaps in an atlas."""

from __future__ import annotations

from dataclasses import dataclass

ALIGNMENT = 4


def align_up(value: int, align: int) -> int:
    """Round ``value`` up to the next multiple of ``align``."""
    if align <= 0:
        raise ValueError(f"alignment must be positive, got {align}")
    return (value + align - 1) // align * align


@dataclass(eq=False)
class AtlasNode:
    """A rectangular region of the atlas, possibly split into children."""

    x: int
    y: int
    width: int
    height: int
    occupied: bool = False
    children: list[AtlasNode] | None = None

    @property
    def split(self) -> bool:
        return self.children is not None

    @property
    def pos(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def _insert(self, width: int, height: int) -> AtlasNode | None:
        if self.occupied or self.width < width or self.height < height:
            return None

        if self.children is None:
            if self.width == width and self.height == height:
                self.occupied = True
                return self

            if self.width // 2 < width or self.height // 2 < height:
                # Too large for a quadrant: carve the region to fit exactly.
                placed = AtlasNode(self.x, self.y, width, height, occupied=True)
                self.children = [
                    placed,
                    AtlasNode(self.x + width, self.y, self.width - width, height),
                    AtlasNode(self.x, self.y + height, width, self.height - height),
                ]
                return placed

            half_w, half_h = self.width // 2, self.height // 2
            self.children = [
                AtlasNode(self.x, self.y, half_w, half_h),
                AtlasNode(self.x + half_w, self.y, half_w, half_h),
                AtlasNode(self.x, self.y + half_h, half_w, half_h),
                AtlasNode(self.x + half_w, self.y + half_h, half_w, half_h),
            ]

        for child in self.children:
            found = child._insert(width, height)
            if found is not None:
                return found
        return None


class QuadtreeAtlas:
    """Packs rectangles into a single-channel bitmap of fixed size."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"atlas size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.root = AtlasNode(0, 0, width, height)
        self.bitmap = bytearray(width * height)

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def insert(self, width: int, height: int) -> AtlasNode | None:
        """Reserve a region of at least ``width`` x ``height``; None if full."""
        if width < 0 or height < 0:
            raise ValueError(f"region size must not be negative, got {width}x{height}")
        return self.root._insert(align_up(width, ALIGNMENT), align_up(height, ALIGNMENT))

    def blit(self, node: AtlasNode, pixels: bytes, width: int, height: int) -> None:
        """Copy a ``width`` x ``height`` bitmap into the region of ``node``."""
        if width > node.width or height > node.height:
            raise ValueError(
                f"bitmap {width}x{height} does not fit region {node.width}x{node.height}"
            )
        if len(pixels) < width * height:
            raise ValueError("pixel buffer is smaller than the bitmap size")
        source = memoryview(bytes(pixels))
        for row in range(height):
            start = node.x + (node.y + row) * self.width
            self.bitmap[start:start + width] = source[row * width:(row + 1) * width]