"""PNG rasterization of contour bands.

Bands are painted in order onto a transparent canvas. Every polygon is
drawn through a grayscale mask with its outer ring filled and its holes
cleared, so lower bands show through the holes.
"""
import io

from PIL import Image, ImageDraw


def _scaled(ring, scale):
    return [(float(x) * scale, float(y) * scale) for x, y in ring]


def rasterize(bands, width: int, height: int, scale: float = 1) -> Image.Image:
    """Paint classified bands onto an RGBA image.

    Parameters
    ----------
    bands : sequence of seasnap.classify.ClassifiedBand
        Bands in painting order.
    width, height : int
        Canvas size in grid units.
    scale : float, optional
        Pixels per grid unit, by default 1.
    """
    size = (max(1, round(width * scale)), max(1, round(height * scale)))
    img = Image.new("RGBA", size, (0, 0, 0, 0))
    for band in bands:
        for polygon in band.polygons:
            outer, *holes = polygon
            if len(outer) < 3:
                continue
            mask = Image.new("L", size, 0)
            draw = ImageDraw.Draw(mask)
            draw.polygon(_scaled(outer, scale), fill=255)
            for hole in holes:
                if len(hole) >= 3:
                    draw.polygon(_scaled(hole, scale), fill=0)
            img.paste(tuple(band.color), (0, 0), mask)
    return img


def to_png(bands, width: int, height: int, scale: float = 1) -> bytes:
    """Rasterize bands and return the PNG bytes."""
    img = rasterize(bands, width, height, scale=scale)
    buf = io.BytesIO()
    try:
        img.save(buf, format="PNG")
        return buf.getvalue()
    finally:
        buf.close()
