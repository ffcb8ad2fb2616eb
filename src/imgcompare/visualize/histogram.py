"""Bar chart rendering of RGB histograms."""

from PIL import Image, ImageDraw, ImageFont

from ..dedup.histogram import BUCKETS, ColorHistogram

CHANNEL_HEIGHT = 100
MARGIN = 10
WIDTH = BUCKETS + 2 * MARGIN
HEIGHT = CHANNEL_HEIGHT * 3 + MARGIN * 4

CHANNELS = (
    ("Red", (255, 0, 0)),
    ("Green", (0, 128, 0)),
    ("Blue", (0, 0, 255)),
)


def render_histogram(histogram: ColorHistogram) -> Image.Image:
    """Draw one bar chart per channel, each scaled to its own maximum."""
    image = Image.new("RGB", (WIDTH, HEIGHT), (255, 255, 255))
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()
    y_offset = MARGIN + CHANNEL_HEIGHT

    for channel, ((name, color), counts) in enumerate(zip(CHANNELS, histogram.channels)):
        max_value = max(int(counts.max()), 1)
        baseline = y_offset * (channel + 1)
        for i in range(BUCKETS):
            bar = counts[i] / max_value * CHANNEL_HEIGHT
            draw.line([(MARGIN + i, baseline), (MARGIN + i, baseline - bar)], fill=color)

        top = y_offset * channel + MARGIN
        label = f"{name}, max value: {int(counts.max())}"
        draw.text((MARGIN + 11, top + MARGIN + 1), label, fill=(192, 192, 192), font=font)
        draw.text((MARGIN + 10, top + MARGIN), label, fill=(0, 0, 0), font=font)
        draw.rectangle([MARGIN, top, MARGIN + BUCKETS, top + CHANNEL_HEIGHT], outline=color)

    return image
