"""Dashboard image renderer."""

import logging
import os
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from countdown.core.models import MilestoneState
from countdown.runtime.frames import CompletedFrame, CountdownFrame, Frame

from .view import CELEBRATION, build_output

logger = logging.getLogger(__name__)

BACKGROUND = "#1a1a2e"
FOREGROUND = "white"
ACCENT = "#4ecdc4"
MUTED = "#8a8aa3"
SAND = "#f9ca24"
LIQUID = "#ff6b6b"


def _plain(text: str) -> str:
    """Drop characters the bundled fonts can't draw (emoji)."""
    return text.encode("latin-1", "ignore").decode("latin-1").strip()


class DashboardRenderer:
    """Renders the countdown dashboard to an image."""

    def __init__(self, output_dir: str = "static/images"):
        """
        Initialize renderer.

        Args:
            output_dir: Directory to save generated images
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        # Try to load fonts, fall back to default
        self.fonts = self._load_fonts()

    def _load_fonts(self) -> dict:
        """Load fonts for rendering."""
        fonts = {}

        font_paths = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "/System/Library/Fonts/Helvetica.ttc",  # macOS
        ]

        try:
            for path in font_paths:
                if Path(path).exists():
                    fonts["huge"] = ImageFont.truetype(path, 56)
                    fonts["header"] = ImageFont.truetype(path, 24)
                    fonts["normal"] = ImageFont.truetype(path, 16)
                    fonts["small"] = ImageFont.truetype(path, 12)
                    logger.info(f"Loaded fonts from {path}")
                    break
        except OSError as e:
            logger.warning(f"Could not load TrueType fonts: {e}, using default")
            fonts = {}

        if not fonts:
            default_font = ImageFont.load_default()
            for name in ("huge", "header", "normal", "small"):
                fonts[name] = default_font

        return fonts

    def render(
        self,
        frame: Frame,
        filename: str = "countdown.png",
        width: int = 800,
        height: int = 480,
    ) -> str:
        """
        Render a frame and save it.

        The image is written to a temporary file first and then moved into
        place, so readers never see a half-written file.

        Args:
            frame: Frame from the driving loop
            filename: Output file name inside output_dir
            width: Image width
            height: Image height

        Returns:
            Path of the saved image
        """
        image = Image.new("RGB", (width, height), BACKGROUND)
        draw = ImageDraw.Draw(image)

        if isinstance(frame, CompletedFrame):
            self._draw_celebration(draw, width, height)
        else:
            values = build_output(frame)
            self._draw_header(draw, values, width)
            self._draw_countdown(draw, values, width)
            self._draw_progress_bar(draw, x=30, y=190, width=width - 60, height=22,
                                    percentage=frame.progress.percentage)
            draw.text((30, 218), _plain(values["bandDescription"]), fill=MUTED, font=self.fonts["small"])
            self._draw_thermometer(draw, frame, x=30, y=250)
            self._draw_hourglass(draw, frame, x=130, y=250)
            self._draw_metrics(draw, values, x=260, y=250)
            self._draw_milestones(draw, frame, y=height - 90, width=width)
            self._draw_footer(draw, values, width, height)

        file_path = self.output_dir / filename
        tmp_path = file_path.with_suffix(".tmp.png")
        image.save(tmp_path, "PNG")
        os.replace(tmp_path, file_path)
        logger.debug(f"Saved dashboard to {file_path}")

        return str(file_path)

    def _draw_header(self, draw: ImageDraw.ImageDraw, values: dict, width: int):
        """Draw header with the target date."""
        draw.text((30, 15), "Countdown", fill=FOREGROUND, font=self.fonts["header"])

        target_text = f"Target: {values['targetDateDisplay']}"
        bbox = draw.textbbox((0, 0), target_text, font=self.fonts["normal"])
        text_width = bbox[2] - bbox[0]
        draw.text((width - text_width - 30, 20), target_text, fill=MUTED, font=self.fonts["normal"])

        draw.line([30, 50, width - 30, 50], fill=MUTED, width=2)

    def _draw_countdown(self, draw: ImageDraw.ImageDraw, values: dict, width: int):
        """Draw the days/hours/minutes/seconds blocks."""
        units = [("days", "Days"), ("hours", "Hours"), ("minutes", "Minutes"), ("seconds", "Seconds")]
        block_width = (width - 60) // len(units)

        for i, (key, label) in enumerate(units):
            x = 30 + i * block_width
            number = str(values[key])
            bbox = draw.textbbox((0, 0), number, font=self.fonts["huge"])
            number_width = bbox[2] - bbox[0]
            draw.text((x + (block_width - number_width) // 2, 65), number, fill=FOREGROUND, font=self.fonts["huge"])

            bbox = draw.textbbox((0, 0), label, font=self.fonts["normal"])
            label_width = bbox[2] - bbox[0]
            draw.text((x + (block_width - label_width) // 2, 135), label, fill=MUTED, font=self.fonts["normal"])

        summary = f"{values['months']} months · {values['weeks']} weeks · {values['totalHours']:,} hours"
        draw.text((30, 163), _plain(summary), fill=MUTED, font=self.fonts["small"])

    def _draw_progress_bar(
        self,
        draw: ImageDraw.ImageDraw,
        x: int,
        y: int,
        width: int,
        height: int,
        percentage: float,
    ):
        """Draw progress bar filled to percentage, with the value on the right."""
        filled_width = int(width * percentage / 100)

        if filled_width > 0:
            draw.rectangle([x, y, x + filled_width, y + height], fill=ACCENT, outline=ACCENT)

        draw.rectangle([x, y, x + width, y + height], outline=FOREGROUND, width=2)

        text = f"{percentage:.1f}%"
        bbox = draw.textbbox((0, 0), text, font=self.fonts["small"])
        text_width = bbox[2] - bbox[0]
        draw.text((x + width - text_width, y + height + 6), text, fill=FOREGROUND, font=self.fonts["small"])

    def _draw_thermometer(self, draw: ImageDraw.ImageDraw, frame: CountdownFrame, x: int, y: int):
        """Draw thermometer: liquid rises with progress, bulb shows days."""
        tube_height = 100
        tube_width = 20
        draw.rectangle([x + 20, y, x + 20 + tube_width, y + tube_height], outline=FOREGROUND, width=2)

        liquid = int(tube_height * frame.thermometer.liquid_height / 100)
        if liquid > 0:
            draw.rectangle(
                [x + 22, y + tube_height - liquid, x + 18 + tube_width, y + tube_height],
                fill=LIQUID,
            )

        draw.ellipse([x + 5, y + tube_height - 5, x + 55, y + tube_height + 45], fill=LIQUID, outline=FOREGROUND, width=2)
        days_text = str(frame.thermometer.days)
        bbox = draw.textbbox((0, 0), days_text, font=self.fonts["small"])
        draw.text((x + 30 - (bbox[2] - bbox[0]) // 2, y + tube_height + 13), days_text,
                  fill=FOREGROUND, font=self.fonts["small"])

    def _draw_hourglass(self, draw: ImageDraw.ImageDraw, frame: CountdownFrame, x: int, y: int):
        """Draw hourglass: top sand empties, bottom sand fills."""
        half = 60
        w = 80
        mid_x = x + w // 2

        draw.polygon([(x, y), (x + w, y), (mid_x, y + half)], outline=FOREGROUND)
        draw.polygon([(mid_x, y + half), (x, y + 2 * half), (x + w, y + 2 * half)], outline=FOREGROUND)

        # Sand in the top bulb sits in the narrow end of the triangle
        top = frame.hourglass.top_sand / 100
        if top > 0:
            depth = int(half * top)
            spread = int((w // 2) * top)
            draw.polygon(
                [(mid_x - spread, y + half - depth), (mid_x + spread, y + half - depth), (mid_x, y + half)],
                fill=SAND,
            )

        bottom = frame.hourglass.bottom_sand / 100
        if bottom > 0:
            depth = int(half * bottom)
            spread = int((w // 2) * depth / half)
            draw.polygon(
                [
                    (x, y + 2 * half),
                    (x + w, y + 2 * half),
                    (x + w - (w // 2 - spread), y + 2 * half - depth),
                    (x + (w // 2 - spread), y + 2 * half - depth),
                ],
                fill=SAND,
            )

        if frame.hourglass.flowing:
            draw.line([mid_x, y + half, mid_x, y + 2 * half], fill=SAND, width=1)

        label = f"{frame.hourglass.seconds_remaining:,} Seconds Left"
        draw.text((x - 10, y + 2 * half + 8), label, fill=MUTED, font=self.fonts["small"])

    def _draw_metrics(self, draw: ImageDraw.ImageDraw, values: dict, x: int, y: int):
        """Draw the fun calendar metrics in two columns."""
        rows = [
            ("Weekends", values["weekends"]),
            ("Work days", values["workDays"]),
            ("Work hours", values["workHours"]),
            ("Mondays", values["mondays"]),
            ("Fridays", values["fridays"]),
            ("Sleeps", values["sleeps"]),
            ("Sunrises", values["sunrises"]),
        ]

        for i, (label, value) in enumerate(rows):
            column, row = divmod(i, 4)
            cx = x + column * 250
            cy = y + row * 22
            draw.text((cx, cy), f"{label}:", fill=MUTED, font=self.fonts["normal"])
            draw.text((cx + 110, cy), f"{value:,}", fill=FOREGROUND, font=self.fonts["normal"])

    def _draw_milestones(self, draw: ImageDraw.ImageDraw, frame: CountdownFrame, y: int, width: int):
        """Draw one cell per milestone, shaded by state."""
        if not frame.milestones:
            return

        cell_width = (width - 60) // len(frame.milestones)
        fills = {
            MilestoneState.ACHIEVED: ACCENT,
            MilestoneState.ACTIVE: SAND,
            MilestoneState.LOCKED: BACKGROUND,
        }

        for i, status in enumerate(frame.milestones):
            cx = 30 + i * cell_width
            draw.rectangle(
                [cx + 2, y, cx + cell_width - 2, y + 40],
                fill=fills[status.state],
                outline=FOREGROUND,
            )
            text_fill = BACKGROUND if status.state != MilestoneState.LOCKED else MUTED
            draw.text((cx + 6, y + 4), _plain(status.milestone.label), fill=text_fill, font=self.fonts["small"])
            draw.text((cx + 6, y + 22), f"{status.milestone.threshold_days} days", fill=text_fill,
                      font=self.fonts["small"])

    def _draw_footer(self, draw: ImageDraw.ImageDraw, values: dict, width: int, height: int):
        """Draw footer with the motivational quote."""
        y = height - 35
        draw.line([30, y - 10, width - 30, y - 10], fill=MUTED, width=1)
        draw.text((30, y), _plain(values["motivation"]), fill=FOREGROUND, font=self.fonts["normal"])

    def _draw_celebration(self, draw: ImageDraw.ImageDraw, width: int, height: int):
        """Draw the terminal celebration card."""
        lines = [
            (_plain(CELEBRATION["title"]), self.fonts["header"], ACCENT),
            (_plain(CELEBRATION["subtitle"]), self.fonts["header"], FOREGROUND),
            (_plain(CELEBRATION["message"]), self.fonts["normal"], MUTED),
        ]

        y = height // 2 - 60
        for text, font, fill in lines:
            bbox = draw.textbbox((0, 0), text, font=font)
            text_width = bbox[2] - bbox[0]
            draw.text(((width - text_width) // 2, y), text, fill=fill, font=font)
            y += 45


class ImageSink:
    """Output sink that renders every frame to the dashboard image."""

    def __init__(self, renderer: DashboardRenderer, filename: str = "countdown.png"):
        self.renderer = renderer
        self.filename = filename
        self.last_path: Optional[str] = None

    def publish(self, frame: Frame) -> None:
        try:
            self.last_path = self.renderer.render(frame, filename=self.filename)
        except OSError as e:
            logger.warning(f"Could not save dashboard image: {e}")
