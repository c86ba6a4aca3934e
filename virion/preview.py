"""
virion/preview.py
Flat 2D preview: silhouette projection of the organism

Same TraitRecord as the 3D scene: the outline is the z=0 slice of the
displaced surface, the appendage count and shape family come from the
traits, and colors come from the same palette and core->shell gradient.
"""
from __future__ import annotations

import base64
import io
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image, ImageChops, ImageDraw, ImageFilter

from .appendages import appendage_shape
from .config import BODY_CONFIG, PREVIEW_CONFIG
from .geometry import surface_radius
from .models import Palette, TraitRecord
from .palette import hex_to_rgb, mix_rgb, palette as resolve_palette

Point = Tuple[float, float]

GRADIENT_STEPS = 24


@dataclass
class FlatAppendage:
    """Appendage in image space."""
    index: int
    root: Point
    tip: Point
    normal: Point
    length: float
    head_radius: float
    base_width: float
    head_type: str


def _outline_directions(angles: np.ndarray) -> np.ndarray:
    # a=0 points up (+y); clockwise in image space
    return np.stack([np.sin(angles), np.cos(angles), np.zeros_like(angles)], axis=1)


def outline_radius(traits: TraitRecord, angles) -> np.ndarray:
    """Displaced body radius in the image plane at each angle (body units)."""
    angles = np.atleast_1d(np.asarray(angles, dtype=np.float64))
    return surface_radius(_outline_directions(angles), traits, BODY_CONFIG.radius)


def _to_image(angles: np.ndarray, radii: np.ndarray, center: Point, scale: float) -> np.ndarray:
    cx, cy = center
    return np.stack([
        cx + radii * scale * np.sin(angles),
        cy - radii * scale * np.cos(angles),
    ], axis=1)


def silhouette_polygon(traits: TraitRecord, center: Point, scale: float,
                       samples: int = PREVIEW_CONFIG.silhouette_samples) -> List[Point]:
    """Outline of the displaced body as image-space polygon vertices."""
    angles = np.linspace(0.0, 2.0 * math.pi, samples, endpoint=False)
    pts = _to_image(angles, outline_radius(traits, angles), center, scale)
    return [(float(x), float(y)) for x, y in pts]


def flat_appendages(traits: TraitRecord, center: Point, scale: float) -> List[FlatAppendage]:
    """
    Appendages evenly spaced around the outline.

    Each roots on the displaced outline and points along its outward normal.
    """
    shape = appendage_shape(traits.alignment)
    n = traits.appendage_count
    h = 1e-3
    out = []
    for i in range(n):
        a = 2.0 * math.pi * i / n
        angles = np.array([a - h, a, a + h])
        p_prev, root, p_next = _to_image(angles, outline_radius(traits, angles), center, scale)
        tx, ty = p_next - p_prev
        norm = math.hypot(tx, ty) or 1.0
        # Outline runs clockwise on screen; (ty, -tx) faces outward
        nx, ny = ty / norm, -tx / norm
        if nx * (root[0] - center[0]) + ny * (root[1] - center[1]) < 0:
            nx, ny = -nx, -ny

        variance = traits.appendage_variance[i]
        length = shape.stalk_length * variance.length * scale
        out.append(FlatAppendage(
            index=i,
            root=(float(root[0]), float(root[1])),
            tip=(float(root[0] + nx * length), float(root[1] + ny * length)),
            normal=(nx, ny),
            length=length,
            head_radius=shape.head_radius * variance.head * scale,
            base_width=max(2.0, 2.0 * shape.stalk_radius * variance.head * scale),
            head_type=shape.head_type,
        ))
    return out


def _draw_body(draw: ImageDraw.ImageDraw, traits: TraitRecord, pal: Palette,
               center: Point, scale: float) -> None:
    """Concentric outline fills: shell color outside, glow at the core."""
    core = hex_to_rgb(pal.glow)
    shell = hex_to_rgb(pal.secondary)
    span = BODY_CONFIG.shell_fraction - BODY_CONFIG.core_fraction
    for j in range(GRADIENT_STEPS):
        f = 1.0 - j / GRADIENT_STEPS
        t = (f - BODY_CONFIG.core_fraction) / span
        draw.polygon(silhouette_polygon(traits, center, scale * f), fill=mix_rgb(core, shell, t))


def _draw_appendages(draw: ImageDraw.ImageDraw, appendages: List[FlatAppendage],
                     color: Tuple[int, int, int]) -> None:
    for a in appendages:
        if a.head_type == "club":
            draw.line([a.root, a.tip], fill=color, width=int(round(a.base_width)))
            r = a.head_radius
            draw.ellipse([a.tip[0] - r, a.tip[1] - r, a.tip[0] + r, a.tip[1] + r], fill=color)
        else:
            nx, ny = a.normal
            half = a.base_width / 2.0
            left = (a.root[0] - ny * half, a.root[1] + nx * half)
            right = (a.root[0] + ny * half, a.root[1] - nx * half)
            draw.polygon([left, a.tip, right], fill=color)


def render_preview(traits: TraitRecord, size: Optional[int] = None) -> Image.Image:
    """Render the flat preview as an RGB image."""
    traits.validate()
    size = size or PREVIEW_CONFIG.size
    pal = resolve_palette(traits.hue, traits.alignment)
    center = (size / 2.0, size / 2.0)
    scale = PREVIEW_CONFIG.body_scale * size
    glow = hex_to_rgb(pal.glow)
    appendages = flat_appendages(traits, center, scale)

    layer = Image.new("RGB", (size, size), (0, 0, 0))
    draw = ImageDraw.Draw(layer)
    _draw_appendages(draw, appendages, glow)
    _draw_body(draw, traits, pal, center, scale)

    # Additive halo, like the 3D path's additive blending
    halo = layer.filter(ImageFilter.GaussianBlur(PREVIEW_CONFIG.glow_blur * size / 512.0))
    img = Image.new("RGB", (size, size), hex_to_rgb(PREVIEW_CONFIG.background))
    img = ImageChops.add(img, halo)
    img = ImageChops.screen(img, layer)
    return img


def preview_png(traits: TraitRecord, size: Optional[int] = None) -> bytes:
    """Preview encoded as PNG bytes."""
    buf = io.BytesIO()
    render_preview(traits, size).save(buf, format=PREVIEW_CONFIG.format)
    return buf.getvalue()


def preview_data_uri(traits: TraitRecord, size: Optional[int] = None) -> str:
    """Preview as a data URI, ready to embed in metadata or HTML."""
    encoded = base64.b64encode(preview_png(traits, size)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
