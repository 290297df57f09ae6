"""Canvas compositing on premultiplied float RGBA arrays.

Pixels are exchanged with the rest of the package as straight-alpha uint8
``(height, width, 4)`` arrays. Compositing converts both sides to premultiplied
float32 in ``[0, 1]``, combines them with the Porter-Duff factors or the
separable/non-separable blend functions of W3C Compositing and Blending Level 1
used by HTML canvas, and converts back.
"""
import enum

import numpy as np


class CompositeOperation(str, enum.Enum):
    SOURCE_OVER = "source-over"
    SOURCE_IN = "source-in"
    SOURCE_OUT = "source-out"
    SOURCE_ATOP = "source-atop"
    DESTINATION_OVER = "destination-over"
    DESTINATION_IN = "destination-in"
    DESTINATION_OUT = "destination-out"
    DESTINATION_ATOP = "destination-atop"
    XOR = "xor"
    COPY = "copy"
    LIGHTER = "lighter"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"
    DARKEN = "darken"
    LIGHTEN = "lighten"
    DIFFERENCE = "difference"
    EXCLUSION = "exclusion"
    HUE = "hue"
    SATURATION = "saturation"
    COLOR = "color"
    LUMINOSITY = "luminosity"


# (source factor, destination factor) as functions of (source alpha, destination alpha)
PORTER_DUFF = {
    CompositeOperation.SOURCE_OVER: (lambda sa, da: 1.0, lambda sa, da: 1.0 - sa),
    CompositeOperation.SOURCE_IN: (lambda sa, da: da, lambda sa, da: 0.0),
    CompositeOperation.SOURCE_OUT: (lambda sa, da: 1.0 - da, lambda sa, da: 0.0),
    CompositeOperation.SOURCE_ATOP: (lambda sa, da: da, lambda sa, da: 1.0 - sa),
    CompositeOperation.DESTINATION_OVER: (lambda sa, da: 1.0 - da, lambda sa, da: 1.0),
    CompositeOperation.DESTINATION_IN: (lambda sa, da: 0.0, lambda sa, da: sa),
    CompositeOperation.DESTINATION_OUT: (lambda sa, da: 0.0, lambda sa, da: 1.0 - sa),
    CompositeOperation.DESTINATION_ATOP: (lambda sa, da: 1.0 - da, lambda sa, da: sa),
    CompositeOperation.XOR: (lambda sa, da: 1.0 - da, lambda sa, da: 1.0 - sa),
    CompositeOperation.COPY: (lambda sa, da: 1.0, lambda sa, da: 0.0),
    CompositeOperation.LIGHTER: (lambda sa, da: 1.0, lambda sa, da: 1.0),
}


def to_premultiplied(pixels: np.ndarray) -> np.ndarray:
    rgba = pixels.astype(np.float32) / 255.0
    rgba[..., :3] *= rgba[..., 3:4]
    return rgba


def to_straight(premultiplied: np.ndarray) -> np.ndarray:
    alpha = np.clip(premultiplied[..., 3:4], 0.0, 1.0)
    color = np.zeros_like(premultiplied[..., :3])
    np.divide(premultiplied[..., :3], alpha, out=color, where=alpha > 0)
    straight = np.concatenate([np.clip(color, 0.0, 1.0), alpha], axis=-1)
    return np.rint(straight * 255.0).astype(np.uint8)


def _safe_divide(numerator, denominator):
    result = np.zeros(np.broadcast(numerator, denominator).shape, dtype=np.float32)
    np.divide(numerator, denominator, out=result, where=denominator != 0)
    return result


def _hard_light(backdrop, source):
    return np.where(
        source <= 0.5,
        backdrop * 2.0 * source,
        backdrop + (2.0 * source - 1.0) - backdrop * (2.0 * source - 1.0),
    )


def _lum(color):
    return 0.3 * color[..., 0:1] + 0.59 * color[..., 1:2] + 0.11 * color[..., 2:3]


def _clip_color(color):
    lum = _lum(color)
    low = color.min(axis=-1, keepdims=True)
    high = color.max(axis=-1, keepdims=True)
    color = np.where(low < 0.0, lum + _safe_divide((color - lum) * lum, lum - low), color)
    color = np.where(high > 1.0, lum + _safe_divide((color - lum) * (1.0 - lum), high - lum), color)
    return color


def _set_lum(color, lum):
    return _clip_color(color + (lum - _lum(color)))


def _sat(color):
    return color.max(axis=-1, keepdims=True) - color.min(axis=-1, keepdims=True)


def _set_sat(color, saturation):
    low = color.min(axis=-1, keepdims=True)
    return _safe_divide((color - low) * saturation, _sat(color))


BLEND_FUNCTIONS = {
    CompositeOperation.MULTIPLY: lambda cb, cs: cb * cs,
    CompositeOperation.SCREEN: lambda cb, cs: cb + cs - cb * cs,
    CompositeOperation.OVERLAY: lambda cb, cs: _hard_light(cs, cb),
    CompositeOperation.DARKEN: np.minimum,
    CompositeOperation.LIGHTEN: np.maximum,
    CompositeOperation.DIFFERENCE: lambda cb, cs: np.abs(cb - cs),
    CompositeOperation.EXCLUSION: lambda cb, cs: cb + cs - 2.0 * cb * cs,
    CompositeOperation.HUE: lambda cb, cs: _set_lum(_set_sat(cs, _sat(cb)), _lum(cb)),
    CompositeOperation.SATURATION: lambda cb, cs: _set_lum(_set_sat(cb, _sat(cs)), _lum(cb)),
    CompositeOperation.COLOR: lambda cb, cs: _set_lum(cs, _lum(cb)),
    CompositeOperation.LUMINOSITY: lambda cb, cs: _set_lum(cb, _lum(cs)),
}


def _unpremultiply(premultiplied, alpha):
    return _safe_divide(premultiplied[..., :3], alpha)


def composite(destination: np.ndarray, source: np.ndarray, operation: CompositeOperation) -> np.ndarray:
    """Combines two premultiplied float arrays of the same shape and returns the result."""
    operation = CompositeOperation(operation)
    source_alpha = source[..., 3:4]
    destination_alpha = destination[..., 3:4]

    if operation in PORTER_DUFF:
        source_factor, destination_factor = PORTER_DUFF[operation]
        result = source * source_factor(source_alpha, destination_alpha) + destination * destination_factor(
            source_alpha, destination_alpha
        )
        return np.clip(result, 0.0, 1.0)

    backdrop = _unpremultiply(destination, destination_alpha)
    color = _unpremultiply(source, source_alpha)
    blended = np.clip(BLEND_FUNCTIONS[operation](backdrop, color), 0.0, 1.0)
    mixed = (1.0 - destination_alpha) * color + destination_alpha * blended

    result = np.empty_like(destination)
    result[..., :3] = source_alpha * mixed + destination[..., :3] * (1.0 - source_alpha)
    result[..., 3:4] = source_alpha + destination_alpha * (1.0 - source_alpha)
    return np.clip(result, 0.0, 1.0)
