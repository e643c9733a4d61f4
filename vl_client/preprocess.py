"""Pixel preprocessing for models that take normalized channel-first patches."""
from typing import Sequence

import numpy as np
from PIL import Image

from vl_client.constants import DEFAULT_MEAN, DEFAULT_STD, IMAGE_PATCH_SIZE


def normalize(
    image: np.ndarray,
    mean: Sequence[float] = DEFAULT_MEAN,
    std: Sequence[float] = DEFAULT_STD,
) -> np.ndarray:
    """Per-channel ``(pixel - mean[c]) / std[c]`` over a ``(C, H, W)`` array."""
    pixels = np.asarray(image, dtype=np.float32)
    channels = pixels.shape[0]
    mean_arr = np.asarray(mean[:channels], dtype=np.float32).reshape(-1, 1, 1)
    std_arr = np.asarray(std[:channels], dtype=np.float32).reshape(-1, 1, 1)
    return (pixels - mean_arr) / std_arr


def create_patches(
    image: np.ndarray | Image.Image,
    image_patch_size: int = IMAGE_PATCH_SIZE,
) -> np.ndarray:
    """
    Cut the top-left square patch out of an RGBA image and normalize it.

    Args:
        image:            (H, W, 4) uint8 array or a PIL image (converted to RGBA).
        image_patch_size: Side length of the square patch in pixels.

    Returns:
        float32 array of shape (3, image_patch_size, image_patch_size) with
        values in [-1, 1] under the default mean/std.

    Raises:
        ValueError: If the image is smaller than the patch.
    """
    match image:
        case Image.Image():
            pixels = np.asarray(image.convert("RGBA"))
        case _:
            pixels = np.asarray(image)

    height, width = pixels.shape[:2]
    if height < image_patch_size or width < image_patch_size:
        raise ValueError(
            f"Image {width}x{height} is smaller than patch size {image_patch_size}"
        )

    patch = pixels[:image_patch_size, :image_patch_size, :3].astype(np.float32) / 255.0
    return normalize(patch.transpose(2, 0, 1))
