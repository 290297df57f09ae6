from PIL import Image

from tokenartisan.raster.raster import Raster


def load_image(path: str) -> Raster:
    with Image.open(path) as pil_image:
        return Raster.from_pillow(pil_image)


def merge_rasters(rasters: list, width: int, height: int) -> Raster:
    merged = Raster(width, height)

    for raster in rasters:
        merged.draw_image(raster, dest_rect=(0, 0, width, height))

    return merged


def save_raster(raster: Raster, output_path: str):
    raster.to_pillow().save(output_path)
