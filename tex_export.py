# tex_export.py
import io
import logging
from pathlib import Path
from PIL import Image
from tex_formats import FreeImageFormat
from texture_decoder import decoder_for

logger = logging.getLogger(__name__)

# Pillow format name -> file extension, where the lowercase name is not the usual extension
PIL_EXTENSIONS = {
    "JPEG": "jpg",
    "TIFF": "tif",
    "JPEG2000": "jp2",
    "MPO": "jpg",
}


def open_codec_image(mipmap):
    """Let Pillow sniff and open codec-owned mipmap bytes."""
    return Image.open(io.BytesIO(mipmap.data))


def mipmap_to_image(mipmap):
    if mipmap.format.is_codec_owned:
        img = open_codec_image(mipmap)
        img.load()
        return img
    return decoder_for(mipmap.format).decode_texture(mipmap.data, mipmap.width, mipmap.height, mipmap.format)


def output_extension(texture, image_index=0, mipmap_index=0):
    image_format = texture.image_container.image_format
    if image_format == FreeImageFormat.UNKNOWN:
        return "png"
    if image_format == FreeImageFormat.MP4:
        return "mp4"
    with open_codec_image(texture.mipmap(image_index, mipmap_index)) as img:
        return PIL_EXTENSIONS.get(img.format, img.format.lower())


def save_texture(texture, output_dir, image_index=0, mipmap_index=0, overwrite=True):
    """Write one mipmap of texture to output_dir/<name>.<ext> and return the path."""
    mipmap = texture.mipmap(image_index, mipmap_index)
    extension = output_extension(texture, image_index, mipmap_index)
    save_path = Path(output_dir) / f"{texture.name}.{extension}"
    if save_path.exists() and not overwrite:
        logger.info("Skipping %s, already exists", save_path)
        return save_path
    save_path.parent.mkdir(parents=True, exist_ok=True)
    if mipmap.format.is_codec_owned:
        # the container already holds a complete file in this format
        save_path.write_bytes(mipmap.data)
    else:
        img = mipmap_to_image(mipmap)
        img.save(save_path, "PNG")
    logger.info("Saved %s", save_path)
    return save_path
