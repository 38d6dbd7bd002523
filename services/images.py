# services/images.py
import base64, binascii, re
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

_DATA_URI = re.compile(r"^data:image/[\w.+-]+;base64,")


@dataclass(frozen=True)
class PreparedImage:
    data: bytes   # JPEG bytes sent to the provider
    width: int
    height: int

    @property
    def mime(self) -> str:
        return "image/jpeg"

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime};base64,{base64.b64encode(self.data).decode('ascii')}"


def decode_base64_image(b64: str) -> bytes:
    """Strip an optional data-URI prefix and decode."""
    payload = _DATA_URI.sub("", (b64 or "").strip())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"invalid base64 image: {e}") from e


def prepare_image(raw: bytes, width: int = 640) -> PreparedImage:
    """Decode, fix EXIF orientation, downscale to `width` and re-encode as JPEG."""
    try:
        im = Image.open(BytesIO(raw))
        im.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"not a readable image: {e}") from e

    im = ImageOps.exif_transpose(im)
    if im.mode != "RGB":
        im = im.convert("RGB")
    if width and im.width > width:
        height = max(1, int(im.height * width / im.width))
        im = im.resize((width, height), Image.Resampling.LANCZOS)

    buf = BytesIO()
    im.save(buf, format="JPEG", quality=90)
    return PreparedImage(data=buf.getvalue(), width=im.width, height=im.height)
