import logging
from bisect import bisect_left
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from PIL import Image

from .paths import DEFAULT_TEXTURE_SIZES, TEXTURE_FILE_PATTERN
from .types import MoonTexture
from .utils.image import generate_moon_texture, resize_box


logger = logging.getLogger(__name__)


class TextureCatalog:
    """Base moon textures kept sorted by size.

    Build one during setup and pass it to the renderer; it is only read
    afterwards.
    """

    def __init__(self, textures: Iterable[MoonTexture] = ()):
        self._sizes: List[int] = []
        self._textures: List[MoonTexture] = []
        for texture in textures:
            self.register(texture.size, texture.image)

    def register(self, size: int, image: Image.Image) -> None:
        """Add image under size, replacing any texture already registered for it."""
        if size <= 0:
            raise ValueError(f"texture size must be positive, got {size}")
        texture = MoonTexture(size=size, image=image)
        i = bisect_left(self._sizes, size)
        if i < len(self._sizes) and self._sizes[i] == size:
            self._textures[i] = texture
        else:
            self._sizes.insert(i, size)
            self._textures.insert(i, texture)
        logger.debug("Registered %dx%d moon texture (%s)", size, size, image.mode)

    @property
    def sizes(self) -> Tuple[int, ...]:
        return tuple(self._sizes)

    def __len__(self) -> int:
        return len(self._textures)

    def __iter__(self) -> Iterator[MoonTexture]:
        return iter(self._textures)

    def select(self, size: int) -> Optional[MoonTexture]:
        """Return the smallest texture of at least size, else the largest one."""
        if not self._textures:
            return None
        i = bisect_left(self._sizes, size)
        return self._textures[min(i, len(self._textures) - 1)]

    def texture_for(self, size: int) -> Optional[Image.Image]:
        """Return a size x size base image, or None when nothing is registered."""
        if size <= 0:
            raise ValueError(f"texture size must be positive, got {size}")
        texture = self.select(size)
        if texture is None:
            logger.debug("No moon texture registered for size %d", size)
            return None
        if texture.size == size and texture.image.size == (size, size):
            return texture.image
        logger.debug("Resizing %d px moon texture to %d px", texture.size, size)
        return resize_box(texture.image, size)

    @classmethod
    def from_directory(cls, directory: Union[str, Path], pattern: str = TEXTURE_FILE_PATTERN) -> "TextureCatalog":
        """Load every moon-<size>.png in directory.

        Decoding errors are not caught: a broken texture is a packaging bug.
        """
        catalog = cls()
        for path in sorted(Path(directory).glob(pattern)):
            size_text = path.stem.rsplit("-", 1)[-1]
            if not size_text.isdigit():
                logger.warning("Skipping texture with no size in its name: %s", path)
                continue
            with Image.open(path) as img:
                img.load()
                catalog.register(int(size_text), img.copy())
        logger.info("Loaded %d moon textures from %s", len(catalog), directory)
        return catalog


def default_catalog(sizes: Sequence[int] = DEFAULT_TEXTURE_SIZES) -> TextureCatalog:
    """Catalog of generated textures, used when no photographs are supplied."""
    return TextureCatalog(MoonTexture(size=s, image=generate_moon_texture(s)) for s in sizes)
