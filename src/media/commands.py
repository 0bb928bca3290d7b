"""Thumbnail commands — how an image is fitted into a target dimension."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum

from PIL import Image, ImageOps

from mediahub.media.models import Dimension


class CommandType(StrEnum):
    """Available thumbnail command types."""

    FIT = "fit"
    LETTER = "letter"
    WIDEN = "widen"
    SPILL = "spill"
    CROP = "crop"


class ThumbnailCommand(ABC):
    """Resize strategy applied to one image for one dimension."""

    type: CommandType

    def __init__(self) -> None:
        self._dimension: Dimension | None = None

    @property
    def dimension(self) -> Dimension | None:
        return self._dimension

    def set_dimension(self, dimension: Dimension) -> None:
        self._dimension = dimension

    def execute(self, image: Image.Image) -> Image.Image:
        """Return a new image fitted to the configured dimension.

        Raises:
            ValueError: If no dimension has been set.
        """
        if self._dimension is None:
            raise ValueError(f"{self.type} command has no dimension")
        return self.apply(image, self._dimension)

    @abstractmethod
    def apply(self, image: Image.Image, dimension: Dimension) -> Image.Image:
        """Transform ``image`` for ``dimension``."""


class FitCommand(ThumbnailCommand):
    """Cover the box and centre-crop the overflow."""

    type = CommandType.FIT

    def apply(self, image: Image.Image, dimension: Dimension) -> Image.Image:
        return ImageOps.fit(image, dimension.size)


class LetterCommand(ThumbnailCommand):
    """Fit inside the box and pad the rest."""

    type = CommandType.LETTER

    def apply(self, image: Image.Image, dimension: Dimension) -> Image.Image:
        return ImageOps.pad(image, dimension.size)


class WidenCommand(ThumbnailCommand):
    """Fit inside the box, keeping the aspect ratio."""

    type = CommandType.WIDEN

    def apply(self, image: Image.Image, dimension: Dimension) -> Image.Image:
        return ImageOps.contain(image, dimension.size)


class SpillCommand(ThumbnailCommand):
    """Cover the box without cropping."""

    type = CommandType.SPILL

    def apply(self, image: Image.Image, dimension: Dimension) -> Image.Image:
        return ImageOps.cover(image, dimension.size)


class CropCommand(ThumbnailCommand):
    """Centre crop at the original scale."""

    type = CommandType.CROP

    def apply(self, image: Image.Image, dimension: Dimension) -> Image.Image:
        width = min(dimension.width, image.width)
        height = min(dimension.height, image.height)
        left = (image.width - width) // 2
        top = (image.height - height) // 2
        return image.crop((left, top, left + width, top + height))


class CommandFactory:
    """Builds a fresh command for each thumbnail request."""

    def __init__(self) -> None:
        self._commands: dict[str, type[ThumbnailCommand]] = {
            CommandType.FIT: FitCommand,
            CommandType.LETTER: LetterCommand,
            CommandType.WIDEN: WidenCommand,
            CommandType.SPILL: SpillCommand,
            CommandType.CROP: CropCommand,
        }

    def make(self, command_type: CommandType | str) -> ThumbnailCommand:
        """Create a command for the given type.

        Raises:
            ValueError: If the type is unknown.
        """
        key = str(command_type).lower()
        if key in self._commands:
            return self._commands[key]()

        raise ValueError(f"Unknown thumbnail type: {command_type!r}")
