"""Exceptions raised while converting GIMP headers into K-1008 card data."""


class ConversionError(Exception):
    """Base class for every failure that aborts a conversion."""


# Pseudo-source parsing


class MissingGeometryError(ConversionError):
    """Width or height declaration not found before the pixel data."""


class GeometryOutOfRangeError(ConversionError):
    """Declared image size does not fit the display cards."""


class MalformedColorMapError(ConversionError):
    """Color map block is truncated or contains an unreadable entry."""


class UnknownColorError(ConversionError):
    """Color map entry has no exact match in the palette."""


class ColorMapSizeMismatchError(ConversionError):
    """Color map length differs from the palette length."""


class BadPixelTokenError(ConversionError):
    """Pixel data token is not an unsigned byte."""


class PixelIndexOutOfRangeError(ConversionError):
    """Pixel value points past the end of the color map."""


class ImageTooLargeError(ConversionError):
    """More pixels than the cards can hold."""


class UnterminatedImageDataError(ConversionError):
    """Pixel data section is missing or never closed."""


class PixelCountMismatchError(ConversionError):
    """Number of pixels read differs from width * height."""


# Layout


class TooManyBitPlanesError(ConversionError):
    """Color depth needs more bit-planes than there are cards."""


# Palette files


class PaletteFormatError(ConversionError):
    """Palette file is not a readable GIMP palette."""


class TooManyColorsError(ConversionError):
    """Palette holds more colors than the cards can show."""


# Output


class FileAccessError(ConversionError):
    """Reading an input or writing an output file failed."""


class UnknownOutputFormatError(ConversionError):
    """Requested output format is not registered."""


class InvalidBaseAddressError(ConversionError):
    """Card base address is outside the usable memory map."""
