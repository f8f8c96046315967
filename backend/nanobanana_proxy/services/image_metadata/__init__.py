from .handler import DownloadPayload, ImageMetadataHandler, download_filename

__all__ = ["DownloadPayload", "ImageMetadataHandler", "download_filename"]
