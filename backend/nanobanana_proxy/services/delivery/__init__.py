"""
生成结果投递
"""

from .service import DeliveryReport, DeliveryService, build_folder_name, image_extension

__all__ = ["DeliveryReport", "DeliveryService", "build_folder_name", "image_extension"]
