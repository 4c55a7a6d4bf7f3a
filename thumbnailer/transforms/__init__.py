from thumbnailer.transforms.image import ImageResizeTransform
from thumbnailer.transforms.video import PreviewWindow, VideoPreviewTransform

__all__ = ["ImageResizeTransform", "PreviewWindow", "VideoPreviewTransform"]
