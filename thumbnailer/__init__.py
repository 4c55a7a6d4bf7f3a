"""S3-triggered thumbnails for images and GIF previews for videos."""
