"""Limits applied to uploaded fridge photos."""

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

ALLOWED_FILE_TYPES = ("image/jpeg", "image/png", "image/webp")

NO_IMAGE_MESSAGE = "No image file provided"
FILE_TOO_LARGE_MESSAGE = "File size must be less than 10MB"
INVALID_FILE_TYPE_MESSAGE = "Please upload a JPEG, PNG, or WebP image"

# Multipart overhead and the text fields ride on top of the image itself.
MAX_REQUEST_SIZE = MAX_FILE_SIZE + 1024 * 1024
