ROOT_ID = "root"
ROOT_NAME = "My Drive"

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_UPLOAD_NAME = "upload.bin"

DAY_MS = 24 * 60 * 60 * 1000
