# dataitem_core/constants.py

FORMAT_NAME = b"dataitem"
FORMAT_VERSION = b"1"

SIGNATURE_TYPE_LENGTH = 2
PRESENCE_FLAG_LENGTH = 1
TARGET_LENGTH = 32
ANCHOR_LENGTH = 32
TAG_COUNT_LENGTH = 8
TAG_BYTES_LENGTH = 8

# Tag limits enforced by bundlers
MAX_TAGS = 128
MAX_TAG_NAME_BYTES = 1024
MAX_TAG_VALUE_BYTES = 3072
