from enum import StrEnum


class DataType(StrEnum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ISODATE = "isodate"
    JSON = "json"
    FILE = "file"
    LINK = "link"
    REFERENCE = "reference"
    GLOBAL_FIELD = "global_field"
    TAXONOMY = "taxonomy"
    GROUP = "group"
    BLOCKS = "blocks"


class CompileMode(StrEnum):
    """How asset fields are represented in compiled validators."""

    READ = "read"  # assets expand to objects, as returned by the delivery API
    UPSERT = "upsert"  # assets are bare asset uids, as sent to the management API


class RichTextKind(StrEnum):
    PLAIN = "plain"
    DOCUMENT_TREE = "document_tree"
    MARKUP = "markup"


def get_data_type(tag: str | None) -> DataType | None:
    """
    Resolve a raw CMS data_type tag.

    Tags are matched exactly; the CMS only emits lower-case tags.

    Args:
        tag: The data_type value read from a field descriptor.

    Returns:
        DataType member, or None when the tag is not a known field type.
    """
    if not tag:
        return None
    try:
        return DataType(tag)
    except ValueError:
        return None
