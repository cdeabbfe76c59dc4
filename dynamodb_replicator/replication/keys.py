"""Key projection and write-operation builders."""

from ..exceptions import ValidationError
from ..models import Item, KeySchema, WriteKind, WriteOperation


def project_key(key_schema: KeySchema, item: Item) -> Item:
    """Reduce an item to its primary key attributes.

    Values are copied verbatim, type tags included.

    Args:
        key_schema: Key schema of the table the item was scanned from
        item: Scanned item in AttributeValue form

    Returns:
        Key-only item suitable for a DeleteRequest

    Raises:
        ValidationError: The item lacks a key attribute
    """
    key = {}
    for attribute_name in key_schema.attribute_names:
        if attribute_name not in item:
            raise ValidationError(
                f"Item from {key_schema.table_name} is missing key attribute '{attribute_name}'",
                errors={attribute_name: "missing"}
            )
        key[attribute_name] = item[attribute_name]
    return key


def put_operation(item: Item) -> WriteOperation:
    return WriteOperation(kind=WriteKind.PUT, payload=item)


def delete_operation(key_schema: KeySchema, item: Item) -> WriteOperation:
    return WriteOperation(kind=WriteKind.DELETE, payload=project_key(key_schema, item))
