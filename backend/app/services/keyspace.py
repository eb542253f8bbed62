"""Key-space layout of the single CRM table.

Customers and their notes share one partition per customer::

    Customer  pk = CUSTOMER#<id>          sk = METADATA
    Note      pk = CUSTOMER#<customerId>  sk = NOTE#<created>#<noteId>

The note sort key embeds the creation timestamp, so a prefix query over
``NOTE#`` returns a customer's notes in creation order with no extra index.
The price is that a single note cannot be addressed by id alone: lookups
query the partition and filter on the ``id`` attribute.

All customers are also reachable through ``gsi1`` (``type`` + ``created``).
"""

CUSTOMER_TYPE = "CUSTOMER"
NOTE_TYPE = "NOTE"

CUSTOMER_PREFIX = "CUSTOMER#"
NOTE_PREFIX = "NOTE#"
CUSTOMER_METADATA_SK = "METADATA"

ATTACHMENT_ROOT = "notes"


def customer_pk(customer_id: str) -> str:
    return f"{CUSTOMER_PREFIX}{customer_id}"


def customer_key(customer_id: str) -> tuple[str, str]:
    return customer_pk(customer_id), CUSTOMER_METADATA_SK


def note_sk(created: str, note_id: str) -> str:
    return f"{NOTE_PREFIX}{created}#{note_id}"


def note_key(customer_id: str, created: str, note_id: str) -> tuple[str, str]:
    return customer_pk(customer_id), note_sk(created, note_id)


def clean_filename(filename: str) -> str:
    """Reduce a client-supplied filename to its last path component."""
    name = filename.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if name in {"", ".", ".."}:
        raise ValueError("filename must name a file")
    return name


def attachment_prefix(customer_id: str, note_id: str) -> str:
    return f"{ATTACHMENT_ROOT}/{customer_id}/attachments/{note_id}/"


def attachment_key(customer_id: str, note_id: str, filename: str) -> str:
    return attachment_prefix(customer_id, note_id) + clean_filename(filename)


def strip_keys(item: dict) -> dict:
    """Item attributes without the table's key fields."""
    return {k: v for k, v in item.items() if k not in ("pk", "sk")}
