"""Domain Types — verifies enum values and shared constants.

Tests:
    - Enums serialize to their string values
    - External label constants are consistent with each other
"""

from sitedir.core.domain_types import (
    DocumentBackend,
    EntryId,
    EntrySource,
    SeedStatus,
    LABEL_ELLIPSIS,
    LABEL_MAX_LENGTH,
    LABEL_TRUNCATED_LENGTH,
)


def test_entry_id_wraps_str():
    assert EntryId("beam-home-site") == "beam-home-site"


def test_enums_serialize_to_strings():
    assert EntrySource.INTERNAL.value == "internal"
    assert EntrySource.EXTERNAL.value == "external"
    assert SeedStatus.CREATED.value == "created"
    assert SeedStatus.UPDATED.value == "updated"


def test_document_backend_parses_from_setting_value():
    assert DocumentBackend("firestore") is DocumentBackend.FIRESTORE
    assert DocumentBackend("sql") is DocumentBackend.SQL


def test_truncated_label_fits_max_length():
    assert LABEL_TRUNCATED_LENGTH + len(LABEL_ELLIPSIS) == LABEL_MAX_LENGTH
