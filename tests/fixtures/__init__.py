# Test fixtures for fbimport
from tests.fixtures.media_samples import (
    MINIMAL_JPEG as MINIMAL_JPEG,
    MINIMAL_PNG as MINIMAL_PNG,
    MINIMAL_MP4 as MINIMAL_MP4,
    media_bytes_for as media_bytes_for,
)
from tests.fixtures.generators import (
    build_zip as build_zip,
    create_facebook_export as create_facebook_export,
    create_facebook_html_export as create_facebook_html_export,
    create_minimal_facebook_export as create_minimal_facebook_export,
)
from tests.fixtures.records import (
    FakeImportClient as FakeImportClient,
    make_record as make_record,
    utc as utc,
)
