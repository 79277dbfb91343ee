from __future__ import annotations

import pytest

from affiliation_module import InMemoryMetadataDirectory
from tests.support import REMOTE_IDP, RecordingReporter


@pytest.fixture
def directory() -> InMemoryMetadataDirectory:
    directory = InMemoryMetadataDirectory()
    directory.add(REMOTE_IDP, {
        "entityid": REMOTE_IDP,
        "UIInfo": {"DisplayName": {"en": "Remote College", "el": "Απομακρυσμένο Κολλέγιο"}},
    })
    return directory


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
