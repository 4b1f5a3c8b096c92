"""BDD tests for webhook ingestion.

Step definitions are in conftest.py.
"""

import pytest
from pytest_bdd import scenarios

scenarios("webhook_ingestion.feature")

pytestmark = [pytest.mark.core]
