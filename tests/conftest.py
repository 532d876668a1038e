import pytest

SAMPLE_FEED = """\
# delegated statistics sample
2|afrinic|20240315|8|00000000|20240314|+0000
afrinic|*|asn|*|1|summary
afrinic|*|ipv4|*|5|summary
afrinic|*|ipv6|*|2|summary
afrinic|ZA|asn|36874|1|20100212|allocated
afrinic|ZA|ipv4|41.0.0.0|65536|20071126|allocated
afrinic|ZA|ipv4|41.1.0.0|65536|20071126|allocated
afrinic|EG|ipv4|41.32.0.0|1048576|20070725|allocated
afrinic|KE|ipv4|41.57.96.0|1024|20100210|assigned
afrinic|ZA|ipv6|2001:4200::|32|20040616|allocated
afrinic||ipv4|41.60.0.0|256|20100210|available
afrinic|NG|ipv4|41.58.0.0|768|20100301|reserved
afrinic|EG|ipv6|2c0f:fc88::|32|20091110|allocated
"""


@pytest.fixture
def sample_feed():
    return SAMPLE_FEED


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "delegated-afrinic-latest"
    path.write_text(SAMPLE_FEED)
    return path
