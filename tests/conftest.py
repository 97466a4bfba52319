import pytest

from effsamples import pack_eff, RESOURCE

@pytest.fixture
def eff_bytes():
    return pack_eff()

@pytest.fixture
def eff_with_resource():
    return pack_eff(resource=RESOURCE)
