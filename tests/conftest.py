import pytest
from datetime import datetime, timezone


@pytest.fixture
def issue_reference() -> datetime:
    """Reference instant matching the 010600Z issue time of the sample bulletin."""
    return datetime(2024, 3, 1, 6, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_taf() -> str:
    """Two-period bulletin: initial VFR then an FM group."""
    return (
        "TAF KXYZ 010600Z 0106/0206 18010KT P6SM FEW250 "
        "FM012000 22015G25KT 3SM BKN015"
    )


@pytest.fixture
def complex_taf() -> str:
    """Bulletin mixing FM, TEMPO, BECMG and PROB groups."""
    return (
        "TAF KJFK 011130Z 0112/0218 18012KT P6SM SCT030 "
        "TEMPO 0114/0118 3SM -SHRA BKN020 "
        "FM011900 20015G25KT 5SM BR OVC008 "
        "PROB30 0200/0204 1/2SM FG VV002 "
        "BECMG 0206/0208 VRB05KT P6SM SKC "
        "FM021200 27010KT P6SM FEW050"
    )
