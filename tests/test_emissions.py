import pytest

from windcase.emissions import co2e_equivalents

def test_co2e_equivalents():
    facts = co2e_equivalents(3162.0)
    assert facts == {
        "trees": 143727,
        "forest_hectares": 115,
        "forest_acres": 284,
        "homes": 401,
        "miles_driven": 14545200,
        "earth_circumnavigations": 584,
        "sea_ice_melt_m2": 949,
    }

@pytest.mark.parametrize("key", [
    "trees", "forest_hectares", "forest_acres", "homes",
    "miles_driven", "earth_circumnavigations", "sea_ice_melt_m2",
])
def test_no_savings_no_equivalents(key):
    assert co2e_equivalents(0.0)[key] == 0
