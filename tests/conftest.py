from pathlib import Path

import pytest

from windcase.fuel_data import FuelProperties
from windcase.fueleucalc import EngineLoad, ShipConfiguration
from windcase.projection import ProjectionRequest

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

@pytest.fixture
def fuels_csv():
    return DATA_DIR / "fuels_default.csv"

@pytest.fixture
def fuels():
    return {
        "HFO": FuelProperties("HFO", "Heavy Fuel Oil", 91.74, 0.0405, 3.114, 0.00005, 0.00018),
        "MDO": FuelProperties("MDO", "Marine Diesel Oil", 90.77, 0.0427, 3.206, 0.00005, 0.00018),
        "B100": FuelProperties("B100", "B100 biodiesel (FAME)", 20.80, 0.0372, 2.834, 0.00005, 0.00018,
                               ets_exempt=True),
    }

@pytest.fixture
def ship():
    return ShipConfiguration("HMM SGS", EngineLoad("HFO", 5000.0), EngineLoad("MDO", 200.0))

@pytest.fixture
def request_default():
    return ProjectionRequest.from_defaults()
