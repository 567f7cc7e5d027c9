import pytest

from growcycle.combinators import (
    production_value,
    seed_cost_per_tray,
    tray_display_name,
    tray_expected_yield,
    tray_seed_cost,
)
from growcycle.models import CropType, Stage, Tray


def test_single_crop_tray(pea):
    assert tray_expected_yield(pea) == 250
    assert tray_display_name(pea) == "Pea Shoots"
    assert tray_seed_cost(pea) == pytest.approx(2.0)


def test_half_half_tray(pea, radish):
    assert tray_expected_yield(pea, radish) == 200
    assert tray_display_name(pea, radish) == "Pea Shoots + Radish"
    # 100 g pea from the 1 kg pack + 15 g radish from the 500 g pack
    assert tray_seed_cost(pea, radish) == pytest.approx(1.0 + 0.18)


def test_seed_cost_fallbacks(radish):
    assert seed_cost_per_tray(radish) == pytest.approx(0.36)
    assert seed_cost_per_tray(CropType(id="n", name="No Prices", seeding_rate=20)) == 0
    assert seed_cost_per_tray(CropType(id="r", name="No Rate", price_large_pack=30)) == 0


def test_production_value(crops, now):
    trays = [
        Tray(id="a", crop_type_id="pea", stage=Stage.HARVEST_READY),
        Tray(id="b", crop_type_id="radish", stage=Stage.LIGHT),
        Tray(id="c", crop_type_id="pea", stage=Stage.HARVESTED),
        Tray(id="d", crop_type_id="ghost", stage=Stage.LIGHT),
        Tray(id="e", crop_type_id="cress", stage=Stage.BLACKOUT),
    ]
    cress = CropType(id="cress", name="Cress", price_per_tray=12.0)

    value = production_value(trays, crops + [cress], price_per_100g=7.0)
    assert value.ready_value == pytest.approx(17.5)
    assert value.maturing_value == pytest.approx(10.5 + 12.0)
    assert value.total_value == pytest.approx(40.0)
    assert value.ready_trays == 1
    assert value.maturing_trays == 2
