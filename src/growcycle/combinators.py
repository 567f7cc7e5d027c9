from __future__ import annotations

from typing import Dict, Iterable, Optional

from growcycle.models import CropType, ProductionValue, Stage, Tray


def seed_cost_for_grams(crop: CropType, seed_grams: float) -> float:
    """Cost of ``seed_grams`` of seed, pro-rated by package weight.

    The large pack is preferred because it is what a running operation buys.
    Falls back to the small pack, and to zero when neither price is set.
    """
    if not seed_grams:
        return 0.0
    if crop.price_large_pack:
        return (seed_grams / crop.pkg_weight_large) * crop.price_large_pack
    if crop.price_small_pack:
        return (seed_grams / crop.pkg_weight_small) * crop.price_small_pack
    return 0.0


def seed_cost_per_tray(crop: CropType, seeding_rate: Optional[float] = None) -> float:
    rate = crop.seeding_rate if seeding_rate is None else seeding_rate
    return seed_cost_for_grams(crop, rate or 0)


def tray_expected_yield(crop: CropType, crop2: Optional[CropType] = None) -> float:
    """Expected grams for a tray; half-half trays average both varieties."""
    if crop2 is None:
        return crop.estimated_yield_per_tray or 0.0
    return ((crop.estimated_yield_per_tray or 0.0) + (crop2.estimated_yield_per_tray or 0.0)) / 2


def tray_seed_cost(crop: CropType, crop2: Optional[CropType] = None) -> float:
    """Seed cost for a tray; half-half trays sow each variety at half rate."""
    if crop2 is None:
        return seed_cost_per_tray(crop)
    return (
        seed_cost_per_tray(crop, (crop.seeding_rate or 0) / 2)
        + seed_cost_per_tray(crop2, (crop2.seeding_rate or 0) / 2)
    )


def tray_display_name(crop: CropType, crop2: Optional[CropType] = None) -> str:
    if crop2 is None:
        return crop.name
    return f"{crop.name} + {crop2.name}"


def resolve_crops(
    tray: Tray, crops_by_id: Dict[str, CropType]
) -> tuple[Optional[CropType], Optional[CropType]]:
    """Look up a tray's primary and (optional) second crop.

    A missing second crop degrades the tray to a single-variety tray.
    """
    crop = crops_by_id.get(tray.crop_type_id)
    crop2 = crops_by_id.get(tray.crop_type_id_2) if tray.crop_type_id_2 else None
    return crop, crop2


def production_value(
    trays: Iterable[Tray],
    crops: Iterable[CropType],
    price_per_100g: float = 7.00,
) -> ProductionValue:
    """Market value of the standing crop, split into ready and maturing trays."""
    crops_by_id = {c.id: c for c in crops}
    value = ProductionValue()

    for tray in trays:
        if not tray.is_active:
            continue
        crop, crop2 = resolve_crops(tray, crops_by_id)
        if crop is None:
            continue

        grams = tray_expected_yield(crop, crop2)
        if grams:
            tray_value = (grams / 100) * price_per_100g
        else:
            tray_value = crop.price_per_tray or 0.0

        if tray.stage == Stage.HARVEST_READY:
            value.ready_value += tray_value
            value.ready_trays += 1
        else:
            value.maturing_value += tray_value
            value.maturing_trays += 1

    value.total_value = value.ready_value + value.maturing_value
    return value
