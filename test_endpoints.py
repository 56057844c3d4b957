import pytest

from astroclient.errors import InputValidationError
from astroclient.models.birth_data import (
    BirthData,
    PrimaryBirthData,
    SecondaryBirthData,
    TarotScores,
    TransitBirthData,
    TwoPersonBirthData,
)
from astroclient.services.endpoints import (
    HYBRID_OPERATIONS,
    OPERATIONS,
    PayloadKind,
    get_operation,
    prepare,
    resolve_path,
)
from astroclient.services.form_encoder import FormFormat

BIRTH = BirthData(day=10, month=5, year=1990, hour=19, min=55, lat=19.20, lon=25.20, tzone=5.5)
PRIMARY = PrimaryBirthData(day=10, month=5, year=1990, hour=11, min=55, lat=19.20, lon=25.20, tzone=5.5)
SECONDARY = SecondaryBirthData(day=10, month=5, year=1990, hour=15, min=22, lat=19.33, lon=25.20, tzone=5.5)
PAIR = TwoPersonBirthData(primary=PRIMARY, secondary=SECONDARY, orb=1)


def test_hybrid_allow_list_is_exactly_the_general_reports():
    assert HYBRID_OPERATIONS == {
        "general_ascendant_report",
        "general_sign_report",
        "general_house_report",
    }


def test_two_person_operations_select_format():
    pair_ops = [op for op in OPERATIONS.values() if op.kind is PayloadKind.PAIR]
    assert len(pair_ops) == 10

    for op in pair_ops:
        expected = FormFormat.HYBRID if op.name in HYBRID_OPERATIONS else FormFormat.COMPOSITE
        assert op.form_format is expected, op.name


def test_single_person_operations_use_single_format():
    for op in OPERATIONS.values():
        if op.kind in (PayloadKind.BIRTH, PayloadKind.TRANSIT):
            assert op.form_format is FormFormat.SINGLE, op.name


def test_tarot_has_no_birth_format():
    assert get_operation("tarot_predictions").form_format is None


def test_path_params_parsed_from_template():
    assert get_operation("western_horoscope").path_params == ()
    assert get_operation("general_sign_report").path_params == ("sign",)
    assert get_operation("compatibility").path_params == (
        "sun_sign", "rising_sign", "partner_sun_sign", "partner_rising_sign",
    )


def test_general_sign_report_scenario():
    request = prepare("general_sign_report", PAIR, path_params={"sign": "sun"})

    assert request.path == "general_sign_report/tropical/sun"
    assert request.form["day"] == "10"
    assert request.form["hour"] == "11"
    assert request.form["lat"] == "19.2"
    assert request.form["s_hour"] == "15"
    assert request.form["s_lat"] == "19.33"
    assert request.form["orb"] == "1"
    assert not any(k.startswith("p_") for k in request.form)


def test_hybrid_operation_accepts_separate_records():
    combined = prepare("general_house_report", PAIR)
    separate = prepare("general_house_report", primary=BIRTH.model_copy(update={"hour": 11}),
                       secondary=SECONDARY, orb=1)
    assert combined.path == separate.path == "general_house_report/tropical"
    assert combined.form == separate.form


def test_composite_operation_uses_prefixes():
    request = prepare("synastry_horoscope", PAIR)
    assert request.path == "synastry_horoscope"
    assert request.form["p_day"] == "10"
    assert request.form["s_min"] == "22"
    assert "day" not in request.form


def test_composite_operation_rejects_separate_records():
    with pytest.raises(InputValidationError, match="separate"):
        prepare("synastry_horoscope", primary=PRIMARY, secondary=SECONDARY)


def test_both_shapes_at_once_rejected():
    with pytest.raises(InputValidationError):
        prepare("general_ascendant_report", PAIR, primary=PRIMARY, secondary=SECONDARY)


def test_missing_payload_rejected():
    with pytest.raises(InputValidationError):
        prepare("western_horoscope")
    with pytest.raises(InputValidationError):
        prepare("general_ascendant_report")


def test_wrong_payload_type_rejected():
    with pytest.raises(InputValidationError, match="TwoPersonBirthData"):
        prepare("synastry_horoscope", BIRTH)
    with pytest.raises(InputValidationError, match="TransitBirthData"):
        prepare("tropical_transits_daily", BIRTH)
    with pytest.raises(InputValidationError, match="TarotScores"):
        prepare("tarot_predictions", BIRTH)


def test_missing_person_rejected_before_sending():
    with pytest.raises(InputValidationError, match="secondary"):
        prepare("friendship_report", TwoPersonBirthData(primary=PRIMARY))


@pytest.mark.parametrize("blank", ["", "   ", "\t", None])
def test_blank_path_segment_rejected(blank):
    with pytest.raises(InputValidationError, match="planet"):
        prepare("personalized_planet_prediction", BIRTH, path_params={"planet": blank})


def test_any_blank_sign_rejected_for_four_sign_compatibility():
    signs = {
        "sun_sign": "leo",
        "rising_sign": "aries",
        "partner_sun_sign": "cancer",
        "partner_rising_sign": " ",
    }
    with pytest.raises(InputValidationError, match="partner_rising_sign"):
        prepare("compatibility", PAIR, path_params=signs)


def test_four_sign_compatibility_path():
    signs = {
        "sun_sign": "leo",
        "rising_sign": "aries",
        "partner_sun_sign": "cancer",
        "partner_rising_sign": "virgo",
    }
    request = prepare("compatibility", PAIR, path_params=signs)
    assert request.path == "compatibility/leo/aries/cancer/virgo"


def test_unexpected_path_param_rejected():
    with pytest.raises(InputValidationError):
        resolve_path(get_operation("western_horoscope"), {"planet": "mars"})


def test_path_segments_are_escaped():
    path = resolve_path(get_operation("personalized_planet_prediction"), {"planet": "../mars"})
    assert path == "personalized_planet_prediction/daily/..%2Fmars"


def test_unknown_operation():
    with pytest.raises(InputValidationError, match="Unknown operation"):
        prepare("horary_chart", BIRTH)


def test_single_person_operation_drops_transit_field():
    transit = TransitBirthData(**BIRTH.model_dump(), prediction_timezone=1)
    for name in ("western_horoscope", "lunar_metrics", "solar_return_details"):
        request = prepare(name, transit)
        assert len(request.form) == 8, name
        assert "prediction_timezone" not in request.form


def test_transit_operations():
    transit = TransitBirthData(**BIRTH.model_dump(), prediction_timezone=-5)
    for name, path in [
        ("tropical_transits_daily", "tropical_transits/daily"),
        ("tropical_transits_weekly", "tropical_transits/weekly"),
        ("tropical_transits_monthly", "tropical_transits/monthly"),
    ]:
        request = prepare(name, transit)
        assert request.path == path
        assert request.form["prediction_timezone"] == "-5"
        assert len(request.form) == 9


def test_tarot_operation():
    request = prepare("tarot_predictions", TarotScores(love=57, career=32, finance=54))
    assert request.path == "tarot_predictions"
    assert request.form == {"love": "57", "career": "32", "finance": "54"}


def test_orb_without_separate_records_rejected():
    with pytest.raises(InputValidationError, match="orb"):
        prepare("synastry_horoscope", PAIR, orb=2)
