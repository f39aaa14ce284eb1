import pytest

from hexshift.game.scenario import (
    MovementPattern,
    Position,
    Scenario,
    ScenarioError,
    Transition,
    TransitionType,
    describe_scenario,
    load_scenario,
    parse_hex_id,
    pos_id,
    positions,
    validate_scenario,
)
from hexshift.protocol import ProtocolError, write_file

from conftest import SAMPLE_SCENARIO, make_scenario, up


def test_sample_scenario_loads_and_validates():
    scenario = load_scenario(SAMPLE_SCENARIO)

    assert scenario.id == "prism_path"
    assert scenario.layers == 3
    assert scenario.start == Position(1, 0, 0)
    assert scenario.pattern_for_layer(2) is MovementPattern.LONG_LEFT_SHORT_RIGHT
    assert scenario.pattern_for_layer(3) is MovementPattern.TOP_RIGHT_BOTTOM_LEFT
    assert scenario.transitions[1].type is TransitionType.DOWN
    assert not scenario.reveal_on_enter_guaranteed_up


def test_hex_ids():
    assert pos_id(Position(2, 5, 4)) == "L2-R5-C4"
    assert Position(7, 0, 6).hex_id == "L7-R0-C6"
    assert parse_hex_id("L3-R1-C5") == Position(3, 1, 5)
    for bad in ("L3-R1", "l3-r1-c5", "L3-R1-C5 ", "hex"):
        with pytest.raises(ScenarioError):
            parse_hex_id(bad)


def test_dict_round_trip_keeps_wire_names():
    scenario = make_scenario(
        layers=2,
        movement={2: MovementPattern.TOP_RIGHT_BOTTOM_LEFT},
        transitions=(up((1, 0, 1), (2, 0, 1)),),
        notes=("hand made",),
    )
    data = scenario.to_dict()

    assert data["movement"] == {"2": "TOP3_RIGHT_BOTTOM4_LEFT"}
    assert data["transitions"][0]["from"] == {"layer": 1, "row": 0, "col": 1}
    assert data["revealOnEnterGuaranteedUp"] is False
    assert Scenario.from_dict(data) == scenario


def test_from_dict_defaults():
    scenario = Scenario.from_dict(
        {
            "id": "bare",
            "name": "Bare",
            "layers": 1,
            "start": {"layer": 1, "row": 0, "col": 0},
            "goal": {"layer": 1, "row": 0, "col": 1},
            "movement": {"1": "seven_left_six_right"},
        }
    )
    assert scenario.missing == ()
    assert scenario.transitions == ()
    assert scenario.reveal_on_enter_guaranteed_up
    assert scenario.movement == ((1, MovementPattern.LONG_LEFT_SHORT_RIGHT),)
    assert scenario.pattern_for_layer(1) is MovementPattern.LONG_LEFT_SHORT_RIGHT
    assert scenario.pattern_for_layer(2) is MovementPattern.NONE


def minimal_data(**extra):
    data = {
        "id": "x",
        "name": "X",
        "layers": 1,
        "start": {"layer": 1, "row": 0, "col": 0},
        "goal": {"layer": 1, "row": 0, "col": 1},
    }
    data.update(extra)
    return data


@pytest.mark.parametrize(
    "data, message",
    [
        ([], "missing/invalid"),
        ({"id": "x", "name": "X", "layers": 1, "start": {}}, "missing 'goal'"),
        (
            {"id": "x", "name": "X", "layers": "many", "start": {}, "goal": {}},
            "layers must be an integer",
        ),
        (
            {
                "id": "x",
                "name": "X",
                "layers": 1,
                "start": {"layer": 1, "row": 0, "col": 0},
                "goal": {"layer": 1, "row": 0, "col": 1},
                "movement": {"1": "SPIN"},
            },
            "Invalid movement pattern",
        ),
        (
            {
                "id": "x",
                "name": "X",
                "layers": 1,
                "start": {"layer": 1, "row": 0, "col": 0},
                "goal": {"layer": 1, "row": 0, "col": "far"},
            },
            "integer layer/row/col",
        ),
        (minimal_data(movement=["NONE"]), "movement must be an object"),
        (minimal_data(missing=5), "missing must be a list"),
        (minimal_data(blocked={"layer": 1}), "blocked must be a list"),
        (minimal_data(transitions="UP"), "transitions must be a list"),
        (minimal_data(notes=3), "notes must be a list"),
    ],
)
def test_from_dict_rejects_bad_shapes(data, message):
    with pytest.raises(ScenarioError, match=message):
        Scenario.from_dict(data)


def test_bad_transition_type():
    with pytest.raises(ScenarioError, match="Invalid transition type"):
        Transition.from_dict({"type": "SIDEWAYS", "from": {}, "to": {}})
    with pytest.raises(ScenarioError, match="missing from/to"):
        Transition.from_dict({"type": "up"})


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"name": ""}, "id and name"),
        ({"layers": 0}, "at least one layer"),
        ({"goal": Position(1, 1, 6)}, "goal out of bounds"),
        ({"missing": positions([(2, 0, 0)])}, "missing out of bounds"),
        ({"blocked": (Position(1, 0, 0),)}, "Start cannot be"),
        ({"missing": (Position(1, 6, 6),)}, "Goal cannot be"),
        ({"transitions": (up((1, 0, 1), (1, 9, 0)),)}, "Transition TO out of bounds"),
        (
            {"transitions": (up((1, 0, 1), (1, 0, 2)), up((1, 0, 1), (1, 0, 3)))},
            "Multiple transitions",
        ),
        (
            {"blocked": (Position(1, 0, 1),), "transitions": (up((1, 0, 1), (1, 0, 2)),)},
            "Transition FROM missing/blocked",
        ),
        (
            {"missing": (Position(1, 0, 2),), "transitions": (up((1, 0, 1), (1, 0, 2)),)},
            "Transition TO missing/blocked",
        ),
        ({"movement": {2: MovementPattern.NONE}}, "Invalid movement layer key"),
        ({"reveal_on_enter_guaranteed_up": True}, "Layer 1 has no usable UP"),
    ],
)
def test_validation_errors(overrides, message):
    with pytest.raises(ScenarioError, match=message):
        validate_scenario(make_scenario(**overrides))


def test_guaranteed_up_needs_every_layer_covered():
    scenario = make_scenario(
        layers=2,
        transitions=(up((1, 0, 1), (2, 0, 1)), up((2, 3, 3), (1, 3, 3))),
        reveal_on_enter_guaranteed_up=True,
    )
    validate_scenario(scenario)

    one_way = make_scenario(
        layers=2,
        transitions=(up((1, 0, 1), (2, 0, 1)),),
        reveal_on_enter_guaranteed_up=True,
    )
    with pytest.raises(ScenarioError, match="Layer 2"):
        validate_scenario(one_way)


def test_load_scenario_errors(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(ProtocolError):
        load_scenario(broken)

    invalid = tmp_path / "invalid.json"
    write_file(invalid, make_scenario(blocked=(Position(1, 0, 0),)).to_dict())
    with pytest.raises(ScenarioError):
        load_scenario(invalid)
    assert load_scenario(invalid, validate=False).blocked == (Position(1, 0, 0),)


def test_describe_scenario():
    notes = describe_scenario(load_scenario(SAMPLE_SCENARIO))
    assert notes == [
        "Moving layers: 2, 3.",
        "Static layers: 1.",
        "Missing hexes: 3.",
        "Blocked hexes: 3.",
        "Transitions: 2 UP, 1 DOWN.",
    ]

    quiet = describe_scenario(make_scenario(reveal_on_enter_guaranteed_up=True))
    assert quiet == [
        "Static layers: 1.",
        "On first entry to a layer, at least one UP transition is revealed.",
    ]


def test_scenario_is_hashable_and_keeps_movement_read_only():
    scenario = make_scenario(
        layers=3,
        movement={3: MovementPattern.TOP_RIGHT_BOTTOM_LEFT, 2: MovementPattern.LONG_LEFT_SHORT_RIGHT},
    )

    assert scenario.movement == (
        (2, MovementPattern.LONG_LEFT_SHORT_RIGHT),
        (3, MovementPattern.TOP_RIGHT_BOTTOM_LEFT),
    )
    assert hash(scenario) == hash(Scenario.from_dict(scenario.to_dict()))
    assert not hasattr(scenario.movement, "__setitem__")
