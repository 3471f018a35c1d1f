"""Tests for journey persistence."""

from datetime import datetime

from explorer.src.models import JourneyStatus, Stage, StageStatus, StageType
from explorer.src.storage.db import generate_journey_id


def make_stage(journey_id: str, number: int, stage_type=StageType.DISCOVERING, **kwargs) -> Stage:
    stage = Stage.create(journey_id, stage_type, number, **kwargs)
    stage.status = StageStatus.COMPLETE
    stage.result = f"Stage {number} output"
    stage.completed_at = datetime.now()
    return stage


class TestJourneys:
    """Tests for journey rows."""

    def test_generated_ids_are_unique(self):
        first, second = generate_journey_id(), generate_journey_id()
        assert first.startswith("journey_")
        assert first != second

    def test_create_and_get(self, db):
        journey_id = db.create_journey("Why are deploys slow?", max_stages=8)

        journey = db.get_journey(journey_id)
        assert journey["input"] == "Why are deploys slow?"
        assert journey["status"] == "running"
        assert journey["max_stages"] == 8
        assert journey["stage_count"] == 0

    def test_create_with_given_id(self, db):
        assert db.create_journey("q", journey_id="journey_fixed") == "journey_fixed"
        assert db.get_journey("journey_fixed") is not None

    def test_missing_journey(self, db):
        assert db.get_journey("journey_missing") is None
        assert db.get_journey_status("journey_missing") is None

    def test_status_round_trip(self, db):
        journey_id = db.create_journey("q")

        db.set_journey_status(journey_id, JourneyStatus.STOPPED)

        assert db.get_journey_status(journey_id) == JourneyStatus.STOPPED

    def test_list_journeys(self, db):
        for i in range(3):
            db.create_journey(f"question {i}")

        assert len(db.list_journeys()) == 3
        assert len(db.list_journeys(limit=2)) == 2


class TestStages:
    """Tests for stage rows."""

    def test_stages_come_back_in_order(self, db):
        journey_id = db.create_journey("q")
        db.create_stage(make_stage(journey_id, 2, StageType.CHASING))
        db.create_stage(make_stage(journey_id, 1))

        stages = db.get_stages(journey_id)

        assert [s.stage_number for s in stages] == [1, 2]
        assert stages[1].type == StageType.CHASING
        assert stages[0].result == "Stage 1 output"
        assert db.get_journey(journey_id)["stage_count"] == 2

    def test_saving_again_replaces(self, db):
        journey_id = db.create_journey("q")
        stage = make_stage(journey_id, 1)
        db.create_stage(stage)

        stage.result = "revised"
        db.create_stage(stage)

        stages = db.get_stages(journey_id)
        assert len(stages) == 1
        assert stages[0].result == "revised"

    def test_summary_flag_survives(self, db):
        journey_id = db.create_journey("q")
        db.create_stage(make_stage(journey_id, 8, StageType.BUILDING, is_summary=True))

        assert db.get_stages(journey_id)[0].is_summary is True

    def test_stats(self, db):
        first = db.create_journey("a")
        second = db.create_journey("b")
        db.set_journey_status(second, JourneyStatus.COMPLETE)
        db.create_stage(make_stage(first, 1))

        stats = db.get_stats()

        assert stats["journeys"] == {"running": 1, "complete": 1}
        assert stats["stages"] == 1
