"""
Tourenplan Backend — Stop Service Tests
=========================================

What:  Ordering, partial updates, status lifecycle, reorder and delete.
How:   Runs against the in-memory SQLite schema from conftest, so foreign
       keys and cascades behave like the real store.
"""

import pytest

from tourenplan.exceptions import (
    DatabaseError,
    NotFoundError,
    StatusTransitionError,
    ValidationError,
)
from tourenplan.models.stop import Stop, StopStatus
from tourenplan.schemas.tour import StopCreate
from tourenplan.services.stop_service import apply_status, stop_service


class TestOrdering:

    @pytest.mark.asyncio
    async def test_list_sorted_by_sequence(self, db_session, sample_tour):
        _, tour, _ = sample_tour
        stops = await stop_service.list_stops(db_session, tour.id)
        assert [s.reihenfolge for s in stops] == [1, 2, 3]
        assert [s.kunde for s in stops] == ["Bäckerei Schmidt", "Müller", None]

    @pytest.mark.asyncio
    async def test_equal_sequence_falls_back_to_id(self, db_session, sample_tour):
        _, tour, _ = sample_tour
        extra = await stop_service.create_stop(
            db_session, tour.id, StopCreate(adresse="Nachtrag", reihenfolge=1)
        )
        stops = await stop_service.list_stops(db_session, tour.id)
        ones = [s.id for s in stops if s.reihenfolge == 1]
        assert ones == sorted(ones)
        assert ones[-1] == extra.id

    @pytest.mark.asyncio
    async def test_unknown_tour_has_no_stops(self, db_session):
        assert await stop_service.list_stops(db_session, 999) == []

    @pytest.mark.asyncio
    async def test_list_tour_stops_requires_tour(self, db_session):
        with pytest.raises(NotFoundError):
            await stop_service.list_tour_stops(db_session, 999)


class TestCreate:

    @pytest.mark.asyncio
    async def test_new_stop_is_pending(self, db_session, sample_tour):
        _, tour, _ = sample_tour
        stop = await stop_service.create_stop(
            db_session,
            tour.id,
            StopCreate(adresse="Hafenstraße 1", reihenfolge=4, lat=53.1, lng=8.7, telefon="0421 1"),
        )
        assert stop.id is not None
        assert stop.status == "pending"
        assert stop.foto_url is None
        assert stop.erledigt_am is None

    @pytest.mark.asyncio
    async def test_unknown_tour_is_database_error(self, db_session):
        with pytest.raises(DatabaseError) as exc_info:
            await stop_service.create_stop(
                db_session, 999, StopCreate(adresse="Nirgendwo", reihenfolge=1)
            )
        assert "FOREIGN KEY" in exc_info.value.diagnostic.upper()


class TestPartialUpdate:

    @pytest.mark.asyncio
    async def test_only_supplied_fields_change(self, db_session, sample_tour):
        _, _, stops = sample_tour
        stop = stops[0]
        original_phone = stop.telefon

        updated = await stop_service.update_stop(db_session, stop.id, {"hinweis": "Klingel defekt"})

        assert updated.hinweis == "Klingel defekt"
        assert updated.telefon == original_phone
        assert updated.status == "pending"

    @pytest.mark.asyncio
    async def test_explicit_null_clears_field(self, db_session, sample_tour):
        _, _, stops = sample_tour
        await stop_service.update_stop(db_session, stops[0].id, {"telefon": "0421 999"})
        updated = await stop_service.update_stop(db_session, stops[0].id, {"telefon": None})
        assert updated.telefon is None

    @pytest.mark.asyncio
    async def test_empty_update_rejected_before_lookup(self, db_session):
        # Unknown id, yet the empty body is reported first
        with pytest.raises(ValidationError, match="Nothing to update"):
            await stop_service.update_stop(db_session, 999, {})

    @pytest.mark.asyncio
    async def test_only_unknown_fields_counts_as_empty(self, db_session, sample_tour):
        _, _, stops = sample_tour
        with pytest.raises(ValidationError):
            await stop_service.update_stop(db_session, stops[0].id, {"adresse": "Neu"})

    @pytest.mark.asyncio
    async def test_unknown_stop(self, db_session):
        with pytest.raises(NotFoundError):
            await stop_service.update_stop(db_session, 999, {"status": "arrived"})

    @pytest.mark.asyncio
    async def test_rejected_transition_leaves_other_fields(self, db_session, sample_tour):
        _, _, stops = sample_tour
        stop = stops[0]
        await stop_service.update_stop(db_session, stop.id, {"status": "done"})

        with pytest.raises(StatusTransitionError):
            await stop_service.update_stop(
                db_session, stop.id, {"status": "skipped", "hinweis": "nicht da"}
            )
        assert stop.status == "done"
        assert stop.hinweis is None


class TestStatusLifecycle:

    def _stop(self, status="pending"):
        return Stop(tour_id=1, adresse="x", reihenfolge=1, status=status)

    def test_done_stamps_and_reopen_clears(self):
        stop = self._stop()
        apply_status(stop, "done")
        assert stop.status == "done"
        assert stop.erledigt_am is not None

        apply_status(stop, "pending")
        assert stop.status == "pending"
        assert stop.erledigt_am is None

    def test_done_again_keeps_timestamp(self):
        stop = self._stop()
        apply_status(stop, "done")
        stamped = stop.erledigt_am
        apply_status(stop, "done")
        assert stop.erledigt_am == stamped

    @pytest.mark.parametrize(
        "current, requested",
        [("done", "arrived"), ("done", "skipped"), ("skipped", "done")],
    )
    def test_disallowed_transitions(self, current, requested):
        stop = self._stop(current)
        with pytest.raises(StatusTransitionError) as exc_info:
            apply_status(stop, requested)
        assert exc_info.value.current == current
        assert stop.status == current

    def test_unknown_value(self):
        with pytest.raises(ValidationError, match="Unknown status"):
            apply_status(self._stop(), "unterwegs")

    def test_case_and_blank(self):
        stop = self._stop("arrived")
        assert apply_status(stop, " DONE ") is StopStatus.DONE
        assert apply_status(stop, "") is StopStatus.PENDING

    def test_legacy_free_text_can_be_reset(self):
        stop = self._stop("zugestellt")
        apply_status(stop, "done")
        assert stop.status == "done"


class TestCompleteAndDelete:

    @pytest.mark.asyncio
    async def test_complete(self, db_session, sample_tour):
        _, _, stops = sample_tour
        stop = await stop_service.complete_stop(db_session, stops[1].id)
        assert stop.status == "done"
        assert stop.erledigt_am is not None

    @pytest.mark.asyncio
    async def test_complete_skipped_not_allowed(self, db_session, sample_tour):
        _, _, stops = sample_tour
        await stop_service.update_stop(db_session, stops[1].id, {"status": "skipped"})
        with pytest.raises(StatusTransitionError):
            await stop_service.complete_stop(db_session, stops[1].id)

    @pytest.mark.asyncio
    async def test_delete(self, db_session, sample_tour):
        _, tour, stops = sample_tour
        await stop_service.delete_stop(db_session, stops[0].id)
        remaining = await stop_service.list_stops(db_session, tour.id)
        assert stops[0].id not in [s.id for s in remaining]
        assert len(remaining) == 2

    @pytest.mark.asyncio
    async def test_delete_unknown(self, db_session):
        with pytest.raises(NotFoundError):
            await stop_service.delete_stop(db_session, 999)


class TestReorder:

    @pytest.mark.asyncio
    async def test_reorder_assigns_one_to_n(self, db_session, sample_tour):
        _, tour, stops = sample_tour
        new_order = [stops[2].id, stops[0].id, stops[1].id]

        result = await stop_service.reorder_stops(db_session, tour.id, new_order)

        assert [s.id for s in result] == new_order
        listed = await stop_service.list_stops(db_session, tour.id)
        assert [s.id for s in listed] == new_order
        assert [s.reihenfolge for s in listed] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_duplicates_rejected(self, db_session, sample_tour):
        _, tour, stops = sample_tour
        with pytest.raises(ValidationError, match="only once"):
            await stop_service.reorder_stops(
                db_session, tour.id, [stops[0].id, stops[0].id, stops[1].id]
            )

    @pytest.mark.asyncio
    async def test_incomplete_list_rejected(self, db_session, sample_tour):
        _, tour, stops = sample_tour
        with pytest.raises(ValidationError) as exc_info:
            await stop_service.reorder_stops(db_session, tour.id, [stops[0].id, 999])
        assert exc_info.value.context["unknown"] == [999]
        assert sorted(exc_info.value.context["missing"]) == sorted([stops[1].id, stops[2].id])

    @pytest.mark.asyncio
    async def test_unknown_tour(self, db_session):
        with pytest.raises(NotFoundError):
            await stop_service.reorder_stops(db_session, 999, [])
