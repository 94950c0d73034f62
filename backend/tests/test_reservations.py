"""
Test reservation stay keys, lookups and optimistic updates
"""

import asyncio
import pytest
from datetime import datetime, timezone

from hai.errors import ConflictError, NotFoundError, ValidationError
from hai.repositories.property import PropertyRepository
from hai.repositories.reservation import ReservationRepository
from hai.services.db import DatabaseService


def stay(room_id, checkin, checkout, guest_id="g1"):
    return {"room_id": room_id, "guest_id": guest_id, "checkin_date": checkin, "checkout_date": checkout}


def test_checkin_update_rebuilds_stay_key_with_stored_checkout(reservation_repo):
    created = asyncio.run(reservation_repo.create(stay("p1", "15112025", "20112025")))

    updated = asyncio.run(reservation_repo.update(created.id, {"checkin_date": "16112025"}))

    assert updated.gsi3sk == "20251116#20251120"
    assert updated.gsi1sk == "20251116"
    assert updated.checkout_date == "20112025"

    assert asyncio.run(reservation_repo.get_by_property_and_dates("p1", "15112025", "20112025")) is None
    found = asyncio.run(reservation_repo.get_by_property_and_dates("p1", "16112025", "20112025"))
    assert found.id == created.id


def test_room_change_moves_reservation_between_properties(reservation_repo):
    created = asyncio.run(reservation_repo.create(stay("p1", "15112025", "20112025")))

    asyncio.run(reservation_repo.update(created.id, {"room_id": "p2"}))

    assert asyncio.run(reservation_repo.list_by_property("p1")) == []
    assert [r.id for r in asyncio.run(reservation_repo.list_by_property("p2"))] == [created.id]


def test_guest_change_rebuilds_parent_key(reservation_repo):
    created = asyncio.run(reservation_repo.create(stay("p1", "15112025", "20112025", guest_id="g1")))

    asyncio.run(reservation_repo.update(created.id, {"guest_id": "g2"}))

    assert asyncio.run(reservation_repo.list_by_guest("g1")) == []
    assert [r.id for r in asyncio.run(reservation_repo.list_by_guest("g2"))] == [created.id]


def test_list_is_chronological_by_checkin(reservation_repo):
    for checkin, checkout in [("20122025", "24122025"), ("01112025", "05112025"), ("15112025", "16112025")]:
        asyncio.run(reservation_repo.create(stay("p1", checkin, checkout)))

    listed = asyncio.run(reservation_repo.list())

    assert [r.checkin_date for r in listed] == ["01112025", "15112025", "20122025"]


def test_list_by_property_is_chronological(reservation_repo):
    asyncio.run(reservation_repo.create(stay("p1", "10122025", "12122025")))
    asyncio.run(reservation_repo.create(stay("p1", "01122025", "03122025")))
    asyncio.run(reservation_repo.create(stay("p2", "05122025", "06122025")))

    listed = asyncio.run(reservation_repo.list_by_property("p1"))

    assert [r.checkin_date for r in listed] == ["01122025", "10122025"]


def test_lookup_by_unknown_stay_returns_none(reservation_repo):
    asyncio.run(reservation_repo.create(stay("p1", "15112025", "20112025")))

    assert asyncio.run(reservation_repo.get_by_property_and_dates("p1", "15112025", "21112025")) is None
    assert asyncio.run(reservation_repo.get_by_property_and_dates("p9", "15112025", "20112025")) is None


def test_yyyymmdd_wire_format(db, clock):
    repo = ReservationRepository(db, date_format="YYYYMMDD", clock=clock)

    created = asyncio.run(repo.create(stay("p1", "20251115", "20251120")))

    assert created.gsi3sk == "20251115#20251120"
    assert created.checkin_date == "20251115"
    assert asyncio.run(repo.get_by_property_and_dates("p1", "20251115", "20251120")).id == created.id


def test_malformed_dates_rejected(reservation_repo):
    with pytest.raises(ValidationError):
        asyncio.run(reservation_repo.create(stay("p1", "15/11/25", "20112025")))


# =============================================================================
# IDS AND CONFLICTS
# =============================================================================

def test_natural_id_rejects_duplicate_booking(db, clock):
    repo = ReservationRepository(db, id_strategy="natural", clock=clock)

    created = asyncio.run(repo.create(stay("p1", "15112025", "20112025")))
    assert created.id == "p1-15112025-20112025"

    with pytest.raises(ConflictError):
        asyncio.run(repo.create(stay("p1", "15112025", "20112025", guest_id="g2")))

    # Original booking untouched
    assert asyncio.run(repo.get_by_id(created.id)).guest_id == "g1"


def test_random_ids_allow_identical_stays(reservation_repo):
    first = asyncio.run(reservation_repo.create(stay("p1", "15112025", "20112025")))
    second = asyncio.run(reservation_repo.create(stay("p1", "15112025", "20112025")))

    assert first.id != second.id


class RacingDatabase(DatabaseService):
    """Lets another writer touch the item right before each of the first `races` updates"""

    def __init__(self, table, races):
        super().__init__(table=table)
        self.races = races
        self.update_calls = 0

    async def update_item(self, pk, sk, assignments, condition=None):
        self.update_calls += 1
        if self.update_calls <= self.races:
            self.table.update_item(
                Key={"PK": pk, "SK": sk},
                UpdateExpression="SET #v = #v + :one, special_requests = :sr",
                ExpressionAttributeNames={"#v": "version"},
                ExpressionAttributeValues={":one": 1, ":sr": "late arrival"},
            )
        return await super().update_item(pk, sk, assignments, condition=condition)


def test_concurrent_update_is_retried(table, clock):
    setup = ReservationRepository(DatabaseService(table=table), clock=clock)
    created = asyncio.run(setup.create(stay("p1", "15112025", "20112025")))

    racing = RacingDatabase(table, races=1)
    repo = ReservationRepository(racing, clock=clock, max_attempts=3)

    updated = asyncio.run(repo.update(created.id, {"checkout_date": "22112025"}))

    assert racing.update_calls == 2
    assert updated.gsi3sk == "20251115#20251122"
    # The concurrent writer's change survives the retry
    assert updated.special_requests == "late arrival"


def test_concurrent_updates_give_up_after_max_attempts(table, clock):
    setup = ReservationRepository(DatabaseService(table=table), clock=clock)
    created = asyncio.run(setup.create(stay("p1", "15112025", "20112025")))

    racing = RacingDatabase(table, races=5)
    repo = ReservationRepository(racing, clock=clock, max_attempts=3)

    with pytest.raises(ConflictError):
        asyncio.run(repo.update(created.id, {"checkout_date": "22112025"}))

    assert racing.update_calls == 3


class InterleavingDatabase(DatabaseService):
    """Runs `other_writer` once, between the first read and the write that follows it"""

    def __init__(self, table, other_writer):
        super().__init__(table=table)
        self.other_writer = other_writer

    async def get_item(self, pk, sk):
        item = await super().get_item(pk, sk)
        if self.other_writer is not None:
            other_writer, self.other_writer = self.other_writer, None
            await other_writer()
        return item


def test_writers_in_the_same_millisecond_do_not_lose_updates(table):
    def frozen():
        return datetime(2025, 11, 1, 9, 0, tzinfo=timezone.utc)

    plain = ReservationRepository(DatabaseService(table=table), clock=frozen)
    created = asyncio.run(plain.create(stay("p1", "15112025", "20112025")))

    async def extend_stay():
        await plain.update(created.id, {"checkout_date": "25112025"})

    repo = ReservationRepository(InterleavingDatabase(table, extend_stay), clock=frozen)
    updated = asyncio.run(repo.update(created.id, {"checkin_date": "16112025"}))

    assert updated.checkout_date == "25112025"
    assert updated.gsi3sk == "20251116#20251125"
    assert updated.version == 2
    assert asyncio.run(plain.get_by_property_and_dates("p1", "16112025", "20112025")) is None
    assert asyncio.run(plain.get_by_property_and_dates("p1", "16112025", "25112025")).id == created.id


def test_items_without_version_are_upgraded(reservation_repo, table):
    created = asyncio.run(reservation_repo.create(stay("p1", "15112025", "20112025")))
    table.update_item(
        Key={"PK": created.pk, "SK": created.sk},
        UpdateExpression="REMOVE #v",
        ExpressionAttributeNames={"#v": "version"},
    )

    updated = asyncio.run(reservation_repo.update(created.id, {"checkin_date": "16112025"}))

    assert updated.version == 1
    assert updated.gsi3sk == "20251116#20251120"

def test_update_missing_reservation(reservation_repo):
    with pytest.raises(NotFoundError):
        asyncio.run(reservation_repo.update("missing", {"checkin_date": "16112025"}))


# =============================================================================
# DASHBOARD AND AVAILABILITY
# =============================================================================

@pytest.fixture
def november(reservation_repo):
    """Three stays around mid November"""
    return {
        "early": asyncio.run(reservation_repo.create(stay("p1", "10112025", "15112025"))),
        "mid": asyncio.run(reservation_repo.create(stay("p2", "14112025", "18112025"))),
        "late": asyncio.run(reservation_repo.create(stay("p1", "20112025", "25112025"))),
    }


def test_arrivals_between_dates_inclusive(reservation_repo, november):
    arrivals = asyncio.run(reservation_repo.list_arrivals("14112025", "20112025"))

    assert [r.id for r in arrivals] == [november["mid"].id, november["late"].id]


def test_departures_on_day(reservation_repo, november):
    departures = asyncio.run(reservation_repo.list_departures("15112025"))

    assert [r.id for r in departures] == [november["early"].id]


def test_in_house_excludes_checkout_day(reservation_repo, november):
    in_house = asyncio.run(reservation_repo.list_in_house("15112025"))

    assert [r.id for r in in_house] == [november["mid"].id]


def test_search_available(db, clock, november):
    properties = PropertyRepository(db, clock=clock)
    p1 = asyncio.run(properties.create({"room_number": "1", "room_name": "A", "floor": 0, "room_count": 1}))
    p2 = asyncio.run(properties.create({"room_number": "2", "room_name": "B", "floor": 0, "room_count": 1}))

    # Re-point the fixture stays at the created properties
    reservations = ReservationRepository(db, clock=clock)
    asyncio.run(reservations.update(november["early"].id, {"room_id": p1.id}))
    asyncio.run(reservations.update(november["late"].id, {"room_id": p1.id}))
    asyncio.run(reservations.update(november["mid"].id, {"room_id": p2.id}))

    # p1 is free from the 15th (checkout day) until the 20th (next check-in)
    free = asyncio.run(properties.search_available("15112025", "20112025"))
    assert {p.id for p in free} == {p1.id}

    free = asyncio.run(properties.search_available("19112025", "21112025"))
    assert {p.id for p in free} == {p2.id}

    free = asyncio.run(properties.search_available("01122025", "05122025"))
    assert {p.id for p in free} == {p1.id, p2.id}


def test_search_available_rejects_empty_range(property_repo):
    with pytest.raises(ValidationError):
        asyncio.run(property_repo.search_available("20112025", "20112025"))


def test_dashboard_looks_back_at_most_max_stay_nights(db, clock):
    repo = ReservationRepository(db, clock=clock, max_stay_nights=5)
    short = asyncio.run(repo.create(stay("p1", "07112025", "10112025")))
    asyncio.run(repo.create(stay("p2", "01112025", "10112025")))

    assert [r.id for r in asyncio.run(repo.list_departures("10112025"))] == [short.id]
    assert [r.id for r in asyncio.run(repo.list_in_house("09112025"))] == [short.id]


def test_dashboard_window_crosses_month_and_year(db, clock):
    repo = ReservationRepository(db, clock=clock, max_stay_nights=10)
    new_year = asyncio.run(repo.create(stay("p1", "28122025", "03012026")))

    assert [r.id for r in asyncio.run(repo.list_in_house("01012026"))] == [new_year.id]
    assert [r.id for r in asyncio.run(repo.list_departures("03012026"))] == [new_year.id]
