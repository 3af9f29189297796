"""Tests for the greedy leave scheduler."""

from datetime import date

import pytest

from conftest import utc
from platoonplanner.domain.errors import UnknownEntityError
from platoonplanner.domain.models import AppConfig, LeaveType, PersonStatus, RequestStatus
from platoonplanner.scheduling.ids import SequentialIdGenerator
from platoonplanner.scheduling.leave_scheduler import LeaveScheduler, schedule_leave

START = date(2026, 3, 1)
END = date(2026, 3, 31)


class TestLeaveScheduler:
    """Tests for LeaveScheduler."""

    @pytest.fixture
    def scheduler(self):
        return LeaveScheduler(
            id_generator=SequentialIdGenerator("leave"),
            clock=lambda: utc(2026, 2, 1, 12),
        )

    @pytest.fixture
    def roster(self, make_person):
        return [make_person(pid) for pid in ("a", "b", "c", "d")]

    def test_lower_fairness_wins_the_single_slot(self, scheduler, make_person, make_request):
        roster = [
            make_person("a", hours_worked=40),
            make_person("b", hours_worked=0),
            make_person("c"),
            make_person("d"),
        ]
        requests = [
            make_request("ra", "a", date(2026, 3, 20), date(2026, 3, 22)),
            make_request("rb", "b", date(2026, 3, 20), date(2026, 3, 22)),
        ]
        config = AppConfig(min_base_presence=75)
        schedule = scheduler.generate_schedule(requests, roster, [], config, START, END)
        assert len(schedule.assignments) == 1
        assert schedule.assignments[0].person_id == "b"
        assert schedule.assignments[0].request_id == "rb"

    def test_presence_limits_grants(self, scheduler, roster, make_request):
        """At 50% minimum with four people, only two of three can go."""
        requests = [
            make_request(f"r{pid}", pid, date(2026, 3, 10), date(2026, 3, 12))
            for pid in ("a", "b", "c")
        ]
        config = AppConfig(min_base_presence=50)
        schedule = scheduler.generate_schedule(requests, roster, [], config, START, END)
        assert len(schedule.assignments) == 2

    def test_priority_beats_fairness(self, scheduler, make_person, make_request):
        roster = [make_person("a", hours_worked=100), make_person("b")]
        requests = [
            make_request("rb", "b", date(2026, 3, 10), date(2026, 3, 11), priority=3),
            make_request("ra", "a", date(2026, 3, 10), date(2026, 3, 11), priority=9),
        ]
        config = AppConfig(min_base_presence=50)
        schedule = scheduler.generate_schedule(requests, roster, [], config, START, END)
        assert [a.person_id for a in schedule.assignments] == ["a"]

    def test_full_ties_keep_input_order(self, scheduler, make_person, make_request):
        roster = [make_person("a"), make_person("b")]
        requests = [
            make_request("rb", "b", date(2026, 3, 10), date(2026, 3, 11)),
            make_request("ra", "a", date(2026, 3, 10), date(2026, 3, 11)),
        ]
        config = AppConfig(min_base_presence=50)
        schedule = scheduler.generate_schedule(requests, roster, [], config, START, END)
        assert [a.person_id for a in schedule.assignments] == ["b"]

    def test_no_partial_grants(self, scheduler, roster, make_leave, make_request):
        """A request failing presence on one day is dropped entirely."""
        existing = [
            make_leave("x1", "a", date(2026, 3, 12), date(2026, 3, 12)),
            make_leave("x2", "b", date(2026, 3, 12), date(2026, 3, 12)),
        ]
        requests = [make_request("rc", "c", date(2026, 3, 10), date(2026, 3, 12))]
        config = AppConfig(min_base_presence=50)
        schedule = scheduler.generate_schedule(requests, roster, existing, config, START, END)
        assert schedule.new_assignments(existing) == []

    def test_only_pending_requests_are_considered(self, scheduler, roster, make_request):
        requests = [
            make_request("r1", "a", date(2026, 3, 10), date(2026, 3, 11), status=RequestStatus.APPROVED),
            make_request("r2", "b", date(2026, 3, 10), date(2026, 3, 11), status=RequestStatus.DENIED),
            make_request("r3", "c", date(2026, 3, 10), date(2026, 3, 11)),
        ]
        schedule = scheduler.generate_schedule(requests, roster, [], AppConfig(), START, END)
        assert [a.request_id for a in schedule.assignments] == ["r3"]

    def test_ineligible_requester_is_skipped(self, scheduler, make_person, make_request):
        roster = [make_person("a", status=PersonStatus.INJURED), make_person("b")]
        requests = [make_request("ra", "a", date(2026, 3, 10), date(2026, 3, 11))]
        schedule = scheduler.generate_schedule(requests, roster, [], AppConfig(), START, END)
        assert schedule.assignments == []

    def test_new_assignment_fields(self, scheduler, roster, make_request):
        requests = [
            make_request("r1", "a", date(2026, 3, 19), date(2026, 3, 20), leave_type=LeaveType.AFTER)
        ]
        schedule = scheduler.generate_schedule(requests, roster, [], AppConfig(), START, END)
        assignment = schedule.assignments[0]
        assert assignment.id == "leave-1"
        assert assignment.leave_type == LeaveType.AFTER
        assert assignment.is_weekend is True
        assert assignment.is_locked is False
        assert assignment.created_at == utc(2026, 2, 1, 12)
        assert schedule.start_date == START
        assert schedule.end_date == END
        assert schedule.conflicts == []

    def test_midweek_leave_is_not_weekend(self, scheduler, roster, make_request):
        # Sunday through Wednesday
        requests = [make_request("r1", "a", date(2026, 3, 22), date(2026, 3, 25))]
        schedule = scheduler.generate_schedule(requests, roster, [], AppConfig(), START, END)
        assert schedule.assignments[0].is_weekend is False

    def test_rerun_with_output_as_existing_adds_nothing(self, roster, make_request):
        requests = [
            make_request(f"r{pid}", pid, date(2026, 3, 10), date(2026, 3, 12))
            for pid in ("a", "b", "c")
        ]
        config = AppConfig(min_base_presence=50)
        first = schedule_leave(requests, roster, [], config, START, END)
        second = schedule_leave(requests, roster, first.assignments, config, START, END)
        assert second.assignments == first.assignments
        assert second.new_assignments(first.assignments) == []

    def test_locked_assignments_pass_through_untouched(self, scheduler, roster, make_leave, make_request):
        locked = make_leave("locked-1", "a", date(2026, 3, 10), date(2026, 3, 12), is_locked=True)
        requests = [make_request("ra", "a", date(2026, 3, 11), date(2026, 3, 13))]
        schedule = scheduler.generate_schedule(requests, roster, [locked], AppConfig(), START, END)
        assert schedule.assignments == [locked]

    def test_existing_leave_counts_toward_presence(self, scheduler, roster, make_leave, make_request):
        existing = [
            make_leave("x1", "a", date(2026, 3, 10), date(2026, 3, 12)),
            make_leave("x2", "b", date(2026, 3, 10), date(2026, 3, 12)),
        ]
        requests = [make_request("rc", "c", date(2026, 3, 11), date(2026, 3, 11))]
        config = AppConfig(min_base_presence=50)
        schedule = scheduler.generate_schedule(requests, roster, existing, config, START, END)
        assert len(schedule.assignments) == 2

    def test_unknown_requester_raises(self, scheduler, roster, make_request):
        requests = [make_request("rz", "zed", date(2026, 3, 10), date(2026, 3, 11))]
        with pytest.raises(UnknownEntityError):
            scheduler.generate_schedule(requests, roster, [], AppConfig(), START, END)

    def test_order_requests(self, scheduler, make_person, make_request):
        people = {
            "a": make_person("a", hours_worked=10),
            "b": make_person("b", hours_worked=5),
            "c": make_person("c"),
        }
        requests = [
            make_request("ra", "a", date(2026, 3, 10), date(2026, 3, 11), priority=5),
            make_request("rb", "b", date(2026, 3, 10), date(2026, 3, 11), priority=5),
            make_request("rc", "c", date(2026, 3, 10), date(2026, 3, 11), priority=2),
        ]
        ordered = scheduler.order_requests(requests, people)
        assert [r.id for r in ordered] == ["rb", "ra", "rc"]
