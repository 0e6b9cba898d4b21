from schedsim.algorithms import (
    schedule_fcfs,
    schedule_sjf,
    schedule_rr,
    schedule_priority,
    schedule_srtf,
    simulate,
)
from schedsim.models import IDLE, Process


def _procs():
    return [
        Process("P1", arrival=0, burst=7, priority=2),
        Process("P2", arrival=2, burst=4, priority=1),
        Process("P3", arrival=4, burst=1, priority=3),
    ]


def _spans(result):
    return [(b.pid, b.start, b.end) for b in result.blocks]


def test_fcfs_order():
    res = schedule_fcfs(_procs())
    assert _spans(res) == [("P1", 0, 7), ("P2", 7, 11), ("P3", 11, 12)]
    assert res.results["P1"].completion == 7
    assert res.results["P1"].waiting == 0
    assert res.results["P2"].completion == 11
    assert res.results["P2"].waiting == 5
    assert res.results["P3"].completion == 12
    assert res.results["P3"].waiting == 7
    assert all(r.response == r.waiting for r in res.processes)


def test_fcfs_ties_broken_by_pid_string_order():
    res = schedule_fcfs([Process("P2", 0, 3), Process("P10", 0, 3)])
    # "P10" sorts before "P2" lexicographically
    assert [b.pid for b in res.blocks] == ["P10", "P2"]


def test_fcfs_idle_gap_between_arrivals():
    res = schedule_fcfs([Process("P1", 0, 2), Process("P2", 5, 3)])
    assert _spans(res) == [("P1", 0, 2), (IDLE, 2, 5), ("P2", 5, 8)]
    assert res.end_time == 8


def test_clock_starts_at_earliest_arrival():
    res = schedule_fcfs([Process("P1", 3, 2)])
    assert _spans(res) == [("P1", 3, 5)]
    assert res.origin == 3
    assert res.results["P1"].waiting == 0


def test_sjf_order():
    res = schedule_sjf(_procs())
    # only P1 is ready at t=0; at t=7 P3 (burst 1) beats P2 (burst 4)
    assert _spans(res) == [("P1", 0, 7), ("P3", 7, 8), ("P2", 8, 12)]
    assert res.results["P2"].waiting == 6


def test_sjf_equal_bursts_fall_back_to_arrival_then_pid():
    res = schedule_sjf(
        [
            Process("X", 0, 3),
            Process("B", 1, 2),
            Process("A", 1, 2),
            Process("C", 2, 2),
        ]
    )
    assert [b.pid for b in res.blocks] == ["X", "A", "B", "C"]


def test_sjf_not_preempted_by_shorter_arrival():
    res = schedule_sjf([Process("P1", 0, 10), Process("P2", 1, 1)])
    assert _spans(res) == [("P1", 0, 10), ("P2", 10, 11)]


def test_priority_static():
    res = schedule_priority(_procs())
    assert _spans(res) == [("P1", 0, 7), ("P2", 7, 11), ("P3", 11, 12)]


def test_priority_not_preempted_by_more_urgent_arrival():
    res = schedule_priority([Process("P1", 0, 5, priority=5), Process("P2", 1, 2, priority=1)])
    assert _spans(res) == [("P1", 0, 5), ("P2", 5, 7)]


def test_priority_lower_value_wins_with_float_priorities():
    res = schedule_priority(
        [
            Process("P1", 0, 1, priority=0),
            Process("P2", 0, 1, priority=2.5),
            Process("P3", 0, 1, priority=-1),
        ]
    )
    assert [b.pid for b in res.blocks] == ["P3", "P1", "P2"]


def test_srtf_preempts_on_arrival():
    res = schedule_srtf([Process("P1", 0, 7), Process("P2", 2, 4)])
    assert _spans(res) == [("P1", 0, 2), ("P2", 2, 6), ("P1", 6, 11)]
    assert res.results["P1"].start == 0
    assert res.results["P1"].response == 0
    assert res.results["P1"].completion == 11
    assert res.results["P1"].waiting == 4
    assert res.results["P2"].response == 0


def test_srtf_equal_remaining_keeps_earlier_arrival():
    res = schedule_srtf([Process("P1", 0, 5), Process("P2", 1, 4)])
    # at t=1 both have 4 left; P1 arrived first
    assert _spans(res) == [("P1", 0, 5), ("P2", 5, 9)]


def test_srtf_coalesces_runs_of_the_same_process():
    res = schedule_srtf([Process("P1", 0, 3), Process("P2", 1, 5), Process("P3", 2, 6)])
    assert _spans(res) == [("P1", 0, 3), ("P2", 3, 8), ("P3", 8, 14)]


def test_srtf_sample_workload():
    procs = [
        Process("P1", 0, 7),
        Process("P2", 2, 4),
        Process("P3", 4, 1),
        Process("P4", 5, 4),
        Process("P5", 6, 6),
    ]
    res = schedule_srtf(procs)
    assert _spans(res) == [
        ("P1", 0, 2),
        ("P2", 2, 4),
        ("P3", 4, 5),
        ("P2", 5, 7),
        ("P4", 7, 11),
        ("P1", 11, 16),
        ("P5", 16, 22),
    ]


def test_srtf_idle_until_next_arrival():
    res = schedule_srtf([Process("P1", 0, 1), Process("P2", 4, 2)])
    assert _spans(res) == [("P1", 0, 1), (IDLE, 1, 4), ("P2", 4, 6)]


def test_rr_quantum_2():
    res = schedule_rr([Process("P1", 0, 5), Process("P2", 1, 3)], quantum=2)
    assert _spans(res) == [
        ("P1", 0, 2),
        ("P2", 2, 4),
        ("P1", 4, 6),
        ("P2", 6, 7),
        ("P1", 7, 8),
    ]
    assert res.results["P2"].completion == 7
    assert res.results["P1"].completion == 8
    assert res.quantum == 2


def test_rr_admits_arrivals_before_requeueing_preempted_process():
    # P2 arrives exactly when P1's first slice ends and must run next
    res = schedule_rr([Process("P1", 0, 3), Process("P2", 2, 2)], quantum=2)
    assert _spans(res) == [("P1", 0, 2), ("P2", 2, 4), ("P1", 4, 5)]


def test_rr_response_fixed_at_first_dispatch():
    res = schedule_rr([Process("A", 0, 4), Process("B", 0, 4), Process("C", 1, 1)], quantum=1)
    assert res.results["A"].response == 0
    assert res.results["B"].response == 1
    assert res.results["C"].response == 1
    assert res.results["C"].start == 2


def test_rr_idle_then_admits_everything_arrived():
    res = schedule_rr([Process("P1", 0, 1), Process("P3", 3, 2), Process("P2", 3, 1)], quantum=4)
    assert _spans(res) == [("P1", 0, 1), (IDLE, 1, 3), ("P2", 3, 4), ("P3", 4, 6)]


def test_simulate_dispatches_by_name_and_alias():
    assert simulate("FCFS", _procs()).policy == "fcfs"
    assert simulate("pr", _procs()).policy == "priority"
    assert simulate("round-robin", _procs(), quantum=3).policy == "rr"


def test_non_rr_policies_ignore_quantum():
    res = simulate("sjf", _procs(), quantum=3)
    assert res.quantum is None
