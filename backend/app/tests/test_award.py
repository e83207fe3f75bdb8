from datetime import date, datetime, timezone

from models.log_types import JudgmentMode, LogType
from app.services.award import AwardPeriod, judge_award_csv


PERIOD = AwardPeriod.default()


def activator_rows(summit: str, day: str, calls, time: str = "12:00", my_call: str = "JA1ABC/P") -> list:
    return [f"V2,{my_call},{summit},{day},{time},7MHz,CW,{c},,x" for c in calls]


def chaser_rows(summit: str, activators, day: str = "01/07/2025") -> list:
    return [f"V2,JA1ABC,,{day},12:00,7MHz,CW,{a},{summit},,x" for a in activators]


def stations(n: int, prefix: str = "JA2A") -> list:
    return [f"{prefix}{chr(ord('A') + i)}{chr(ord('A') + i)}" for i in range(n)]


def csv(rows) -> str:
    return "\n".join(rows) + "\n"


def test_default_period_is_jst() -> None:
    assert PERIOD.start == datetime(2025, 5, 31, 15, 0, tzinfo=timezone.utc)
    assert PERIOD.end == datetime(2025, 12, 31, 15, 0, tzinfo=timezone.utc)
    assert PERIOD.contains(datetime(2025, 7, 1, tzinfo=timezone.utc))
    assert not PERIOD.contains(PERIOD.end)


def test_from_dates_utc() -> None:
    p = AwardPeriod.from_dates(date(2025, 1, 1), date(2025, 1, 31))
    assert p.start == datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert p.end == datetime(2025, 2, 1, tzinfo=timezone.utc)


def test_one_summit_ten_stations_is_not_the_award() -> None:
    result = judge_award_csv(csv(activator_rows("JA/TK-001", "01/07/2025", stations(10))), period=PERIOD)
    assert result.log_type == LogType.ACTIVATOR
    assert result.callsign == "JA1ABC"
    assert result.total_qsos == 10
    assert result.chaser is None
    act = result.activator
    assert act.achieved is False
    assert act.qualified_summits == 1
    assert act.summits[0].summit_code == "JA/TK-001"
    assert act.summits[0].unique_stations == 10
    assert act.summits[0].qualified is True


def test_nine_stations_do_not_qualify() -> None:
    result = judge_award_csv(csv(activator_rows("JA/TK-001", "01/07/2025", stations(9))), period=PERIOD)
    assert result.activator.summits[0].qualified is False
    assert result.activator.qualified_summits == 0


def test_ten_summits_achieve_activator_award() -> None:
    rows = []
    for i in range(10):
        rows += activator_rows(f"JA/TK-{i + 1:03d}", "01/07/2025", stations(10))
    result = judge_award_csv(csv(rows), period=PERIOD)
    assert result.activator.qualified_summits == 10
    assert result.activator.achieved is True


def test_duplicate_stations_counted_once() -> None:
    calls = stations(9) + ["JA2AAA", "JA2AAA/P", "JA/JA2AAA/P"]
    result = judge_award_csv(csv(activator_rows("JA/TK-001", "01/07/2025", calls)), period=PERIOD)
    assert result.activator.summits[0].unique_stations == 9


def test_strict_and_lenient_two_day_activation() -> None:
    rows = activator_rows("JA/TK-001", "01/07/2025", stations(4, "JA2B"))
    rows += activator_rows("JA/TK-001", "02/07/2025", stations(6, "JA3C"))
    strict = judge_award_csv(csv(rows), JudgmentMode.STRICT, PERIOD)
    lenient = judge_award_csv(csv(rows), JudgmentMode.LENIENT, PERIOD)
    assert strict.activator.summits[0].qualified is False
    assert strict.activator.summits[0].unique_stations == 10
    assert lenient.activator.summits[0].qualified is True
    assert lenient.mode == JudgmentMode.LENIENT


def test_strict_next_day_alone_qualifies() -> None:
    rows = activator_rows("JA/TK-001", "01/07/2025", stations(4, "JA2B"))
    rows += activator_rows("JA/TK-001", "02/07/2025", stations(10, "JA3C"))
    result = judge_award_csv(csv(rows), JudgmentMode.STRICT, PERIOD)
    assert result.activator.summits[0].qualified is True
    assert result.activator.summits[0].unique_stations == 10


def test_non_consecutive_days_not_merged() -> None:
    rows = activator_rows("JA/TK-001", "01/07/2025", stations(5, "JA2B"))
    rows += activator_rows("JA/TK-001", "03/07/2025", stations(5, "JA3C"))
    result = judge_award_csv(csv(rows), JudgmentMode.LENIENT, PERIOD)
    assert result.activator.summits[0].qualified is False
    assert result.activator.summits[0].unique_stations == 5


def test_activation_day_needs_four_stations() -> None:
    rows = activator_rows("JA/TK-001", "01/07/2025", stations(3, "JA2B"))
    rows += activator_rows("JA/TK-001", "10/07/2025", stations(3, "JA3C"))
    result = judge_award_csv(csv(rows), JudgmentMode.LENIENT, PERIOD)
    assert result.activator.summits[0].qualified is False
    assert result.activator.summits[0].unique_stations == 6


def test_lenient_superset_of_strict() -> None:
    rows = []
    rows += activator_rows("JA/TK-001", "01/07/2025", stations(10))
    rows += activator_rows("JA/TK-002", "01/07/2025", stations(5, "JA2B"))
    rows += activator_rows("JA/TK-002", "02/07/2025", stations(5, "JA3C"))
    rows += activator_rows("JA/TK-003", "01/07/2025", stations(7))
    strict = judge_award_csv(csv(rows), JudgmentMode.STRICT, PERIOD)
    lenient = judge_award_csv(csv(rows), JudgmentMode.LENIENT, PERIOD)
    s = {x.summit_code for x in strict.activator.summits if x.qualified}
    l_ = {x.summit_code for x in lenient.activator.summits if x.qualified}
    assert s <= l_
    assert s == {"JA/TK-001"}
    assert l_ == {"JA/TK-001", "JA/TK-002"}


def test_summits_sorted_by_count() -> None:
    rows = activator_rows("JA/TK-002", "01/07/2025", stations(5))
    rows += activator_rows("JA/TK-001", "01/07/2025", stations(8))
    rows += activator_rows("JA/TK-003", "01/07/2025", stations(5))
    result = judge_award_csv(csv(rows), period=PERIOD)
    assert [s.summit_code for s in result.activator.summits] == ["JA/TK-001", "JA/TK-002", "JA/TK-003"]


def test_out_of_period_excluded() -> None:
    rows = activator_rows("JA/TK-001", "01/05/2025", stations(10))
    # 2025-05-31 14:59 UTC is still before the JST start
    rows += activator_rows("JA/TK-001", "31/05/2025", stations(1, "JA3C"), time="14:59")
    rows += activator_rows("JA/TK-002", "31/05/2025", stations(1, "JA4D"), time="15:00")
    result = judge_award_csv(csv(rows), period=PERIOD)
    assert result.total_qsos == 1
    assert [s.summit_code for s in result.activator.summits] == ["JA/TK-002"]


def test_malformed_rows_are_excluded_and_reported() -> None:
    rows = activator_rows("JA/TK-001", "01/07/2025", stations(10))
    rows.append("V2,JA1ABC/P,JA/TK-001,99/99/2025,12:00,7MHz,CW,JA9ZZZ,,x")
    result = judge_award_csv(csv(rows), period=PERIOD)
    assert result.total_qsos == 10
    assert len(result.errors) == 1
    assert result.errors[0].line == 11


def test_chaser_ten_activators_qualify() -> None:
    result = judge_award_csv(csv(chaser_rows("JA/TK-001", stations(10))), period=PERIOD)
    assert result.log_type == LogType.CHASER
    assert result.activator is None
    chaser = result.chaser
    assert chaser.achieved is True
    assert len(chaser.qualified_summits) == 1
    summit = chaser.qualified_summits[0]
    assert summit.summit_code == "JA/TK-001"
    assert summit.unique_activators == 10
    assert summit.activators == sorted(stations(10))


def test_chaser_nine_activators_not_qualified() -> None:
    result = judge_award_csv(csv(chaser_rows("JA/TK-001", stations(9))), period=PERIOD)
    assert result.chaser.achieved is False
    assert result.chaser.qualified_summits == []


def test_chaser_same_activator_on_other_days_counted_once() -> None:
    rows = chaser_rows("JA/TK-001", stations(9))
    rows += chaser_rows("JA/TK-001", stations(1), day="05/08/2025")
    result = judge_award_csv(csv(rows), period=PERIOD)
    assert result.chaser.achieved is False


def test_unknown_log_type_has_no_results() -> None:
    result = judge_award_csv("V2,JA1ABC,JA/TK-001,01/07/2025\n", period=PERIOD)
    assert result.log_type == LogType.UNKNOWN
    assert result.activator is None and result.chaser is None


def test_default_mode_is_strict() -> None:
    result = judge_award_csv(csv(activator_rows("JA/TK-001", "01/07/2025", stations(10))), period=PERIOD)
    assert result.mode == JudgmentMode.STRICT
